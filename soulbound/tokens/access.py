"""Single-administrator access guard.

One designated admin address gates privileged configuration calls. The
admin is the only piece of global mutable state besides token data.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..chain.addresses import Address, ZERO_ADDRESS, normalize_address
from ..chain.errors import InvalidAddress, Unauthorized

logger = logging.getLogger(__name__)


class AccessGuard:
    """Holds the admin address and checks callers against it."""

    _admin: Address
    _emit: Callable[..., None]

    def __init__(self, admin: Address, emit: Callable[..., None]) -> None:
        """
        Args:
            admin: Initial administrator (must not be the null address)
            emit: Event emitter of the owning contract

        Raises:
            InvalidAddress: If admin is the null address.
        """
        admin = normalize_address(admin)
        if admin == ZERO_ADDRESS:
            raise InvalidAddress("Administrator cannot be the zero address")
        self._admin = admin
        self._emit = emit

    def snapshot(self) -> Address:
        return self._admin

    def restore(self, snapshot: Address) -> None:
        self._admin = snapshot

    @property
    def admin(self) -> Address:
        """Current administrator."""
        return self._admin

    def require_admin(self, caller: Address) -> None:
        """Guard for privileged operations.

        Raises:
            Unauthorized: If caller is not the administrator.
        """
        caller = normalize_address(caller)
        if caller != self._admin:
            raise Unauthorized(f"{caller} is not the administrator", caller=caller)

    def transfer_admin(self, new_admin: Address, caller: Address) -> None:
        """Hand administration to another address.

        Raises:
            Unauthorized: If caller is not the administrator.
            InvalidAddress: If new_admin is the null address.
        """
        self.require_admin(caller)
        new_admin = normalize_address(new_admin)
        if new_admin == ZERO_ADDRESS:
            raise InvalidAddress("Administrator cannot be the zero address")
        previous = self._admin
        self._admin = new_admin
        self._emit("AdminTransferred", previous_admin=previous, new_admin=new_admin)
        logger.info("Administrator changed from %s to %s", previous, new_admin)
