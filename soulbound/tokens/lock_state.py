"""Lock-State Store and Transfer Gate

The store maps token id -> locked flag. The gate is a TransferHook
registered on the registry's ledger:
- on_mint writes locked=True (and emits Locked) for every new token, so
  "freshly minted => locked" holds for any mint path
- before_transfer rejects an ownership change of a locked token with
  TokenLocked, before the ledger mutates anything
"""

# --- GOVERNANCE START (do not edit) ---
# Every minted token is locked until an authorized unlock.
# The gate never runs for mint.
# --- GOVERNANCE END ---

from __future__ import annotations

from typing import Callable

from ..chain.addresses import Address
from ..chain.errors import TokenLocked


class LockStateStore:
    """token id -> locked flag, with Locked/Unlocked notifications."""

    _locked: dict[int, bool]
    _emit: Callable[..., None]

    def __init__(self, emit: Callable[..., None]) -> None:
        self._locked = {}
        self._emit = emit

    def snapshot(self) -> dict[int, bool]:
        return dict(self._locked)

    def restore(self, snapshot: dict[int, bool]) -> None:
        self._locked = dict(snapshot)

    def is_locked(self, token_id: int) -> bool:
        """Current flag. A token with no entry reads as unlocked.

        Callers check that the token is minted first; every minted token
        has an entry.
        """
        return self._locked.get(token_id, False)

    def set_locked(self, token_id: int, locked: bool) -> None:
        """Write the flag and emit Locked or Unlocked.

        Setting the value it already has is allowed and still notifies.
        """
        self._locked[token_id] = locked
        self._emit("Locked" if locked else "Unlocked", token_id=token_id)


class TransferGate:
    """TransferHook enforcing the lock state at the ledger boundary."""

    store: LockStateStore

    def __init__(self, store: LockStateStore) -> None:
        self.store = store

    def before_transfer(self, from_address: Address, to_address: Address, token_id: int) -> None:
        if self.store.is_locked(token_id):
            raise TokenLocked(token_id)

    def on_mint(self, to_address: Address, token_id: int) -> None:
        self.store.set_locked(token_id, True)
