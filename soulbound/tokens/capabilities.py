"""Static capability declarations for cross-contract feature discovery.

A contract lists the capability sets it implements in
SUPPORTED_CAPABILITIES; other contracts (or tooling) ask with
supports_capability() instead of probing methods at runtime.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class Capability(str, Enum):
    """Capability sets a token contract can declare.

    Using str, Enum allows lookup by plain string identifiers.
    """

    CAPABILITY_PROBE = "capability_probe"
    """supports_capability() itself."""

    OWNERSHIP = "ownership"
    """owner_of, balance_of, approvals, transfer_from, safe_transfer_from."""

    ENUMERATION = "enumeration"
    """total_supply, token_by_index, token_of_owner_by_index."""

    METADATA = "metadata"
    """name, symbol, token_uri."""

    LOCKABLE = "lockable"
    """lock, unlock, locked."""

    TOKEN_RECEIVER = "token_receiver"
    """on_token_received custody hook."""

    SOULBOUND_REGISTRY = "soulbound_registry"
    """This registry's own surface: lockable ownership plus the migration bridge."""


class CapabilityProbe:
    """Mixin answering capability queries from a static declaration."""

    SUPPORTED_CAPABILITIES: ClassVar[frozenset[Capability]] = frozenset({Capability.CAPABILITY_PROBE})

    @classmethod
    def supports_capability(cls, capability: Capability | str) -> bool:
        """Whether this contract implements a capability set.

        Args:
            capability: A Capability member or its string value. Unknown
                identifiers are answered with False.
        """
        try:
            wanted = Capability(capability)
        except ValueError:
            return False
        return wanted in cls.SUPPORTED_CAPABILITIES
