"""Address helpers shared by every contract on the chain.

Addresses are 0x-prefixed, 40 hex digit strings compared case-insensitively.
Two addresses are reserved:
- ZERO_ADDRESS: the null sentinel ("unset", mint source, burn target of burn())
- BURN_ADDRESS: a well-known address nobody controls; tokens sent here are
  irrecoverable
"""

from __future__ import annotations

import re

from .errors import InvalidAddress

Address = str

ZERO_ADDRESS: Address = "0x" + "0" * 40
BURN_ADDRESS: Address = "0x000000000000000000000000000000000000dead"

_ADDRESS_RE = re.compile(r"^0x[0-9a-f]{40}$")


def normalize_address(address: str | None) -> Address:
    """Return the canonical lowercase form of an address.

    None and the empty string map to ZERO_ADDRESS. A bare hex string gets
    its 0x prefix added.

    Raises:
        InvalidAddress: If the value is not a 20-byte hex address.
    """
    if not address:
        return ZERO_ADDRESS
    lowered = address.lower()
    if not lowered.startswith("0x"):
        lowered = f"0x{lowered}"
    if not _ADDRESS_RE.match(lowered):
        raise InvalidAddress(f"Not a valid address: {address!r}", address=address)
    return lowered


def is_zero_address(address: str | None) -> bool:
    """Check whether an address is the null sentinel."""
    return normalize_address(address) == ZERO_ADDRESS


def address_from_int(value: int) -> Address:
    """Build an address from an integer (used for deterministic deploys)."""
    if value < 0 or value >= 1 << 160:
        raise ValueError(f"Address value out of range: {value}")
    return "0x" + format(value, "040x")
