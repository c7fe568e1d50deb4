"""Soulbound registry source package.

This package contains:
- config: Configuration loading and validation
- chain: In-process execution environment (addresses, atomic units, events)
- tokens: Ownership ledger, lock state, metadata, migration bridge, registry
"""

from __future__ import annotations

__all__: list[str] = []
