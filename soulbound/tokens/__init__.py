"""Token contracts and their components.

- ledger: ownership ledger with hooks and enumeration
- access: single-administrator guard
- capabilities: static capability declarations
- lock_state: lock flags and the transfer gate
- metadata: URI overrides and resolution
- bridge: source-to-registry migration
- collection: transferable source collection
- registry: the soulbound registry contract
"""

from .access import AccessGuard
from .bridge import MigrationBridge, SourceLedger
from .capabilities import Capability, CapabilityProbe
from .collection import TransferableCollection, notify_receiver
from .ledger import TOKEN_RECEIVED_ACK, TokenLedger, TokenReceiver, TransferHook
from .lock_state import LockStateStore, TransferGate
from .metadata import MetadataStore, resolve_uri
from .registry import SoulboundRegistry, non_reentrant

__all__ = [
    "AccessGuard",
    "MigrationBridge", "SourceLedger",
    "Capability", "CapabilityProbe",
    "TransferableCollection", "notify_receiver",
    "TOKEN_RECEIVED_ACK", "TokenLedger", "TokenReceiver", "TransferHook",
    "LockStateStore", "TransferGate",
    "MetadataStore", "resolve_uri",
    "SoulboundRegistry", "non_reentrant",
]
