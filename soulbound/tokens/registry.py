"""Soulbound Registry - lockable, non-transferable-by-default token contract

Composes the ownership ledger with:
- LockStateStore + TransferGate: new tokens are locked; locked tokens
  cannot change owner
- MigrationBridge: on_token_received() converts source-ledger tokens into
  locked registry tokens with the same id and URI
- MetadataStore: per-token URI overrides over an optional base URI
- AccessGuard: single administrator for configuration calls

Every public mutating entry point is a single-entry atomic unit: a call
that arrives while another entry point of this registry is still running
fails with ReentrantCall, and any failure rolls back the whole unit.

Usage:
    chain = Chain()
    registry = SoulboundRegistry(name="Badges", symbol="BDG", admin=admin)
    chain.deploy(registry)
    registry.set_source_address(source.address, caller=admin)

    source.safe_transfer_from(alice, registry.address, 42, caller=alice)
    registry.locked(42)  # True
"""

from __future__ import annotations

import functools
from typing import Any, Callable, ClassVar, TypeVar, cast

from ..chain.addresses import Address, normalize_address
from ..chain.chain import Contract, Stateful
from ..chain.errors import ReentrantCall, Unauthorized
from ..config_schema import AppConfig, RegistryConfig
from .access import AccessGuard
from .bridge import MigrationBridge
from .capabilities import Capability, CapabilityProbe
from .collection import notify_receiver
from .ledger import TokenLedger
from .lock_state import LockStateStore, TransferGate
from .metadata import MetadataStore

F = TypeVar("F", bound=Callable[..., Any])


def non_reentrant(method: F) -> F:
    """Run a registry method as a single-entry atomic unit."""

    @functools.wraps(method)
    def wrapper(self: SoulboundRegistry, *args: Any, **kwargs: Any) -> Any:
        chain = self.require_chain()
        with chain.atomic():
            if self._entered:
                raise ReentrantCall(
                    f"{method.__name__} called while another registry entry point is running"
                )
            self._entered = True
            try:
                return method(self, *args, **kwargs)
            finally:
                self._entered = False

    return cast(F, wrapper)


class SoulboundRegistry(Contract, CapabilityProbe):
    """
    Registry of uniquely-owned tokens that are locked from the moment of mint.

    Tokens enter the registry only through the migration bridge. Owners (or
    their approved addresses/operators) may unlock a token to make it
    transferable and lock it again.
    """

    SUPPORTED_CAPABILITIES: ClassVar[frozenset[Capability]] = frozenset({
        Capability.CAPABILITY_PROBE,
        Capability.OWNERSHIP,
        Capability.ENUMERATION,
        Capability.METADATA,
        Capability.LOCKABLE,
        Capability.TOKEN_RECEIVER,
        Capability.SOULBOUND_REGISTRY,
    })

    name: str
    symbol: str
    guard: AccessGuard
    ledger: TokenLedger
    locks: LockStateStore
    gate: TransferGate
    metadata: MetadataStore
    bridge: MigrationBridge
    _entered: bool

    def __init__(
        self,
        name: str,
        symbol: str,
        admin: Address,
        base_uri: str = "",
        source_address: Address | None = None,
    ) -> None:
        """
        Args:
            name: Collection name
            symbol: Collection symbol
            admin: Administrator allowed to configure the registry
            base_uri: Collection-wide URI prefix ("" = none)
            source_address: Source ledger accepted by the bridge (None = unset)
        """
        super().__init__()
        self.name = name
        self.symbol = symbol
        self.guard = AccessGuard(admin, emit=self.emit)
        self.ledger = TokenLedger(emit=self.emit)
        self.locks = LockStateStore(emit=self.emit)
        self.gate = TransferGate(self.locks)
        self.ledger.add_hook(self.gate)
        self.metadata = MetadataStore(base_uri)
        self.bridge = MigrationBridge(
            self.ledger, self.metadata, emit=self.emit, source_address=source_address
        )
        self._entered = False

    @classmethod
    def from_config(cls, config: AppConfig | RegistryConfig, admin: Address) -> "SoulboundRegistry":
        """Create a registry from the 'registry' config section.

        Args:
            config: Full AppConfig or just its RegistryConfig
            admin: Administrator address

        Returns:
            Undeployed SoulboundRegistry
        """
        registry_cfg = config.registry if isinstance(config, AppConfig) else config
        return cls(
            name=registry_cfg.name,
            symbol=registry_cfg.symbol,
            admin=admin,
            base_uri=registry_cfg.base_uri,
            source_address=registry_cfg.source_address,
        )

    def stateful_parts(self) -> dict[str, Stateful]:
        return {
            "guard": self.guard,
            "ledger": self.ledger,
            "locks": self.locks,
            "metadata": self.metadata,
            "bridge": self.bridge,
        }

    # ===== LOCK STATE =====

    def _require_approved_or_owner(self, token_id: int, caller: Address) -> None:
        self.ledger.require_minted(token_id)
        if not self.ledger.is_approved_or_owner(caller, token_id):
            raise Unauthorized(
                f"{normalize_address(caller)} is not owner or approved for token {token_id}",
                token_id=token_id,
            )

    @non_reentrant
    def lock(self, token_id: int, *, caller: Address) -> None:
        """Lock a token. Owner, approved address, or operator only.

        Raises:
            NotMinted: If the token does not exist.
            Unauthorized: If caller lacks owner/approval rights.
        """
        self._require_approved_or_owner(token_id, caller)
        self.locks.set_locked(token_id, True)

    @non_reentrant
    def unlock(self, token_id: int, *, caller: Address) -> None:
        """Unlock a token so it can be transferred. Same rules as lock()."""
        self._require_approved_or_owner(token_id, caller)
        self.locks.set_locked(token_id, False)

    def locked(self, token_id: int) -> bool:
        """Whether a token is locked. Raises NotMinted if absent."""
        self.ledger.require_minted(token_id)
        return self.locks.is_locked(token_id)

    # ===== MIGRATION =====

    @non_reentrant
    def on_token_received(
        self,
        operator: Address,
        from_address: Address,
        token_id: int,
        data: bytes = b"",
        *,
        caller: Address,
    ) -> str:
        """Receive-hook called by the source ledger during safe_transfer_from.

        Args:
            operator: Address that initiated the source transfer
            from_address: Owner of the source token before the transfer
            token_id: Source token id (reused for the registry token)
            data: Opaque transfer payload (unused)
            caller: Address of the ledger making this call

        Returns:
            TOKEN_RECEIVED_ACK when the migration succeeded
        """
        return self.bridge.migrate(
            self.require_chain(),
            custodian=self.address,
            caller=caller,
            original_owner=from_address,
            token_id=token_id,
        )

    def migrated_from(self, token_id: int) -> Address | None:
        """Source ledger a token came from. Raises NotMinted if absent."""
        self.ledger.require_minted(token_id)
        return self.bridge.migrated_from(token_id)

    # ===== ADMINISTRATION =====

    @property
    def admin(self) -> Address:
        return self.guard.admin

    def source_address(self) -> Address:
        """Configured source ledger address (ZERO_ADDRESS when unset)."""
        return self.bridge.source_address

    @non_reentrant
    def set_source_address(self, address: Address, *, caller: Address) -> None:
        """Set the source ledger accepted by the bridge. Admin only."""
        self.guard.require_admin(caller)
        self.bridge.set_source_address(address)

    @non_reentrant
    def set_base_uri(self, base_uri: str, *, caller: Address) -> None:
        """Set the collection-wide URI prefix. Admin only."""
        self.guard.require_admin(caller)
        self.metadata.set_base_uri(base_uri)
        self.emit("BaseURISet", base_uri=base_uri)

    @non_reentrant
    def transfer_admin(self, new_admin: Address, *, caller: Address) -> None:
        """Hand administration to another address. Admin only."""
        self.guard.transfer_admin(new_admin, caller)

    # ===== METADATA =====

    def resolve_uri(self, token_id: int) -> str:
        """Resolved metadata URI. Raises NotMinted if absent."""
        self.ledger.require_minted(token_id)
        return self.metadata.resolve(token_id)

    token_uri = resolve_uri

    # ===== OWNERSHIP =====

    def owner_of(self, token_id: int) -> Address:
        return self.ledger.owner_of(token_id)

    def balance_of(self, owner: Address) -> int:
        return self.ledger.balance_of(owner)

    def exists(self, token_id: int) -> bool:
        return self.ledger.exists(token_id)

    def get_approved(self, token_id: int) -> Address:
        return self.ledger.get_approved(token_id)

    def is_approved_for_all(self, owner: Address, operator: Address) -> bool:
        return self.ledger.is_approved_for_all(owner, operator)

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def token_by_index(self, index: int) -> int:
        return self.ledger.token_by_index(index)

    def token_of_owner_by_index(self, owner: Address, index: int) -> int:
        return self.ledger.token_of_owner_by_index(owner, index)

    def tokens_of_owner(self, owner: Address) -> list[int]:
        return self.ledger.tokens_of_owner(owner)

    @non_reentrant
    def approve(self, to_address: Address, token_id: int, *, caller: Address) -> None:
        self.ledger.approve(to_address, token_id, caller)

    @non_reentrant
    def set_approval_for_all(self, operator: Address, approved: bool, *, caller: Address) -> None:
        self.ledger.set_approval_for_all(operator, approved, caller)

    @non_reentrant
    def transfer_from(self, from_address: Address, to_address: Address, token_id: int, *, caller: Address) -> None:
        """Transfer an unlocked token. Raises TokenLocked while locked."""
        self.ledger.transfer(from_address, to_address, token_id, caller)

    @non_reentrant
    def safe_transfer_from(
        self,
        from_address: Address,
        to_address: Address,
        token_id: int,
        data: bytes = b"",
        *,
        caller: Address,
    ) -> None:
        """Transfer an unlocked token and require receiver acknowledgement."""
        self.ledger.transfer(from_address, to_address, token_id, caller)
        notify_receiver(
            self,
            normalize_address(caller),
            normalize_address(from_address),
            normalize_address(to_address),
            token_id,
            data,
        )
