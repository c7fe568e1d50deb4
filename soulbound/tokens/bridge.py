"""Migration Bridge - one-way conversion of source tokens into registry tokens

The source ledger calls the registry's on_token_received() from inside its
own safe_transfer_from(), after custody of the token has moved to the
registry. The bridge then, in this order:
1. authenticates the caller against the configured source address
2. destroys the source token by sending it to BURN_ADDRESS
3. mints the same token id to the original owner (locked by the mint hook)
4. copies the source token's URI into the Metadata Store
5. returns TOKEN_RECEIVED_ACK

Burn precedes mint, and every step runs inside the source ledger's atomic
unit: if any step raises, the incoming transfer is rolled back with it and
the source token stays with its owner.
"""

# --- GOVERNANCE START (do not edit) ---
# Never mint without first destroying the source token.
# Registry token id == source token id.
# --- GOVERNANCE END ---

from __future__ import annotations

import logging
from typing import Callable, Protocol, TypedDict, runtime_checkable

from ..chain.addresses import Address, BURN_ADDRESS, ZERO_ADDRESS, normalize_address
from ..chain.chain import Chain
from ..chain.errors import SourceNotConfigured, TransferRejected, UnrecognizedSource
from .ledger import TOKEN_RECEIVED_ACK, TokenLedger
from .metadata import MetadataStore

logger = logging.getLogger(__name__)


@runtime_checkable
class SourceLedger(Protocol):
    """What the bridge needs from the source ledger contract."""

    def owner_of(self, token_id: int) -> Address:
        ...

    def token_uri(self, token_id: int) -> str:
        ...

    def transfer_from(
        self, from_address: Address, to_address: Address, token_id: int, *, caller: Address
    ) -> None:
        ...


class BridgeState(TypedDict):
    """Snapshot of a MigrationBridge."""
    source_address: Address
    migrated_from: dict[int, Address]


class MigrationBridge:
    """Source-address configuration plus the burn/mint/copy sequence."""

    ledger: TokenLedger
    metadata: MetadataStore
    _source_address: Address
    _migrated_from: dict[int, Address]
    _emit: Callable[..., None]

    def __init__(
        self,
        ledger: TokenLedger,
        metadata: MetadataStore,
        emit: Callable[..., None],
        source_address: Address | None = None,
    ) -> None:
        """
        Args:
            ledger: The registry's ownership ledger (mint target)
            metadata: The registry's Metadata Store (URI copy target)
            emit: Event emitter of the owning contract
            source_address: Initial source ledger address (None = unset)
        """
        self.ledger = ledger
        self.metadata = metadata
        self._emit = emit
        self._source_address = normalize_address(source_address)
        self._migrated_from = {}

    def snapshot(self) -> BridgeState:
        return {
            "source_address": self._source_address,
            "migrated_from": dict(self._migrated_from),
        }

    def restore(self, snapshot: BridgeState) -> None:
        self._source_address = snapshot["source_address"]
        self._migrated_from = dict(snapshot["migrated_from"])

    @property
    def source_address(self) -> Address:
        """Configured source ledger (ZERO_ADDRESS when unset)."""
        return self._source_address

    def set_source_address(self, address: Address) -> None:
        """Overwrite the source ledger address. No liveness check is made."""
        previous = self._source_address
        self._source_address = normalize_address(address)
        self._emit("SourceAddressSet", previous_address=previous, new_address=self._source_address)
        logger.info("Migration source changed from %s to %s", previous, self._source_address)

    def migrated_from(self, token_id: int) -> Address | None:
        """Source ledger a registry token was migrated from, if any."""
        return self._migrated_from.get(token_id)

    def _authenticate(self, chain: Chain, caller: Address) -> SourceLedger:
        if self._source_address == ZERO_ADDRESS:
            raise SourceNotConfigured("Migration source ledger has not been configured")
        caller = normalize_address(caller)
        if caller != self._source_address:
            raise UnrecognizedSource(
                f"Caller {caller} is not the configured source ledger {self._source_address}",
                caller=caller,
                source_address=self._source_address,
            )
        source = chain.get(caller)
        if not isinstance(source, SourceLedger):
            raise UnrecognizedSource(
                f"Contract at {caller} does not expose a source ledger interface",
                caller=caller,
            )
        return source

    def migrate(
        self,
        chain: Chain,
        custodian: Address,
        caller: Address,
        original_owner: Address,
        token_id: int,
    ) -> str:
        """Convert a source token held by custodian into a registry token.

        Args:
            chain: Chain the source ledger is deployed on
            custodian: Registry address currently holding the source token
            caller: Address of the ledger invoking the receive-hook
            original_owner: Owner of the source token before the transfer
            token_id: Source token id, reused as the registry token id

        Returns:
            TOKEN_RECEIVED_ACK

        Raises:
            SourceNotConfigured: If no source address is set.
            UnrecognizedSource: If caller is not the configured source ledger.
            TransferRejected: If the burn did not leave the token at BURN_ADDRESS.
        """
        source = self._authenticate(chain, caller)
        source_address = normalize_address(caller)

        source.transfer_from(custodian, BURN_ADDRESS, token_id, caller=custodian)
        if normalize_address(source.owner_of(token_id)) != BURN_ADDRESS:
            raise TransferRejected(
                f"Source token {token_id} was not destroyed",
                token_id=token_id,
            )

        self.ledger.mint(original_owner, token_id)
        self.metadata.set_uri(token_id, source.token_uri(token_id))
        self._migrated_from[token_id] = source_address

        self._emit(
            "Migrated",
            source_address=source_address,
            token_id=token_id,
            owner=normalize_address(original_owner),
        )
        logger.info("Migrated token %s from %s to owner %s", token_id, source_address, original_owner)
        return TOKEN_RECEIVED_ACK
