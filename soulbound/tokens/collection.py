"""Transferable token collection (the bridge's source ledger)

An ordinary ledger contract: tokens move freely, the administrator mints
them with a metadata URI, and safe_transfer_from hands custody to receiver
contracts only if they acknowledge it.

safe_transfer_from follows the receive-hook protocol:
1. ownership moves to the recipient
2. if the recipient is a contract, its on_token_received() is called with
   this collection's address as caller
3. anything other than TOKEN_RECEIVED_ACK (or a raised error) aborts, and
   the enclosing atomic unit rolls the whole transfer back
"""

from __future__ import annotations

from typing import ClassVar

from ..chain.addresses import Address, normalize_address
from ..chain.chain import Contract, Stateful, atomic_entry
from ..chain.errors import TransferRejected, Unauthorized
from .access import AccessGuard
from .capabilities import Capability, CapabilityProbe
from .ledger import TOKEN_RECEIVED_ACK, TokenLedger, TokenReceiver
from .metadata import MetadataStore


def notify_receiver(
    contract: Contract,
    operator: Address,
    from_address: Address,
    to_address: Address,
    token_id: int,
    data: bytes,
) -> None:
    """Run the receive-hook check for a token just sent to to_address.

    Plain (non-contract) recipients always accept.

    Raises:
        TransferRejected: If a recipient contract cannot or does not accept.
    """
    chain = contract.require_chain()
    if not chain.is_contract(to_address):
        return
    recipient = chain.get(to_address)
    if not isinstance(recipient, TokenReceiver):
        raise TransferRejected(
            f"Contract at {to_address} does not implement on_token_received",
            token_id=token_id,
            recipient=to_address,
        )
    result = recipient.on_token_received(
        operator, from_address, token_id, data, caller=contract.address
    )
    if result != TOKEN_RECEIVED_ACK:
        raise TransferRejected(
            f"Contract at {to_address} did not acknowledge token {token_id}",
            token_id=token_id,
            recipient=to_address,
            returned=result,
        )


class TransferableCollection(Contract, CapabilityProbe):
    """
    Freely transferable collection with admin minting and per-token URIs.

    All mutating methods take an explicit caller and run as atomic units.
    """

    SUPPORTED_CAPABILITIES: ClassVar[frozenset[Capability]] = frozenset({
        Capability.CAPABILITY_PROBE,
        Capability.OWNERSHIP,
        Capability.ENUMERATION,
        Capability.METADATA,
    })

    name: str
    symbol: str
    guard: AccessGuard
    ledger: TokenLedger
    metadata: MetadataStore

    def __init__(self, name: str, symbol: str, admin: Address, base_uri: str = "") -> None:
        super().__init__()
        self.name = name
        self.symbol = symbol
        self.guard = AccessGuard(admin, emit=self.emit)
        self.ledger = TokenLedger(emit=self.emit)
        self.metadata = MetadataStore(base_uri)

    def stateful_parts(self) -> dict[str, Stateful]:
        return {"guard": self.guard, "ledger": self.ledger, "metadata": self.metadata}

    # ===== QUERIES =====

    @property
    def admin(self) -> Address:
        return self.guard.admin

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

    def token_uri(self, token_id: int) -> str:
        """Resolved metadata URI. Raises NotMinted if absent."""
        self.ledger.require_minted(token_id)
        return self.metadata.resolve(token_id)

    # ===== MUTATIONS =====

    @atomic_entry
    def mint(self, to_address: Address, token_id: int, uri: str = "", *, caller: Address) -> None:
        """Admin-only mint with an optional per-token URI."""
        self.guard.require_admin(caller)
        self.ledger.mint(to_address, token_id)
        if uri:
            self.metadata.set_uri(token_id, uri)

    @atomic_entry
    def burn(self, token_id: int, *, caller: Address) -> None:
        """Destroy a token. Owner, approved address, or operator only."""
        if not self.ledger.is_approved_or_owner(caller, token_id):
            raise Unauthorized(
                f"{normalize_address(caller)} is not owner or approved for token {token_id}",
                token_id=token_id,
            )
        self.ledger.burn(token_id)

    @atomic_entry
    def approve(self, to_address: Address, token_id: int, *, caller: Address) -> None:
        self.ledger.approve(to_address, token_id, caller)

    @atomic_entry
    def set_approval_for_all(self, operator: Address, approved: bool, *, caller: Address) -> None:
        self.ledger.set_approval_for_all(operator, approved, caller)

    @atomic_entry
    def transfer_from(self, from_address: Address, to_address: Address, token_id: int, *, caller: Address) -> None:
        self.ledger.transfer(from_address, to_address, token_id, caller)

    @atomic_entry
    def safe_transfer_from(
        self,
        from_address: Address,
        to_address: Address,
        token_id: int,
        data: bytes = b"",
        *,
        caller: Address,
    ) -> None:
        """Transfer, then require the recipient contract to acknowledge custody."""
        self.ledger.transfer(from_address, to_address, token_id, caller)
        notify_receiver(
            self,
            normalize_address(caller),
            normalize_address(from_address),
            normalize_address(to_address),
            token_id,
            data,
        )
