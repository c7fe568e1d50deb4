"""Ownership ledger for uniquely-owned tokens

Tracks token id -> owner, per-owner balances, per-token and operator
approvals, and enumeration indexes (all tokens, tokens per owner).

The ledger is a component, not a contract: the contract that owns it
forwards calls with an explicit caller and wraps them in an atomic unit.
Contracts constrain the ledger by registering TransferHook objects:
- before_transfer() runs before any change of an existing token's owner
  (transfer and burn) and may raise to veto it; no state has changed yet
- on_mint() runs for every newly created token, before mint returns

Mint is deliberately not routed through before_transfer(): there is no
prior owner to protect.
"""

# --- GOVERNANCE START (do not edit) ---
# All ownership mutations go through here.
# Hooks run strictly before mutation; a veto leaves the ledger untouched.
# --- GOVERNANCE END ---

from __future__ import annotations

import copy
from typing import Any, Callable, Protocol, TypedDict, runtime_checkable

from ..chain.addresses import Address, ZERO_ADDRESS, normalize_address
from ..chain.errors import (
    ApprovalToCurrentOwner,
    IndexOutOfRange,
    InvalidAddress,
    InvalidRecipient,
    NotMinted,
    NotTokenOwner,
    TokenAlreadyMinted,
    Unauthorized,
)

# Value a receiver must return from on_token_received to accept custody
TOKEN_RECEIVED_ACK: str = "0x150b7a02"

EmitFn = Callable[..., None]


@runtime_checkable
class TransferHook(Protocol):
    """Pre-mutation hook registered on a TokenLedger."""

    def before_transfer(self, from_address: Address, to_address: Address, token_id: int) -> None:
        """Called before an existing token changes owner. Raise to veto."""
        ...

    def on_mint(self, to_address: Address, token_id: int) -> None:
        """Called for every newly minted token, before mint completes."""
        ...


@runtime_checkable
class TokenReceiver(Protocol):
    """A contract that can take custody of tokens sent with safe_transfer_from."""

    def on_token_received(
        self,
        operator: Address,
        from_address: Address,
        token_id: int,
        data: bytes,
        *,
        caller: Address,
    ) -> str:
        """Return TOKEN_RECEIVED_ACK to accept the token."""
        ...


class LedgerState(TypedDict):
    """Snapshot of a TokenLedger."""
    owners: dict[int, Address]
    balances: dict[Address, int]
    token_approvals: dict[int, Address]
    operator_approvals: dict[Address, set[Address]]
    owned_tokens: dict[Address, list[int]]
    all_tokens: list[int]


class TokenLedger:
    """
    Tracks ownership of unique integer token ids.

    - owners: {token_id: owner}
    - balances: {owner: count}
    - token_approvals: {token_id: approved address}
    - operator_approvals: {owner: {operator, ...}}
    - owned_tokens / all_tokens: enumeration indexes, in mint/receive order
    """

    _owners: dict[int, Address]
    _balances: dict[Address, int]
    _token_approvals: dict[int, Address]
    _operator_approvals: dict[Address, set[Address]]
    _owned_tokens: dict[Address, list[int]]
    _all_tokens: list[int]
    _hooks: list[TransferHook]
    _emit: EmitFn

    def __init__(self, emit: EmitFn) -> None:
        """
        Args:
            emit: Event emitter of the owning contract (name, **args)
        """
        self._owners = {}
        self._balances = {}
        self._token_approvals = {}
        self._operator_approvals = {}
        self._owned_tokens = {}
        self._all_tokens = []
        self._hooks = []
        self._emit = emit

    def add_hook(self, hook: TransferHook) -> None:
        """Register a pre-mutation hook."""
        self._hooks.append(hook)

    # ===== STATE CAPTURE =====

    def snapshot(self) -> LedgerState:
        return copy.deepcopy({
            "owners": self._owners,
            "balances": self._balances,
            "token_approvals": self._token_approvals,
            "operator_approvals": self._operator_approvals,
            "owned_tokens": self._owned_tokens,
            "all_tokens": self._all_tokens,
        })

    def restore(self, snapshot: LedgerState) -> None:
        state = copy.deepcopy(snapshot)
        self._owners = state["owners"]
        self._balances = state["balances"]
        self._token_approvals = state["token_approvals"]
        self._operator_approvals = state["operator_approvals"]
        self._owned_tokens = state["owned_tokens"]
        self._all_tokens = state["all_tokens"]

    # ===== QUERIES =====

    def exists(self, token_id: int) -> bool:
        """Check whether a token has been minted (and not burned)."""
        return token_id in self._owners

    def require_minted(self, token_id: int) -> Address:
        """Return the owner of a token.

        Raises:
            NotMinted: If the token does not exist.
        """
        owner = self._owners.get(token_id)
        if owner is None:
            raise NotMinted(token_id)
        return owner

    def owner_of(self, token_id: int) -> Address:
        """Get the owner of a token. Raises NotMinted if absent."""
        return self.require_minted(token_id)

    def balance_of(self, owner: Address) -> int:
        """Number of tokens held by an address.

        Raises:
            InvalidAddress: For the null address.
        """
        owner = normalize_address(owner)
        if owner == ZERO_ADDRESS:
            raise InvalidAddress("Balance query for the zero address")
        return self._balances.get(owner, 0)

    def get_approved(self, token_id: int) -> Address:
        """Address approved for a single token (ZERO_ADDRESS if none)."""
        self.require_minted(token_id)
        return self._token_approvals.get(token_id, ZERO_ADDRESS)

    def is_approved_for_all(self, owner: Address, operator: Address) -> bool:
        """Whether operator may manage every token of owner."""
        owner = normalize_address(owner)
        operator = normalize_address(operator)
        return operator in self._operator_approvals.get(owner, set())

    def is_approved_or_owner(self, spender: Address, token_id: int) -> bool:
        """Whether spender is the owner, the approved address, or an operator.

        Raises:
            NotMinted: If the token does not exist.
        """
        owner = self.require_minted(token_id)
        spender = normalize_address(spender)
        if spender == ZERO_ADDRESS:
            return False
        return (
            spender == owner
            or self._token_approvals.get(token_id) == spender
            or self.is_approved_for_all(owner, spender)
        )

    # ===== ENUMERATION =====

    def total_supply(self) -> int:
        """Number of live tokens."""
        return len(self._all_tokens)

    def token_by_index(self, index: int) -> int:
        """Token id at a position of the global index."""
        if index < 0 or index >= len(self._all_tokens):
            raise IndexOutOfRange(f"Global index {index} out of range (total supply {len(self._all_tokens)})")
        return self._all_tokens[index]

    def tokens_of_owner(self, owner: Address) -> list[int]:
        """Token ids held by an address."""
        return list(self._owned_tokens.get(normalize_address(owner), []))

    def token_of_owner_by_index(self, owner: Address, index: int) -> int:
        """Token id at a position of an owner's index."""
        tokens = self._owned_tokens.get(normalize_address(owner), [])
        if index < 0 or index >= len(tokens):
            raise IndexOutOfRange(f"Owner index {index} out of range (balance {len(tokens)})")
        return tokens[index]

    # ===== MUTATIONS =====

    def _add_to_owner(self, owner: Address, token_id: int) -> None:
        self._owners[token_id] = owner
        self._balances[owner] = self._balances.get(owner, 0) + 1
        self._owned_tokens.setdefault(owner, []).append(token_id)

    def _remove_from_owner(self, owner: Address, token_id: int) -> None:
        self._balances[owner] -= 1
        self._owned_tokens[owner].remove(token_id)
        if not self._owned_tokens[owner]:
            del self._owned_tokens[owner]
        self._token_approvals.pop(token_id, None)

    def mint(self, to_address: Address, token_id: int) -> None:
        """Create a new token owned by to_address.

        Emits Transfer(ZERO_ADDRESS -> to_address), then runs on_mint hooks.

        Raises:
            InvalidRecipient: If to_address is the null address.
            TokenAlreadyMinted: If the id is taken.
        """
        to_address = normalize_address(to_address)
        if to_address == ZERO_ADDRESS:
            raise InvalidRecipient("Cannot mint to the zero address")
        if token_id in self._owners:
            raise TokenAlreadyMinted(token_id)

        self._add_to_owner(to_address, token_id)
        self._all_tokens.append(token_id)
        self._emit("Transfer", from_address=ZERO_ADDRESS, to_address=to_address, token_id=token_id)

        for hook in self._hooks:
            hook.on_mint(to_address, token_id)

    def burn(self, token_id: int) -> None:
        """Destroy a token. Authorization is the calling contract's job.

        Raises:
            NotMinted: If the token does not exist.
        """
        owner = self.require_minted(token_id)
        for hook in self._hooks:
            hook.before_transfer(owner, ZERO_ADDRESS, token_id)

        self._remove_from_owner(owner, token_id)
        del self._owners[token_id]
        self._all_tokens.remove(token_id)
        self._emit("Transfer", from_address=owner, to_address=ZERO_ADDRESS, token_id=token_id)

    def transfer(
        self,
        from_address: Address,
        to_address: Address,
        token_id: int,
        caller: Address,
    ) -> None:
        """Move a token from its owner to a new address.

        Check order: existence, caller authorization, from-address match,
        recipient, then hooks. Nothing is mutated until all have passed.

        Raises:
            NotMinted: If the token does not exist.
            Unauthorized: If caller is not owner, approved, or operator.
            NotTokenOwner: If from_address does not own the token.
            InvalidRecipient: If to_address is the null address.
        """
        owner = self.require_minted(token_id)
        caller = normalize_address(caller)
        from_address = normalize_address(from_address)
        to_address = normalize_address(to_address)

        if not self.is_approved_or_owner(caller, token_id):
            raise Unauthorized(
                f"{caller} is not owner or approved for token {token_id}",
                token_id=token_id,
                caller=caller,
            )
        if owner != from_address:
            raise NotTokenOwner(
                f"Token {token_id} is owned by {owner}, not {from_address}",
                token_id=token_id,
            )
        if to_address == ZERO_ADDRESS:
            raise InvalidRecipient("Cannot transfer to the zero address")

        for hook in self._hooks:
            hook.before_transfer(from_address, to_address, token_id)

        self._remove_from_owner(from_address, token_id)
        self._add_to_owner(to_address, token_id)
        self._emit("Transfer", from_address=from_address, to_address=to_address, token_id=token_id)

    def approve(self, to_address: Address, token_id: int, caller: Address) -> None:
        """Approve an address to transfer one token (ZERO_ADDRESS clears).

        Raises:
            NotMinted: If the token does not exist.
            ApprovalToCurrentOwner: If to_address already owns the token.
            Unauthorized: If caller is neither owner nor operator.
        """
        owner = self.require_minted(token_id)
        to_address = normalize_address(to_address)
        caller = normalize_address(caller)
        if to_address == owner:
            raise ApprovalToCurrentOwner(f"{to_address} already owns token {token_id}")
        if caller != owner and not self.is_approved_for_all(owner, caller):
            raise Unauthorized(
                f"{caller} is not owner nor approved for all of {owner}",
                token_id=token_id,
                caller=caller,
            )

        if to_address == ZERO_ADDRESS:
            self._token_approvals.pop(token_id, None)
        else:
            self._token_approvals[token_id] = to_address
        self._emit("Approval", owner=owner, approved=to_address, token_id=token_id)

    def set_approval_for_all(self, operator: Address, approved: bool, caller: Address) -> None:
        """Grant or revoke operator rights over all of caller's tokens.

        Raises:
            InvalidAddress: If operator is the caller itself.
        """
        operator = normalize_address(operator)
        caller = normalize_address(caller)
        if operator == caller:
            raise InvalidAddress("Cannot set approval for all to the caller itself")

        operators = self._operator_approvals.setdefault(caller, set())
        if approved:
            operators.add(operator)
        else:
            operators.discard(operator)
            if not operators:
                del self._operator_approvals[caller]
        self._emit("ApprovalForAll", owner=caller, operator=operator, approved=approved)

    def to_dict(self) -> dict[str, Any]:
        """Plain view of ownership for inspection and scenario output."""
        return {
            "total_supply": self.total_supply(),
            "owners": {str(token_id): owner for token_id, owner in self._owners.items()},
        }
