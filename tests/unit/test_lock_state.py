"""Unit tests for the Lock-State Store and Transfer Gate."""

from typing import Any

import pytest

from soulbound.chain.errors import TokenLocked
from soulbound.tokens.ledger import TokenLedger, TransferHook
from soulbound.tokens.lock_state import LockStateStore, TransferGate
from tests.testing_utils import ALICE, BOB


@pytest.fixture
def events() -> list[tuple[str, dict[str, Any]]]:
    return []


@pytest.fixture
def store(events: list[tuple[str, dict[str, Any]]]) -> LockStateStore:
    return LockStateStore(emit=lambda name, **args: events.append((name, args)))


@pytest.fixture
def gated_ledger(store: LockStateStore, events: list[tuple[str, dict[str, Any]]]) -> TokenLedger:
    ledger = TokenLedger(emit=lambda name, **args: events.append((name, args)))
    ledger.add_hook(TransferGate(store))
    return ledger


class TestLockStateStore:
    """Tests for the flag store."""

    def test_absent_reads_unlocked(self, store: LockStateStore) -> None:
        assert store.is_locked(1) is False

    def test_set_and_notify(
        self, store: LockStateStore, events: list[tuple[str, dict[str, Any]]]
    ) -> None:
        store.set_locked(1, True)
        store.set_locked(1, False)

        assert store.is_locked(1) is False
        assert events == [("Locked", {"token_id": 1}), ("Unlocked", {"token_id": 1})]

    def test_repeated_set_is_idempotent(
        self, store: LockStateStore, events: list[tuple[str, dict[str, Any]]]
    ) -> None:
        """Same target state: no error, only another notification."""
        store.set_locked(1, True)
        store.set_locked(1, True)

        assert store.is_locked(1) is True
        assert [name for name, _ in events] == ["Locked", "Locked"]

    def test_snapshot_restore(self, store: LockStateStore) -> None:
        store.set_locked(1, True)
        snapshot = store.snapshot()
        store.set_locked(1, False)
        store.set_locked(2, True)

        store.restore(snapshot)

        assert store.is_locked(1) is True
        assert store.is_locked(2) is False


class TestTransferGate:
    """Tests for the gate registered on a ledger."""

    def test_gate_is_transfer_hook(self, store: LockStateStore) -> None:
        assert isinstance(TransferGate(store), TransferHook)

    def test_mint_locks(
        self,
        gated_ledger: TokenLedger,
        store: LockStateStore,
        events: list[tuple[str, dict[str, Any]]],
    ) -> None:
        """Freshly minted tokens are locked before mint returns."""
        gated_ledger.mint(ALICE, 5)

        assert store.is_locked(5) is True
        assert [name for name, _ in events] == ["Transfer", "Locked"]

    def test_locked_transfer_rejected(self, gated_ledger: TokenLedger) -> None:
        gated_ledger.mint(ALICE, 5)

        with pytest.raises(TokenLocked) as exc_info:
            gated_ledger.transfer(ALICE, BOB, 5, caller=ALICE)

        assert exc_info.value.token_id == 5
        assert gated_ledger.owner_of(5) == ALICE
        assert gated_ledger.balance_of(BOB) == 0

    def test_unlocked_transfer_allowed(self, gated_ledger: TokenLedger, store: LockStateStore) -> None:
        gated_ledger.mint(ALICE, 5)
        store.set_locked(5, False)

        gated_ledger.transfer(ALICE, BOB, 5, caller=ALICE)

        assert gated_ledger.owner_of(5) == BOB
        assert store.is_locked(5) is False

    def test_locked_burn_rejected(self, gated_ledger: TokenLedger) -> None:
        gated_ledger.mint(ALICE, 5)
        with pytest.raises(TokenLocked):
            gated_ledger.burn(5)
        assert gated_ledger.exists(5)
