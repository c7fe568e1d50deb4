"""Unit tests for the single-administrator AccessGuard."""

from typing import Any

import pytest

from soulbound.chain.addresses import ZERO_ADDRESS
from soulbound.chain.errors import InvalidAddress, Unauthorized
from soulbound.tokens.access import AccessGuard
from tests.testing_utils import ADMIN, ALICE


@pytest.fixture
def events() -> list[tuple[str, dict[str, Any]]]:
    return []


@pytest.fixture
def guard(events: list[tuple[str, dict[str, Any]]]) -> AccessGuard:
    return AccessGuard(ADMIN, emit=lambda name, **args: events.append((name, args)))


class TestAccessGuard:
    """Tests for admin checks and hand-over."""

    def test_admin_passes(self, guard: AccessGuard) -> None:
        guard.require_admin(ADMIN)
        guard.require_admin(ADMIN.upper().replace("0X", "0x"))

    def test_non_admin_rejected(self, guard: AccessGuard) -> None:
        with pytest.raises(Unauthorized):
            guard.require_admin(ALICE)

    def test_zero_admin_rejected(self) -> None:
        with pytest.raises(InvalidAddress):
            AccessGuard(ZERO_ADDRESS, emit=lambda name, **args: None)

    def test_transfer_admin(
        self, guard: AccessGuard, events: list[tuple[str, dict[str, Any]]]
    ) -> None:
        guard.transfer_admin(ALICE, caller=ADMIN)

        assert guard.admin == ALICE
        assert events == [("AdminTransferred", {"previous_admin": ADMIN, "new_admin": ALICE})]
        with pytest.raises(Unauthorized):
            guard.require_admin(ADMIN)

    def test_transfer_admin_requires_admin(self, guard: AccessGuard) -> None:
        with pytest.raises(Unauthorized):
            guard.transfer_admin(ALICE, caller=ALICE)
        assert guard.admin == ADMIN

    def test_transfer_admin_to_zero(self, guard: AccessGuard) -> None:
        with pytest.raises(InvalidAddress):
            guard.transfer_admin(ZERO_ADDRESS, caller=ADMIN)

    def test_snapshot_restore(self, guard: AccessGuard) -> None:
        snapshot = guard.snapshot()
        guard.transfer_admin(ALICE, caller=ADMIN)
        guard.restore(snapshot)
        assert guard.admin == ADMIN
