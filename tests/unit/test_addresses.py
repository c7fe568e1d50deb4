"""Unit tests for address helpers."""

import pytest

from soulbound.chain.addresses import (
    BURN_ADDRESS,
    ZERO_ADDRESS,
    address_from_int,
    is_zero_address,
    normalize_address,
)
from soulbound.chain.errors import InvalidAddress


class TestNormalizeAddress:
    """Tests for normalize_address."""

    def test_lowercases(self) -> None:
        """Mixed-case addresses compare equal after normalization."""
        assert normalize_address("0x000000000000000000000000000000000000DEAD") == BURN_ADDRESS

    def test_adds_prefix(self) -> None:
        """Bare hex gets a 0x prefix."""
        assert normalize_address("ab" * 20) == "0x" + "ab" * 20

    def test_empty_is_zero(self) -> None:
        """None and "" map to the null sentinel."""
        assert normalize_address(None) == ZERO_ADDRESS
        assert normalize_address("") == ZERO_ADDRESS

    @pytest.mark.parametrize("bad", ["0x1234", "0x" + "g" * 40, "not an address"])
    def test_rejects_malformed(self, bad: str) -> None:
        """Wrong length or non-hex digits raise InvalidAddress."""
        with pytest.raises(InvalidAddress) as exc_info:
            normalize_address(bad)
        assert exc_info.value.to_response()["code"] == "invalid_address"
        assert isinstance(exc_info.value, ValueError)


class TestZeroAndInt:
    """Tests for is_zero_address and address_from_int."""

    def test_is_zero_address(self) -> None:
        assert is_zero_address(ZERO_ADDRESS)
        assert is_zero_address(None)
        assert not is_zero_address(BURN_ADDRESS)

    def test_address_from_int(self) -> None:
        assert address_from_int(0) == ZERO_ADDRESS
        assert address_from_int(0xDEAD) == BURN_ADDRESS

    def test_address_from_int_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            address_from_int(1 << 160)
