"""Pytest fixtures for soulbound registry tests.

Common fixtures build a fresh chain with a deployed registry and a
deployed source collection holding a few legacy tokens.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from soulbound.chain.chain import Chain
from soulbound.chain.logger import EventLogger
from soulbound.tokens.collection import TransferableCollection
from soulbound.tokens.registry import SoulboundRegistry
from tests.testing_utils import ADMIN, ALICE, BOB


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "feature(name): mark test as belonging to a feature. "
        "Usage: @pytest.mark.feature('bridge')"
    )


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add custom command-line options."""
    parser.addoption(
        "--feature",
        action="store",
        type=str,
        default=None,
        help="Run tests for a specific feature (e.g., --feature bridge)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Filter tests based on command-line options."""
    feature_filter = config.getoption("--feature")
    if feature_filter is None:
        return
    selected = []
    deselected = []
    for item in items:
        marker = item.get_closest_marker("feature")
        if marker is not None:
            feature_name = marker.args[0] if marker.args else ""
            if feature_name == feature_filter:
                selected.append(item)
                continue
        deselected.append(item)
    config.hook.pytest_deselected(items=deselected)
    items[:] = selected


@pytest.fixture
def chain() -> Chain:
    """Create a fresh Chain with in-memory events only."""
    return Chain()


@pytest.fixture
def logged_chain(tmp_path: Path) -> Chain:
    """Create a Chain that writes committed events to a temp JSONL file."""
    return Chain(event_logger=EventLogger(tmp_path / "events.jsonl"))


@pytest.fixture
def registry(chain: Chain) -> SoulboundRegistry:
    """Deployed registry administered by ADMIN, source not configured."""
    registry = SoulboundRegistry(name="Soulbound Badges", symbol="SBB", admin=ADMIN)
    chain.deploy(registry)
    return registry


@pytest.fixture
def source(chain: Chain) -> TransferableCollection:
    """Deployed source collection.

    Pre-minted tokens:
    - 42 -> ALICE, "ipfs://abc"
    - 7  -> ALICE, no URI
    - 99 -> BOB, "ipfs://bob"
    """
    source = TransferableCollection(name="Legacy Badges", symbol="LGB", admin=ADMIN)
    chain.deploy(source)
    source.mint(ALICE, 42, "ipfs://abc", caller=ADMIN)
    source.mint(ALICE, 7, caller=ADMIN)
    source.mint(BOB, 99, "ipfs://bob", caller=ADMIN)
    return source


@pytest.fixture
def bridged(registry: SoulboundRegistry, source: TransferableCollection) -> SoulboundRegistry:
    """Registry with the source collection configured as migration source."""
    registry.set_source_address(source.address, caller=ADMIN)
    return registry


@pytest.fixture
def migrated(bridged: SoulboundRegistry, source: TransferableCollection) -> SoulboundRegistry:
    """Registry holding token 42 (ALICE) migrated from the source collection."""
    source.safe_transfer_from(ALICE, bridged.address, 42, caller=ALICE)
    return bridged
