"""In-process chain: contract directory, atomic units, and event emission.

Every public contract entry point runs inside Chain.atomic(). The outermost
unit snapshots all deployed contracts and the event log; if anything raises,
all of it is restored before the exception propagates. Nested units (one
contract calling another) join the outer unit, so a cross-contract call
either commits as a whole or not at all.

Usage:
    chain = Chain()
    registry = SoulboundRegistry(name="Badges", symbol="BDG", admin=admin)
    chain.deploy(registry)

    with chain.atomic():
        ...  # all-or-nothing
"""

# --- GOVERNANCE START (do not edit) ---
# Execution is single-threaded and serialized.
# A failed unit leaves no state change and no event behind.
# --- GOVERNANCE END ---

from __future__ import annotations

import functools
import hashlib
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Protocol, TypeVar, cast, runtime_checkable

from ..config_schema import AppConfig
from .addresses import Address, ZERO_ADDRESS, address_from_int, normalize_address
from .errors import UnknownContract
from .events import Event, EventLog
from .logger import EventLogger

logger = logging.getLogger(__name__)


@runtime_checkable
class Stateful(Protocol):
    """A component whose state can be captured and put back."""

    def snapshot(self) -> Any:
        """Return an independent copy of the component's state."""
        ...

    def restore(self, snapshot: Any) -> None:
        """Replace the component's state with a previous snapshot."""
        ...


class Contract:
    """Base class for anything deployed on a Chain.

    Subclasses list their state-bearing components in stateful_parts();
    snapshot()/restore() are derived from that list.
    """

    address: Address
    chain: Chain | None

    def __init__(self) -> None:
        self.address = ZERO_ADDRESS
        self.chain = None

    def stateful_parts(self) -> dict[str, Stateful]:
        """State-bearing components of this contract, by name."""
        return {}

    def snapshot(self) -> dict[str, Any]:
        return {name: part.snapshot() for name, part in self.stateful_parts().items()}

    def restore(self, snapshot: dict[str, Any]) -> None:
        for name, part in self.stateful_parts().items():
            part.restore(snapshot[name])

    def on_deploy(self) -> None:
        """Called once the contract has an address and a chain."""

    def require_chain(self) -> Chain:
        """Return the chain this contract is deployed on.

        Raises:
            RuntimeError: If the contract has not been deployed.
        """
        if self.chain is None:
            raise RuntimeError(f"{type(self).__name__} is not deployed on a chain")
        return self.chain

    def emit(self, name: str, **args: Any) -> None:
        """Emit an event from this contract's address."""
        self.require_chain().emit(self.address, name, **args)


class Chain:
    """Directory of deployed contracts plus the atomic-unit machinery.

    Thread-safety: This class is NOT thread-safe. Entry points are expected
    to be serialized by the caller.
    """

    events: EventLog
    event_logger: EventLogger | None
    _contracts: dict[Address, Contract]
    _deploy_nonce: int
    _depth: int

    def __init__(self, event_logger: EventLogger | None = None) -> None:
        self.events = EventLog()
        self.event_logger = event_logger
        self._contracts = {}
        self._deploy_nonce = 0
        self._depth = 0

    @classmethod
    def from_config(cls, config: AppConfig) -> "Chain":
        """Create a Chain whose committed events go to the configured JSONL file.

        Args:
            config: Validated application config

        Returns:
            Configured Chain instance
        """
        event_file = config.logging.event_file
        event_logger = EventLogger(event_file) if event_file else None
        return cls(event_logger=event_logger)

    # ===== CONTRACT DIRECTORY =====

    def _next_address(self) -> Address:
        self._deploy_nonce += 1
        digest = hashlib.sha256(f"deploy:{self._deploy_nonce}".encode()).digest()
        return address_from_int(int.from_bytes(digest[:20], "big"))

    def deploy(self, contract: Contract) -> Address:
        """Deploy a contract and return its new address.

        Raises:
            RuntimeError: If the contract is already deployed.
        """
        if contract.chain is not None:
            raise RuntimeError(f"{type(contract).__name__} is already deployed at {contract.address}")
        with self.atomic():
            address = self._next_address()
            contract.chain = self
            contract.address = address
            self._contracts[address] = contract
            contract.on_deploy()
        logger.debug("Deployed %s at %s", type(contract).__name__, address)
        return address

    def get(self, address: Address) -> Contract:
        """Look up a deployed contract.

        Raises:
            UnknownContract: If nothing is deployed at the address.
        """
        key = normalize_address(address)
        contract = self._contracts.get(key)
        if contract is None:
            raise UnknownContract(f"No contract deployed at {key}", address=key)
        return contract

    def is_contract(self, address: Address) -> bool:
        """Check whether a contract is deployed at the address."""
        return normalize_address(address) in self._contracts

    def contracts(self) -> list[Contract]:
        """All deployed contracts, in deploy order."""
        return list(self._contracts.values())

    # ===== EVENTS =====

    def emit(self, address: Address, name: str, **args: Any) -> None:
        """Append an event to the log of the running unit."""
        self.events.append(Event(name=name, address=address, args=dict(args)))

    # ===== ATOMIC UNITS =====

    @property
    def in_unit(self) -> bool:
        """Whether an atomic unit is currently running."""
        return self._depth > 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run the enclosed block as one all-or-nothing unit.

        Only the outermost unit snapshots and restores; inner units join it.
        Contracts deployed inside a failed unit are dropped and unbound, so
        they can be deployed again. Committed events go to the event logger
        after the unit commits; a write failure there is logged and does not
        undo the commit.
        """
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        deployed = dict(self._contracts)
        snapshots = {address: c.snapshot() for address, c in deployed.items()}
        mark = len(self.events)
        self._depth = 1
        try:
            yield
        except BaseException as e:
            for address, contract in self._contracts.items():
                if address not in deployed:
                    contract.chain = None
                    contract.address = ZERO_ADDRESS
            self._contracts = deployed
            for address, contract in deployed.items():
                contract.restore(snapshots[address])
            self.events.truncate(mark)
            logger.info("Atomic unit rolled back: %s: %s", type(e).__name__, e)
            raise
        finally:
            self._depth = 0

        if self.event_logger is not None:
            try:
                self.event_logger.log_events(self.events.since(mark))
            except OSError as e:
                logger.warning(f"Failed to write committed events to {self.event_logger.output_path}: {e}")


F = TypeVar("F", bound=Callable[..., Any])


def atomic_entry(method: F) -> F:
    """Decorator running a contract method as (or inside) an atomic unit."""

    @functools.wraps(method)
    def wrapper(self: Contract, *args: Any, **kwargs: Any) -> Any:
        with self.require_chain().atomic():
            return method(self, *args, **kwargs)

    return cast(F, wrapper)
