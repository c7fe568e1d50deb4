"""Scenario runner - scripted walkthroughs of the registry

A scenario is a YAML document naming actors (label -> address) and a list
of steps. Each step runs one operation against a fresh chain holding one
SoulboundRegistry and, once deployed, one TransferableCollection as the
migration source. Failed steps are reported with ChainError.to_response()
and do not stop later steps.

Example:
    actors:
      admin: "0x00000000000000000000000000000000000000a1"
      alice: "0x00000000000000000000000000000000000000a2"
    steps:
      - {action: deploy_source}
      - {action: mint_source, to: alice, token_id: 42, uri: "ipfs://abc"}
      - {action: set_source_address}
      - {action: migrate, from: alice, token_id: 42}
      - {action: query, token_id: 42}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field

from .chain.addresses import Address, normalize_address
from .chain.chain import Chain
from .chain.errors import ChainError
from .config_schema import AppConfig, StrictModel
from .tokens.collection import TransferableCollection
from .tokens.registry import SoulboundRegistry

logger = logging.getLogger(__name__)

StepAction = Literal[
    "deploy_source",
    "mint_source",
    "set_source_address",
    "migrate",
    "lock",
    "unlock",
    "approve",
    "transfer",
    "query",
]


class ScenarioStep(StrictModel):
    """One operation of a scenario."""

    action: StepAction
    caller: str | None = Field(default=None, description="Actor label or address (default: admin)")
    from_: str | None = Field(default=None, alias="from", description="Token holder label or address")
    to: str | None = Field(default=None, description="Recipient label or address")
    token_id: int | None = Field(default=None, ge=0)
    uri: str = ""
    address: str | None = Field(default=None, description="Source address override for set_source_address")
    name: str = "Legacy Collection"
    symbol: str = "LEGACY"


class Scenario(StrictModel):
    """Actors plus the ordered steps to run."""

    actors: dict[str, str] = Field(default_factory=dict)
    admin: str = Field(default="admin", description="Actor label of the registry administrator")
    steps: list[ScenarioStep] = Field(default_factory=list)


def load_scenario(path: str | Path) -> Scenario:
    """Load and validate a scenario YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        pydantic.ValidationError: If the scenario is malformed.
    """
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return Scenario.model_validate(raw)


class ScenarioRunner:
    """Executes scenario steps against one chain."""

    chain: Chain
    registry: SoulboundRegistry
    source: TransferableCollection | None

    def __init__(self, scenario: Scenario, config: AppConfig | None = None) -> None:
        self.scenario = scenario
        self.config = config or AppConfig()
        self.chain = Chain.from_config(self.config)
        self.admin = self.resolve(scenario.admin)
        self.registry = SoulboundRegistry.from_config(self.config, admin=self.admin)
        self.chain.deploy(self.registry)
        self.source = None

    def resolve(self, label: str | None) -> Address:
        """Map an actor label (or literal address) to an address."""
        if label is None:
            return self.admin
        return normalize_address(self.scenario.actors.get(label, label))

    def _require(self, value: Any, field_name: str, step: ScenarioStep) -> Any:
        if value is None:
            raise ValueError(f"Step '{step.action}' requires '{field_name}'")
        return value

    def _require_source(self) -> TransferableCollection:
        if self.source is None:
            raise ValueError("No source collection deployed; add a deploy_source step first")
        return self.source

    def _token_state(self, token_id: int) -> dict[str, Any]:
        return {
            "token_id": token_id,
            "owner": self.registry.owner_of(token_id),
            "locked": self.registry.locked(token_id),
            "uri": self.registry.resolve_uri(token_id),
            "migrated_from": self.registry.migrated_from(token_id),
        }

    def run_step(self, step: ScenarioStep) -> dict[str, Any]:
        """Run one step and return its success payload.

        Raises:
            ChainError: If the operation fails on chain.
            ValueError: If the step is missing a required field.
        """
        caller = self.resolve(step.caller)

        if step.action == "deploy_source":
            self.source = TransferableCollection(step.name, step.symbol, admin=self.admin)
            return {"source_address": self.chain.deploy(self.source)}

        if step.action == "set_source_address":
            address = normalize_address(step.address) if step.address else self._require_source().address
            self.registry.set_source_address(address, caller=caller)
            return {"source_address": self.registry.source_address()}

        token_id: int = self._require(step.token_id, "token_id", step)

        if step.action == "mint_source":
            to_address = self.resolve(self._require(step.to, "to", step))
            self._require_source().mint(to_address, token_id, step.uri, caller=caller)
            return {"token_id": token_id, "owner": to_address}

        if step.action == "migrate":
            holder = self.resolve(self._require(step.from_, "from", step))
            self._require_source().safe_transfer_from(
                holder, self.registry.address, token_id, caller=holder if step.caller is None else caller
            )
            return self._token_state(token_id)

        if step.action == "lock":
            self.registry.lock(token_id, caller=caller)
            return {"token_id": token_id, "locked": True}

        if step.action == "unlock":
            self.registry.unlock(token_id, caller=caller)
            return {"token_id": token_id, "locked": False}

        if step.action == "approve":
            to_address = self.resolve(self._require(step.to, "to", step))
            self.registry.approve(to_address, token_id, caller=caller)
            return {"token_id": token_id, "approved": to_address}

        if step.action == "transfer":
            holder = self.resolve(self._require(step.from_, "from", step))
            to_address = self.resolve(self._require(step.to, "to", step))
            self.registry.transfer_from(holder, to_address, token_id, caller=caller)
            return {"token_id": token_id, "owner": to_address}

        return self._token_state(token_id)

    def run(self) -> list[dict[str, Any]]:
        """Run every step; failures are recorded and the run continues."""
        results: list[dict[str, Any]] = []
        for index, step in enumerate(self.scenario.steps):
            header = {"step": index, "action": step.action}
            try:
                payload = self.run_step(step)
            except ChainError as e:
                logger.info("Step %d (%s) failed: %s", index, step.action, e)
                results.append({**header, **e.to_response()})
                continue
            results.append({**header, "success": True, **payload})
        return results


def run_scenario(scenario: Scenario, config: AppConfig | None = None) -> list[dict[str, Any]]:
    """Run a scenario on a fresh chain and return one result per step."""
    return ScenarioRunner(scenario, config).run()
