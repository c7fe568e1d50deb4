"""Integration tests for the scenario runner and the command-line entry point."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from soulbound.chain.addresses import BURN_ADDRESS
from soulbound.cli import main
from soulbound.config import DEFAULT_CONFIG_PATH, reset_config
from soulbound.config_schema import AppConfig
from soulbound.scenario import Scenario, ScenarioRunner, load_scenario, run_scenario
from tests.testing_utils import ALICE, BOB

EXAMPLE_SCENARIO = DEFAULT_CONFIG_PATH.parent / "scenarios" / "migrate_and_unlock.yaml"


@pytest.fixture(autouse=True)
def clean_config():
    reset_config()
    yield
    reset_config()


class TestScenarioRunner:
    """Tests for running scenarios in-process."""

    def test_example_scenario(self) -> None:
        results = run_scenario(load_scenario(EXAMPLE_SCENARIO))

        failures = {r["step"]: r["code"] for r in results if not r["success"]}
        assert failures == {2: "source_not_configured", 5: "token_locked", 6: "not_authorized"}

        migrated = results[4]
        assert migrated["owner"] == ALICE
        assert migrated["locked"] is True
        assert migrated["uri"] == "ipfs://abc"

        final = results[-1]
        assert final["owner"] == BOB
        assert final["locked"] is False
        assert final["migrated_from"] == results[0]["source_address"]

    def test_runner_state(self) -> None:
        runner = ScenarioRunner(load_scenario(EXAMPLE_SCENARIO))
        runner.run()

        assert runner.source is not None
        assert runner.source.owner_of(42) == BURN_ADDRESS
        assert runner.registry.tokens_of_owner(BOB) == [42]

    def test_config_drives_registry(self, tmp_path: Path) -> None:
        scenario = Scenario.model_validate({
            "actors": {"admin": "0x" + "a1".rjust(40, "0"), "alice": ALICE},
            "steps": [
                {"action": "deploy_source"},
                {"action": "mint_source", "to": "alice", "token_id": 3, "uri": "3.json"},
                {"action": "set_source_address"},
                {"action": "migrate", "from": "alice", "token_id": 3},
            ],
        })
        config = AppConfig.model_validate({
            "registry": {"base_uri": "https://meta/"},
            "logging": {"event_file": str(tmp_path / "events.jsonl")},
        })

        results = run_scenario(scenario, config)

        assert all(r["success"] for r in results)
        assert results[-1]["uri"] == "https://meta/3.json"
        lines = (tmp_path / "events.jsonl").read_text().splitlines()
        assert json.loads(lines[-1])["event_type"] == "Migrated"

    def test_missing_field_is_a_value_error(self) -> None:
        scenario = Scenario.model_validate({
            "actors": {"admin": ALICE},
            "steps": [{"action": "lock"}],
        })
        with pytest.raises(ValueError, match="token_id"):
            run_scenario(scenario)

    def test_bad_address_is_recorded_and_run_continues(self) -> None:
        scenario = Scenario.model_validate({
            "actors": {"admin": ALICE},
            "steps": [
                {"action": "deploy_source"},
                {"action": "set_source_address", "address": "0x12"},
                {"action": "mint_source", "to": "bobb", "token_id": 1},
                {"action": "set_source_address"},
            ],
        })

        results = run_scenario(scenario)

        assert len(results) == 4
        assert [r["success"] for r in results] == [True, False, False, True]
        assert results[1]["code"] == "invalid_address"
        assert results[2]["code"] == "invalid_address"
        assert results[3]["source_address"] == results[0]["source_address"]

    def test_unknown_action_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Scenario.model_validate({"steps": [{"action": "teleport"}]})

    def test_unknown_step_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Scenario.model_validate({"steps": [{"action": "query", "token": 1}]})

    def test_step_before_source_deployed(self) -> None:
        scenario = Scenario.model_validate({
            "actors": {"admin": ALICE},
            "steps": [{"action": "mint_source", "to": "admin", "token_id": 1}],
        })
        with pytest.raises(ValueError, match="deploy_source"):
            run_scenario(scenario)


class TestCli:
    """Tests for soulbound.cli.main."""

    def test_exit_code_reports_failures(self, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main([str(EXAMPLE_SCENARIO)])

        assert exit_code == 1
        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert len(lines) == 10
        assert lines[5]["code"] == "token_locked"

    def test_quiet_prints_only_failures(self, capsys: pytest.CaptureFixture[str]) -> None:
        main([str(EXAMPLE_SCENARIO), "--quiet"])

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert [line["step"] for line in lines] == [2, 5, 6]

    def test_all_success_and_event_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scenario_path = tmp_path / "ok.yaml"
        scenario_path.write_text(
            "actors:\n"
            f"  alice: \"{ALICE}\"\n"
            "  admin: \"0x00000000000000000000000000000000000000a1\"\n"
            "steps:\n"
            "  - {action: deploy_source}\n"
            "  - {action: mint_source, to: alice, token_id: 1}\n"
            "  - {action: set_source_address}\n"
            "  - {action: migrate, from: alice, token_id: 1}\n"
        )
        config_path = tmp_path / "config.yaml"
        config_path.write_text("registry:\n  symbol: TST\n")
        event_file = tmp_path / "logs" / "events.jsonl"

        exit_code = main([
            str(scenario_path),
            "--config", str(config_path),
            "--event-file", str(event_file),
        ])

        assert exit_code == 0
        records = [json.loads(line) for line in event_file.read_text().splitlines()]
        assert records[-1]["event_type"] == "Migrated"
        assert len(capsys.readouterr().out.splitlines()) == 4
