"""
chatops-config: unit tests for the validation engine

File: tests/unit/validation/test_engine.py
Last updated: 2026-10-19

Purpose
- Validate end-to-end engine behavior, result handling and structured logging.

What this test file should cover
- The repository's reference chatops.yaml validates without findings.
- Validation is deterministic and does not depend on shared state.
- Hard failures raise instead of returning a result.
- Custom rules plug in through extra templates and the validator table.
- Boot gating and result reporting.

Functional requirements
- No network usage.

Non-functional requirements
- Deterministic and fast.
"""

from __future__ import annotations

import copy
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from chatops_config import (
    BootBlockedError,
    ConfigViolationError,
    RuleRegistry,
    RuleRegistryError,
    ValidateResult,
    ValidationEngine,
    ValidationEngineError,
    assert_bootable,
    load_config,
    report_result,
    validate_config,
)
from chatops_config.config.models import (
    Alias,
    ChannelBindingsByName,
    Communications,
    Config,
    Settings,
    SocketSlack,
)
from chatops_config.validation.context import CheckContext
from chatops_config.validation.engine import CROSS_ENTITY_VALIDATORS
from chatops_config.validation.tree import EntityKind, Node

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st
except ModuleNotFoundError:
    HYPOTHESIS_AVAILABLE = False
else:
    HYPOTHESIS_AVAILABLE = True

REPO_ROOT = Path(__file__).resolve().parents[3]


def _mixed_config(cluster_name: str = "", channel: str = "Bad Name") -> Config:
    return Config(
        aliases={"fb": Alias(command="foo bar")},
        communications={
            "default-group": Communications(
                socket_slack=SocketSlack(
                    enabled=True,
                    app_token="xapp-1",
                    bot_token="xoxb-1",
                    channels={"default": ChannelBindingsByName(name=channel)},
                )
            )
        },
        settings=Settings(cluster_name=cluster_name),
    )


def test_reference_config_is_clean() -> None:
    config = load_config(REPO_ROOT / "chatops.yaml")

    result = validate_config(config)

    assert result.is_clean, result.messages("critical") + result.messages("warning")


def test_field_rules_report_before_cross_entity_checks() -> None:
    result = ValidationEngine().validate(_mixed_config())

    assert [error.tag for error in result.criticals] == ["required", "invalid_alias_command"]
    assert [error.tag for error in result.warnings] == ["invalid_channel_name"]
    assert not result.is_bootable


def test_validation_is_repeatable() -> None:
    engine = ValidationEngine()
    config = _mixed_config()

    assert engine.validate(config) == engine.validate(config)


def test_one_engine_validates_trees_concurrently() -> None:
    engine = ValidationEngine()
    configs = [_mixed_config(cluster_name=f"c{index}") for index in range(8)] + [
        _mixed_config() for _ in range(8)
    ]
    expected = [engine.validate(config) for config in configs]

    with ThreadPoolExecutor(max_workers=4) as pool:
        actual = list(pool.map(engine.validate, configs))

    assert actual == expected


def test_non_config_root_raises() -> None:
    with pytest.raises(ValidationEngineError, match="expected a Config root"):
        ValidationEngine().validate({"settings": {}})  # type: ignore[arg-type]


def test_unregistered_tag_from_custom_validator_raises() -> None:
    def _report_unknown(ctx: CheckContext, node: Node) -> None:
        ctx.report("not_registered", node.path)

    engine = ValidationEngine(validators={EntityKind.ALIAS: _report_unknown})

    with pytest.raises(ValidationEngineError, match="not_registered"):
        engine.validate(_mixed_config(cluster_name="prod"))


def test_extra_templates_render_custom_violations() -> None:
    def _forbid_kubectl_aliases(ctx: CheckContext, node: Node) -> None:
        alias = node.value
        assert isinstance(alias, Alias)
        if alias.command.startswith("kubectl"):
            ctx.report("forbidden_alias", node.path, alias.command)

    validators = dict(CROSS_ENTITY_VALIDATORS)
    validators[EntityKind.ALIAS] = _forbid_kubectl_aliases
    engine = ValidationEngine(
        extra_templates={"forbidden_alias": "alias command '{0}' is not allowed"},
        validators=validators,
    )
    config = Config(
        aliases={"k": Alias(command="kubectl get")}, settings=Settings(cluster_name="prod")
    )

    result = engine.validate(config)

    assert len(result.criticals) == 1
    error = result.criticals[0]
    assert type(error) is ConfigViolationError
    assert str(error) == "Key: 'Config.aliases[k]' alias command 'kubectl get' is not allowed"


def test_registry_and_extra_templates_are_exclusive() -> None:
    with pytest.raises(ValueError, match="either registry or extra_templates"):
        ValidationEngine(RuleRegistry.build(), extra_templates={"custom": "{0}"})


def test_malformed_extra_template_fails_at_construction() -> None:
    with pytest.raises(RuleRegistryError):
        ValidationEngine(extra_templates={"custom": "{0"})


def test_engine_exposes_its_registry() -> None:
    registry = RuleRegistry.build({"custom": "{0} custom"})

    assert ValidationEngine(registry).registry is registry


def test_assert_bootable_raises_with_every_critical() -> None:
    result = ValidationEngine().validate(_mixed_config())

    with pytest.raises(BootBlockedError) as exc_info:
        assert_bootable(result)

    assert exc_info.value.issues == result.criticals
    assert str(exc_info.value).splitlines() == [
        "invalid configuration:",
        "- Key: 'Config.settings.cluster_name' cluster_name is a required field",
        "- Key: 'Config.aliases[fb].command' "
        "Command prefix 'foo' not found in executors or builtin commands",
    ]


def test_assert_bootable_passes_warnings_through() -> None:
    config = replace(_mixed_config(cluster_name="prod"), aliases={})

    result = ValidationEngine().validate(config)

    assert assert_bootable(result) is result
    assert len(result.warnings) == 1


def test_report_result_logs_warnings_and_criticals() -> None:
    result = ValidationEngine().validate(_mixed_config())

    with capture_logs() as logs:
        report_result(result)

    assert [(entry["log_level"], entry["event"], entry["tag"]) for entry in logs] == [
        ("warning", "config_validation_warning", "invalid_channel_name"),
        ("error", "config_validation_critical", "required"),
        ("error", "config_validation_critical", "invalid_alias_command"),
    ]


def test_validate_logs_a_summary_event() -> None:
    with capture_logs() as logs:
        ValidationEngine().validate(_mixed_config())

    summary = [entry for entry in logs if entry["event"] == "config_validation_finished"]
    assert len(summary) == 1
    assert summary[0]["criticals"] == 2
    assert summary[0]["warnings"] == 1
    assert summary[0]["nodes"] > 0


def test_empty_result_is_clean_and_bootable() -> None:
    result = ValidateResult()

    assert result.is_clean
    assert result.is_bootable
    assert result.messages("warning") == ()


def test_validating_does_not_modify_the_tree() -> None:
    config = _mixed_config()
    snapshot = copy.deepcopy(config)

    ValidationEngine().validate(config)

    assert config == snapshot


if HYPOTHESIS_AVAILABLE:

    @given(
        cluster_name=st.sampled_from(["", "prod"]),
        channel=st.text(
            alphabet="abcXYZ019 _-#",
            max_size=20,
        ),
    )
    @settings(max_examples=40, deadline=None)
    def test_validation_is_deterministic(cluster_name: str, channel: str) -> None:
        config = _mixed_config(cluster_name=cluster_name, channel=channel)

        first = ValidationEngine().validate(config)
        second = ValidationEngine().validate(config)

        assert first == second
        assert all(error.tag != "invalid_channel_name" for error in first.criticals)
