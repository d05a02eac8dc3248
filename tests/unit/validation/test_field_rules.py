"""
chatops-config: unit tests for the field schema rules

File: tests/unit/validation/test_field_rules.py
Last updated: 2026-10-19

Purpose
- Validate per-field constraints evaluated in the first validation phase.

What this test file should cover
- Required fields report a SchemaError at the field path.
- Rules gated on ``enabled`` only fire for enabled integrations.
- Within one field the first failing constraint wins; all fields are checked.
- Custom rule tables can be evaluated directly.

Functional requirements
- No network usage.

Non-functional requirements
- Deterministic and fast.
"""

from __future__ import annotations

from dataclasses import replace

from chatops_config.config.models import (
    Action,
    Alias,
    ChannelBindingsByName,
    Communications,
    Config,
    Elasticsearch,
    ElasticsearchIndex,
    Mattermost,
    Settings,
    Webhook,
)
from chatops_config.errors import SchemaError
from chatops_config.validation.engine import ValidationEngine
from chatops_config.validation.result import ViolationCollector
from chatops_config.validation.rules import RuleTag
from chatops_config.validation.schema import (
    FieldRule,
    at_least,
    is_empty,
    required,
    validate_fields,
)
from chatops_config.validation.tree import EntityKind, Node


def _config(**changes: object) -> Config:
    return replace(Config(settings=Settings(cluster_name="prod")), **changes)


def _group(**platforms: object) -> dict[str, Communications]:
    return {"default-group": Communications(**platforms)}


def test_minimal_config_is_clean() -> None:
    result = ValidationEngine().validate(_config())

    assert result.is_clean


def test_missing_cluster_name_is_critical() -> None:
    result = ValidationEngine().validate(Config())

    assert len(result.criticals) == 1
    error = result.criticals[0]
    assert isinstance(error, SchemaError)
    assert error.tag == RuleTag.REQUIRED
    assert str(error) == "Key: 'Config.settings.cluster_name' cluster_name is a required field"


def test_whitespace_only_cluster_name_is_required() -> None:
    result = ValidationEngine().validate(Config(settings=Settings(cluster_name="  ")))

    assert [(error.tag, error.path) for error in result.criticals] == [
        (RuleTag.REQUIRED, "Config.settings.cluster_name")
    ]


def test_every_failing_field_is_reported() -> None:
    config = _config(actions={"describe": Action(enabled=False)})

    result = ValidationEngine().validate(config)

    assert [error.path for error in result.criticals] == [
        "Config.actions[describe].command",
        "Config.actions[describe].display_name",
    ]


def test_alias_command_is_required() -> None:
    result = ValidationEngine().validate(_config(aliases={"k": Alias(command="  ")}))

    assert result.messages("critical") == (
        "Key: 'Config.aliases[k].command' command is a required field",
    )


def test_disabled_integration_fields_are_not_checked() -> None:
    config = _config(
        communications=_group(
            mattermost=Mattermost(enabled=False),
            webhook=Webhook(enabled=False, url="not a url"),
            elasticsearch=Elasticsearch(
                enabled=False, indices={"events": ElasticsearchIndex(shards=0)}
            ),
        )
    )

    assert ValidationEngine().validate(config).is_clean


def test_enabled_mattermost_requires_connection_fields() -> None:
    config = _config(
        communications=_group(
            mattermost=Mattermost(
                enabled=True,
                url="",
                channels={"town": ChannelBindingsByName(name="town-square")},
            )
        )
    )

    result = ValidationEngine().validate(config)

    prefix = "Config.communications[default-group].mattermost"
    assert [(error.tag, error.path) for error in result.criticals] == [
        (RuleTag.REQUIRED_IF_ENABLED, f"{prefix}.url"),
        (RuleTag.REQUIRED_IF_ENABLED, f"{prefix}.token"),
        (RuleTag.REQUIRED_IF_ENABLED, f"{prefix}.team"),
        (RuleTag.REQUIRED_IF_ENABLED, f"{prefix}.bot_name"),
    ]
    assert result.warnings == ()


def test_first_failing_constraint_wins_per_field() -> None:
    config = _config(communications=_group(webhook=Webhook(enabled=True, url="ftp://hooks")))

    result = ValidationEngine().validate(config)

    assert len(result.criticals) == 1
    error = result.criticals[0]
    assert error.tag == RuleTag.URL
    assert str(error) == (
        "Key: 'Config.communications[default-group].webhook.url' url must be a valid http(s) URL"
    )


def test_elasticsearch_index_rules() -> None:
    config = _config(
        communications=_group(
            elasticsearch=Elasticsearch(
                enabled=True,
                server="https://es.example.com",
                indices={"events": ElasticsearchIndex(name="events", type="", shards=0)},
            )
        )
    )

    result = ValidationEngine().validate(config)

    prefix = "Config.communications[default-group].elasticsearch.indices[events]"
    assert result.messages("critical") == (
        f"Key: '{prefix}.type' type is a required field",
        f"Key: '{prefix}.shards' shards must be 1 or greater",
    )


def test_is_empty_treats_blank_strings_and_empty_collections_as_empty() -> None:
    assert is_empty(None)
    assert is_empty("   ")
    assert is_empty(())
    assert is_empty({})
    assert not is_empty("x")
    assert not is_empty(0)
    assert not is_empty(False)


def test_validate_fields_accepts_a_custom_rule_table() -> None:
    rules = {
        EntityKind.ELASTICSEARCH_INDEX: (
            FieldRule("name", (required(),)),
            FieldRule("replicas", (at_least(1),)),
        )
    }
    nodes = [Node(EntityKind.ELASTICSEARCH_INDEX, ElasticsearchIndex(name="a"), "Index")]
    collector = ViolationCollector()

    validate_fields(nodes, collector, rules=rules)

    violations = collector.items()
    assert len(violations) == 1
    assert violations[0].tag == RuleTag.MIN
    assert violations[0].path == "Index.replicas"
    assert violations[0].params == ("replicas", "1")
