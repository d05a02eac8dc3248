"""
Two-phase configuration validation engine.

Phase one evaluates the declarative field rules over every node of the tree.
Phase two dispatches each node to the cross-entity validator registered for
its ``EntityKind``; those validators read the whole root to resolve
references. Both phases report into one collector, whose violations are
rendered through the rule registry and partitioned into criticals and
warnings.

The engine holds no mutable state: the registry and both dispatch tables are
frozen at construction, so one engine may validate different trees from
several threads.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Final

import structlog

from chatops_config.config.models import Config
from chatops_config.constants import BUILTIN_VERBS
from chatops_config.errors import ValidationEngineError
from chatops_config.validation.aliases import validate_alias, validate_regex_constraints
from chatops_config.validation.bindings import (
    validate_action_bindings,
    validate_bot_bindings,
    validate_sink_bindings,
)
from chatops_config.validation.channels import (
    validate_cloud_slack,
    validate_discord,
    validate_mattermost,
    validate_slack,
    validate_socket_slack,
)
from chatops_config.validation.context import CheckContext, CrossEntityValidator
from chatops_config.validation.plugins import validate_plugin_definitions
from chatops_config.validation.result import ResultAggregator, ValidateResult, ViolationCollector
from chatops_config.validation.rules import RuleRegistry
from chatops_config.validation.schema import FIELD_RULES, FieldRule, validate_fields
from chatops_config.validation.tree import EntityKind, walk

CROSS_ENTITY_VALIDATORS: Final[Mapping[EntityKind, CrossEntityValidator]] = MappingProxyType(
    {
        EntityKind.SOURCES: validate_plugin_definitions,
        EntityKind.EXECUTORS: validate_plugin_definitions,
        EntityKind.REGEX_CONSTRAINTS: validate_regex_constraints,
        EntityKind.ALIAS: validate_alias,
        EntityKind.BOT_BINDINGS: validate_bot_bindings,
        EntityKind.ACTION_BINDINGS: validate_action_bindings,
        EntityKind.SINK_BINDINGS: validate_sink_bindings,
        EntityKind.SLACK: validate_slack,
        EntityKind.SOCKET_SLACK: validate_socket_slack,
        EntityKind.CLOUD_SLACK: validate_cloud_slack,
        EntityKind.DISCORD: validate_discord,
        EntityKind.MATTERMOST: validate_mattermost,
    }
)


class ValidationEngine:
    """Validate typed configuration trees against schema and graph rules."""

    __slots__ = ("_builtin_verbs", "_field_rules", "_logger", "_registry", "_validators")

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        *,
        extra_templates: Mapping[str, str] | None = None,
        builtin_verbs: Iterable[str] = BUILTIN_VERBS,
        field_rules: Mapping[EntityKind, tuple[FieldRule, ...]] | None = None,
        validators: Mapping[EntityKind, CrossEntityValidator] | None = None,
        logger: Any | None = None,
    ) -> None:
        if registry is not None and extra_templates:
            raise ValueError("pass either registry or extra_templates, not both")
        self._registry = (
            registry if registry is not None else RuleRegistry.build(extra_templates)
        )
        self._builtin_verbs = frozenset(builtin_verbs)
        self._field_rules = MappingProxyType(
            dict(FIELD_RULES if field_rules is None else field_rules)
        )
        self._validators = MappingProxyType(
            dict(CROSS_ENTITY_VALIDATORS if validators is None else validators)
        )
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def validate(self, config: Config) -> ValidateResult:
        """Return every violation of ``config``, partitioned by severity.

        Raises ``ValidationEngineError`` when ``config`` is not a ``Config``
        root or a validator raises a tag the registry cannot render.
        """

        if not isinstance(config, Config):
            raise ValidationEngineError(f"expected a Config root, got {type(config).__name__}")

        nodes = tuple(walk(config))
        collector = ViolationCollector()
        validate_fields(nodes, collector, rules=self._field_rules)

        ctx = CheckContext(root=config, collector=collector, builtin_verbs=self._builtin_verbs)
        for node in nodes:
            validator = self._validators.get(node.kind)
            if validator is not None:
                validator(ctx, node)

        aggregator = ResultAggregator(self._registry)
        aggregator.extend(collector.items())
        result = aggregator.result()

        self._logger.info(
            "config_validation_finished",
            nodes=len(nodes),
            criticals=len(result.criticals),
            warnings=len(result.warnings),
        )
        return result


def validate_config(config: Config, *, engine: ValidationEngine | None = None) -> ValidateResult:
    """Validate ``config`` with ``engine`` or a default-built one."""

    selected = engine if engine is not None else ValidationEngine()
    return selected.validate(config)


__all__ = ["CROSS_ENTITY_VALIDATORS", "ValidationEngine", "validate_config"]
