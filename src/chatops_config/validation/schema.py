"""Field schema validator: declarative per-field constraints.

Each entity kind declares a tuple of ``FieldRule`` entries. A rule checks one
attribute of the entity and never looks at sibling fields, except for the
owner's ``enabled`` switch on rules marked ``when_enabled``. Every rule runs;
within one rule the first failing constraint wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping, Sized
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from chatops_config.validation.result import ViolationCollector
from chatops_config.validation.rules import RuleTag
from chatops_config.validation.tree import EntityKind, Node, join

_URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^https?://\S+$")


@dataclass(frozen=True, slots=True)
class Constraint:
    """One check on a field value; ``check`` returns True when satisfied."""

    tag: str
    check: Callable[[object], bool]
    param: str = ""
    skip_empty: bool = False


@dataclass(frozen=True, slots=True)
class FieldRule:
    attr: str
    constraints: tuple[Constraint, ...]
    when_enabled: bool = False


def is_empty(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def required(tag: str = RuleTag.REQUIRED) -> Constraint:
    return Constraint(tag=tag, check=lambda value: not is_empty(value))


def matches(pattern: re.Pattern[str], tag: str) -> Constraint:
    return Constraint(
        tag=tag,
        check=lambda value: isinstance(value, str) and pattern.fullmatch(value) is not None,
        param=pattern.pattern,
        skip_empty=True,
    )


def at_least(minimum: int) -> Constraint:
    return Constraint(
        tag=RuleTag.MIN,
        check=lambda value: isinstance(value, int) and value >= minimum,
        param=str(minimum),
    )


_REQUIRED_WHEN_ENABLED: Final[Constraint] = required(RuleTag.REQUIRED_IF_ENABLED)
_URL: Final[Constraint] = matches(_URL_PATTERN, RuleTag.URL)

FIELD_RULES: Final[Mapping[EntityKind, tuple[FieldRule, ...]]] = MappingProxyType(
    {
        EntityKind.SETTINGS: (FieldRule("cluster_name", (required(),)),),
        EntityKind.ALIAS: (FieldRule("command", (required(),)),),
        EntityKind.ACTION: (
            FieldRule("command", (required(),)),
            FieldRule("display_name", (required(),)),
        ),
        EntityKind.CLOUD_SLACK: (
            FieldRule("token", (_REQUIRED_WHEN_ENABLED,), when_enabled=True),
        ),
        EntityKind.DISCORD: (
            FieldRule("token", (_REQUIRED_WHEN_ENABLED,), when_enabled=True),
            FieldRule("bot_id", (_REQUIRED_WHEN_ENABLED,), when_enabled=True),
        ),
        EntityKind.MATTERMOST: (
            FieldRule("url", (_REQUIRED_WHEN_ENABLED, _URL), when_enabled=True),
            FieldRule("token", (_REQUIRED_WHEN_ENABLED,), when_enabled=True),
            FieldRule("team", (_REQUIRED_WHEN_ENABLED,), when_enabled=True),
            FieldRule("bot_name", (_REQUIRED_WHEN_ENABLED,), when_enabled=True),
        ),
        EntityKind.WEBHOOK: (
            FieldRule("url", (_REQUIRED_WHEN_ENABLED, _URL), when_enabled=True),
        ),
        EntityKind.ELASTICSEARCH: (
            FieldRule("server", (_REQUIRED_WHEN_ENABLED, _URL), when_enabled=True),
        ),
        EntityKind.ELASTICSEARCH_INDEX: (
            FieldRule("name", (required(),)),
            FieldRule("type", (required(),)),
            FieldRule("shards", (at_least(1),)),
        ),
    }
)


def validate_fields(
    nodes: Iterable[Node],
    collector: ViolationCollector,
    *,
    rules: Mapping[EntityKind, tuple[FieldRule, ...]] = FIELD_RULES,
) -> None:
    """Evaluate every declared field rule for every node."""

    for node in nodes:
        for rule in rules.get(node.kind, ()):
            _apply_rule(node, rule, collector)


def _apply_rule(node: Node, rule: FieldRule, collector: ViolationCollector) -> None:
    if rule.when_enabled and not getattr(node.value, "enabled", False):
        return
    value = getattr(node.value, rule.attr)
    for constraint in rule.constraints:
        if constraint.skip_empty and is_empty(value):
            continue
        if constraint.check(value):
            continue
        params = (rule.attr, constraint.param) if constraint.param else (rule.attr,)
        collector.report(constraint.tag, join(node.path, rule.attr), *params)
        return


__all__ = [
    "FIELD_RULES",
    "Constraint",
    "FieldRule",
    "at_least",
    "is_empty",
    "matches",
    "required",
    "validate_fields",
]
