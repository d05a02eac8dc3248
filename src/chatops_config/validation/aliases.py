"""Alias resolution and regex-constraint redundancy checks."""

from __future__ import annotations

from collections.abc import Iterable
from typing import cast

from chatops_config.config.models import Alias, Config, RegexConstraints
from chatops_config.constants import ALL_VALUES_PATTERNS
from chatops_config.validation.context import CheckContext
from chatops_config.validation.rules import RuleTag
from chatops_config.validation.tree import Node, join, sorted_items


def collect_command_prefixes(config: Config, builtin_verbs: Iterable[str]) -> frozenset[str]:
    """Prefixes of every configured executor (bound or not) plus the built-in verbs."""

    prefixes: set[str] = set(builtin_verbs)
    for _, executors in sorted_items(config.executors):
        prefixes.update(executors.collect_command_prefixes())
    return frozenset(prefixes)


def command_prefix(command: str) -> str:
    prefix, _, _ = command.strip().partition(" ")
    return prefix


def validate_alias(ctx: CheckContext, node: Node) -> None:
    alias = cast("Alias", node.value)
    if not alias.command.strip():
        # reported by the field schema rule
        return

    prefix = command_prefix(alias.command)
    if prefix in collect_command_prefixes(ctx.root, ctx.builtin_verbs):
        return
    ctx.report(RuleTag.INVALID_ALIAS_COMMAND, join(node.path, "command"), prefix)


def validate_regex_constraints(ctx: CheckContext, node: Node) -> None:
    constraints = cast("RegexConstraints", node.value)
    if len(constraints.include) < 2:
        return
    if any(pattern in ALL_VALUES_PATTERNS for pattern in constraints.include):
        ctx.report(RuleTag.REGEX_CONSTRAINTS_INCLUDE, join(node.path, "include"), "include")


__all__ = [
    "collect_command_prefixes",
    "command_prefix",
    "validate_alias",
    "validate_regex_constraints",
]
