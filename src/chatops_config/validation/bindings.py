"""Binding validators: every bound name must resolve, and plugins bound together must agree."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import cast

from chatops_config.config.models import ActionBindings, BotBindings, PluginProvider, SinkBindings
from chatops_config.constants import EXECUTORS_MAP_NAME, SOURCES_MAP_NAME
from chatops_config.validation.context import CheckContext
from chatops_config.validation.plugins import (
    check_action_executors,
    check_bound_plugin_conflicts,
    check_plugin_rbac,
)
from chatops_config.validation.rules import RuleTag
from chatops_config.validation.tree import Node, index, join


def check_binding_resolution(
    ctx: CheckContext,
    providers: Mapping[str, PluginProvider],
    bindings: Sequence[str],
    path: str,
    map_name: str,
) -> None:
    """Report each binding name missing from ``providers`` once."""

    reported: set[str] = set()
    for binding in bindings:
        if binding in providers or binding in reported:
            continue
        reported.add(binding)
        ctx.report(RuleTag.INVALID_BINDING, index(path, binding), binding, map_name)


def check_source_bindings(ctx: CheckContext, bindings: Sequence[str], path: str) -> None:
    sources = ctx.root.sources
    check_binding_resolution(ctx, sources, bindings, path, SOURCES_MAP_NAME)
    check_bound_plugin_conflicts(ctx, sources, bindings, path)
    check_plugin_rbac(ctx, sources, bindings, path)


def check_executor_bindings(ctx: CheckContext, bindings: Sequence[str], path: str) -> None:
    executors = ctx.root.executors
    check_binding_resolution(ctx, executors, bindings, path, EXECUTORS_MAP_NAME)
    check_bound_plugin_conflicts(ctx, executors, bindings, path)
    check_plugin_rbac(ctx, executors, bindings, path)


def validate_bot_bindings(ctx: CheckContext, node: Node) -> None:
    bindings = cast("BotBindings", node.value)
    check_source_bindings(ctx, bindings.sources, join(node.path, "sources"))
    check_executor_bindings(ctx, bindings.executors, join(node.path, "executors"))


def validate_action_bindings(ctx: CheckContext, node: Node) -> None:
    bindings = cast("ActionBindings", node.value)
    executors_path = join(node.path, "executors")
    check_source_bindings(ctx, bindings.sources, join(node.path, "sources"))
    check_executor_bindings(ctx, bindings.executors, executors_path)
    check_action_executors(ctx, bindings.executors, executors_path)


def validate_sink_bindings(ctx: CheckContext, node: Node) -> None:
    bindings = cast("SinkBindings", node.value)
    check_source_bindings(ctx, bindings.sources, join(node.path, "sources"))


__all__ = [
    "check_binding_resolution",
    "check_executor_bindings",
    "check_source_bindings",
    "validate_action_bindings",
    "validate_bot_bindings",
    "validate_sink_bindings",
]
