"""Plugin-level cross-entity checks.

All checks that compare plugins bound together share one grouping primitive:
``group_plugin_usages`` walks a binding list in order and groups every
enabled plugin under a key (the plugin key itself for RBAC, the plugin name
for repository/version conflicts).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import cast

from chatops_config.config.models import (
    PLUGIN_KEY_SYNTAX,
    Executors,
    PluginConfig,
    PluginProvider,
    PolicySubjectType,
    Sources,
    decompose_plugin_key,
)
from chatops_config.validation.context import CheckContext
from chatops_config.validation.rules import RuleTag
from chatops_config.validation.tree import Node, index, join, sorted_items


@dataclass(frozen=True, slots=True)
class PluginUsage:
    """One enabled plugin reached through one binding."""

    binding: str
    plugin_key: str
    plugin: PluginConfig


GroupKey = Callable[[str], str | None]


def _same_key(plugin_key: str) -> str | None:
    return plugin_key


def _plugin_name(plugin_key: str) -> str | None:
    try:
        return decompose_plugin_key(plugin_key).name
    except ValueError:
        return None


def group_plugin_usages(
    providers: Mapping[str, PluginProvider],
    bindings: Sequence[str],
    *,
    group_key: GroupKey = _same_key,
) -> dict[str, list[PluginUsage]]:
    """Group enabled plugin usages by ``group_key``, preserving binding order.

    Unknown bindings contribute nothing; disabled plugins are left out, as are
    plugins for which ``group_key`` returns ``None``.
    """

    groups: dict[str, list[PluginUsage]] = {}
    for binding in bindings:
        provider = providers.get(binding)
        if provider is None:
            continue
        for plugin_key, plugin in sorted_items(provider.get_plugins()):
            if not plugin.enabled:
                continue
            key = group_key(plugin_key)
            if key is None:
                continue
            groups.setdefault(key, []).append(
                PluginUsage(binding=binding, plugin_key=plugin_key, plugin=plugin)
            )
    return groups


def check_plugin_rbac(
    ctx: CheckContext,
    providers: Mapping[str, PluginProvider],
    bindings: Sequence[str],
    path: str,
) -> None:
    """Plugins reached from several bindings must carry identical RBAC."""

    groups = group_plugin_usages(providers, bindings)
    for plugin_key in sorted(groups):
        occurrences = groups[plugin_key]
        if len(occurrences) < 2:
            continue
        head = occurrences[0]
        first_rbac = head.plugin.context.rbac
        for other in occurrences[1:]:
            if other.plugin.context.rbac != first_rbac:
                ctx.report(
                    RuleTag.INVALID_PLUGIN_RBAC,
                    index(path, head.binding),
                    head.binding,
                    other.binding,
                )


def check_bound_plugin_conflicts(
    ctx: CheckContext,
    providers: Mapping[str, PluginProvider],
    bindings: Sequence[str],
    path: str,
) -> None:
    """Plugins bound together under one name must share repository and version."""

    groups = group_plugin_usages(providers, bindings, group_key=_plugin_name)
    for name in sorted(groups):
        usages = groups[name]
        if len(usages) < 2:
            continue
        decomposed = [decompose_plugin_key(usage.plugin_key) for usage in usages]
        repositories = _ordered_unique(item.repository for item in decomposed)
        if len(repositories) > 1:
            ctx.report(RuleTag.CONFLICTING_PLUGIN_REPO, path, name, ", ".join(repositories))
            continue
        versions = _ordered_unique(item.version or "latest" for item in decomposed)
        if len(versions) > 1:
            ctx.report(RuleTag.CONFLICTING_PLUGIN_VERSION, path, name, ", ".join(versions))


def check_action_executors(ctx: CheckContext, bindings: Sequence[str], path: str) -> None:
    """Channel-scoped RBAC has no channel to bind to inside an action."""

    for binding in bindings:
        executors = ctx.root.executors.get(binding)
        if executors is None:
            continue
        for plugin_key, plugin in sorted_items(executors.plugins):
            if not plugin.enabled:
                continue
            rbac = plugin.context.rbac
            if rbac is None:
                continue
            if rbac.group.type == PolicySubjectType.CHANNEL_NAME:
                ctx.report(RuleTag.INVALID_ACTION_RBAC, index(path, binding), plugin_key)


def validate_plugin_definitions(ctx: CheckContext, node: Node) -> None:
    """Every plugin key of a sources/executors entry must decompose."""

    provider = cast("Sources | Executors", node.value)
    plugins_path = join(node.path, "plugins")
    for plugin_key in sorted(provider.get_plugins()):
        try:
            decompose_plugin_key(plugin_key)
        except ValueError:
            ctx.report(
                RuleTag.INVALID_PLUGIN_DEFINITION,
                index(plugins_path, plugin_key),
                plugin_key,
                f"expected {PLUGIN_KEY_SYNTAX}",
            )


def _ordered_unique(values: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


__all__ = [
    "PluginUsage",
    "check_action_executors",
    "check_bound_plugin_conflicts",
    "check_plugin_rbac",
    "group_plugin_usages",
    "validate_plugin_definitions",
]
