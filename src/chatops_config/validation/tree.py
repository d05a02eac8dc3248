"""Deterministic walk over the typed configuration tree.

The walk yields one ``Node`` per validated entity, tagged with its
``EntityKind``. Map entries are visited in sorted key order, so two walks over
the same tree produce the same node sequence. Bindings are visited whether or
not their owner is enabled. Elasticsearch indices are the exception: they are
only visited for an enabled sink.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

from chatops_config.config.models import (
    ChannelBindingsByID,
    ChannelBindingsByName,
    Communications,
    Config,
)
from chatops_config.constants import ROOT_PATH

_T = TypeVar("_T")


class EntityKind(StrEnum):
    SETTINGS = "settings"
    SOURCES = "sources"
    EXECUTORS = "executors"
    REGEX_CONSTRAINTS = "regex_constraints"
    ACTION = "action"
    ACTION_BINDINGS = "action_bindings"
    ALIAS = "alias"
    SLACK = "slack"
    SOCKET_SLACK = "socket_slack"
    CLOUD_SLACK = "cloud_slack"
    DISCORD = "discord"
    MATTERMOST = "mattermost"
    BOT_BINDINGS = "bot_bindings"
    WEBHOOK = "webhook"
    ELASTICSEARCH = "elasticsearch"
    ELASTICSEARCH_INDEX = "elasticsearch_index"
    SINK_BINDINGS = "sink_bindings"


@dataclass(frozen=True, slots=True)
class Node:
    kind: EntityKind
    value: object
    path: str


def join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


def index(path: str, key: str) -> str:
    return f"{path}[{key}]"


def sorted_items(mapping: Mapping[str, _T]) -> Iterator[tuple[str, _T]]:
    for key in sorted(mapping):
        yield key, mapping[key]


def walk(config: Config) -> Iterator[Node]:
    root = ROOT_PATH
    yield Node(EntityKind.SETTINGS, config.settings, join(root, "settings"))

    for name, sources in sorted_items(config.sources):
        path = index(join(root, "sources"), name)
        yield Node(EntityKind.SOURCES, sources, path)
        yield Node(EntityKind.REGEX_CONSTRAINTS, sources.namespaces, join(path, "namespaces"))

    for name, executors in sorted_items(config.executors):
        yield Node(EntityKind.EXECUTORS, executors, index(join(root, "executors"), name))

    for name, action in sorted_items(config.actions):
        path = index(join(root, "actions"), name)
        yield Node(EntityKind.ACTION, action, path)
        yield Node(EntityKind.ACTION_BINDINGS, action.bindings, join(path, "bindings"))

    for name, alias in sorted_items(config.aliases):
        yield Node(EntityKind.ALIAS, alias, index(join(root, "aliases"), name))

    for name, group in sorted_items(config.communications):
        yield from _walk_communications(group, index(join(root, "communications"), name))


def _walk_communications(group: Communications, path: str) -> Iterator[Node]:
    platforms = (
        (EntityKind.SLACK, "slack", group.slack),
        (EntityKind.SOCKET_SLACK, "socket_slack", group.socket_slack),
        (EntityKind.CLOUD_SLACK, "cloud_slack", group.cloud_slack),
        (EntityKind.DISCORD, "discord", group.discord),
        (EntityKind.MATTERMOST, "mattermost", group.mattermost),
    )
    for kind, attr, platform in platforms:
        platform_path = join(path, attr)
        yield Node(kind, platform, platform_path)
        yield from _walk_channels(platform.channels, join(platform_path, "channels"))

    webhook_path = join(path, "webhook")
    yield Node(EntityKind.WEBHOOK, group.webhook, webhook_path)
    yield Node(EntityKind.SINK_BINDINGS, group.webhook.bindings, join(webhook_path, "bindings"))

    elastic = group.elasticsearch
    elastic_path = join(path, "elasticsearch")
    yield Node(EntityKind.ELASTICSEARCH, elastic, elastic_path)
    if not elastic.enabled:
        # indices of a disabled sink are not validated
        return
    for name, item in sorted_items(elastic.indices):
        item_path = index(join(elastic_path, "indices"), name)
        yield Node(EntityKind.ELASTICSEARCH_INDEX, item, item_path)
        yield Node(EntityKind.SINK_BINDINGS, item.bindings, join(item_path, "bindings"))


def _walk_channels(
    channels: Mapping[str, ChannelBindingsByName] | Mapping[str, ChannelBindingsByID],
    path: str,
) -> Iterator[Node]:
    for alias, channel in sorted_items(channels):
        yield Node(
            EntityKind.BOT_BINDINGS, channel.bindings, join(index(path, alias), "bindings")
        )


__all__ = ["EntityKind", "Node", "index", "join", "sorted_items", "walk"]
