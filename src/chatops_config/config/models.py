"""Typed configuration tree consumed by the validation engine.

Every entity is a frozen dataclass, so two policies (or two whole trees) compare
by structural deep equality. Mappings are keyed by the user-facing names used in
configuration files; sequences are tuples and keep declaration order.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final, Protocol

_PLUGIN_KEY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<repository>[^/@\s]+)/(?P<name>[^/@\s]+)(?:@(?P<version>[^/@\s]+))?$"
)
PLUGIN_KEY_SYNTAX: Final[str] = "{repository}/{plugin_name}[@{version}]"


class PolicySubjectType(StrEnum):
    """Subject kinds an RBAC policy can bind to."""

    EMPTY = "Empty"
    STATIC = "Static"
    CHANNEL_NAME = "ChannelName"


class Identifiable(Protocol):
    """Anything that exposes a platform identifier (channel name or ID)."""

    def identifier(self) -> str: ...


class PluginProvider(Protocol):
    """Anything that owns a plugin map (sources and executors)."""

    def get_plugins(self) -> Mapping[str, PluginConfig]: ...


@dataclass(frozen=True, slots=True)
class PluginKey:
    """Decomposed ``<repository>/<name>[@<version>]`` plugin key."""

    repository: str
    name: str
    version: str | None = None


def decompose_plugin_key(key: str) -> PluginKey:
    """Split a plugin key into repository, name and optional version.

    Raises ``ValueError`` when the key does not follow the required syntax.
    """

    match = _PLUGIN_KEY_PATTERN.fullmatch(key.strip())
    if match is None:
        raise ValueError(
            f"plugin key {key!r} doesn't follow the required {PLUGIN_KEY_SYNTAX} syntax"
        )
    return PluginKey(
        repository=match.group("repository"),
        name=match.group("name"),
        version=match.group("version"),
    )


def executor_name_for_key(key: str) -> str:
    """Return the command prefix an executor plugin key registers."""

    _, _, tail = key.rpartition("/")
    name, _, _ = tail.partition("@")
    return name


# RBAC


@dataclass(frozen=True, slots=True)
class UserStaticSubject:
    value: str = ""


@dataclass(frozen=True, slots=True)
class GroupStaticSubject:
    values: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class UserPolicySubject:
    type: PolicySubjectType = PolicySubjectType.EMPTY
    static: UserStaticSubject = field(default_factory=UserStaticSubject)
    prefix: str = ""


@dataclass(frozen=True, slots=True)
class GroupPolicySubject:
    type: PolicySubjectType = PolicySubjectType.EMPTY
    static: GroupStaticSubject = field(default_factory=GroupStaticSubject)
    prefix: str = ""


@dataclass(frozen=True, slots=True)
class RBACPolicy:
    """Access-control scope attached to one plugin configuration."""

    user: UserPolicySubject = field(default_factory=UserPolicySubject)
    group: GroupPolicySubject = field(default_factory=GroupPolicySubject)


# Plugins


@dataclass(frozen=True, slots=True)
class PluginContext:
    rbac: RBACPolicy | None = None


@dataclass(frozen=True, slots=True)
class PluginConfig:
    enabled: bool = False
    context: PluginContext = field(default_factory=PluginContext)
    config: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RegexConstraints:
    """Include/exclude pattern lists (glob or regex)."""

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Sources:
    display_name: str = ""
    plugins: Mapping[str, PluginConfig] = field(default_factory=dict)
    namespaces: RegexConstraints = field(default_factory=RegexConstraints)

    def get_plugins(self) -> Mapping[str, PluginConfig]:
        return self.plugins


@dataclass(frozen=True, slots=True)
class Executors:
    plugins: Mapping[str, PluginConfig] = field(default_factory=dict)

    def get_plugins(self) -> Mapping[str, PluginConfig]:
        return self.plugins

    def collect_command_prefixes(self) -> tuple[str, ...]:
        """Command prefixes of every plugin, disabled ones included, sorted."""

        prefixes = {executor_name_for_key(key) for key in self.plugins}
        prefixes.discard("")
        return tuple(sorted(prefixes))


# Bindings


@dataclass(frozen=True, slots=True)
class BotBindings:
    sources: tuple[str, ...] = ()
    executors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ActionBindings:
    sources: tuple[str, ...] = ()
    executors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SinkBindings:
    sources: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Action:
    enabled: bool = False
    display_name: str = ""
    command: str = ""
    bindings: ActionBindings = field(default_factory=ActionBindings)


@dataclass(frozen=True, slots=True)
class Alias:
    command: str = ""
    display_name: str = ""


# Chat platforms


@dataclass(frozen=True, slots=True)
class ChannelNotification:
    disabled: bool = False


@dataclass(frozen=True, slots=True)
class ChannelBindingsByName:
    name: str = ""
    notification: ChannelNotification = field(default_factory=ChannelNotification)
    bindings: BotBindings = field(default_factory=BotBindings)

    def identifier(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class ChannelBindingsByID:
    id: str = ""
    notification: ChannelNotification = field(default_factory=ChannelNotification)
    bindings: BotBindings = field(default_factory=BotBindings)

    def identifier(self) -> str:
        return self.id


@dataclass(frozen=True, slots=True)
class Slack:
    enabled: bool = False
    token: str = ""
    channels: Mapping[str, ChannelBindingsByName] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SocketSlack:
    enabled: bool = False
    app_token: str = ""
    bot_token: str = ""
    channels: Mapping[str, ChannelBindingsByName] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class CloudSlack:
    enabled: bool = False
    token: str = ""
    bot_id: str = ""
    channels: Mapping[str, ChannelBindingsByName] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Discord:
    enabled: bool = False
    token: str = ""
    bot_id: str = ""
    channels: Mapping[str, ChannelBindingsByID] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Mattermost:
    enabled: bool = False
    url: str = ""
    token: str = ""
    team: str = ""
    bot_name: str = ""
    channels: Mapping[str, ChannelBindingsByName] = field(default_factory=dict)


# Sinks


@dataclass(frozen=True, slots=True)
class Webhook:
    enabled: bool = False
    url: str = ""
    bindings: SinkBindings = field(default_factory=SinkBindings)


@dataclass(frozen=True, slots=True)
class ElasticsearchIndex:
    name: str = ""
    type: str = ""
    shards: int = 1
    replicas: int = 0
    bindings: SinkBindings = field(default_factory=SinkBindings)


@dataclass(frozen=True, slots=True)
class Elasticsearch:
    enabled: bool = False
    server: str = ""
    username: str = ""
    password: str = ""
    skip_tls_verify: bool = False
    indices: Mapping[str, ElasticsearchIndex] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Communications:
    """One communication group: chat platforms plus notification sinks."""

    slack: Slack = field(default_factory=Slack)
    socket_slack: SocketSlack = field(default_factory=SocketSlack)
    cloud_slack: CloudSlack = field(default_factory=CloudSlack)
    discord: Discord = field(default_factory=Discord)
    mattermost: Mattermost = field(default_factory=Mattermost)
    webhook: Webhook = field(default_factory=Webhook)
    elasticsearch: Elasticsearch = field(default_factory=Elasticsearch)


@dataclass(frozen=True, slots=True)
class Settings:
    cluster_name: str = ""


@dataclass(frozen=True, slots=True)
class Config:
    """Root of the configuration tree."""

    sources: Mapping[str, Sources] = field(default_factory=dict)
    executors: Mapping[str, Executors] = field(default_factory=dict)
    actions: Mapping[str, Action] = field(default_factory=dict)
    aliases: Mapping[str, Alias] = field(default_factory=dict)
    communications: Mapping[str, Communications] = field(default_factory=dict)
    settings: Settings = field(default_factory=Settings)


__all__ = [
    "Action",
    "ActionBindings",
    "Alias",
    "BotBindings",
    "ChannelBindingsByID",
    "ChannelBindingsByName",
    "ChannelNotification",
    "CloudSlack",
    "Communications",
    "Config",
    "Discord",
    "Elasticsearch",
    "ElasticsearchIndex",
    "Executors",
    "GroupPolicySubject",
    "GroupStaticSubject",
    "Identifiable",
    "Mattermost",
    "PLUGIN_KEY_SYNTAX",
    "PluginConfig",
    "PluginContext",
    "PluginKey",
    "PluginProvider",
    "PolicySubjectType",
    "RBACPolicy",
    "RegexConstraints",
    "Settings",
    "SinkBindings",
    "Slack",
    "SocketSlack",
    "Sources",
    "UserPolicySubject",
    "UserStaticSubject",
    "Webhook",
    "decompose_plugin_key",
    "executor_name_for_key",
]
