"""
chatops-config: YAML configuration loader.

Purpose
- Turn one or more YAML configuration documents into the typed ``Config`` tree.

Behavior
- Documents are deep-merged in order; later files win on scalar conflicts.
- Keys follow the camelCase spelling used in configuration files
  (``socketSlack``, ``botToken``, ``displayName``).
- Source and executor entries hold their plugins inline: every key that is
  not a reserved entry field is a plugin key.
- Unknown keys are ignored; structural type errors raise ``ConfigLoadError``
  with the dotted path of the offending value.

The loader does not validate consistency; hand the result to
``ValidationEngine.validate``.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Final, TypeVar, cast

import yaml

from chatops_config.config.models import (
    Action,
    ActionBindings,
    Alias,
    BotBindings,
    ChannelBindingsByID,
    ChannelBindingsByName,
    ChannelNotification,
    CloudSlack,
    Communications,
    Config,
    Discord,
    Elasticsearch,
    ElasticsearchIndex,
    Executors,
    GroupPolicySubject,
    GroupStaticSubject,
    Mattermost,
    PluginConfig,
    PluginContext,
    PolicySubjectType,
    RBACPolicy,
    RegexConstraints,
    Settings,
    SinkBindings,
    Slack,
    SocketSlack,
    Sources,
    UserPolicySubject,
    UserStaticSubject,
    Webhook,
)
from chatops_config.errors import ConfigLoadError

_T = TypeVar("_T")

_SOURCE_RESERVED_KEYS: Final[frozenset[str]] = frozenset({"displayName", "namespaces"})


def load_config(*paths: str | Path) -> Config:
    """Load and merge YAML documents from ``paths`` into a typed ``Config``."""

    if not paths:
        raise ConfigLoadError("at least one configuration file is required")
    merged: dict[str, Any] = {}
    for path in paths:
        merged = merge_documents(merged, load_yaml_file(path))
    return config_from_mapping(merged)


def load_yaml_file(path: str | Path) -> dict[str, Any]:
    resolved = Path(path).expanduser()
    try:
        with resolved.open("r", encoding="utf-8") as handle:
            loaded = cast("object", yaml.safe_load(handle))
    except FileNotFoundError as exc:
        raise ConfigLoadError(f"config file not found: {resolved}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {resolved}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigLoadError(f"config file {resolved} is not valid UTF-8: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"invalid YAML in {resolved}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, Mapping):
        raise ConfigLoadError(f"config root in {resolved} must be a mapping")
    return _deep_copy_mapping(loaded)


def merge_documents(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto ``base``; lists and scalars are replaced."""

    merged = _deep_copy_mapping(base)
    _merge_into(merged, overlay)
    return merged


def config_from_mapping(payload: Mapping[str, object]) -> Config:
    """Map a merged configuration document onto the typed tree."""

    root = _as_mapping(payload, "")
    return Config(
        sources=_map_entries(root.get("sources"), "sources", _sources),
        executors=_map_entries(root.get("executors"), "executors", _executors),
        actions=_map_entries(root.get("actions"), "actions", _action),
        aliases=_map_entries(root.get("aliases"), "aliases", _alias),
        communications=_map_entries(
            root.get("communications"), "communications", _communications
        ),
        settings=_settings(_as_mapping(root.get("settings"), "settings"), "settings"),
    )


# Entities


def _settings(data: Mapping[str, object], path: str) -> Settings:
    return Settings(cluster_name=_as_str(data.get("clusterName"), _join(path, "clusterName")))


def _sources(data: Mapping[str, object], path: str) -> Sources:
    plugins = {
        key: _plugin(_as_mapping(value, _join(path, key)), _join(path, key))
        for key, value in data.items()
        if key not in _SOURCE_RESERVED_KEYS
    }
    return Sources(
        display_name=_as_str(data.get("displayName"), _join(path, "displayName")),
        plugins=plugins,
        namespaces=_regex_constraints(
            _as_mapping(data.get("namespaces"), _join(path, "namespaces")),
            _join(path, "namespaces"),
        ),
    )


def _executors(data: Mapping[str, object], path: str) -> Executors:
    return Executors(
        plugins={
            key: _plugin(_as_mapping(value, _join(path, key)), _join(path, key))
            for key, value in data.items()
        }
    )


def _plugin(data: Mapping[str, object], path: str) -> PluginConfig:
    context = _as_mapping(data.get("context"), _join(path, "context"))
    rbac_raw = context.get("rbac")
    rbac_path = _join(path, "context.rbac")
    rbac = None if rbac_raw is None else _rbac(_as_mapping(rbac_raw, rbac_path), rbac_path)
    return PluginConfig(
        enabled=_as_bool(data.get("enabled"), _join(path, "enabled")),
        context=PluginContext(rbac=rbac),
        config=_as_mapping(data.get("config"), _join(path, "config")),
    )


def _rbac(data: Mapping[str, object], path: str) -> RBACPolicy:
    user = _as_mapping(data.get("user"), _join(path, "user"))
    group = _as_mapping(data.get("group"), _join(path, "group"))
    user_static = _as_mapping(user.get("static"), _join(path, "user.static"))
    group_static = _as_mapping(group.get("static"), _join(path, "group.static"))
    return RBACPolicy(
        user=UserPolicySubject(
            type=_subject_type(user.get("type"), _join(path, "user.type")),
            static=UserStaticSubject(
                value=_as_str(user_static.get("value"), _join(path, "user.static.value"))
            ),
            prefix=_as_str(user.get("prefix"), _join(path, "user.prefix")),
        ),
        group=GroupPolicySubject(
            type=_subject_type(group.get("type"), _join(path, "group.type")),
            static=GroupStaticSubject(
                values=_as_str_tuple(
                    group_static.get("values"), _join(path, "group.static.values")
                )
            ),
            prefix=_as_str(group.get("prefix"), _join(path, "group.prefix")),
        ),
    )


def _regex_constraints(data: Mapping[str, object], path: str) -> RegexConstraints:
    return RegexConstraints(
        include=_as_str_tuple(data.get("include"), _join(path, "include")),
        exclude=_as_str_tuple(data.get("exclude"), _join(path, "exclude")),
    )


def _action(data: Mapping[str, object], path: str) -> Action:
    bindings = _as_mapping(data.get("bindings"), _join(path, "bindings"))
    return Action(
        enabled=_as_bool(data.get("enabled"), _join(path, "enabled")),
        display_name=_as_str(data.get("displayName"), _join(path, "displayName")),
        command=_as_str(data.get("command"), _join(path, "command")),
        bindings=ActionBindings(
            sources=_as_str_tuple(bindings.get("sources"), _join(path, "bindings.sources")),
            executors=_as_str_tuple(bindings.get("executors"), _join(path, "bindings.executors")),
        ),
    )


def _alias(data: Mapping[str, object], path: str) -> Alias:
    return Alias(
        command=_as_str(data.get("command"), _join(path, "command")),
        display_name=_as_str(data.get("displayName"), _join(path, "displayName")),
    )


def _communications(data: Mapping[str, object], path: str) -> Communications:
    return Communications(
        slack=_section(data, "slack", path, _slack),
        socket_slack=_section(data, "socketSlack", path, _socket_slack),
        cloud_slack=_section(data, "cloudSlack", path, _cloud_slack),
        discord=_section(data, "discord", path, _discord),
        mattermost=_section(data, "mattermost", path, _mattermost),
        webhook=_section(data, "webhook", path, _webhook),
        elasticsearch=_section(data, "elasticsearch", path, _elasticsearch),
    )


def _slack(data: Mapping[str, object], path: str) -> Slack:
    return Slack(
        enabled=_as_bool(data.get("enabled"), _join(path, "enabled")),
        token=_as_str(data.get("token"), _join(path, "token")),
        channels=_map_entries(data.get("channels"), _join(path, "channels"), _channel_by_name),
    )


def _socket_slack(data: Mapping[str, object], path: str) -> SocketSlack:
    return SocketSlack(
        enabled=_as_bool(data.get("enabled"), _join(path, "enabled")),
        app_token=_as_str(data.get("appToken"), _join(path, "appToken")),
        bot_token=_as_str(data.get("botToken"), _join(path, "botToken")),
        channels=_map_entries(data.get("channels"), _join(path, "channels"), _channel_by_name),
    )


def _cloud_slack(data: Mapping[str, object], path: str) -> CloudSlack:
    return CloudSlack(
        enabled=_as_bool(data.get("enabled"), _join(path, "enabled")),
        token=_as_str(data.get("token"), _join(path, "token")),
        bot_id=_as_str(data.get("botID"), _join(path, "botID"), allow_int=True),
        channels=_map_entries(data.get("channels"), _join(path, "channels"), _channel_by_name),
    )


def _discord(data: Mapping[str, object], path: str) -> Discord:
    return Discord(
        enabled=_as_bool(data.get("enabled"), _join(path, "enabled")),
        token=_as_str(data.get("token"), _join(path, "token")),
        bot_id=_as_str(data.get("botID"), _join(path, "botID"), allow_int=True),
        channels=_map_entries(data.get("channels"), _join(path, "channels"), _channel_by_id),
    )


def _mattermost(data: Mapping[str, object], path: str) -> Mattermost:
    return Mattermost(
        enabled=_as_bool(data.get("enabled"), _join(path, "enabled")),
        url=_as_str(data.get("url"), _join(path, "url")),
        token=_as_str(data.get("token"), _join(path, "token")),
        team=_as_str(data.get("team"), _join(path, "team")),
        bot_name=_as_str(data.get("botName"), _join(path, "botName")),
        channels=_map_entries(data.get("channels"), _join(path, "channels"), _channel_by_name),
    )


def _channel_by_name(data: Mapping[str, object], path: str) -> ChannelBindingsByName:
    return ChannelBindingsByName(
        name=_as_str(data.get("name"), _join(path, "name")),
        notification=_notification(data, path),
        bindings=_bot_bindings(data, path),
    )


def _channel_by_id(data: Mapping[str, object], path: str) -> ChannelBindingsByID:
    return ChannelBindingsByID(
        id=_as_str(data.get("id"), _join(path, "id"), allow_int=True),
        notification=_notification(data, path),
        bindings=_bot_bindings(data, path),
    )


def _notification(data: Mapping[str, object], path: str) -> ChannelNotification:
    notification = _as_mapping(data.get("notification"), _join(path, "notification"))
    return ChannelNotification(
        disabled=_as_bool(notification.get("disabled"), _join(path, "notification.disabled"))
    )


def _bot_bindings(data: Mapping[str, object], path: str) -> BotBindings:
    bindings = _as_mapping(data.get("bindings"), _join(path, "bindings"))
    return BotBindings(
        sources=_as_str_tuple(bindings.get("sources"), _join(path, "bindings.sources")),
        executors=_as_str_tuple(bindings.get("executors"), _join(path, "bindings.executors")),
    )


def _sink_bindings(data: Mapping[str, object], path: str) -> SinkBindings:
    bindings = _as_mapping(data.get("bindings"), _join(path, "bindings"))
    return SinkBindings(
        sources=_as_str_tuple(bindings.get("sources"), _join(path, "bindings.sources"))
    )


def _webhook(data: Mapping[str, object], path: str) -> Webhook:
    return Webhook(
        enabled=_as_bool(data.get("enabled"), _join(path, "enabled")),
        url=_as_str(data.get("url"), _join(path, "url")),
        bindings=_sink_bindings(data, path),
    )


def _elasticsearch(data: Mapping[str, object], path: str) -> Elasticsearch:
    return Elasticsearch(
        enabled=_as_bool(data.get("enabled"), _join(path, "enabled")),
        server=_as_str(data.get("server"), _join(path, "server")),
        username=_as_str(data.get("username"), _join(path, "username")),
        password=_as_str(data.get("password"), _join(path, "password")),
        skip_tls_verify=_as_bool(data.get("skipTLSVerify"), _join(path, "skipTLSVerify")),
        indices=_map_entries(data.get("indices"), _join(path, "indices"), _elasticsearch_index),
    )


def _elasticsearch_index(data: Mapping[str, object], path: str) -> ElasticsearchIndex:
    return ElasticsearchIndex(
        name=_as_str(data.get("name"), _join(path, "name")),
        type=_as_str(data.get("type"), _join(path, "type")),
        shards=_as_int(data.get("shards"), _join(path, "shards"), default=1),
        replicas=_as_int(data.get("replicas"), _join(path, "replicas"), default=0),
        bindings=_sink_bindings(data, path),
    )


# Coercion helpers


def _section(
    data: Mapping[str, object],
    key: str,
    path: str,
    builder: Callable[[Mapping[str, object], str], _T],
) -> _T:
    section_path = _join(path, key)
    return builder(_as_mapping(data.get(key), section_path), section_path)


def _map_entries(
    value: object,
    path: str,
    builder: Callable[[Mapping[str, object], str], _T],
) -> dict[str, _T]:
    entries = _as_mapping(value, path)
    out: dict[str, _T] = {}
    for key, item in entries.items():
        item_path = _join(path, key)
        out[key] = builder(_as_mapping(item, item_path), item_path)
    return out


def _as_mapping(value: object, path: str) -> dict[str, object]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigLoadError(f"{path or '<root>'}: expected mapping, got {type(value).__name__}")
    out: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise ConfigLoadError(
                f"{path or '<root>'}: mapping keys must be strings, got {type(key).__name__}"
            )
        out[key] = item
    return out


def _as_str(value: object, path: str, *, allow_int: bool = False) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if allow_int and isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise ConfigLoadError(f"{path}: expected string, got {type(value).__name__}")


def _as_bool(value: object, path: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ConfigLoadError(f"{path}: expected boolean, got {type(value).__name__}")


def _as_int(value: object, path: str, *, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigLoadError(f"{path}: expected integer, got {type(value).__name__}")
    return value


def _as_str_tuple(value: object, path: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigLoadError(f"{path}: expected list, got {type(value).__name__}")
    return tuple(_as_str(item, f"{path}[{position}]") for position, item in enumerate(value))


def _subject_type(value: object, path: str) -> PolicySubjectType:
    if value is None:
        return PolicySubjectType.EMPTY
    raw = _as_str(value, path)
    try:
        return PolicySubjectType(raw)
    except ValueError:
        expected = ", ".join(item.value for item in PolicySubjectType)
        raise ConfigLoadError(
            f"{path}: invalid subject type {raw!r}; expected one of: {expected}"
        ) from None


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key in overlay:
        value = overlay[key]
        if isinstance(value, Mapping):
            existing = target.get(key)
            if isinstance(existing, dict):
                _merge_into(existing, value)
            else:
                nested: dict[str, Any] = {}
                _merge_into(nested, value)
                target[key] = nested
        else:
            target[key] = copy.deepcopy(value)


def _deep_copy_mapping(value: Mapping[str, object]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, item in value.items():
        if isinstance(item, Mapping):
            out[key] = _deep_copy_mapping(item)
        else:
            out[key] = copy.deepcopy(item)
    return out


__all__ = [
    "config_from_mapping",
    "load_config",
    "load_yaml_file",
    "merge_documents",
]
