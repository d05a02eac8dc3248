"""Stable constants shared by the config model, loader and validation engine."""

from __future__ import annotations

import re
from typing import Final

# Token prefixes issued by Slack.
SLACK_BOT_TOKEN_PREFIX: Final[str] = "xoxb-"
SLACK_APP_TOKEN_PREFIX: Final[str] = "xapp-"

# Regex constraint patterns that match every value, in regex and glob form.
ALL_VALUES_PATTERN: Final[str] = ".*"
ALL_VALUES_PATTERNS: Final[frozenset[str]] = frozenset({ALL_VALUES_PATTERN, "*"})

# Channel identifier grammars per chat platform.
SLACK_CHANNEL_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9\-_]{1,79}$")
DISCORD_CHANNEL_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9]*$")
MATTERMOST_CHANNEL_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^.{1,64}$", re.DOTALL)

SLACK_DOCS_URL: Final[str] = "https://api.slack.com/methods/conversations.rename#naming"
DISCORD_DOCS_URL: Final[str] = (
    "https://support.discord.com/hc/en-us/articles/"
    "206346498-Where-can-I-find-my-User-Server-Message-ID-"
)
MATTERMOST_DOCS_URL: Final[str] = (
    "https://docs.mattermost.com/channels/channel-naming-conventions.html"
)
SLACK_TOKEN_DOCS_URL: Final[str] = "https://docs.botkube.io/installation/slack/"
SOCKET_SLACK_BOT_TOKEN_DOCS_URL: Final[str] = (
    "https://docs.botkube.io/installation/socketslack/#obtain-bot-token"
)
SOCKET_SLACK_APP_TOKEN_DOCS_URL: Final[str] = (
    "https://docs.botkube.io/installation/socketslack/#generate-and-obtain-app-level-token"
)
ACTION_RBAC_DOCS_URL: Final[str] = "https://docs.botkube.io/configuration/action#rbac"

# Verbs handled by the platform itself, without any executor plugin.
BUILTIN_VERBS: Final[tuple[str, ...]] = (
    "disable",
    "edit",
    "enable",
    "feedback",
    "get",
    "help",
    "list",
    "ping",
    "reload",
    "show",
    "start",
    "status",
    "stop",
)

# Binding targets named in binding violations.
SOURCES_MAP_NAME: Final[str] = "Config.Sources"
EXECUTORS_MAP_NAME: Final[str] = "Config.Executors"

ROOT_PATH: Final[str] = "Config"

__all__ = [
    "ACTION_RBAC_DOCS_URL",
    "ALL_VALUES_PATTERN",
    "ALL_VALUES_PATTERNS",
    "BUILTIN_VERBS",
    "DISCORD_CHANNEL_ID_PATTERN",
    "DISCORD_DOCS_URL",
    "EXECUTORS_MAP_NAME",
    "MATTERMOST_CHANNEL_NAME_PATTERN",
    "MATTERMOST_DOCS_URL",
    "ROOT_PATH",
    "SLACK_APP_TOKEN_PREFIX",
    "SLACK_BOT_TOKEN_PREFIX",
    "SLACK_CHANNEL_NAME_PATTERN",
    "SLACK_DOCS_URL",
    "SLACK_TOKEN_DOCS_URL",
    "SOCKET_SLACK_APP_TOKEN_DOCS_URL",
    "SOCKET_SLACK_BOT_TOKEN_DOCS_URL",
    "SOURCES_MAP_NAME",
]
