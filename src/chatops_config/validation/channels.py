"""Chat platform validators: tokens and channel identifier grammars.

A malformed channel identifier is only discoverable once the platform rejects
it, so identifier mismatches are reported with warning-only tags.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final, cast

from chatops_config.config.models import (
    CloudSlack,
    Discord,
    Identifiable,
    Mattermost,
    Slack,
    SocketSlack,
)
from chatops_config.constants import (
    DISCORD_CHANNEL_ID_PATTERN,
    DISCORD_DOCS_URL,
    MATTERMOST_CHANNEL_NAME_PATTERN,
    MATTERMOST_DOCS_URL,
    SLACK_APP_TOKEN_PREFIX,
    SLACK_BOT_TOKEN_PREFIX,
    SLACK_CHANNEL_NAME_PATTERN,
    SLACK_DOCS_URL,
    SLACK_TOKEN_DOCS_URL,
    SOCKET_SLACK_APP_TOKEN_DOCS_URL,
    SOCKET_SLACK_BOT_TOKEN_DOCS_URL,
)
from chatops_config.validation.context import CheckContext
from chatops_config.validation.rules import RuleTag
from chatops_config.validation.tree import Node, index, join, sorted_items


@dataclass(frozen=True, slots=True)
class ChannelGrammar:
    """Identifier syntax of one chat platform."""

    pattern: re.Pattern[str]
    field_name: str
    tag: str
    docs_url: str
    normalize: bool = False


SLACK_GRAMMAR: Final[ChannelGrammar] = ChannelGrammar(
    pattern=SLACK_CHANNEL_NAME_PATTERN,
    field_name="name",
    tag=RuleTag.INVALID_CHANNEL_NAME,
    docs_url=SLACK_DOCS_URL,
    normalize=True,
)
DISCORD_GRAMMAR: Final[ChannelGrammar] = ChannelGrammar(
    pattern=DISCORD_CHANNEL_ID_PATTERN,
    field_name="id",
    tag=RuleTag.INVALID_CHANNEL_ID,
    docs_url=DISCORD_DOCS_URL,
)
MATTERMOST_GRAMMAR: Final[ChannelGrammar] = ChannelGrammar(
    pattern=MATTERMOST_CHANNEL_NAME_PATTERN,
    field_name="name",
    tag=RuleTag.INVALID_CHANNEL_NAME,
    docs_url=MATTERMOST_DOCS_URL,
)


def normalize_channel_identifier(identifier: str) -> str:
    """Strip surrounding whitespace and a leading ``#``; case is kept."""

    return identifier.strip().lstrip("#")


def is_valid_channel_identifier(identifier: str, grammar: ChannelGrammar) -> bool:
    if not identifier:
        return False
    candidate = normalize_channel_identifier(identifier) if grammar.normalize else identifier
    return grammar.pattern.fullmatch(candidate) is not None


def check_channels(
    ctx: CheckContext,
    channels: Mapping[str, Identifiable],
    path: str,
    grammar: ChannelGrammar,
) -> None:
    channels_path = join(path, "channels")
    if not channels:
        ctx.report(RuleTag.REQUIRED, channels_path, "channels")

    for alias, channel in sorted_items(channels):
        identifier = channel.identifier()
        field_path = join(index(channels_path, alias), grammar.field_name)
        if not identifier:
            ctx.report(RuleTag.REQUIRED, field_path, grammar.field_name)
            continue
        if not is_valid_channel_identifier(identifier, grammar):
            ctx.report(grammar.tag, field_path, identifier, grammar.docs_url)


def check_slack_token(
    ctx: CheckContext,
    token: str,
    path: str,
    field_name: str,
    prefix: str,
    docs_url: str,
) -> None:
    token_path = join(path, field_name)
    if not token:
        ctx.report(RuleTag.REQUIRED, token_path, field_name)
        return
    if not token.startswith(prefix):
        ctx.report(
            RuleTag.INVALID_SLACK_TOKEN,
            token_path,
            field_name,
            f"must have the {prefix} prefix. Learn more at {docs_url}",
        )


def validate_slack(ctx: CheckContext, node: Node) -> None:
    slack = cast("Slack", node.value)
    if not slack.enabled:
        return
    check_slack_token(
        ctx, slack.token, node.path, "token", SLACK_BOT_TOKEN_PREFIX, SLACK_TOKEN_DOCS_URL
    )
    check_channels(ctx, slack.channels, node.path, SLACK_GRAMMAR)


def validate_socket_slack(ctx: CheckContext, node: Node) -> None:
    slack = cast("SocketSlack", node.value)
    if not slack.enabled:
        return
    check_slack_token(
        ctx,
        slack.app_token,
        node.path,
        "app_token",
        SLACK_APP_TOKEN_PREFIX,
        SOCKET_SLACK_APP_TOKEN_DOCS_URL,
    )
    check_slack_token(
        ctx,
        slack.bot_token,
        node.path,
        "bot_token",
        SLACK_BOT_TOKEN_PREFIX,
        SOCKET_SLACK_BOT_TOKEN_DOCS_URL,
    )
    check_channels(ctx, slack.channels, node.path, SLACK_GRAMMAR)


def validate_cloud_slack(ctx: CheckContext, node: Node) -> None:
    slack = cast("CloudSlack", node.value)
    if not slack.enabled:
        return
    check_channels(ctx, slack.channels, node.path, SLACK_GRAMMAR)


def validate_discord(ctx: CheckContext, node: Node) -> None:
    discord = cast("Discord", node.value)
    if not discord.enabled:
        return
    check_channels(ctx, discord.channels, node.path, DISCORD_GRAMMAR)


def validate_mattermost(ctx: CheckContext, node: Node) -> None:
    mattermost = cast("Mattermost", node.value)
    if not mattermost.enabled:
        return
    check_channels(ctx, mattermost.channels, node.path, MATTERMOST_GRAMMAR)


__all__ = [
    "DISCORD_GRAMMAR",
    "MATTERMOST_GRAMMAR",
    "SLACK_GRAMMAR",
    "ChannelGrammar",
    "check_channels",
    "check_slack_token",
    "is_valid_channel_identifier",
    "normalize_channel_identifier",
    "validate_cloud_slack",
    "validate_discord",
    "validate_mattermost",
    "validate_slack",
    "validate_socket_slack",
]
