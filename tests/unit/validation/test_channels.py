"""
chatops-config: unit tests for chat platform validators

File: tests/unit/validation/test_channels.py
Last updated: 2026-10-19

Purpose
- Validate channel identifier grammars and Slack token checks.

What this test file should cover
- Malformed channel identifiers are warnings, never criticals.
- Slack names are normalized (leading ``#``, surrounding whitespace) before matching.
- Empty channel maps and empty identifiers are criticals.
- Slack tokens must carry the issuer prefix.
- Disabled platforms are skipped entirely.

Functional requirements
- No network usage.

Non-functional requirements
- Deterministic and fast.
"""

from __future__ import annotations

import pytest

from chatops_config.config.models import (
    ChannelBindingsByID,
    ChannelBindingsByName,
    Communications,
    Config,
    Discord,
    Mattermost,
    Settings,
    Slack,
    SocketSlack,
)
from chatops_config.constants import DISCORD_DOCS_URL, SLACK_DOCS_URL
from chatops_config.errors import ChannelFormatError, SchemaError
from chatops_config.validation.channels import (
    DISCORD_GRAMMAR,
    MATTERMOST_GRAMMAR,
    SLACK_GRAMMAR,
    is_valid_channel_identifier,
    normalize_channel_identifier,
)
from chatops_config.validation.engine import ValidationEngine
from chatops_config.validation.rules import RuleTag

GROUP_PATH = "Config.communications[default-group]"


def _config(**platforms: object) -> Config:
    return Config(
        settings=Settings(cluster_name="prod"),
        communications={"default-group": Communications(**platforms)},
    )


def _socket_slack(
    *names: str, app_token: str = "xapp-1", bot_token: str = "xoxb-1"
) -> SocketSlack:
    return SocketSlack(
        enabled=True,
        app_token=app_token,
        bot_token=bot_token,
        channels={
            f"channel-{position}": ChannelBindingsByName(name=name)
            for position, name in enumerate(names)
        },
    )


@pytest.mark.parametrize(
    ("identifier", "valid"),
    [
        ("my-channel-1", True),
        ("#general", True),
        (" ops_alerts ", True),
        ("a" * 79, True),
        ("a" * 80, False),
        ("My_Channel", False),
        ("has space", False),
        ("#", False),
    ],
)
def test_slack_channel_grammar(identifier: str, valid: bool) -> None:
    assert is_valid_channel_identifier(identifier, SLACK_GRAMMAR) is valid


@pytest.mark.parametrize(
    ("identifier", "valid"),
    [("12345", True), ("0", True), ("abc", False), ("123 45", False), ("", False)],
)
def test_discord_channel_grammar(identifier: str, valid: bool) -> None:
    assert is_valid_channel_identifier(identifier, DISCORD_GRAMMAR) is valid


@pytest.mark.parametrize(
    ("identifier", "valid"),
    [("Town Square", True), ("x" * 64, True), ("x" * 65, False), ("", False)],
)
def test_mattermost_channel_grammar(identifier: str, valid: bool) -> None:
    assert is_valid_channel_identifier(identifier, MATTERMOST_GRAMMAR) is valid


def test_normalization_keeps_case() -> None:
    assert normalize_channel_identifier("  #General ") == "General"


def test_invalid_slack_channel_name_is_a_warning() -> None:
    result = ValidationEngine().validate(_config(socket_slack=_socket_slack("My_Channel")))

    assert result.criticals == ()
    assert len(result.warnings) == 1
    warning = result.warnings[0]
    assert isinstance(warning, ChannelFormatError)
    assert warning.tag == RuleTag.INVALID_CHANNEL_NAME
    assert warning.path == f"{GROUP_PATH}.socket_slack.channels[channel-0].name"
    assert "'My_Channel'" in warning.message
    assert SLACK_DOCS_URL in warning.message
    assert result.is_bootable


def test_valid_slack_channel_names_are_clean() -> None:
    config = _config(socket_slack=_socket_slack("my-channel-1", "#general"))

    assert ValidationEngine().validate(config).is_clean


def test_invalid_discord_channel_id_is_a_warning() -> None:
    config = _config(
        discord=Discord(
            enabled=True,
            token="token",
            bot_id="42",
            channels={"ops": ChannelBindingsByID(id="abc"), "dev": ChannelBindingsByID(id="123")},
        )
    )

    result = ValidationEngine().validate(config)

    assert result.criticals == ()
    assert [(item.tag, item.path) for item in result.warnings] == [
        (RuleTag.INVALID_CHANNEL_ID, f"{GROUP_PATH}.discord.channels[ops].id")
    ]
    assert DISCORD_DOCS_URL in result.warnings[0].message


def test_enabled_platform_without_channels_is_critical() -> None:
    config = _config(discord=Discord(enabled=True, token="token", bot_id="42"))

    result = ValidationEngine().validate(config)

    assert result.messages("critical") == (
        f"Key: '{GROUP_PATH}.discord.channels' channels is a required field",
    )


def test_empty_identifier_is_critical_and_other_channels_are_still_checked() -> None:
    config = _config(socket_slack=_socket_slack("", "Bad Name"))

    result = ValidationEngine().validate(config)

    assert [(item.tag, item.path) for item in result.criticals] == [
        (RuleTag.REQUIRED, f"{GROUP_PATH}.socket_slack.channels[channel-0].name")
    ]
    assert [(item.tag, item.path) for item in result.warnings] == [
        (RuleTag.INVALID_CHANNEL_NAME, f"{GROUP_PATH}.socket_slack.channels[channel-1].name")
    ]


def test_mattermost_overlong_name_is_a_warning() -> None:
    config = _config(
        mattermost=Mattermost(
            enabled=True,
            url="https://chat.example.com",
            token="token",
            team="ops",
            bot_name="chatops",
            channels={"long": ChannelBindingsByName(name="x" * 65)},
        )
    )

    result = ValidationEngine().validate(config)

    assert result.criticals == ()
    assert [item.tag for item in result.warnings] == [RuleTag.INVALID_CHANNEL_NAME]


def test_socket_slack_bot_token_prefix_is_critical() -> None:
    config = _config(socket_slack=_socket_slack("general", bot_token="xapp-wrong"))

    result = ValidationEngine().validate(config)

    assert len(result.criticals) == 1
    error = result.criticals[0]
    assert isinstance(error, SchemaError)
    assert error.tag == RuleTag.INVALID_SLACK_TOKEN
    assert error.path == f"{GROUP_PATH}.socket_slack.bot_token"
    assert str(error).startswith(
        f"Key: '{GROUP_PATH}.socket_slack.bot_token' bot_token must have the xoxb- prefix."
    )


def test_socket_slack_missing_tokens_are_required() -> None:
    config = _config(socket_slack=_socket_slack("general", app_token="", bot_token=""))

    result = ValidationEngine().validate(config)

    assert [(item.tag, item.path) for item in result.criticals] == [
        (RuleTag.REQUIRED, f"{GROUP_PATH}.socket_slack.app_token"),
        (RuleTag.REQUIRED, f"{GROUP_PATH}.socket_slack.bot_token"),
    ]


def test_legacy_slack_token_prefix() -> None:
    config = _config(
        slack=Slack(
            enabled=True,
            token="xapp-1",
            channels={"default": ChannelBindingsByName(name="general")},
        )
    )

    result = ValidationEngine().validate(config)

    assert [item.tag for item in result.criticals] == [RuleTag.INVALID_SLACK_TOKEN]


def test_disabled_platforms_are_skipped() -> None:
    config = _config(
        slack=Slack(enabled=False, channels={"a": ChannelBindingsByName(name="Bad Name")}),
        socket_slack=SocketSlack(enabled=False),
        discord=Discord(enabled=False, channels={"a": ChannelBindingsByID(id="abc")}),
    )

    assert ValidationEngine().validate(config).is_clean
