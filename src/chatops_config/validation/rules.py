"""Rule tags, message templates and severity classification.

The registry maps a rule tag to a message template with positional
placeholders (``{0}``, ``{1}``). It is built once, frozen, and passed to every
validation call; registering a template after construction is not possible.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from chatops_config.constants import ACTION_RBAC_DOCS_URL
from chatops_config.errors import RuleRegistryError

_PLACEHOLDER_PATTERN: Final[re.Pattern[str]] = re.compile(r"\{(\d+)\}")
_TAG_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z0-9_-]*$")


class RuleTag(StrEnum):
    REQUIRED = "required"
    REQUIRED_IF_ENABLED = "required_if_enabled"
    URL = "url"
    MIN = "min"
    INVALID_SLACK_TOKEN = "invalid_slack_token"
    REGEX_CONSTRAINTS_INCLUDE = "rs-include-regex"
    INVALID_BINDING = "invalid_binding"
    INVALID_CHANNEL_NAME = "invalid_channel_name"
    INVALID_CHANNEL_ID = "invalid_channel_id"
    CONFLICTING_PLUGIN_REPO = "conflicting_plugin_repo"
    CONFLICTING_PLUGIN_VERSION = "conflicting_plugin_version"
    INVALID_PLUGIN_DEFINITION = "invalid_plugin_definition"
    INVALID_ALIAS_COMMAND = "invalid_alias_command"
    INVALID_PLUGIN_RBAC = "invalid_plugin_rbac"
    INVALID_ACTION_RBAC = "invalid_action_rbac"


class Severity(StrEnum):
    CRITICAL = "critical"
    WARNING = "warning"


WARNING_TAGS: Final[frozenset[str]] = frozenset(
    {
        RuleTag.REGEX_CONSTRAINTS_INCLUDE,
        RuleTag.INVALID_CHANNEL_NAME,
        RuleTag.INVALID_CHANNEL_ID,
    }
)

DEFAULT_TEMPLATES: Final[Mapping[str, str]] = MappingProxyType(
    {
        RuleTag.REQUIRED: "{0} is a required field",
        RuleTag.REQUIRED_IF_ENABLED: "{0} is a required field when the integration is enabled",
        RuleTag.URL: "{0} must be a valid http(s) URL",
        RuleTag.MIN: "{0} must be {1} or greater",
        RuleTag.INVALID_SLACK_TOKEN: "{0} {1}",
        RuleTag.REGEX_CONSTRAINTS_INCLUDE: (
            "{0} contains multiple constraints, but it does already include "
            "a regex pattern for all values"
        ),
        RuleTag.INVALID_BINDING: "'{0}' binding not defined in {1}",
        RuleTag.INVALID_CHANNEL_NAME: (
            "The channel name '{0}' seems to be invalid. "
            "See the documentation to learn more: {1}."
        ),
        RuleTag.INVALID_CHANNEL_ID: (
            "The channel ID '{0}' seems to be invalid. "
            "See the documentation to learn more: {1}."
        ),
        RuleTag.CONFLICTING_PLUGIN_REPO: (
            "Plugin '{0}' is bound from multiple repositories: {1}. "
            "Bindings used together must reference one repository per plugin."
        ),
        RuleTag.CONFLICTING_PLUGIN_VERSION: (
            "Plugin '{0}' is bound in multiple versions: {1}. "
            "Bindings used together must reference one version per plugin."
        ),
        RuleTag.INVALID_PLUGIN_DEFINITION: "Plugin key '{0}' is invalid: {1}",
        RuleTag.INVALID_ALIAS_COMMAND: (
            "Command prefix '{0}' not found in executors or builtin commands"
        ),
        RuleTag.INVALID_PLUGIN_RBAC: (
            "Binding is referencing plugins of same kind with different RBAC. "
            "'{0}' and '{1}' bindings must be identical when used together."
        ),
        RuleTag.INVALID_ACTION_RBAC: (
            "Plugin {0} has 'ChannelName' RBAC policy. This is not supported for actions. "
            f"See {ACTION_RBAC_DOCS_URL}"
        ),
    }
)


def severity_for(tag: str) -> Severity:
    """Warning for the advisory allow-list, critical for everything else."""

    if tag in WARNING_TAGS:
        return Severity.WARNING
    return Severity.CRITICAL


class RuleRegistry:
    """Immutable rule tag -> message template table."""

    __slots__ = ("_templates",)

    def __init__(self, templates: Mapping[str, str]) -> None:
        checked: dict[str, str] = {}
        for tag in sorted(templates):
            checked[_check_tag(tag)] = _check_template(tag, templates[tag])
        self._templates: Mapping[str, str] = MappingProxyType(checked)

    @classmethod
    def build(cls, extra: Mapping[str, str] | None = None) -> RuleRegistry:
        """Default templates plus ``extra`` pairs; an extra tag may not shadow a default one."""

        templates = dict(DEFAULT_TEMPLATES)
        additions = dict(extra or {})
        for tag in sorted(additions):
            if tag in templates:
                raise RuleRegistryError(f"rule tag {tag!r} is already registered")
            templates[tag] = additions[tag]
        return cls(templates)

    def contains(self, tag: str) -> bool:
        return tag in self._templates

    def template(self, tag: str) -> str:
        try:
            return self._templates[tag]
        except KeyError:
            raise KeyError(f"no message template registered for rule tag {tag!r}") from None

    def render(self, tag: str, params: Sequence[str]) -> str:
        """Substitute ``{n}`` with ``params[n]``; placeholders without a param render empty."""

        template = self.template(tag)

        def _substitute(match: re.Match[str]) -> str:
            index = int(match.group(1))
            if index < len(params):
                return str(params[index])
            return ""

        return _PLACEHOLDER_PATTERN.sub(_substitute, template)

    def tags(self) -> tuple[str, ...]:
        return tuple(self._templates)

    def items(self) -> Iterable[tuple[str, str]]:
        return tuple(self._templates.items())


def _check_tag(tag: object) -> str:
    if not isinstance(tag, str) or not _TAG_PATTERN.fullmatch(tag):
        raise RuleRegistryError(f"invalid rule tag {tag!r}")
    return str(tag)


def _check_template(tag: str, template: object) -> str:
    if not isinstance(template, str) or not template.strip():
        raise RuleRegistryError(f"template for rule tag {tag!r} must be a non-empty string")
    residue = _PLACEHOLDER_PATTERN.sub("", template)
    if "{" in residue or "}" in residue:
        raise RuleRegistryError(
            f"template for rule tag {tag!r} has a malformed placeholder: {template!r}"
        )
    return template


__all__ = [
    "DEFAULT_TEMPLATES",
    "WARNING_TAGS",
    "RuleRegistry",
    "RuleTag",
    "Severity",
    "severity_for",
]
