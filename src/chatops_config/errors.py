"""Error taxonomy for configuration validation.

Violations are ``ValueError`` subclasses so they can be raised on their own, but
the engine collects them into ``ValidateResult`` instead of raising. Only
failures of the validation machinery itself are raised from ``validate()``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Final


class ConfigViolationError(ValueError):
    """One rendered rule violation: tag, field path, parameters and message."""

    def __init__(self, tag: str, path: str, params: Sequence[str], message: str) -> None:
        self.tag = tag
        self.path = path
        self.params = tuple(params)
        self.message = message
        super().__init__(f"Key: '{path}' {message}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigViolationError):
            return NotImplemented
        return (type(self), self.tag, self.path, self.params, self.message) == (
            type(other),
            other.tag,
            other.path,
            other.params,
            other.message,
        )

    def __hash__(self) -> int:
        return hash((type(self), self.tag, self.path, self.params, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tag={self.tag!r}, path={self.path!r})"


class SchemaError(ConfigViolationError):
    """A field is missing or malformed."""


class BindingError(ConfigViolationError):
    """A binding references an undefined source or executor."""


class RBACConflictError(ConfigViolationError):
    """Two bindings share a plugin with divergent RBAC policies."""


class ActionRBACError(ConfigViolationError):
    """A channel-scoped RBAC policy is attached to an action plugin."""


class ChannelFormatError(ConfigViolationError):
    """A channel identifier does not match its platform grammar."""


class AliasConflictError(ConfigViolationError):
    """An alias command prefix resolves to no executor or built-in verb."""


class RegexRedundancyError(ConfigViolationError):
    """An all-values wildcard is combined with explicit patterns."""


class PluginConflictError(ConfigViolationError):
    """A plugin key is malformed or bound from conflicting repositories/versions."""


class RuleRegistryError(ValueError):
    """Raised when a message template cannot be registered."""


class ValidationEngineError(RuntimeError):
    """Raised when validation cannot produce a structured result."""


class BootBlockedError(ValueError):
    """Raised when a validation result carries critical violations."""

    def __init__(self, issues: Sequence[ConfigViolationError]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {issue}" for issue in self.issues)
        super().__init__(f"invalid configuration:\n{rendered}")


class ConfigLoadError(ValueError):
    """Raised when configuration documents cannot be read or mapped to the typed tree."""


ERROR_TYPES_BY_TAG: Final[Mapping[str, type[ConfigViolationError]]] = MappingProxyType(
    {
        "required": SchemaError,
        "required_if_enabled": SchemaError,
        "url": SchemaError,
        "min": SchemaError,
        "invalid_slack_token": SchemaError,
        "invalid_binding": BindingError,
        "invalid_plugin_rbac": RBACConflictError,
        "invalid_action_rbac": ActionRBACError,
        "invalid_channel_name": ChannelFormatError,
        "invalid_channel_id": ChannelFormatError,
        "invalid_alias_command": AliasConflictError,
        "rs-include-regex": RegexRedundancyError,
        "conflicting_plugin_repo": PluginConflictError,
        "conflicting_plugin_version": PluginConflictError,
        "invalid_plugin_definition": PluginConflictError,
    }
)


def error_type_for(tag: str) -> type[ConfigViolationError]:
    return ERROR_TYPES_BY_TAG.get(tag, ConfigViolationError)


__all__ = [
    "ERROR_TYPES_BY_TAG",
    "ActionRBACError",
    "AliasConflictError",
    "BindingError",
    "BootBlockedError",
    "ChannelFormatError",
    "ConfigLoadError",
    "ConfigViolationError",
    "PluginConflictError",
    "RBACConflictError",
    "RegexRedundancyError",
    "RuleRegistryError",
    "SchemaError",
    "ValidationEngineError",
    "error_type_for",
]
