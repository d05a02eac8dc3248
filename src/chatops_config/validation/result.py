"""Violation records, the severity-partitioned result and its aggregator."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from chatops_config.errors import (
    BootBlockedError,
    ConfigViolationError,
    ValidationEngineError,
    error_type_for,
)
from chatops_config.validation.rules import RuleRegistry, Severity, severity_for


@dataclass(frozen=True, slots=True)
class Violation:
    """Unrendered rule violation raised by either validation phase."""

    tag: str
    path: str
    params: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ValidateResult:
    """Ordered criticals (startup-blocking) and warnings (advisory)."""

    criticals: tuple[ConfigViolationError, ...] = ()
    warnings: tuple[ConfigViolationError, ...] = ()

    @property
    def is_bootable(self) -> bool:
        return not self.criticals

    @property
    def is_clean(self) -> bool:
        return not self.criticals and not self.warnings

    def messages(self, severity: Severity | str) -> tuple[str, ...]:
        selected = self.criticals if Severity(severity) is Severity.CRITICAL else self.warnings
        return tuple(str(item) for item in selected)


class ViolationCollector:
    """Append-only sink shared by every validator during one call."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[Violation] = []

    def report(self, tag: str, path: str, *params: str) -> None:
        self._items.append(Violation(tag=str(tag), path=path, params=tuple(params)))

    def items(self) -> tuple[Violation, ...]:
        return tuple(self._items)


class ResultAggregator:
    """Render violations through the registry and partition them by severity."""

    __slots__ = ("_criticals", "_warnings", "registry")

    def __init__(self, registry: RuleRegistry) -> None:
        self.registry = registry
        self._criticals: list[ConfigViolationError] = []
        self._warnings: list[ConfigViolationError] = []

    def extend(self, violations: Sequence[Violation]) -> None:
        for violation in violations:
            self.add(violation)

    def add(self, violation: Violation) -> None:
        if not self.registry.contains(violation.tag):
            raise ValidationEngineError(
                f"violation at {violation.path!r} raised unregistered rule tag {violation.tag!r}"
            )
        message = self.registry.render(violation.tag, violation.params)
        error = error_type_for(violation.tag)(
            violation.tag, violation.path, violation.params, message
        )
        if severity_for(violation.tag) is Severity.WARNING:
            self._warnings.append(error)
        else:
            self._criticals.append(error)

    def result(self) -> ValidateResult:
        return ValidateResult(criticals=tuple(self._criticals), warnings=tuple(self._warnings))


def assert_bootable(result: ValidateResult) -> ValidateResult:
    """Raise ``BootBlockedError`` listing every critical; return ``result`` otherwise."""

    if result.criticals:
        raise BootBlockedError(result.criticals)
    return result


def report_result(result: ValidateResult, *, logger: Any | None = None) -> None:
    """Log warnings as non-fatal lines and criticals as errors."""

    log = logger if logger is not None else structlog.get_logger(__name__)
    for warning in result.warnings:
        log.warning(
            "config_validation_warning",
            tag=warning.tag,
            path=warning.path,
            detail=warning.message,
        )
    for critical in result.criticals:
        log.error(
            "config_validation_critical",
            tag=critical.tag,
            path=critical.path,
            detail=critical.message,
        )


__all__ = [
    "ResultAggregator",
    "ValidateResult",
    "Violation",
    "ViolationCollector",
    "assert_bootable",
    "report_result",
]
