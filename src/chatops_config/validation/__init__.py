"""Constraint validation engine: field schema rules plus cross-entity consistency checks."""

from chatops_config.validation.engine import (
    CROSS_ENTITY_VALIDATORS,
    ValidationEngine,
    validate_config,
)
from chatops_config.validation.result import (
    ValidateResult,
    Violation,
    assert_bootable,
    report_result,
)
from chatops_config.validation.rules import (
    DEFAULT_TEMPLATES,
    WARNING_TAGS,
    RuleRegistry,
    RuleTag,
    Severity,
    severity_for,
)
from chatops_config.validation.schema import FIELD_RULES, FieldRule
from chatops_config.validation.tree import EntityKind

__all__ = [
    "CROSS_ENTITY_VALIDATORS",
    "DEFAULT_TEMPLATES",
    "FIELD_RULES",
    "WARNING_TAGS",
    "EntityKind",
    "FieldRule",
    "RuleRegistry",
    "RuleTag",
    "Severity",
    "ValidateResult",
    "ValidationEngine",
    "Violation",
    "assert_bootable",
    "report_result",
    "severity_for",
    "validate_config",
]
