"""chatops-config: configuration consistency checks for a ChatOps platform."""

from chatops_config.config import Config, load_config
from chatops_config.errors import (
    BootBlockedError,
    ConfigLoadError,
    ConfigViolationError,
    RuleRegistryError,
    ValidationEngineError,
)
from chatops_config.validation import (
    RuleRegistry,
    ValidateResult,
    ValidationEngine,
    assert_bootable,
    report_result,
    validate_config,
)

__version__ = "0.1.0"

__all__ = [
    "BootBlockedError",
    "Config",
    "ConfigLoadError",
    "ConfigViolationError",
    "RuleRegistry",
    "RuleRegistryError",
    "ValidateResult",
    "ValidationEngine",
    "ValidationEngineError",
    "__version__",
    "assert_bootable",
    "load_config",
    "report_result",
    "validate_config",
]
