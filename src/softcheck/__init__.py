"""softcheck - deferred, classified soft assertions for test steps."""

from .assertions import SoftAssertions
from .config import SoftcheckConfig, load_config
from .context import ExecutionContext, ExecutionContextStore
from .errors import (
    InvalidComparisonError,
    NormalizationError,
    ReportSerializationError,
    SoftAssertionFailure,
    SoftcheckError,
)
from .ledger import FailureLedger
from .registry import KnownFailureRegistry, get_known_failure_registry
from .types import Bucket
from .version import __version__


__all__ = [
    # Engine
    "SoftAssertions",
    "ExecutionContext",
    "ExecutionContextStore",
    # Ledger and registry
    "Bucket",
    "FailureLedger",
    "KnownFailureRegistry",
    "get_known_failure_registry",
    # Configuration
    "SoftcheckConfig",
    "load_config",
    # Errors
    "SoftcheckError",
    "SoftAssertionFailure",
    "InvalidComparisonError",
    "NormalizationError",
    "ReportSerializationError",
]
