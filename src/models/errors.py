"""
Error taxonomy

These are raised inside the runtime and caught at the init/update/destroy
boundary, where they are turned into diagnostics. None of them is allowed to
reach page code.
"""

from typing import Any, Dict

from models.enums import DiagnosticKind


class EffectsError(Exception):
    """Base class for recoverable runtime anomalies"""

    kind: DiagnosticKind = DiagnosticKind.CONFIGURATION

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details


class ConfigurationError(EffectsError):
    """Attribute present but unparsable or out of range"""
    kind = DiagnosticKind.CONFIGURATION


class LifecycleViolation(EffectsError):
    """Init on an active element, update/destroy of an unknown one"""
    kind = DiagnosticKind.LIFECYCLE_VIOLATION


class DependencyUnavailable(EffectsError):
    """Required host capability (e.g. webgl) is missing"""
    kind = DiagnosticKind.DEPENDENCY_UNAVAILABLE


class TeardownFailure(EffectsError):
    """Exception raised by destroy-time cleanup"""
    kind = DiagnosticKind.TEARDOWN_FAILURE

    def __init__(self, message: str, cause: BaseException, **details: Any):
        super().__init__(message, **details)
        self.cause = cause
