"""
rtc-call error types.
"""

from typing import Any, Optional


class RtcCallError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class CredentialUnavailable(RtcCallError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("credential_unavailable", message, details)


class EngineError(RtcCallError):
    def __init__(self, message: str, engine_code: Optional[int] = None):
        super().__init__("engine_error", message, {"engine_code": engine_code})


class EngineWarning(RtcCallError):
    def __init__(self, message: str, engine_code: Optional[int] = None):
        super().__init__("engine_warning", message, {"engine_code": engine_code})


class InvalidTransition(RtcCallError):
    """An operation was requested in a status that forbids it. Logged, not raised."""

    def __init__(self, operation: str, status: str, reason: str = ""):
        message = f"{operation} not allowed while {status}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__("invalid_transition", message, {"operation": operation, "status": status})


class ConfigError(RtcCallError):
    def __init__(self, message: str):
        super().__init__("config_error", message)
