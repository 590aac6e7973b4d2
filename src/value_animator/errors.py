"""
Animator errors

All errors are contract violations reported synchronously to the caller.
There is no retry or recovery logic.
"""

from typing import Optional


class AnimatorError(Exception):
    """Base class for animator errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class MissingArgumentError(AnimatorError):
    """Required configuration field is absent"""
    def __init__(self, argument: str):
        super().__init__(
            code="MISSING_ARGUMENT",
            message=f"animation {argument.replace('_', ' ')} is required",
            details={"argument": argument}
        )


class InvalidArgumentError(AnimatorError):
    """Configuration field is present but unusable"""
    def __init__(self, argument: str, value, reason: str):
        super().__init__(
            code="INVALID_ARGUMENT",
            message=f"invalid {argument}: {reason}",
            details={"argument": argument, "value": value}
        )


class InvalidStateError(AnimatorError):
    """Operation invoked outside its required state"""
    def __init__(self, message: str, state=None):
        super().__init__(
            code="INVALID_STATE",
            message=message,
            details={"state": state.name if state is not None else None}
        )


class ConfigError(AnimatorError):
    """Preset file missing, malformed or referencing unknown names"""
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="CONFIG_ERROR",
            message=message,
            details=details
        )
