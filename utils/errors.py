"""
Error Types

Exceptions shared by the analyze service and the companion session.
"""


class CapabilityUnavailable(RuntimeError):
    """Camera or speech transcription could not be acquired on this device."""

    def __init__(self, capability: str, reason: str = ""):
        self.capability = capability
        self.reason = reason
        message = f"{capability} unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ServiceError(RuntimeError):
    """A remote service call failed, timed out, or returned a malformed body."""


class ClassificationServiceError(ServiceError):
    """Text emotion classification (or the combined analyze call) failed."""


class ResponseGenerationError(ServiceError):
    """Empathetic response generation failed."""


class ConfigurationError(RuntimeError):
    """A required setting, such as the AI gateway credential, is missing."""


class InputValidationError(ValueError):
    """Submitted text is empty or whitespace-only."""
