"""
Error taxonomy shared by the provider layer and the confidentiality gate.

Errors are raised inside a component and recovered at its boundary into a
tagged success/failure result. Nothing here is fatal to the host process.
"""

from typing import Literal

ErrorKind = Literal[
    "not_configured",
    "invalid_credentials",
    "generation_failed",
    "unauthorized",
    "validation_failed",
]


class PrintDeskError(Exception):
    """Base class for recoverable domain errors."""

    kind: ErrorKind = "generation_failed"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotConfigured(PrintDeskError):
    """A required provider configuration field is missing."""

    kind = "not_configured"


class InvalidCredentials(PrintDeskError):
    """A credential test call against the provider failed."""

    kind = "invalid_credentials"


class GenerationFailed(PrintDeskError):
    """Transport error or unparseable provider reply."""

    kind = "generation_failed"


class Unauthorized(PrintDeskError):
    """Secret mismatch on a state-changing firewall action."""

    kind = "unauthorized"


class ValidationFailed(PrintDeskError):
    """Settings rejected before anything was applied."""

    kind = "validation_failed"
