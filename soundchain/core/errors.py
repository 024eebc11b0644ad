"""Exceptions raised by the negotiation core and mapped at the HTTP boundary."""


class SoundChainError(Exception):
    """Base class for negotiation errors."""

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class MissingFieldsError(SoundChainError):
    """Raised when a negotiation request lacks required fields."""

    def __init__(self, fields: list[str]):
        super().__init__("Missing required fields", details=fields)
        self.fields = fields


class BackendError(SoundChainError):
    """The external text-generation service failed or returned garbage."""


class BackendNotConfiguredError(BackendError):
    """A backend was requested without its credentials."""


class InvalidRequestError(SoundChainError):
    """A negotiation request has the required fields but unusable values."""
