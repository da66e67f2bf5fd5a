"""Domain exceptions raised by the service and route layers.

Every error carries the HTTP status it maps to; the global handlers in
``digimon_api.api.error_handlers`` render them in the error envelope.
"""


class DigimonAPIError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DigimonAPIError):
    """Missing or malformed request input."""

    status_code = 400


class NotFoundError(DigimonAPIError):
    """A well-formed lookup matched no record."""

    status_code = 404


class BackendError(DigimonAPIError):
    """The database backend failed while serving an operation.

    The message is operation-specific and never includes backend detail.
    """

    status_code = 500
