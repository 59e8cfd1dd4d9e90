"""Error taxonomy shared by calculators, services and the API layer."""


class SmartSplitError(Exception):
    """Base class for application errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SmartSplitError):
    """Malformed or out-of-range input (negative revenue, unknown label, ...)."""

    status_code = 400


class UpstreamServiceError(SmartSplitError):
    """The LLM provider or the database was unavailable or returned unusable data."""

    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message)
        self.status_code = status_code


class InternalComputationError(SmartSplitError):
    """A contract violation inside the calculators, e.g. a bracket table with gaps."""

    status_code = 500


class NotFoundError(SmartSplitError):
    """A referenced record (e.g. a conversation) does not exist."""

    status_code = 404
