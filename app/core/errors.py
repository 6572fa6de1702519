"""
Domain exceptions raised by the service layer.

Routers translate these into HTTP responses; services never build
HTTP errors themselves.
"""


class ReportValidationError(ValueError):
    """The generate request is incomplete or names something unsupported."""


class ReportNotFoundError(LookupError):
    """No report record, or no backing file, for the requested id."""

    def __init__(self, message: str = "Report not found"):
        super().__init__(message)
        self.message = message
