"""Dashboard domain exceptions."""


class DashboardError(Exception):
    """Base class for dashboard failures."""


class DashboardValidationError(DashboardError):
    """Input was well-formed but refers to something that cannot be used."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field
