"""Projection errors raised for a single invalid position."""


class ProjectionError(ValueError):
    """Base class for position projection failures."""


class InvalidRegimeError(ProjectionError):
    def __init__(self, regime: object) -> None:
        super().__init__(f"Unknown index regime: {regime!r}")
        self.regime = regime


class InvalidPeriodError(ProjectionError):
    def __init__(self, start_date: object, due_date: object) -> None:
        super().__init__(
            f"Due date {due_date} must be after start date {start_date}"
        )
        self.start_date = start_date
        self.due_date = due_date


class InvalidPrincipalError(ProjectionError):
    def __init__(self, principal: float) -> None:
        super().__init__(f"Principal must be positive, got {principal}")
        self.principal = principal
