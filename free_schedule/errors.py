class ScheduleError(Exception):
    """Base class for errors surfaced by the free schedule service."""


class ValidationError(ScheduleError):
    """Caller supplied range parameters are malformed or out of bounds."""


class UpstreamError(ScheduleError):
    """The calendar source failed or returned data we cannot read."""


class AuthRequired(ScheduleError):
    """No usable calendar credential; an interactive authorization is needed."""
