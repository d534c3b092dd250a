"""Errors surfaced to the callers that apply a plan."""


class OrganizerError(Exception):
    """Base class for failures a caller must report to the user."""


class ConfigurationError(OrganizerError, ValueError):
    """Missing or invalid settings: credentials, rules, preferences."""


class TransientError(OrganizerError, RuntimeError):
    """External failure worth retrying later (rate limit, API outage)."""

    def __init__(self, message: str, retry_after: float = 0.0):
        super().__init__(message)
        self.retry_after = retry_after


class StateDriftError(OrganizerError, RuntimeError):
    """Tabs or a stored preview changed between planning and applying."""
