"""Failure types for a timesheet run. None of them is retried."""


class TimesheetError(Exception):
    """Base class for every failure that aborts a timesheet run."""


class ConfigurationError(TimesheetError):
    """Required configuration is missing or malformed."""


class AuthenticationError(ConfigurationError):
    """No GitHub credential was injected into the environment."""


class UpstreamError(TimesheetError):
    """The GitHub API call failed (network, rate limit, 4xx/5xx)."""


class FileSystemError(TimesheetError):
    """An output artifact could not be written."""
