"""Weekly timesheet of merged pull requests for a GitHub repository."""

__version__ = "1.0.0"
