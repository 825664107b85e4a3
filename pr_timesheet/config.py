import math
import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from pr_timesheet.aggregation import Policy
from pr_timesheet.errors import AuthenticationError, ConfigurationError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_HOURS_PER_PR = 1.0


@dataclass(frozen=True)
class TimesheetConfig:
    """Everything a run needs, read once from the environment at startup."""

    token: str
    owner: str
    repo: str
    policy: Policy = Policy.FIXED_RATE
    hours_per_pr: float = DEFAULT_HOURS_PER_PR
    output_file: Optional[str] = None
    debug: bool = False
    api_url: str = DEFAULT_API_URL

    @property
    def full_name(self):
        return f"{self.owner}/{self.repo}"


def validate_repo_format(repo):
    """Validate GitHub repo input strictly as owner/repo.

    Blocks path traversal and protocol tricks when the value is placed in
    the request URL. Returns the repo if valid, else raises ConfigurationError.
    """
    if not isinstance(repo, str):
        raise ConfigurationError("Repository must be a string like 'owner/repo'.")

    pattern = r"^[A-Za-z0-9._-]+/[A-Za-z0-9._-]+$"
    if not re.match(pattern, repo):
        raise ConfigurationError(
            f"Invalid repository '{repo}': expected format 'owner/repo' using letters, numbers, '.', '_' or '-'."
        )

    if ".." in repo or repo.startswith("/") or repo.endswith("/") or " " in repo:
        raise ConfigurationError(f"Repository '{repo}' contains invalid characters or path traversal attempts.")

    return repo


def parse_hours_per_pr(raw):
    """Hours credited per merged PR. Absent, non-numeric or zero input means 1.0."""
    if raw is None:
        return DEFAULT_HOURS_PER_PR
    try:
        value = float(str(raw).strip())
    except ValueError:
        return DEFAULT_HOURS_PER_PR
    if not math.isfinite(value) or value == 0:
        return DEFAULT_HOURS_PER_PR
    return value


def parse_policy(raw):
    if raw is None or not str(raw).strip():
        return Policy.FIXED_RATE
    name = str(raw).strip().lower().replace("-", "_")
    try:
        return Policy(name)
    except ValueError:
        choices = ", ".join(p.value for p in Policy)
        raise ConfigurationError(f"Unknown policy '{raw}'. Expected one of: {choices}") from None


def resolve_repository(environ: Mapping[str, str]):
    """Return (owner, repo) from GITHUB_REPOSITORY or the metric-specific variables."""
    full_name = environ.get("GITHUB_REPOSITORY")
    if not full_name:
        owner = environ.get("GITHUB_METRIC_OWNER_OR_ORGANIZATION")
        repo = environ.get("GITHUB_METRIC_REPO")
        if not owner or not repo:
            raise ConfigurationError(
                "Missing repository: set GITHUB_REPOSITORY (owner/repo) or "
                "GITHUB_METRIC_OWNER_OR_ORGANIZATION and GITHUB_METRIC_REPO."
            )
        full_name = f"{owner}/{repo}"

    owner, repo = validate_repo_format(full_name.strip()).split("/")
    return owner, repo


def load_config(environ: Optional[Mapping[str, str]] = None) -> TimesheetConfig:
    """Build the run configuration.

    When no mapping is given the process environment is used, after loading
    a local .env file if one exists.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    token = environ.get("GITHUB_TOKEN") or environ.get("GITHUB_TOKEN_READONLY_WEB")
    if not token:
        raise AuthenticationError("GITHUB_TOKEN not found")

    owner, repo = resolve_repository(environ)

    return TimesheetConfig(
        token=token,
        owner=owner,
        repo=repo,
        policy=parse_policy(environ.get("INPUT_POLICY")),
        hours_per_pr=parse_hours_per_pr(environ.get("INPUT_HOURS_PER_PR")),
        output_file=environ.get("GITHUB_OUTPUT") or None,
        debug=environ.get("RUNNER_DEBUG") == "1",
        api_url=(environ.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
    )
