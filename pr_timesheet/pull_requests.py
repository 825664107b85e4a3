import logging
from datetime import timedelta

import pytz
import requests
from dateutil import parser

from pr_timesheet.errors import AuthenticationError, UpstreamError

logger = logging.getLogger(__name__)

MAX_PULL_REQUESTS = 100
MERGE_WINDOW_DAYS = 7
REQUEST_TIMEOUT = 30


def get_api_headers(access_token):
    """Return API headers for GitHub requests"""
    return {
        "Authorization": f"token {access_token}",
        "Accept": "application/vnd.github.v3+json",
    }


def fetch_closed_pull_requests(config):
    """Fetch the most recently updated closed PRs. One page only, no retries."""
    if not config.token:
        raise AuthenticationError("GITHUB_TOKEN not found")

    url = f"{config.api_url}/repos/{config.owner}/{config.repo}/pulls"
    params = {
        "state": "closed",
        "sort": "updated",
        "direction": "desc",
        "per_page": MAX_PULL_REQUESTS,
    }

    logger.info("Fetching closed pull requests for %s", config.full_name)
    try:
        response = requests.get(url, headers=get_api_headers(config.token), params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        prs = response.json()
    except requests.RequestException as e:
        raise UpstreamError(f"Failed to fetch pull requests for {config.full_name}: {e}") from e
    except ValueError as e:
        raise UpstreamError(f"Invalid JSON in pull request listing for {config.full_name}: {e}") from e

    if not isinstance(prs, list):
        raise UpstreamError(f"Unexpected pull request listing for {config.full_name}: {type(prs).__name__}")

    logger.debug("Retrieved %d closed PRs", len(prs))
    return prs[:MAX_PULL_REQUESTS]


def parse_merged_at(value):
    """Parse a GitHub timestamp into an aware datetime, None when not merged."""
    if not value:
        return None
    merged_at = parser.isoparse(value)
    if merged_at.tzinfo is None:
        merged_at = pytz.utc.localize(merged_at)
    return merged_at


def filter_recently_merged(prs, now, window_days=MERGE_WINDOW_DAYS):
    """Keep PRs merged at or after `now - window_days`, in their original order."""
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    since = now - timedelta(days=window_days)

    merged = []
    for pr in prs:
        merged_at = parse_merged_at(pr.get("merged_at"))
        if merged_at is not None and merged_at >= since:
            merged.append(pr)

    if not merged:
        logger.info("No merged PRs in the last %d days", window_days)
    else:
        logger.info("Found %d PRs merged since %s", len(merged), since.strftime("%Y-%m-%d %H:%M:%S"))
    return merged
