"""
Weekly PR Timesheet
===================

Builds a per-author timesheet from the pull requests merged into a GitHub
repository during the last 7 days, and writes it to timesheet.csv and
timesheet.json in the working directory.

Meant to run as a scheduled GitHub Actions job, but works locally too.

Setup Requirements:
-----------------
Environment variables (a local .env file is loaded if present):

    GITHUB_TOKEN=token with read access to pull requests
    GITHUB_REPOSITORY=owner/repo
      (or GITHUB_METRIC_OWNER_OR_ORGANIZATION + GITHUB_METRIC_REPO)

    # Optional
    INPUT_POLICY=fixed_rate | text_annotation | structured_annotation
    INPUT_HOURS_PER_PR=1.5      (fixed_rate only, default 1)
    RUNNER_DEBUG=1              (verbose logging)

With text_annotation or structured_annotation, authors declare time spent
by writing {H:MM} in the PR description, e.g. "Refactor parser {2:30}".

Usage:
------
    python -m pr_timesheet

Output:
-------
    timesheet.csv   Author,Hours            (fixed_rate, text_annotation)
                    Author,Hours,Time       (structured_annotation)
    timesheet.json  {"alice": 2.5, ...} or
                    {"alice": {"hoursDecimal": 2.25, "hours": 2, "minutes": 15}, ...}

The CSV path is published as the step output `timesheet_file`.
"""

import logging
import sys
from datetime import datetime

import pytz

from pr_timesheet.actions import set_failed
from pr_timesheet.aggregation import aggregate
from pr_timesheet.config import load_config
from pr_timesheet.pull_requests import fetch_closed_pull_requests, filter_recently_merged
from pr_timesheet.report import CSV_PATH, JSON_PATH, publish_timesheet, write_csv, write_json


def setup_logging(debug=False):
    """Configure logging settings."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger(__name__)


def generate_timesheet(config, now, csv_path=CSV_PATH, json_path=JSON_PATH):
    logger = logging.getLogger(__name__)

    prs = fetch_closed_pull_requests(config)
    merged = filter_recently_merged(prs, now)
    summary = aggregate(merged, config.policy, config.hours_per_pr)

    write_csv(summary, config.policy, csv_path)
    write_json(summary, config.policy, json_path)
    logger.info("Timesheet generated: %s & %s", csv_path, json_path)

    publish_timesheet(config, csv_path)
    return summary


# pylint: disable=broad-exception-caught
def run(environ=None, now=None, csv_path=CSV_PATH, json_path=JSON_PATH):
    """Run one timesheet generation. Returns the process exit status."""
    logger = setup_logging()
    try:
        config = load_config(environ)
        if config.debug:
            logging.getLogger().setLevel(logging.DEBUG)
        logger.info("Generating %s timesheet for %s", config.policy.value, config.full_name)
        generate_timesheet(config, now or datetime.now(pytz.utc), csv_path, json_path)
    except Exception as e:
        return set_failed(str(e))
    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
