"""Minimal GitHub Actions workflow commands: step outputs and failure reporting."""

import logging
import sys

logger = logging.getLogger(__name__)


def escape_data(value):
    return str(value).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_output(name, value, output_file=None):
    """Publish a step output for later steps in the job.

    Outside a runner (no GITHUB_OUTPUT file) the value is only logged.
    """
    if not output_file:
        logger.info("Output %s=%s (GITHUB_OUTPUT not set)", name, value)
        return
    with open(output_file, "a", encoding="utf-8") as f:
        f.write(f"{name}={value}\n")


def set_failed(message, stream=None):
    """Report the run as failed and return the exit status to use."""
    stream = stream or sys.stdout
    logger.error("Timesheet run failed: %s", message)
    stream.write(f"::error::{escape_data(message)}\n")
    stream.flush()
    return 1
