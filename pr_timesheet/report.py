import csv
import json
import logging

from pr_timesheet.actions import set_output
from pr_timesheet.aggregation import Policy
from pr_timesheet.errors import FileSystemError

logger = logging.getLogger(__name__)

CSV_PATH = "timesheet.csv"
JSON_PATH = "timesheet.json"
OUTPUT_NAME = "timesheet_file"


def csv_rows(summary, policy):
    """Header plus one row per author, in the order authors were first seen."""
    if Policy(policy) is Policy.STRUCTURED_ANNOTATION:
        yield ["Author", "Hours", "Time"]
        for author, totals in summary.items():
            yield [author, f"{totals.hours_decimal:.2f}", totals.as_text()]
    else:
        yield ["Author", "Hours"]
        for author, hours in summary.items():
            yield [author, f"{hours:.2f}"]


def json_document(summary, policy):
    if Policy(policy) is not Policy.STRUCTURED_ANNOTATION:
        return dict(summary)
    return {
        author: {"hoursDecimal": totals.hours_decimal, "hours": totals.hours, "minutes": totals.minutes}
        for author, totals in summary.items()
    }


def write_csv(summary, policy, path=CSV_PATH):
    try:
        with open(path, "w", newline="", encoding="utf-8") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerows(csv_rows(summary, policy))
    except OSError as e:
        raise FileSystemError(f"Could not write {path}: {e}") from e
    logger.debug("Wrote %d authors to %s", len(summary), path)
    return path


def write_json(summary, policy, path=JSON_PATH):
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(json_document(summary, policy), f, indent=2)
    except OSError as e:
        raise FileSystemError(f"Could not write {path}: {e}") from e
    logger.debug("Wrote %d authors to %s", len(summary), path)
    return path


def publish_timesheet(config, csv_path=CSV_PATH):
    try:
        set_output(OUTPUT_NAME, csv_path, config.output_file)
    except OSError as e:
        raise FileSystemError(f"Could not write step output to {config.output_file}: {e}") from e
