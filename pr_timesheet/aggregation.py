"""
Per-author time accounting for merged pull requests.

Three policies decide how much time a PR is worth:

- fixed_rate: every PR counts a configured number of hours.
- text_annotation: the author writes `{H:MM}` in the PR description, e.g.
  `{2:30}` for two and a half hours. PRs without an annotation are skipped.
- structured_annotation: same annotation, but hours and minutes are kept as
  separate integer totals next to the decimal total, so the report can show
  both "2.25" and "2h15min".

Only the first annotation in a description counts.
"""

import logging
import re
from collections import namedtuple
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Union

logger = logging.getLogger(__name__)

TIME_ANNOTATION = re.compile(r"\{(\d+):(\d{2})\}")

# Login GitHub shows for PRs whose author account was deleted
GHOST_AUTHOR = "ghost"


class Policy(str, Enum):
    FIXED_RATE = "fixed_rate"
    TEXT_ANNOTATION = "text_annotation"
    STRUCTURED_ANNOTATION = "structured_annotation"


class Duration(namedtuple("Duration", ["hours", "minutes"])):
    __slots__ = ()

    @property
    def decimal_hours(self):
        return self.hours + self.minutes / 60


@dataclass
class StructuredTime:
    """Running totals for one author under the structured policy.

    hours_decimal is accumulated on its own and is never recomputed from
    hours/minutes.
    """

    hours_decimal: float = 0.0
    hours: int = 0
    minutes: int = 0

    def add(self, duration):
        self.hours_decimal += duration.decimal_hours
        self.hours += duration.hours
        self.minutes += duration.minutes

    def normalize(self):
        self.hours += self.minutes // 60
        self.minutes = self.minutes % 60

    def as_text(self):
        return f"{self.hours}h{self.minutes}min"


Contribution = Union[float, StructuredTime]


def extract_duration(text) -> Optional[Duration]:
    """Return the first `{H:MM}` annotation in text, or None."""
    if not text:
        return None
    match = TIME_ANNOTATION.search(text)
    if not match:
        return None
    return Duration(int(match.group(1)), int(match.group(2)))


def pr_author(pr):
    user = pr.get("user") or {}
    return user.get("login") or GHOST_AUTHOR


def aggregate(prs: Iterable[dict], policy: Policy, hours_per_pr: float = 1.0) -> Dict[str, Contribution]:
    """Accumulate time per author, keeping authors in first-seen order."""
    policy = Policy(policy)
    summary: Dict[str, Contribution] = {}

    for pr in prs:
        author = pr_author(pr)

        if policy is Policy.FIXED_RATE:
            summary[author] = summary.get(author, 0.0) + hours_per_pr
            logger.debug("PR #%s by %s: %s hours (fixed rate)", pr.get("number"), author, hours_per_pr)
            continue

        duration = extract_duration(pr.get("body"))
        if duration is None:
            logger.warning("PR #%s by %s has no {H:MM} time annotation, skipping", pr.get("number"), author)
            continue

        logger.debug("PR #%s by %s: %dh%02dmin", pr.get("number"), author, duration.hours, duration.minutes)
        if policy is Policy.TEXT_ANNOTATION:
            summary[author] = summary.get(author, 0.0) + duration.decimal_hours
        else:
            summary.setdefault(author, StructuredTime()).add(duration)

    if policy is Policy.STRUCTURED_ANNOTATION:
        for totals in summary.values():
            totals.normalize()

    return summary
