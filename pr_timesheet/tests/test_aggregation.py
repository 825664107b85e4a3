import os
import sys
import unittest

# Add the repository root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
# pylint: disable=wrong-import-position,import-error
from pr_timesheet.aggregation import (
    Duration,
    Policy,
    StructuredTime,
    aggregate,
    extract_duration,
    pr_author,
)


def make_pr(number, login, body=None):
    return {"number": number, "user": {"login": login}, "body": body, "merged_at": "2024-03-01T12:00:00Z"}


class TestExtractDuration(unittest.TestCase):
    def test_simple_annotation(self):
        self.assertEqual(extract_duration("{2:30}"), Duration(2, 30))
        self.assertEqual(extract_duration("{2:30}").decimal_hours, 2.5)

    def test_annotation_inside_description(self):
        body = "Refactors the parser.\n\nTime spent: {12:05}\nCloses #41"
        self.assertEqual(extract_duration(body), Duration(12, 5))

    def test_only_first_annotation_counts(self):
        self.assertEqual(extract_duration("{1:00} then {3:15}"), Duration(1, 0))

    def test_minutes_need_exactly_two_digits(self):
        self.assertIsNone(extract_duration("{2:3}"))
        self.assertIsNone(extract_duration("{2:300}"))

    def test_no_annotation(self):
        self.assertIsNone(extract_duration("2:30 without braces"))
        self.assertIsNone(extract_duration("{:30}"))
        self.assertIsNone(extract_duration(""))
        self.assertIsNone(extract_duration(None))


class TestPrAuthor(unittest.TestCase):
    def test_login(self):
        self.assertEqual(pr_author(make_pr(1, "alice")), "alice")

    def test_deleted_user_is_ghost(self):
        self.assertEqual(pr_author({"number": 1, "user": None}), "ghost")


class TestFixedRate(unittest.TestCase):
    def test_three_prs_at_default_rate(self):
        prs = [make_pr(1, "alice"), make_pr(2, "alice"), make_pr(3, "alice")]
        self.assertEqual(aggregate(prs, Policy.FIXED_RATE), {"alice": 3.0})

    def test_configured_rate_ignores_description(self):
        prs = [make_pr(1, "alice", "{9:00}"), make_pr(2, "bob"), make_pr(3, "alice")]
        self.assertEqual(aggregate(prs, Policy.FIXED_RATE, 1.5), {"alice": 3.0, "bob": 1.5})

    def test_authors_keep_first_seen_order(self):
        prs = [make_pr(1, "zoe"), make_pr(2, "adam"), make_pr(3, "zoe"), make_pr(4, "mia")]
        self.assertEqual(list(aggregate(prs, Policy.FIXED_RATE)), ["zoe", "adam", "mia"])

    def test_empty_input(self):
        self.assertEqual(aggregate([], Policy.FIXED_RATE), {})

    def test_policy_accepts_string_value(self):
        self.assertEqual(aggregate([make_pr(1, "alice")], "fixed_rate"), {"alice": 1.0})


class TestTextAnnotation(unittest.TestCase):
    def test_annotation_becomes_decimal_hours(self):
        self.assertEqual(aggregate([make_pr(1, "alice", "{2:30}")], Policy.TEXT_ANNOTATION), {"alice": 2.5})

    def test_sums_per_author(self):
        prs = [make_pr(1, "alice", "{1:15}"), make_pr(2, "bob", "{0:45}"), make_pr(3, "alice", "{2:00}")]
        self.assertEqual(aggregate(prs, Policy.TEXT_ANNOTATION), {"alice": 3.25, "bob": 0.75})

    def test_unannotated_pr_is_skipped_with_warning(self):
        prs = [make_pr(7, "alice", "{1:00}"), make_pr(8, "bob", "forgot the time"), make_pr(9, "carol", None)]
        with self.assertLogs("pr_timesheet.aggregation", level="WARNING") as logs:
            summary = aggregate(prs, Policy.TEXT_ANNOTATION)

        self.assertEqual(summary, {"alice": 1.0})
        self.assertNotIn("bob", summary)
        self.assertEqual(len(logs.output), 2)
        self.assertIn("#8", logs.output[0])
        self.assertIn("bob", logs.output[0])
        self.assertIn("#9", logs.output[1])
        self.assertIn("carol", logs.output[1])


class TestStructuredAnnotation(unittest.TestCase):
    def test_minutes_fold_into_hours(self):
        prs = [make_pr(1, "alice", "{1:45}"), make_pr(2, "alice", "{0:30}")]
        summary = aggregate(prs, Policy.STRUCTURED_ANNOTATION)

        totals = summary["alice"]
        self.assertAlmostEqual(totals.hours_decimal, 2.25)
        self.assertEqual(totals.hours, 2)
        self.assertEqual(totals.minutes, 15)
        self.assertEqual(totals.as_text(), "2h15min")

    def test_raw_accumulators_before_normalizing(self):
        totals = StructuredTime()
        totals.add(Duration(1, 45))
        totals.add(Duration(0, 30))
        self.assertEqual((totals.hours, totals.minutes), (1, 75))
        totals.normalize()
        self.assertEqual((totals.hours, totals.minutes), (2, 15))

    def test_decimal_total_matches_normalized_time(self):
        prs = [make_pr(n, "bob", f"{{{h}:{m:02d}}}") for n, (h, m) in enumerate([(0, 59), (3, 59), (0, 2), (1, 40)])]
        totals = aggregate(prs, Policy.STRUCTURED_ANNOTATION)["bob"]

        self.assertLess(totals.minutes, 60)
        self.assertAlmostEqual(totals.hours_decimal, totals.hours + totals.minutes / 60)

    def test_unannotated_pr_is_skipped(self):
        prs = [make_pr(1, "alice", "no time"), make_pr(2, "bob", "{0:10}")]
        with self.assertLogs("pr_timesheet.aggregation", level="WARNING"):
            summary = aggregate(prs, Policy.STRUCTURED_ANNOTATION)
        self.assertEqual(list(summary), ["bob"])


if __name__ == "__main__":
    unittest.main()
