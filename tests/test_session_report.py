"""
tests/test_session_report.py
=============================
Session, Report, and CSV Export Tests

Test categories:
    1. Session lifecycle (defaults, apply result, per-criterion overrides)
    2. Report assembly (percentage, rows, narrative segments, chart)
    3. CSV export (layout, N/A, quote doubling, filename)
"""

import os
import sys
import unittest

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from callaudit.export import content_disposition, export_csv, export_filename
from callaudit.report import build_report
from callaudit.rubric import CRITERIA, ValidationError
from callaudit.schemas import AuditResult
from callaudit.session import PENDING_COMMENT, AuditSession, parse_review_date


# ===================================================================
# Test fixtures
# ===================================================================

def _result(hold_na: bool = True) -> AuditResult:
    return AuditResult(
        scores={
            "greeting": 5, "comm_style": 4, "issue_handling": 3, "hold_proc": 0,
            "prof_empathy": 5, "resolution": 4, "closure": 5, "compliance": 2,
        },
        comments={c.id: f"{c.title} noted at [00:30]." for c in CRITERIA},
        hold_na=hold_na,
        executive_summary="Call started well at [00:05]. Issues at [01:20].",
        detailed_strengths=("Polite greeting [00:05].",),
        detailed_improvements=("Missed security [00:40].", "Rushed closure."),
    )


def _session() -> AuditSession:
    return AuditSession.new("Jane Doe", "2026-10-17").apply_result(_result())


# ===================================================================
# 1. Session lifecycle
# ===================================================================


class TestSessionLifecycle(unittest.TestCase):

    def test_new_session_defaults(self):
        session = AuditSession.new("  Jane Doe ", "2026-10-17")
        self.assertEqual(session.agent_name, "Jane Doe")
        self.assertEqual(set(session.scores.values()), {0})
        self.assertEqual(set(session.na_flags.values()), {False})
        self.assertEqual(set(session.comments.values()), {PENDING_COMMENT})
        self.assertEqual(session.compliance(), 0.0)

    def test_new_session_defaults_date_to_today(self):
        session = AuditSession.new("Jane")
        self.assertRegex(session.review_date, r"^\d{4}-\d{2}-\d{2}$")

    def test_apply_result_replaces_wholesale(self):
        session = _session()
        self.assertEqual(session.scores["issue_handling"], 3)
        self.assertTrue(session.na_flags["hold_proc"])
        self.assertEqual(session.detailed_improvements[1], "Rushed closure.")
        self.assertEqual(session.compliance(), 72.2)

    def test_apply_result_keeps_other_na_flags(self):
        session = AuditSession.new("Jane").with_na("greeting", True)
        session = session.apply_result(_result(hold_na=False))
        self.assertTrue(session.na_flags["greeting"])
        self.assertFalse(session.na_flags["hold_proc"])

    def test_with_score_only_changes_target(self):
        before = _session()
        after = before.with_score("compliance", 5)
        self.assertEqual(after.scores["compliance"], 5)
        self.assertEqual(before.scores["compliance"], 2)
        for cid in before.scores:
            if cid != "compliance":
                self.assertEqual(after.scores[cid], before.scores[cid])
        # (325 + 60) / 450 * 100
        self.assertEqual(after.compliance(), 85.6)

    def test_with_score_rejects_out_of_range(self):
        with self.assertRaises(ValueError):
            _session().with_score("greeting", 6)

    def test_with_score_rejects_bool(self):
        with self.assertRaises(ValueError):
            _session().with_score("greeting", True)

    def test_with_score_unknown_id(self):
        with self.assertRaises(KeyError):
            _session().with_score("nonexistent", 3)

    def test_with_na_on_disallowed_criterion_ignored_in_score(self):
        session = _session()
        flagged = session.with_na("compliance", True)
        self.assertTrue(flagged.na_flags["compliance"])
        self.assertEqual(flagged.compliance(), session.compliance())

    def test_with_na_toggle_hold_off(self):
        session = _session().with_na("hold_proc", False)
        # hold_proc now counts with score 0: 325 / 500 * 100
        self.assertEqual(session.compliance(), 65.0)

    def test_with_comment_and_agreed_action(self):
        session = _session().with_comment("greeting", "Updated.").with_agreed_action("Retrain on ID&V")
        self.assertEqual(session.comments["greeting"], "Updated.")
        self.assertEqual(session.agreed_action, "Retrain on ID&V")

    def test_session_is_frozen(self):
        with self.assertRaises(Exception):
            _session().agent_name = "Other"  # type: ignore[misc]

    def test_to_dict_from_dict_round_trip(self):
        session = _session().with_agreed_action("Coach on hold etiquette")
        self.assertEqual(AuditSession.from_dict(session.to_dict()), session)

    def test_from_dict_fills_missing_criteria(self):
        session = AuditSession.from_dict({"agent_name": "Jane", "scores": {"greeting": 5}})
        self.assertEqual(session.scores["greeting"], 5)
        self.assertEqual(session.scores["closure"], 0)
        self.assertEqual(session.comments["closure"], PENDING_COMMENT)

    def test_review_date_normalised(self):
        self.assertEqual(parse_review_date(" 2026-10-17 "), "2026-10-17")
        self.assertEqual(AuditSession.new("Jane", "").review_date, parse_review_date(None))

    def test_review_date_rejects_non_iso(self):
        for bad in ('x";evil=1', "17/10/2026", "2026-13-01"):
            with self.assertRaises(ValueError):
                AuditSession.new("Jane", bad)

    def test_from_dict_rejects_bad_review_date(self):
        with self.assertRaises(ValueError):
            AuditSession.from_dict({"agent_name": "Jane", "review_date": "yesterday"})


# ===================================================================
# 2. Report assembly
# ===================================================================


class TestBuildReport(unittest.TestCase):

    def setUp(self):
        self.report = build_report(_session())

    def test_overall(self):
        self.assertEqual(self.report["overall_percentage"], 72.2)
        self.assertEqual(self.report["overall_display"], "72.2%")

    def test_rows(self):
        rows = self.report["criteria"]
        self.assertEqual([r["id"] for r in rows], [c.id for c in CRITERIA])
        hold = rows[3]
        self.assertTrue(hold["not_applicable"])
        self.assertTrue(hold["excluded"])
        self.assertEqual(hold["weight"], 10)

    def test_comment_segments(self):
        segments = self.report["criteria"][0]["comment_segments"]
        markers = [s for s in segments if s["type"] == "timestamp"]
        self.assertEqual(len(markers), 1)
        self.assertEqual(markers[0]["offset_seconds"], 30)

    def test_narrative_segments(self):
        summary = self.report["executive_summary"]
        offsets = [s["offset_seconds"] for s in summary["segments"] if s["type"] == "timestamp"]
        self.assertEqual(offsets, [5, 80])
        self.assertEqual(len(self.report["detailed_improvements"]), 2)
        self.assertEqual(self.report["detailed_improvements"][1]["segments"],
                         [{"type": "text", "value": "Rushed closure."}])

    def test_chart_values(self):
        self.assertEqual(self.report["chart_values"], [5, 4, 3, 0, 5, 4, 5, 2])

    def test_invalid_override_raises(self):
        session = AuditSession.from_dict({"agent_name": "Jane", "scores": {"greeting": 9}})
        with self.assertRaises(ValidationError):
            build_report(session)


# ===================================================================
# 3. CSV export
# ===================================================================


class TestCsvExport(unittest.TestCase):

    def setUp(self):
        session = _session().with_comment("greeting", 'Said "hello" at [00:05], then paused.')
        self.session = session
        self.lines = export_csv(session).split("\n")

    def test_line_count(self):
        # analyst line + header + 8 criteria + summary
        self.assertEqual(len(self.lines), 11)

    def test_analyst_line(self):
        self.assertEqual(self.lines[0], 'Analyst,"Jane Doe",Date,2026-10-17')

    def test_header(self):
        self.assertEqual(self.lines[1], "Criteria,Weight,Score,Comments")

    def test_quotes_doubled(self):
        self.assertEqual(
            self.lines[2],
            'Greeting & Introduction,5%,5,"Said ""hello"" at [00:05], then paused."',
        )

    def test_na_row(self):
        self.assertEqual(
            self.lines[5],
            'Hold Procedure,10%,N/A,"Hold Procedure noted at [00:30]."',
        )

    def test_summary_row(self):
        self.assertEqual(
            self.lines[-1],
            'OVERALL SCORE,,72.2%,"Call started well at [00:05]. Issues at [01:20]."',
        )

    def test_filename(self):
        self.assertEqual(export_filename(self.session), "Audit_Jane_Doe_2026-10-17.csv")

    def test_filename_strips_unsafe_characters(self):
        session = AuditSession.new("../evil name", "2026-10-17")
        self.assertEqual(export_filename(session), "Audit_.._evil_name_2026-10-17.csv")

    def test_analyst_name_with_comma_stays_in_one_column(self):
        session = AuditSession.new('Doe, "JJ" Jane', "2026-10-17")
        first = export_csv(session).split("\n")[0]
        self.assertEqual(first, 'Analyst,"Doe, ""JJ"" Jane",Date,2026-10-17')

    def test_filename_non_ascii_name(self):
        session = AuditSession.new("李雷", "2026-10-17")
        self.assertEqual(export_filename(session), "Audit_unknown_2026-10-17.csv")
        session = AuditSession.new("José Núñez", "2026-10-17")
        self.assertEqual(export_filename(session), "Audit_Jos_N_ez_2026-10-17.csv")

    def test_content_disposition_is_latin1_safe(self):
        header = content_disposition(AuditSession.new("李雷", "2026-10-17"))
        header.encode("latin-1")
        self.assertIn('filename="Audit_unknown_2026-10-17.csv"', header)
        self.assertIn("filename*=UTF-8''Audit_%E6%9D%8E%E9%9B%B7_2026-10-17.csv", header)


if __name__ == "__main__":
    unittest.main()
