"""
tests/test_audit_result.py
===========================
Audit Result Decoder Tests

Verifies that provider output is decoded into a typed AuditResult, that
optional fields get their defaults, and that malformed output raises
AuditDecodeError instead of reaching the aggregator.
"""

import json
import os
import sys
import unittest

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from callaudit.schemas import (
    DEFAULT_SUMMARY,
    AuditDecodeError,
    AuditResult,
    decode_audit_result,
)


# ===================================================================
# Test fixtures — realistic provider output
# ===================================================================

def _valid_payload() -> dict:
    return {
        "scores": {
            "greeting": 5, "comm_style": 4, "issue_handling": 3, "hold_proc": 0,
            "prof_empathy": 5, "resolution": 4, "closure": 5, "compliance": 2,
        },
        "comments": {
            "greeting": "[00:05] Agent used full greeting.",
            "comm_style": "Clear tone throughout.",
            "issue_handling": "[01:15] Agent interrupted the caller.",
            "hold_proc": "Long silence noted at [02:30].",
            "prof_empathy": "Empathetic at [03:00].",
            "resolution": "Next steps stated.",
            "closure": "Closed well at [04:10].",
            "compliance": "[00:40] Missed security check.",
        },
        "hold_na": True,
        "executive_summary": "Solid call overall; security check missed at [00:40].",
        "detailed_strengths": ["Polite greeting [00:05]."],
        "detailed_improvements": ["Verify identity before account changes [00:40]."],
    }


class TestDecodeValid(unittest.TestCase):

    def test_dict_payload(self):
        result = decode_audit_result(_valid_payload())
        self.assertIsInstance(result, AuditResult)
        self.assertEqual(result.scores["issue_handling"], 3)
        self.assertTrue(result.hold_na)
        self.assertEqual(result.detailed_strengths, ("Polite greeting [00:05].",))

    def test_json_text_payload(self):
        result = decode_audit_result(json.dumps(_valid_payload()))
        self.assertEqual(result.scores["compliance"], 2)

    def test_bytes_payload(self):
        result = decode_audit_result(json.dumps(_valid_payload()).encode("utf-8"))
        self.assertEqual(result.scores["greeting"], 5)

    def test_code_fenced_payload(self):
        raw = "```json\n" + json.dumps(_valid_payload()) + "\n```"
        result = decode_audit_result(raw)
        self.assertEqual(result.scores["greeting"], 5)

    def test_integral_float_score_accepted(self):
        payload = _valid_payload()
        payload["scores"]["greeting"] = 4.0
        result = decode_audit_result(payload)
        self.assertEqual(result.scores["greeting"], 4)
        self.assertIsInstance(result.scores["greeting"], int)

    def test_extra_score_ids_dropped(self):
        payload = _valid_payload()
        payload["scores"]["bonus"] = 5
        result = decode_audit_result(payload)
        self.assertNotIn("bonus", result.scores)
        self.assertEqual(len(result.scores), 8)

    def test_defaults_for_optional_fields(self):
        payload = {"scores": _valid_payload()["scores"]}
        result = decode_audit_result(payload)
        self.assertFalse(result.hold_na)
        self.assertEqual(result.executive_summary, DEFAULT_SUMMARY)
        self.assertEqual(result.detailed_strengths, ())
        self.assertEqual(result.detailed_improvements, ())
        self.assertEqual(set(result.comments.values()), {""})

    def test_null_optional_fields(self):
        payload = _valid_payload()
        payload["hold_na"] = None
        payload["executive_summary"] = None
        payload["detailed_strengths"] = None
        payload["comments"]["closure"] = None
        result = decode_audit_result(payload)
        self.assertFalse(result.hold_na)
        self.assertEqual(result.executive_summary, DEFAULT_SUMMARY)
        self.assertEqual(result.detailed_strengths, ())
        self.assertEqual(result.comments["closure"], "")

    def test_to_dict_round_trip(self):
        result = decode_audit_result(_valid_payload())
        self.assertEqual(decode_audit_result(result.to_dict()), result)


class TestDecodeInvalid(unittest.TestCase):

    def _assert_field(self, payload, field):
        with self.assertRaises(AuditDecodeError) as ctx:
            decode_audit_result(payload)
        self.assertEqual(ctx.exception.field, field)

    def test_not_json(self):
        self._assert_field("this is not json", "$")

    def test_json_array(self):
        self._assert_field("[1, 2, 3]", "$")

    def test_missing_scores(self):
        payload = _valid_payload()
        del payload["scores"]
        self._assert_field(payload, "scores")

    def test_missing_criterion(self):
        payload = _valid_payload()
        del payload["scores"]["closure"]
        self._assert_field(payload, "scores")

    def test_score_out_of_range(self):
        payload = _valid_payload()
        payload["scores"]["greeting"] = 7
        self._assert_field(payload, "scores.greeting")

    def test_score_negative(self):
        payload = _valid_payload()
        payload["scores"]["greeting"] = -1
        self._assert_field(payload, "scores.greeting")

    def test_score_bool(self):
        payload = _valid_payload()
        payload["scores"]["closure"] = True
        self._assert_field(payload, "scores.closure")

    def test_score_fractional(self):
        payload = _valid_payload()
        payload["scores"]["resolution"] = 3.5
        self._assert_field(payload, "scores.resolution")

    def test_score_string(self):
        payload = _valid_payload()
        payload["scores"]["resolution"] = "4"
        self._assert_field(payload, "scores.resolution")

    def test_comments_not_object(self):
        payload = _valid_payload()
        payload["comments"] = ["nope"]
        self._assert_field(payload, "comments")

    def test_comment_not_string(self):
        payload = _valid_payload()
        payload["comments"]["greeting"] = 5
        self._assert_field(payload, "comments.greeting")

    def test_hold_na_not_bool(self):
        payload = _valid_payload()
        payload["hold_na"] = "yes"
        self._assert_field(payload, "hold_na")

    def test_summary_not_string(self):
        payload = _valid_payload()
        payload["executive_summary"] = ["a"]
        self._assert_field(payload, "executive_summary")

    def test_strengths_not_list(self):
        payload = _valid_payload()
        payload["detailed_strengths"] = "Polite greeting."
        self._assert_field(payload, "detailed_strengths")

    def test_improvement_item_not_string(self):
        payload = _valid_payload()
        payload["detailed_improvements"] = ["ok", 3]
        self._assert_field(payload, "detailed_improvements[1]")


if __name__ == "__main__":
    unittest.main()
