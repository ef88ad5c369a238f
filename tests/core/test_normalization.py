"""
Normalization Tests
===================

normalize() is the single coercion boundary for duck-typed bodies.

INVARIANTS TESTED:
1. Never raises, for any input shape
2. No list-valued scores -> None
3. Malformed entries are dropped, good entries kept
4. Duplicate keys: last write wins
"""

import json
import math

import pytest

from culture_engine.contracts.snapshot import ScoreEntry, Snapshot
from culture_engine.core.normalization import normalize, normalize_many


class TestNormalizeShapes:

    @pytest.mark.parametrize("raw", [
        None, 42, "scores", [], (), {"scores": "not an array"},
        {"scores": None}, {"scores": {"caring": 7}}, {}, {"top3": {"observed": ["Caring"]}},
    ])
    def test_unusable_input_returns_none(self, raw):
        assert normalize(raw) is None

    def test_bad_entry_keys_are_dropped(self):
        snapshot = normalize({"scores": [{"key": "caring", "current": 7}, {"key": 123, "current": 5}]})

        assert snapshot == Snapshot(scores=(ScoreEntry("caring", "caring", 7.0),))

    def test_empty_scores_list_is_a_snapshot(self):
        snapshot = normalize({"scores": []})

        assert snapshot is not None
        assert snapshot.scores == ()

    def test_non_mapping_entries_are_skipped(self):
        snapshot = normalize({"scores": [None, "caring", 7, ["caring", 7], {"key": "order", "current": 3}]})

        assert [e.key for e in snapshot.scores] == ["order"]

    def test_blank_key_is_skipped(self):
        snapshot = normalize({"scores": [{"key": "  ", "current": 4}, {"current": 4}]})

        assert snapshot.scores == ()


class TestNormalizeValues:

    @pytest.mark.parametrize("value", [
        float("nan"), float("inf"), -float("inf"), "7", None, True, False, [7], {"v": 7},
    ])
    def test_non_finite_or_non_numeric_values_are_absent(self, value):
        snapshot = normalize({"scores": [{"key": "caring", "current": value}]})

        assert snapshot.scores == ()

    def test_any_finite_number_is_accepted(self):
        snapshot = normalize({"scores": [
            {"key": "caring", "current": -3},
            {"key": "order", "current": 250.5},
        ]})

        assert [e.value for e in snapshot.scores] == [-3.0, 250.5]
        assert all(math.isfinite(e.value) for e in snapshot.scores)

    def test_integer_beyond_float_range_is_absent(self):
        raw = json.loads(
            '{"scores": [{"key": "caring", "current": 1' + "0" * 400 + '}, {"key": "order", "current": 5}]}'
        )

        snapshot = normalize(raw)

        assert [e.key for e in snapshot.scores] == ["order"]
        assert snapshot.score_for("order").value == 5.0

    def test_value_field_is_a_fallback(self):
        snapshot = normalize({"scores": [{"key": "safety", "value": 6}]})

        assert snapshot.scores[0].value == 6.0

    def test_duplicate_keys_last_write_wins(self):
        snapshot = normalize({"scores": [
            {"key": "caring", "current": 2},
            {"key": "order", "current": 5},
            {"key": "caring", "current": 9, "style": "Caring"},
        ]})

        assert [e.key for e in snapshot.scores] == ["caring", "order"]
        assert snapshot.score_for("caring") == ScoreEntry("caring", "Caring", 9.0)


class TestNormalizeLabels:

    def test_label_prefers_style_then_title(self):
        snapshot = normalize({"scores": [
            {"key": "caring", "style": "Caring", "title": "Ignored", "current": 1},
            {"key": "order", "title": "Order", "current": 1},
            {"key": "purpose", "current": 1},
        ]})

        assert [e.label for e in snapshot.scores] == ["Caring", "Order", "purpose"]

    def test_top3_is_trimmed_and_stringified(self):
        snapshot = normalize({
            "scores": [],
            "top3": {"observed": ["  Results ", "", None, 7], "personal": ["Learning"]},
        })

        assert snapshot.top_observed == ("Results", "7")
        assert snapshot.top_personal == ("Learning",)

    def test_null_labels_are_dropped(self):
        snapshot = normalize(json.loads('{"scores": [], "top3": {"personal": [null, " Order "]}}'))

        assert snapshot.top_personal == ("Order",)

    @pytest.mark.parametrize("top3", ["Caring", None, 5, {"observed": "Caring", "personal": {"a": 1}}])
    def test_non_list_top3_becomes_empty(self, top3):
        snapshot = normalize({"scores": [{"key": "caring", "current": 1}], "top3": top3})

        assert snapshot.top_observed == ()
        assert snapshot.top_personal == ()
        assert len(snapshot.scores) == 1

    def test_flat_top_fields_are_accepted(self):
        snapshot = normalize({"scores": [], "topObserved": ["Order"], "topPersonal": ["Caring"]})

        assert snapshot.top_observed == ("Order",)
        assert snapshot.top_personal == ("Caring",)


class TestNormalizeRows:

    def test_nested_snapshot_column(self):
        row = {
            "email": "a@example.com",
            "snapshot": {"scores": [{"key": "results", "current": 8}]},
        }

        assert normalize(row).scores[0].key == "results"

    def test_normalize_many_drops_unusable_records(self):
        snapshots = normalize_many([
            {"scores": [{"key": "caring", "current": 8}]},
            {"scores": "broken"},
            None,
            {"scores": []},
        ])

        assert len(snapshots) == 2
