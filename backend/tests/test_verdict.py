"""Tests for the VIN verdict generator."""

import pytest

from carintel.schemas.analysis import HISTORY_UNAVAILABLE, MaintenanceEvent, Recall
from carintel.services.verdict import generate_verdict, recommend

RECORD = MaintenanceEvent(date="03/14/2019", mileage=24310, description="Oil change")
SENTINEL = MaintenanceEvent(error=HISTORY_UNAVAILABLE)


def _recalls(n):
    return [Recall(recall_id=f"24V{i:06d}", affected_component="AIR BAGS") for i in range(n)]


class TestScore:
    def test_clean_vehicle_with_records_caps_at_100(self):
        verdict = generate_verdict([], [RECORD])
        assert verdict.score == 100
        assert verdict.recommendation == "GREAT"
        assert verdict.alerts == []

    def test_recall_penalty(self):
        assert generate_verdict(_recalls(1), []).score == 85
        assert generate_verdict(_recalls(2), []).score == 70

    def test_service_record_bonus(self):
        assert generate_verdict(_recalls(2), [RECORD]).score == 80

    def test_sentinel_earns_no_bonus(self):
        assert generate_verdict(_recalls(2), [SENTINEL]).score == 70

    @pytest.mark.parametrize("records", [[], [RECORD], [SENTINEL]])
    def test_monotonic_in_recall_count(self, records):
        scores = [generate_verdict(_recalls(n), records).score for n in range(15)]
        assert all(a >= b for a, b in zip(scores, scores[1:]))

    def test_clamped_at_zero(self):
        verdict = generate_verdict(_recalls(500), [RECORD])
        assert verdict.score == 0
        assert verdict.recommendation == "CAUTION"


class TestAlerts:
    def test_recall_count_alert(self):
        assert generate_verdict(_recalls(3), []).alerts == ["3 Open Recalls"]

    def test_degraded_recall_check_alert(self):
        verdict = generate_verdict([], [], recalls_degraded=True)
        assert verdict.alerts == ["Recall check unavailable"]
        assert verdict.score == 100


class TestRecommend:
    @pytest.mark.parametrize(
        "score,expected",
        [(100, "GREAT"), (76, "GREAT"), (75, "FAIR"), (51, "FAIR"), (50, "CAUTION"), (0, "CAUTION")],
    )
    def test_thresholds(self, score, expected):
        assert recommend(score) == expected
