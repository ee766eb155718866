"""Tests for allocation math, rebalancing recommendations and tier reports."""

import pytest

from income_stream.exceptions import ValidationError
from income_stream.rebalance import (
    allocation_percentages,
    rebalance_recommendations,
    tier_report,
    tier_summary,
    total_value,
    validate_tier,
)

PORTFOLIO = {"tier1_allocation": 90750, "tier2_allocation": 41250, "tier3_allocation": 8250}


def _holding(holding_id, value, target, shares=100, tier=1, symbol=None):
    return {
        "id": holding_id,
        "current_value": value,
        "target_allocation_percentage": target,
        "shares": shares,
        "stock": {"symbol": symbol or f"S{holding_id}", "name": f"Stock {holding_id}", "tier": tier},
    }


class TestAllocation:
    def test_total_value_excludes_nothing_but_cash(self):
        assert total_value([_holding(1, 100, 0), _holding(2, 300, 0)]) == 400

    def test_percentages_sum_to_100(self):
        holdings = [_holding(1, 123.45, 0), _holding(2, 678.9, 0), _holding(3, 0.01, 0)]
        percentages = allocation_percentages(holdings)
        assert sum(percentages.values()) == pytest.approx(100)
        assert set(percentages) == {1, 2, 3}

    def test_zero_total_gives_zero_allocations(self):
        assert allocation_percentages([_holding(1, 0, 50), _holding(2, 0, 50)]) == {1: 0.0, 2: 0.0}


class TestRecommendations:
    """Tests for the Buy/Sell threshold rule."""

    def test_within_threshold_no_recommendation(self):
        # 24% held against a 25% target
        holdings = [_holding(1, 24, 25), _holding(2, 76, 75)]
        assert rebalance_recommendations(holdings) == []

    def test_beyond_threshold_buy(self):
        # 22% held against a 25% target
        holdings = [_holding(1, 22, 25), _holding(2, 78, 75)]
        recommendations = rebalance_recommendations(holdings)

        buy = next(r for r in recommendations if r["holding_id"] == 1)
        assert buy["action"] == "Buy"
        assert buy["difference"] == pytest.approx(3)

    def test_sell_amount(self):
        holdings = [_holding(1, 50000, 20, shares=1000), _holding(2, 150000, 80, shares=1000)]
        recommendations = rebalance_recommendations(holdings)

        sell = next(r for r in recommendations if r["holding_id"] == 1)
        assert sell["difference"] == pytest.approx(-5)
        assert sell["action"] == "Sell"
        assert sell["amount_to_adjust"] == pytest.approx(10000)
        assert sell["shares_count"] == 200

    def test_sorted_by_largest_drift(self):
        holdings = [_holding(1, 10, 30), _holding(2, 60, 30), _holding(3, 30, 40)]
        differences = [abs(r["difference"]) for r in rebalance_recommendations(holdings)]
        assert differences == sorted(differences, reverse=True)

    def test_custom_threshold(self):
        holdings = [_holding(1, 22, 25), _holding(2, 78, 75)]
        assert rebalance_recommendations(holdings, threshold=5) == []

    def test_zero_total_no_recommendations(self):
        assert rebalance_recommendations([_holding(1, 0, 50)]) == []

    def test_no_shares_gives_zero_share_count(self):
        holdings = [_holding(1, 0, 50, shares=0), _holding(2, 100, 50)]
        rec = next(r for r in rebalance_recommendations(holdings) if r["holding_id"] == 1)
        assert rec["shares_count"] == 0
        assert rec["amount_to_adjust"] == pytest.approx(50)

    def test_includes_stock_fields(self):
        holdings = [_holding(1, 10, 90, symbol="CLM", tier=1), _holding(2, 90, 10, tier=3)]
        rec = next(r for r in rebalance_recommendations(holdings) if r["holding_id"] == 1)
        assert rec["symbol"] == "CLM"
        assert rec["tier"] == 1
        assert rec["target_allocation"] == 90


class TestTiers:
    def test_validate_tier(self):
        assert validate_tier(2) == 2
        with pytest.raises(ValidationError, match="Must be 1, 2, or 3"):
            validate_tier(4)

    def test_tier_report(self):
        report = tier_report(1, [_holding(1, 50000, 0), _holding(2, 30000, 0)], PORTFOLIO)
        assert report["tier_total"] == 80000
        assert report["tier_allocation"] == 90750
        assert report["difference"] == -10750

    def test_tier_summary_splits_by_stock_tier(self):
        holdings = [_holding(1, 100, 0, tier=1), _holding(2, 200, 0, tier=3), _holding(3, 300, 0, tier=3)]
        summary = tier_summary(holdings, PORTFOLIO)

        assert [r["tier"] for r in summary] == [1, 2, 3]
        assert [r["holding_count"] for r in summary] == [1, 0, 2]
        assert summary[2]["tier_total"] == 500
        assert summary[1]["difference"] == -41250
