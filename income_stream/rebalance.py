"""
Rebalance - Allocation math for holdings and tiers.

Pure functions over holding records (with the joined stock under
'stock'). Cash reserve is never part of total_value here; the portfolio
service adds it to the report separately.
"""

from income_stream.config.tiers import TIERS
from income_stream.exceptions import ValidationError

DEFAULT_THRESHOLD_PCT = 1.0


def total_value(holdings: list[dict]) -> float:
    return sum(h.get("current_value") or 0.0 for h in holdings)


def allocation_percentages(holdings: list[dict]) -> dict[int, float]:
    """Holding id -> share of total value in percent. All zero when nothing is held."""
    total = total_value(holdings)
    if total <= 0:
        return {h["id"]: 0.0 for h in holdings}
    return {h["id"]: (h.get("current_value") or 0.0) / total * 100 for h in holdings}


def rebalance_recommendations(holdings: list[dict], threshold: float = DEFAULT_THRESHOLD_PCT) -> list[dict]:
    """
    Buy/Sell suggestions for holdings whose allocation drifted from target.

    A holding is reported when |target% - current%| exceeds threshold
    percentage points. Results are ordered by the size of the drift,
    largest first.
    """
    total = total_value(holdings)
    if total <= 0:
        return []

    recommendations = []
    for holding in holdings:
        value = holding.get("current_value") or 0.0
        current = value / total * 100
        target = holding.get("target_allocation_percentage") or 0.0
        difference = target - current
        if abs(difference) <= threshold:
            continue

        amount = abs(difference / 100 * total)
        shares = holding.get("shares") or 0.0
        if shares > 0 and value > 0:
            shares_count = round(amount / (value / shares), 2)
        else:
            shares_count = 0

        stock = holding.get("stock") or {}
        recommendations.append(
            {
                "holding_id": holding["id"],
                "symbol": stock.get("symbol"),
                "name": stock.get("name"),
                "tier": stock.get("tier"),
                "current_allocation": current,
                "target_allocation": target,
                "difference": difference,
                "action": "Buy" if difference > 0 else "Sell",
                "amount_to_adjust": amount,
                "shares_count": shares_count,
            }
        )

    recommendations.sort(key=lambda r: abs(r["difference"]), reverse=True)
    return recommendations


def validate_tier(tier: int) -> int:
    if tier not in TIERS:
        raise ValidationError("Invalid tier. Must be 1, 2, or 3.")
    return tier


def tier_target(portfolio: dict, tier: int) -> float:
    """The portfolio's target amount for a tier."""
    return portfolio.get(f"tier{tier}_allocation") or 0.0


def tier_report(tier: int, holdings: list[dict], portfolio: dict) -> dict:
    """Compare a tier's held value with its target. `holdings` must already be the tier's."""
    validate_tier(tier)
    tier_total = total_value(holdings)
    target = tier_target(portfolio, tier)
    return {
        "tier": tier,
        "holdings": holdings,
        "tier_total": tier_total,
        "tier_allocation": target,
        "difference": tier_total - target,
    }


def tier_summary(holdings: list[dict], portfolio: dict) -> list[dict]:
    """tier_report for every tier, splitting one holdings list by stock tier."""
    reports = []
    for tier in TIERS:
        in_tier = [h for h in holdings if (h.get("stock") or {}).get("tier") == tier]
        report = tier_report(tier, in_tier, portfolio)
        report["holding_count"] = len(in_tier)
        reports.append(report)
    return reports
