"""
Output Builder

Converts calculation and aggregation results into JSON-ready dicts.
"""

from decimal import Decimal
from typing import Optional

from .calculators.gig import quantize_money
from .models import (
    AggregateSummary,
    BandPerformance,
    GigCalculation,
    GigRecord,
    MonthlyEarnings,
    SeasonalPattern,
)


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return float(quantize_money(Decimal(value)))


def to_iso(value) -> Optional[str]:
    return value.isoformat() if value else None


class OutputBuilder:
    """Builds the API response bodies."""

    def calculation_to_dict(self, calc: GigCalculation) -> dict:
        return {
            "actual_manager_bonus": to_money(calc.actual_manager_bonus),
            "total_received": to_money(calc.total_received),
            "amount_per_musician": to_money(calc.amount_per_musician),
            "my_earnings": to_money(calc.my_earnings),
            "my_earnings_already_received": to_money(calc.my_earnings_already_received),
            "my_earnings_still_owed": to_money(calc.my_earnings_still_owed),
            "amount_owed_to_others": to_money(calc.amount_owed_to_others),
        }

    def gig_to_dict(self, gig: GigRecord) -> dict:
        """Short gig reference for lists (active/handled)."""
        return {
            "id": gig.id,
            "event_name": gig.event_name,
            "date": to_iso(gig.performance_date),
            "performers": gig.performers,
            "payment_received": gig.payment_received,
            "band_paid": gig.band_paid,
        }

    def summary_to_dict(self, summary: AggregateSummary) -> dict:
        """Construct the complete dashboard response."""
        totals = summary.totals
        return {
            "totals": {
                "total_gigs": totals.total_gigs,
                "total_earnings": to_money(totals.total_earnings),
                "total_earnings_received": to_money(totals.total_earnings_received),
                "total_earnings_pending": to_money(totals.total_earnings_pending),
                "pending_client_payments": totals.pending_client_payments,
                "outstanding_to_band": to_money(totals.outstanding_to_band),
            },
            "pending_by_band": [
                {"band": p.band, "amount": to_money(p.amount), "count": p.count}
                for p in summary.pending_by_band
            ],
            "per_band": {
                band: {
                    "earnings": to_money(t.earnings),
                    "gigs": t.gigs,
                    "received": to_money(t.received),
                    "pending": to_money(t.pending),
                    "owed": to_money(t.owed),
                }
                for band, t in summary.per_band.items()
            },
            "monthly": [
                {
                    "month": b.month,
                    "count": b.count,
                    "total": to_money(b.total),
                    "charity": b.charity,
                    "paid_gigs": b.paid_gigs,
                }
                for b in summary.monthly
            ],
            "seasonal": {
                "patterns": [self._pattern(p) for p in summary.seasonal],
                "busiest_month": self._pattern(summary.busiest_month),
                "quietest_month": self._pattern(summary.quietest_month),
                "current_month": self._pattern(summary.current_month_pattern),
            },
            "analytics": {
                "monthly_earnings": [self._monthly_earnings(m) for m in summary.monthly_earnings],
                "band_performance": [self._band_performance(b) for b in summary.band_performance],
                "highest_month": self._monthly_earnings(summary.highest_month),
                "best_band": self._band_performance(summary.best_band),
                "average_per_gig": to_money(summary.average_per_gig),
            },
            "metrics": self._metrics(summary),
            "active_gigs": [self.gig_to_dict(g) for g in summary.active_gigs],
            "handled_gigs": [self.gig_to_dict(g) for g in summary.handled_gigs],
        }

    def _pattern(self, pattern: Optional[SeasonalPattern]) -> Optional[dict]:
        if pattern is None:
            return None
        return {
            "month": pattern.month,
            "month_num": pattern.month_num,
            "avg_gigs": pattern.avg_gigs,
            "avg_income": to_money(pattern.avg_income),
            "total_gigs": pattern.total_gigs,
        }

    def _monthly_earnings(self, entry: Optional[MonthlyEarnings]) -> Optional[dict]:
        if entry is None:
            return None
        return {
            "month": entry.month,
            "earnings": to_money(entry.earnings),
            "gigs": entry.gigs,
            "average_per_gig": to_money(entry.average_per_gig),
        }

    def _band_performance(self, entry: Optional[BandPerformance]) -> Optional[dict]:
        if entry is None:
            return None
        return {
            "name": entry.name,
            "gigs": entry.gigs,
            "total_earned": to_money(entry.total_earned),
            "average_earnings": to_money(entry.average_earnings),
        }

    def _metrics(self, summary: AggregateSummary) -> dict:
        m = summary.metrics
        return {
            "paid_gigs": m.paid_gigs,
            "unpaid_gigs": m.unpaid_gigs,
            "band_paid_count": m.band_paid_count,
            "band_unpaid_count": m.band_unpaid_count,
            "charity_count": m.charity_count,
            "regular_count": m.regular_count,
            "total_client_revenue": to_money(m.total_client_revenue),
            "total_earned": to_money(m.total_earned),
            "avg_gig_size": to_money(m.avg_gig_size),
            "avg_earnings_per_gig": to_money(m.avg_earnings_per_gig),
            "gigs_with_advance": m.gigs_with_advance,
            "total_advance_received": to_money(m.total_advance_received),
            "total_advance_paid": to_money(m.total_advance_paid),
        }
