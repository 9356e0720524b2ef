"""
Financial Report Builder

Builds the period financial report: per-gig rows, summary counts and a
month-by-month breakdown, all from the shared gig calculator.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from .calculators import GigFinancialCalculator
from .models import GigRecord, to_date
from .output import to_iso, to_money

PERIODS = ("month", "quarter", "year", "all")


def period_start(period: str, today: date) -> Optional[date]:
    """First day covered by a named period ending today. None means no limit."""
    if period == "month":
        return today.replace(day=1)
    if period == "quarter":
        return today.replace(month=((today.month - 1) // 3) * 3 + 1, day=1)
    if period == "year":
        return today.replace(month=1, day=1)
    if period == "all":
        return None
    raise ValueError(f"Invalid period: {period}. Must be one of {', '.join(PERIODS)}")


class FinancialReportBuilder:
    """Builds financial reports over a date range."""

    def __init__(self):
        self.calculator = GigFinancialCalculator()

    def build(
        self,
        gigs: Iterable[GigRecord],
        period: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        Build the report.

        An explicit start/end range (inclusive) wins over a named period.
        A named period runs from its start up to today.
        """
        today = today or date.today()
        selected = self._select(list(gigs), period, start_date, end_date, today)
        selected.sort(key=lambda g: g.performance_date or date.min, reverse=True)

        rows = [self._row(gig) for gig in selected]
        return {
            "summary": self._summary(rows),
            "monthly_breakdown": self._monthly_breakdown(rows),
            "gigs": [self._row_to_dict(row) for row in rows],
        }

    def build_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Build from an API payload: {"gigs", "period", "startDate", "endDate", "today"}."""
        return self.build(
            [GigRecord.from_dict(g) for g in data.get("gigs", [])],
            period=data.get("period"),
            start_date=to_date(data.get("startDate")),
            end_date=to_date(data.get("endDate")),
            today=to_date(data.get("today")),
        )

    def _select(self, gigs, period, start_date, end_date, today) -> list[GigRecord]:
        if start_date and end_date:
            lower, upper = start_date, end_date
        elif period:
            lower, upper = period_start(period, today), today
            if lower is None:
                return gigs
        else:
            return gigs

        return [
            g for g in gigs
            if g.performance_date is not None and lower <= g.performance_date <= upper
        ]

    def _row(self, gig: GigRecord) -> dict:
        calc = self.calculator.calculate(gig)
        return {
            "gig": gig,
            "revenue": calc.total_received,
            "my_earnings": calc.my_earnings,
            "owed_to_band": calc.amount_owed_to_others,
        }

    def _summary(self, rows: list[dict]) -> dict:
        total = len(rows)
        charity = sum(1 for r in rows if r["gig"].is_charity)
        client_paid = sum(1 for r in rows if r["gig"].payment_received)
        band_paid = sum(1 for r in rows if r["gig"].band_paid)
        return {
            "total_revenue": to_money(sum((r["revenue"] for r in rows), Decimal("0"))),
            "total_my_earnings": to_money(sum((r["my_earnings"] for r in rows), Decimal("0"))),
            "total_owed_to_band": to_money(sum((r["owed_to_band"] for r in rows), Decimal("0"))),
            "charity_gigs_count": charity,
            "fee_gigs_count": total - charity,
            "total_gigs_count": total,
            "client_paid_count": client_paid,
            "client_unpaid_count": total - client_paid,
            "band_paid_count": band_paid,
            "band_unpaid_count": total - band_paid,
        }

    def _monthly_breakdown(self, rows: list[dict]) -> list[dict]:
        """Totals per month name, in the order months first appear (most recent first)."""
        months: dict[str, dict] = {}
        for row in rows:
            gig_date = row["gig"].performance_date
            if gig_date is None:
                continue
            name = gig_date.strftime("%B %Y")
            entry = months.setdefault(
                name,
                {"month": name, "revenue": Decimal("0"), "my_earnings": Decimal("0"),
                 "owed_to_band": Decimal("0"), "gigs_count": 0},
            )
            entry["revenue"] += row["revenue"]
            entry["my_earnings"] += row["my_earnings"]
            entry["owed_to_band"] += row["owed_to_band"]
            entry["gigs_count"] += 1

        return [
            {
                "month": m["month"],
                "revenue": to_money(m["revenue"]),
                "my_earnings": to_money(m["my_earnings"]),
                "owed_to_band": to_money(m["owed_to_band"]),
                "gigs_count": m["gigs_count"],
            }
            for m in months.values()
        ]

    def _row_to_dict(self, row: dict) -> dict:
        gig = row["gig"]
        return {
            "id": gig.id,
            "event_name": gig.event_name,
            "date": to_iso(gig.performance_date),
            "is_charity": gig.is_charity,
            "client_payment_received": gig.payment_received,
            "band_payment_complete": gig.band_paid,
            "revenue": to_money(row["revenue"]),
            "my_earnings": to_money(row["my_earnings"]),
            "owed_to_band": to_money(row["owed_to_band"]),
        }
