"""
Export Builder

CSV and JSON exports of gigs and their financials. Every number comes from
the same calculator and aggregator the dashboard uses.
"""

import csv
import io
from datetime import date
from typing import Any, Dict, Iterable, Optional

from .aggregator import AggregationEngine
from .calculators.gig import quantize_money
from .models import GigRecord, to_date
from .output import OutputBuilder, to_iso, to_money

EXPORT_TYPES = ("gigs", "summary", "report")

GIG_HEADERS = [
    "Event Name",
    "Date",
    "Band",
    "Performance Fee",
    "Technical Fee",
    "Manager Bonus",
    "Total Received",
    "Your Earnings",
    "Owed to Others",
    "Status",
]

SUMMARY_HEADERS = [
    "Band",
    "Number of Gigs",
    "Total Earnings",
    "Amount Paid",
    "Outstanding",
    "Owed to Band",
]


def _fmt(value) -> str:
    """Two fixed decimals, no currency symbol."""
    return f"{quantize_money(value):.2f}"


def _write_csv(headers: list[str], rows: list[list]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


class ExportBuilder:
    """Builds export documents from gig records."""

    def __init__(self):
        self.engine = AggregationEngine()
        self.output_builder = OutputBuilder()

    def build(self, export_type: str, gigs: Iterable[GigRecord], today: Optional[date] = None):
        """Dispatch on export type. Returns CSV text or a JSON-ready dict."""
        if export_type == "gigs":
            return self.gigs_csv(gigs)
        if export_type == "summary":
            return self.summary_csv(gigs, today)
        if export_type == "report":
            return self.report_json(gigs, today)
        raise ValueError(f"Invalid export type: {export_type}. Must be one of {', '.join(EXPORT_TYPES)}")

    def gigs_csv(self, gigs: Iterable[GigRecord]) -> str:
        """One row per gig with its full breakdown."""
        ctx = self.engine.build_context(gigs)
        rows = []
        for gig, calc in ctx.pairs():
            rows.append([
                gig.event_name,
                to_iso(gig.performance_date) or "",
                gig.performers,
                _fmt(gig.performance_fee),
                _fmt(gig.technical_fee),
                _fmt(calc.actual_manager_bonus),
                _fmt(calc.total_received),
                _fmt(calc.my_earnings),
                _fmt(calc.amount_owed_to_others),
                "Paid" if gig.payment_received else "Pending",
            ])
        return _write_csv(GIG_HEADERS, rows)

    def summary_csv(self, gigs: Iterable[GigRecord], today: Optional[date] = None) -> str:
        """One row per band, taken from the dashboard's per-band breakdown."""
        summary = self.engine.aggregate(gigs, today)
        rows = [
            [t.band, t.gigs, _fmt(t.earnings), _fmt(t.received), _fmt(t.pending), _fmt(t.owed)]
            for t in summary.per_band.values()
        ]
        return _write_csv(SUMMARY_HEADERS, rows)

    def report_json(self, gigs: Iterable[GigRecord], today: Optional[date] = None) -> Dict[str, Any]:
        """Structured report, ready for PDF rendering by a collaborator."""
        ctx = self.engine.build_context(gigs, today)
        summary = self.engine.aggregate_context(ctx)
        return {
            "summary": {
                "total_earnings": to_money(summary.totals.total_earnings),
                "total_owed": to_money(summary.totals.outstanding_to_band),
                "gig_count": summary.totals.total_gigs,
                "band_count": len(summary.per_band),
            },
            "by_band": {
                band: {"gigs": t.gigs, "earnings": to_money(t.earnings), "owed": to_money(t.owed)}
                for band, t in summary.per_band.items()
            },
            "gigs": [
                {
                    "id": gig.id,
                    "event_name": gig.event_name,
                    "date": to_iso(gig.performance_date),
                    "performers": gig.performers,
                    "is_charity": gig.is_charity,
                    "payment_received": gig.payment_received,
                    "band_paid": gig.band_paid,
                    "calc": self.output_builder.calculation_to_dict(calc),
                }
                for gig, calc in ctx.pairs()
            ],
        }

    def build_from_dict(self, data: Dict[str, Any]):
        """Build from an API payload: {"gigs": [...], "type": "gigs"|"summary"|"report", "today"}."""
        gigs = [GigRecord.from_dict(g) for g in data.get("gigs", [])]
        return self.build(data.get("type") or "gigs", gigs, to_date(data.get("today")))
