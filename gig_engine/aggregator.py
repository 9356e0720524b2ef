"""
Aggregation Engine - Main Orchestrator

Coordinates the aggregation pipeline through discrete, testable steps.
Every call recomputes everything from the gigs it is given.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, Optional

from .calculators import (
    BandBreakdownCalculator,
    DashboardTotalsCalculator,
    EarningsAnalyticsCalculator,
    GigFinancialCalculator,
    GigPartitioner,
    MonthlyBreakdownCalculator,
)
from .models import AggregateSummary, AggregationContext, GigRecord, to_date
from .output import OutputBuilder

logger = logging.getLogger(__name__)


class AggregationEngine:
    """
    Main orchestrator for gig aggregation.

    Implements a clear pipeline pattern:
    1. Calculate every gig
    2. Build Context
    3. Dashboard totals + pending by band
    4. Per-band breakdown
    5. Monthly buckets + seasonal patterns
    6. Earnings analytics + key metrics
    7. Active / handled partition
    """

    def __init__(self):
        self.gig_calculator = GigFinancialCalculator()
        self.totals_calculator = DashboardTotalsCalculator()
        self.band_calculator = BandBreakdownCalculator()
        self.monthly_calculator = MonthlyBreakdownCalculator()
        self.analytics_calculator = EarningsAnalyticsCalculator()
        self.partitioner = GigPartitioner()
        self.output_builder = OutputBuilder()

    def aggregate(self, gigs: Iterable[GigRecord], today: Optional[date] = None) -> AggregateSummary:
        """
        Aggregate a user's gigs into a dashboard summary.

        Args:
            gigs: Sanitized GigRecord objects
            today: Reference date for the active/handled split and the
                current-month pattern. Defaults to the system date.

        Returns:
            AggregateSummary with all totals, groupings and patterns
        """
        return self.aggregate_context(self.build_context(gigs, today))

    def aggregate_context(self, ctx: AggregationContext) -> AggregateSummary:
        """Run the pipeline over an already calculated context."""
        logger.debug(f"Aggregating {len(ctx.gigs)} gigs as of {ctx.today.isoformat()}")

        summary = AggregateSummary()
        summary.totals = self.totals_calculator.calculate(ctx)
        summary.pending_by_band = self.totals_calculator.pending_by_band(ctx)
        summary.per_band = self.band_calculator.calculate(ctx)

        summary.monthly = self.monthly_calculator.calculate(ctx)
        summary.seasonal = self.monthly_calculator.seasonal_patterns(summary.monthly)
        summary.busiest_month = self.monthly_calculator.busiest(summary.seasonal)
        summary.quietest_month = self.monthly_calculator.quietest(summary.seasonal)
        summary.current_month_pattern = self.monthly_calculator.for_month(summary.seasonal, ctx.today.month)

        summary.monthly_earnings = self.analytics_calculator.monthly_earnings(ctx)
        summary.band_performance = self.analytics_calculator.band_performance(ctx)
        summary.highest_month = self.analytics_calculator.highest_month(summary.monthly_earnings)
        summary.best_band = summary.band_performance[0] if summary.band_performance else None
        summary.average_per_gig = self.analytics_calculator.average_per_gig(ctx)
        summary.metrics = self.analytics_calculator.key_metrics(ctx)

        summary.active_gigs, summary.handled_gigs = self.partitioner.partition(ctx)
        return summary

    def aggregate_from_dicts(self, gigs: list[Dict[str, Any]], today=None) -> Dict[str, Any]:
        """
        Aggregate raw gig dicts and return a JSON-ready dict.

        Convenience method for API usage.
        """
        records = [GigRecord.from_dict(g) for g in gigs]
        summary = self.aggregate(records, to_date(today))
        return self.output_builder.summary_to_dict(summary)

    def build_context(self, gigs: Iterable[GigRecord], today: Optional[date] = None) -> AggregationContext:
        """Calculate every gig once; all steps share these results."""
        records = list(gigs)
        return AggregationContext(
            gigs=records,
            calculations=[self.gig_calculator.calculate(g) for g in records],
            today=today or date.today(),
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def aggregate(gigs: Iterable[GigRecord], today: Optional[date] = None) -> AggregateSummary:
    """Aggregate gigs with a fresh engine."""
    return AggregationEngine().aggregate(gigs, today)
