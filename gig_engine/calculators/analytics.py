"""
Earnings Analytics Calculator

Ranks months and bands by the manager's own earnings and computes the
headline metrics of the analytics page.
"""

from decimal import Decimal

from ..models import AggregationContext, BandPerformance, KeyMetrics, MonthlyEarnings
from .monthly import month_key


class EarningsAnalyticsCalculator:
    """Earnings trends per month and per band."""

    def monthly_earnings(self, ctx: AggregationContext) -> list[MonthlyEarnings]:
        """My earnings per YYYY-MM, chronological."""
        months: dict[str, MonthlyEarnings] = {}
        for gig, calc in ctx.pairs():
            if gig.performance_date is None:
                continue
            key = month_key(gig.performance_date)
            entry = months.setdefault(key, MonthlyEarnings(month=key))
            entry.earnings += calc.my_earnings
            entry.gigs += 1
        return sorted(months.values(), key=lambda m: m.month)

    def band_performance(self, ctx: AggregationContext) -> list[BandPerformance]:
        """Bands ranked by what the manager earned with them."""
        bands: dict[str, BandPerformance] = {}
        for gig, calc in ctx.pairs():
            entry = bands.setdefault(gig.band, BandPerformance(name=gig.band))
            entry.total_earned += calc.my_earnings
            entry.gigs += 1
        return sorted(bands.values(), key=lambda b: b.total_earned, reverse=True)

    @staticmethod
    def highest_month(monthly: list[MonthlyEarnings]) -> MonthlyEarnings | None:
        return max(monthly, key=lambda m: m.earnings, default=None)

    @staticmethod
    def average_per_gig(ctx: AggregationContext) -> Decimal:
        if not ctx.gigs:
            return Decimal("0")
        total = sum((calc.my_earnings for calc in ctx.calculations), Decimal("0"))
        return total / len(ctx.gigs)

    def key_metrics(self, ctx: AggregationContext) -> KeyMetrics:
        """
        Counts and averages for the analytics page.

        Client revenue counts performance + technical fees of paid gigs.
        Average gig size spreads that revenue over every gig; average
        earnings per gig only over the paid ones.
        """
        metrics = KeyMetrics()

        for gig, calc in ctx.pairs():
            if gig.payment_received:
                metrics.paid_gigs += 1
                metrics.total_client_revenue += gig.performance_fee + gig.technical_fee
                metrics.total_earned += calc.my_earnings
            else:
                metrics.unpaid_gigs += 1

            if gig.band_paid:
                metrics.band_paid_count += 1
            else:
                metrics.band_unpaid_count += 1

            if gig.is_charity:
                metrics.charity_count += 1
            else:
                metrics.regular_count += 1

            if gig.advance_received_by_manager > 0 or gig.advance_to_musicians > 0:
                metrics.gigs_with_advance += 1
                metrics.total_advance_received += gig.advance_received_by_manager
                metrics.total_advance_paid += gig.advance_to_musicians

        if ctx.gigs:
            metrics.avg_gig_size = metrics.total_client_revenue / len(ctx.gigs)
        if metrics.paid_gigs:
            metrics.avg_earnings_per_gig = metrics.total_earned / metrics.paid_gigs

        return metrics
