"""
Dashboard Totals Calculator

Rolls per-gig calculations into the scalar dashboard totals and the
outstanding client exposure per band.
"""

from decimal import Decimal

from ..models import AggregationContext, DashboardTotals, GigCalculation, GigRecord, PendingBand


def owes_band(gig: GigRecord) -> bool:
    """True when the manager still has to pay the band for this gig.

    Bands paid directly by a third party are never owed anything by the manager.
    """
    return gig.manager_handles_distribution and not gig.band_paid


def received_and_pending(gig: GigRecord, calc: GigCalculation) -> tuple[Decimal, Decimal]:
    """Split my earnings into the received and pending buckets."""
    if gig.payment_received:
        return calc.my_earnings, Decimal("0")
    return calc.my_earnings_already_received, calc.my_earnings_still_owed


class DashboardTotalsCalculator:
    """Computes the dashboard summary cards."""

    def calculate(self, ctx: AggregationContext) -> DashboardTotals:
        totals = DashboardTotals()

        for gig, calc in ctx.pairs():
            totals.total_gigs += 1
            totals.total_earnings += calc.my_earnings

            received, pending = received_and_pending(gig, calc)
            totals.total_earnings_received += received
            totals.total_earnings_pending += pending

            if not gig.payment_received:
                totals.pending_client_payments += 1

            if owes_band(gig):
                totals.outstanding_to_band += calc.amount_owed_to_others

        return totals

    def pending_by_band(self, ctx: AggregationContext) -> list[PendingBand]:
        """
        Total client money still outstanding, grouped by band.

        This is the whole gig amount minus any advance already in hand,
        not just the manager's own share. Largest exposure first.
        """
        buckets: dict[str, PendingBand] = {}

        for gig, calc in ctx.pairs():
            if gig.payment_received:
                continue
            bucket = buckets.setdefault(gig.band, PendingBand(band=gig.band))
            bucket.amount += max(Decimal("0"), calc.total_received - gig.advance_received_by_manager)
            bucket.count += 1

        return sorted(buckets.values(), key=lambda b: b.amount, reverse=True)
