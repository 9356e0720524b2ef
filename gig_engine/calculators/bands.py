"""
Band Breakdown Calculator

Per-band totals for the dashboard drill-downs and the summary export.
"""

from ..models import AggregationContext, BandTotals
from .totals import owes_band, received_and_pending


class BandBreakdownCalculator:
    """Groups earnings, payment state and band debt by performers."""

    def calculate(self, ctx: AggregationContext) -> dict[str, BandTotals]:
        """Return band -> totals, ordered by amount received (highest first)."""
        bands: dict[str, BandTotals] = {}

        for gig, calc in ctx.pairs():
            totals = bands.setdefault(gig.band, BandTotals(band=gig.band))
            totals.gigs += 1
            totals.earnings += calc.my_earnings

            received, pending = received_and_pending(gig, calc)
            totals.received += received
            totals.pending += pending

            if owes_band(gig):
                totals.owed += calc.amount_owed_to_others

        ordered = sorted(bands.values(), key=lambda t: t.received, reverse=True)
        return {t.band: t for t in ordered}
