"""
Gig Timeline Partition

Splits gigs into those that still need attention and those fully handled.
"""

from datetime import date

from ..models import AggregationContext, GigRecord


class GigPartitioner:
    """Active vs handled partition for the dashboard list."""

    def partition(self, ctx: AggregationContext) -> tuple[list[GigRecord], list[GigRecord]]:
        """
        Return (active, handled).

        Handled: performed strictly before today and both the client and the
        band are paid. Everything else stays active. Active gigs come soonest
        first, handled gigs most recent first. Gigs without a date stay
        active and sort last.
        """
        active = [g for g in ctx.gigs if not self.is_handled(g, ctx.today)]
        handled = [g for g in ctx.gigs if self.is_handled(g, ctx.today)]

        active.sort(key=lambda g: (g.performance_date is None, g.performance_date or date.min))
        handled.sort(key=lambda g: g.performance_date, reverse=True)
        return active, handled

    @staticmethod
    def is_handled(gig: GigRecord, today: date) -> bool:
        if gig.performance_date is None:
            return False
        return gig.performance_date < today and gig.payment_received and gig.band_paid
