"""
Gig Financial Calculator

Turns one gig's fee, claim and advance fields into its earnings breakdown.
All arithmetic stays in full Decimal precision; rounding to cents with
ROUND_HALF_UP happens once, on the final outputs.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext

from ..models import GigCalculation, GigRecord

ZERO = Decimal("0")


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, halves rounding away from zero."""
    with localcontext() as ctx:
        # room for every integer digit plus the cents
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class GigFinancialCalculator:
    """Calculates the earnings breakdown of a single gig."""

    def calculate(self, gig: GigRecord) -> GigCalculation:
        """
        Calculate the breakdown for one gig.

        Rules:
        - Charity gigs zero every output, whatever the other fields say.
        - The manager bonus sits on top and belongs entirely to the manager.
        - Claiming the performance fee counts the manager in the split;
          not claiming it leaves the whole fee to the other musicians.
        - The technical fee is not split; the manager keeps the claimed part
          and owes the rest.
        - Advances paid to musicians reduce what is still owed to them.
        """
        if gig.is_charity:
            return GigCalculation()

        bonus = self._calculate_bonus(gig)
        total_received = gig.performance_fee + gig.technical_fee + bonus

        amount_per_musician = self._calculate_amount_per_musician(gig)
        perf_share = amount_per_musician if gig.claim_performance_fee else ZERO
        tech_share = self._calculate_technical_share(gig)
        my_earnings = perf_share + tech_share + bonus

        already_received, still_owed = self._split_received(gig, my_earnings)

        owed_to_band = self._calculate_owed_to_band(gig, amount_per_musician)
        owed_for_technical = self._calculate_owed_for_technical(gig)

        return GigCalculation(
            actual_manager_bonus=quantize_money(bonus),
            total_received=quantize_money(total_received),
            amount_per_musician=quantize_money(amount_per_musician),
            my_earnings=quantize_money(my_earnings),
            my_earnings_already_received=quantize_money(already_received),
            my_earnings_still_owed=quantize_money(still_owed),
            amount_owed_to_others=quantize_money(owed_to_band + owed_for_technical),
        )

    def calculate_from_dict(self, data: dict) -> GigCalculation:
        """Calculate from a raw gig dict as returned by the API."""
        return self.calculate(GigRecord.from_dict(data))

    def _calculate_bonus(self, gig: GigRecord) -> Decimal:
        """Manager bonus; a percentage bonus is always taken of the performance fee."""
        if gig.manager_bonus_type == "percentage":
            return gig.performance_fee * (gig.manager_bonus_amount / Decimal("100"))
        return gig.manager_bonus_amount

    def _musicians_in_split(self, gig: GigRecord) -> int:
        if gig.claim_performance_fee:
            return gig.number_of_musicians
        return max(1, gig.number_of_musicians - 1)

    def _calculate_amount_per_musician(self, gig: GigRecord) -> Decimal:
        musicians = self._musicians_in_split(gig)
        if musicians <= 0:
            return ZERO
        return gig.performance_fee / musicians

    def _calculate_technical_share(self, gig: GigRecord) -> Decimal:
        if not gig.claim_technical_fee:
            return ZERO
        if gig.technical_fee_claim_amount is None:
            return gig.technical_fee
        return min(gig.technical_fee_claim_amount, gig.technical_fee)

    def _calculate_owed_to_band(self, gig: GigRecord, amount_per_musician: Decimal) -> Decimal:
        """Shares of the other musicians, net of any advance already paid to them."""
        if gig.number_of_musicians <= 1:
            return ZERO
        owed = (gig.number_of_musicians - 1) * amount_per_musician
        return max(ZERO, owed - gig.advance_to_musicians)

    def _calculate_owed_for_technical(self, gig: GigRecord) -> Decimal:
        if not gig.claim_technical_fee:
            return gig.technical_fee
        if gig.technical_fee_claim_amount is None:
            return ZERO
        return max(ZERO, gig.technical_fee - gig.technical_fee_claim_amount)

    def _split_received(self, gig: GigRecord, my_earnings: Decimal) -> tuple[Decimal, Decimal]:
        """
        Split my earnings into (already received, still owed).

        Once the client has paid, everything counts as received. Before that,
        only the advance the manager actually holds counts, capped at the
        earnings themselves.
        """
        if gig.payment_received:
            return my_earnings, ZERO
        already_received = min(gig.advance_received_by_manager, my_earnings)
        return already_received, my_earnings - already_received
