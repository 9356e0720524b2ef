"""
Monthly Breakdown & Seasonal Patterns

Buckets gigs by calendar month of performance, keeps the latest twelve
months, and folds those into average activity per month of the year.
"""

from decimal import ROUND_HALF_UP, Decimal

from ..models import AggregationContext, MonthlyBucket, SeasonalPattern

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def month_key(value) -> str:
    return f"{value.year:04d}-{value.month:02d}"


class MonthlyBreakdownCalculator:
    """Builds monthly buckets and detects seasonal patterns."""

    MONTHS_RETAINED = 12

    def calculate(self, ctx: AggregationContext) -> list[MonthlyBucket]:
        """
        Bucket gigs by YYYY-MM of their performance date.

        Unpaid gigs count towards the month but not towards its income.
        Returns the most recent 12 months in chronological order.
        """
        buckets: dict[str, MonthlyBucket] = {}

        for gig in ctx.gigs:
            if gig.performance_date is None:
                continue
            key = month_key(gig.performance_date)
            bucket = buckets.setdefault(key, MonthlyBucket(month=key))
            bucket.count += 1
            if gig.is_charity:
                bucket.charity += 1
            if gig.payment_received:
                bucket.paid_gigs += 1
                bucket.total += gig.performance_fee + gig.technical_fee

        latest = sorted(buckets.values(), key=lambda b: b.month, reverse=True)[: self.MONTHS_RETAINED]
        return list(reversed(latest))

    def seasonal_patterns(self, monthly: list[MonthlyBucket]) -> list[SeasonalPattern]:
        """Average gigs and income per calendar month across the years observed."""
        by_calendar_month: dict[int, dict] = {}

        for bucket in monthly:
            month_num = int(bucket.month.split("-")[1])
            data = by_calendar_month.setdefault(month_num, {"count": 0, "total": Decimal("0"), "years": 0})
            data["count"] += bucket.count
            data["total"] += bucket.total
            data["years"] += 1

        patterns = []
        for month_num, data in by_calendar_month.items():
            years = data["years"]
            avg_gigs = Decimal(data["count"]) / years if years else Decimal("0")
            patterns.append(
                SeasonalPattern(
                    month=MONTH_NAMES[month_num - 1],
                    month_num=month_num,
                    avg_gigs=int(avg_gigs.to_integral_value(rounding=ROUND_HALF_UP)),
                    avg_income=data["total"] / years if years else Decimal("0"),
                    total_gigs=data["count"],
                )
            )
        return patterns

    @staticmethod
    def busiest(patterns: list[SeasonalPattern]) -> SeasonalPattern | None:
        # max/min keep the first occurrence on ties
        return max(patterns, key=lambda p: p.avg_gigs, default=None)

    @staticmethod
    def quietest(patterns: list[SeasonalPattern]) -> SeasonalPattern | None:
        return min(patterns, key=lambda p: p.avg_gigs, default=None)

    @staticmethod
    def for_month(patterns: list[SeasonalPattern], month_num: int) -> SeasonalPattern | None:
        return next((p for p in patterns if p.month_num == month_num), None)
