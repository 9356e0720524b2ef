"""
Domain Models for the Gig Ledger Engine

These dataclasses provide type-safe representations of gigs and of every
structure derived from them. All monetary values use Decimal for precision.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

BONUS_TYPES = ("fixed", "percentage")

# =============================================================================
# SANITIZATION HELPERS
# =============================================================================


def to_amount(value) -> Decimal:
    """Coerce a money value to a non-negative Decimal.

    None, unparsable, NaN and infinite values become 0; negatives clamp to 0.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not amount.is_finite() or amount < 0:
        return Decimal("0")
    return amount


def to_musician_count(value) -> int:
    """Round to a whole musician count, never below 1."""
    amount = to_amount(value)
    return max(1, int(amount.to_integral_value(rounding=ROUND_HALF_UP)))


def to_date(value) -> date | None:
    """Accept date, datetime or an ISO string (YYYY-MM-DD, optionally with a time part)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()


def to_date_or_none(value) -> date | None:
    """Like to_date, but an unparsable date reads as no date at all."""
    try:
        return to_date(value)
    except ValueError:
        return None


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass
class GigRecord:
    """A single booked performance as stored by the persistence layer.

    Construction sanitizes every numeric field, so downstream calculators
    can assume clean, non-negative input.
    """

    id: str
    performance_date: date | None
    performers: str = ""
    event_name: str = ""
    number_of_musicians: int = 1
    manager_performs: bool = True
    performance_fee: Decimal = Decimal("0")
    technical_fee: Decimal = Decimal("0")
    manager_bonus_type: str = "fixed"
    manager_bonus_amount: Decimal = Decimal("0")
    claim_performance_fee: bool = True
    claim_technical_fee: bool = True
    technical_fee_claim_amount: Decimal | None = None  # None = claim it all
    advance_received_by_manager: Decimal = Decimal("0")
    advance_to_musicians: Decimal = Decimal("0")
    payment_received: bool = False
    payment_received_date: date | None = None
    band_paid: bool = False
    band_paid_date: date | None = None
    manager_handles_distribution: bool = True
    is_charity: bool = False
    booking_date: date | None = None
    notes: str | None = None

    def __post_init__(self):
        self.performance_date = to_date(self.performance_date)
        self.booking_date = to_date(self.booking_date)
        self.payment_received_date = to_date(self.payment_received_date)
        self.band_paid_date = to_date(self.band_paid_date)
        self.number_of_musicians = to_musician_count(self.number_of_musicians)
        self.performance_fee = to_amount(self.performance_fee)
        self.technical_fee = to_amount(self.technical_fee)
        self.manager_bonus_amount = to_amount(self.manager_bonus_amount)
        self.advance_received_by_manager = to_amount(self.advance_received_by_manager)
        self.advance_to_musicians = to_amount(self.advance_to_musicians)
        if self.technical_fee_claim_amount is not None:
            self.technical_fee_claim_amount = to_amount(self.technical_fee_claim_amount)
        if self.manager_bonus_type not in BONUS_TYPES:
            self.manager_bonus_type = "fixed"
        self.performers = (self.performers or "").strip()

    @property
    def band(self) -> str:
        """Grouping key used by every per-band aggregation."""
        return self.performers or "Unknown"

    @classmethod
    def from_dict(cls, data: dict) -> "GigRecord":
        claim_amount = data.get("technicalFeeClaimAmount")
        return cls(
            id=str(data.get("id", "")),
            performance_date=to_date_or_none(data.get("date")),
            performers=str(data.get("performers") or ""),
            event_name=str(data.get("eventName") or ""),
            number_of_musicians=data.get("numberOfMusicians", 1),
            manager_performs=data.get("managerPerforms") is not False,
            performance_fee=data.get("performanceFee"),
            technical_fee=data.get("technicalFee"),
            manager_bonus_type=data.get("managerBonusType") or "fixed",
            manager_bonus_amount=data.get("managerBonusAmount"),
            # Claims and distribution default to on unless explicitly disabled
            claim_performance_fee=data.get("claimPerformanceFee") is not False,
            claim_technical_fee=data.get("claimTechnicalFee") is not False,
            technical_fee_claim_amount=claim_amount if claim_amount not in (None, "") else None,
            advance_received_by_manager=data.get("advanceReceivedByManager"),
            advance_to_musicians=data.get("advanceToMusicians"),
            payment_received=bool(data.get("paymentReceived", False)),
            payment_received_date=to_date_or_none(data.get("paymentReceivedDate")),
            band_paid=bool(data.get("bandPaid", False)),
            band_paid_date=to_date_or_none(data.get("bandPaidDate")),
            manager_handles_distribution=data.get("managerHandlesDistribution") is not False,
            is_charity=bool(data.get("isCharity", False)),
            booking_date=to_date_or_none(data.get("bookingDate")),
            notes=data.get("notes"),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass
class GigCalculation:
    """Earnings breakdown for one gig. Always derived, never persisted."""

    actual_manager_bonus: Decimal = Decimal("0")
    total_received: Decimal = Decimal("0")
    amount_per_musician: Decimal = Decimal("0")
    my_earnings: Decimal = Decimal("0")
    my_earnings_already_received: Decimal = Decimal("0")
    my_earnings_still_owed: Decimal = Decimal("0")
    amount_owed_to_others: Decimal = Decimal("0")


@dataclass
class DashboardTotals:
    """Scalar totals shown on the dashboard summary cards."""

    total_gigs: int = 0
    total_earnings: Decimal = Decimal("0")
    total_earnings_received: Decimal = Decimal("0")
    total_earnings_pending: Decimal = Decimal("0")
    pending_client_payments: int = 0
    outstanding_to_band: Decimal = Decimal("0")


@dataclass
class PendingBand:
    """Outstanding client exposure for one band."""

    band: str
    amount: Decimal = Decimal("0")
    count: int = 0


@dataclass
class BandTotals:
    """Per-band drill-down totals."""

    band: str
    earnings: Decimal = Decimal("0")
    gigs: int = 0
    received: Decimal = Decimal("0")
    pending: Decimal = Decimal("0")
    owed: Decimal = Decimal("0")


@dataclass
class MonthlyBucket:
    """Gig activity for one calendar month (key YYYY-MM)."""

    month: str
    count: int = 0
    total: Decimal = Decimal("0")  # fees of paid gigs only
    charity: int = 0
    paid_gigs: int = 0


@dataclass
class SeasonalPattern:
    """Average activity of one calendar month across the years observed."""

    month: str  # "Jan".."Dec"
    month_num: int
    avg_gigs: int
    avg_income: Decimal
    total_gigs: int


@dataclass
class MonthlyEarnings:
    """The manager's own earnings in one month."""

    month: str
    earnings: Decimal = Decimal("0")
    gigs: int = 0

    @property
    def average_per_gig(self) -> Decimal:
        if self.gigs == 0:
            return Decimal("0")
        return self.earnings / self.gigs


@dataclass
class BandPerformance:
    """The manager's earnings ranked per band."""

    name: str
    gigs: int = 0
    total_earned: Decimal = Decimal("0")

    @property
    def average_earnings(self) -> Decimal:
        if self.gigs == 0:
            return Decimal("0")
        return self.total_earned / self.gigs


@dataclass
class KeyMetrics:
    """Headline counts and averages for the analytics page."""

    paid_gigs: int = 0
    unpaid_gigs: int = 0
    band_paid_count: int = 0
    band_unpaid_count: int = 0
    charity_count: int = 0
    regular_count: int = 0
    total_client_revenue: Decimal = Decimal("0")  # fees collected on paid gigs
    total_earned: Decimal = Decimal("0")  # my earnings on paid gigs
    avg_gig_size: Decimal = Decimal("0")
    avg_earnings_per_gig: Decimal = Decimal("0")
    gigs_with_advance: int = 0
    total_advance_received: Decimal = Decimal("0")
    total_advance_paid: Decimal = Decimal("0")


@dataclass
class AggregationContext:
    """
    Holds the gigs, their calculations and the reference date.
    This is the "bag" that flows through the aggregation pipeline.
    """

    gigs: list[GigRecord]
    calculations: list[GigCalculation]
    today: date

    def pairs(self):
        return zip(self.gigs, self.calculations)


@dataclass
class AggregateSummary:
    """Everything a dashboard render needs, recomputed from scratch each call."""

    totals: DashboardTotals = field(default_factory=DashboardTotals)
    pending_by_band: list[PendingBand] = field(default_factory=list)
    per_band: dict[str, BandTotals] = field(default_factory=dict)
    monthly: list[MonthlyBucket] = field(default_factory=list)
    seasonal: list[SeasonalPattern] = field(default_factory=list)
    busiest_month: SeasonalPattern | None = None
    quietest_month: SeasonalPattern | None = None
    current_month_pattern: SeasonalPattern | None = None
    monthly_earnings: list[MonthlyEarnings] = field(default_factory=list)
    band_performance: list[BandPerformance] = field(default_factory=list)
    highest_month: MonthlyEarnings | None = None
    best_band: BandPerformance | None = None
    average_per_gig: Decimal = Decimal("0")
    metrics: KeyMetrics = field(default_factory=KeyMetrics)
    active_gigs: list[GigRecord] = field(default_factory=list)
    handled_gigs: list[GigRecord] = field(default_factory=list)
