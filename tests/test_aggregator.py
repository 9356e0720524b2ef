"""
Tests for the Aggregation Engine

Covers dashboard totals, pending client payments, per-band breakdowns and
the active/handled split, plus the JSON output of the whole pipeline.
"""

from datetime import date
from decimal import Decimal

import pytest

from gig_engine import AggregationEngine, GigRecord
from gig_engine.aggregator import aggregate

TODAY = date(2026, 10, 19)


def make_gig(gig_id="g1", **overrides) -> GigRecord:
    """1000 performance + 200 technical + 50 bonus, 4 musicians: my earnings 500, owed 750."""
    fields = dict(
        id=gig_id,
        performance_date="2026-03-15",
        performers="The Band",
        performance_fee=1000,
        technical_fee=200,
        manager_bonus_amount=50,
        number_of_musicians=4,
    )
    fields.update(overrides)
    return GigRecord(**fields)


@pytest.fixture
def engine():
    return AggregationEngine()


class TestEmptyInput:
    """No gigs: every total is zero and every pointer is empty."""

    def test_empty_summary(self, engine):
        summary = engine.aggregate([], TODAY)

        assert summary.totals.total_gigs == 0
        assert summary.totals.total_earnings == Decimal("0")
        assert summary.totals.outstanding_to_band == Decimal("0")
        assert summary.pending_by_band == []
        assert summary.per_band == {}
        assert summary.monthly == []
        assert summary.seasonal == []
        assert summary.busiest_month is None
        assert summary.quietest_month is None
        assert summary.current_month_pattern is None
        assert summary.highest_month is None
        assert summary.best_band is None
        assert summary.average_per_gig == Decimal("0")
        assert summary.metrics.avg_gig_size == Decimal("0")
        assert summary.active_gigs == []
        assert summary.handled_gigs == []

    def test_empty_dict_output(self, engine):
        result = engine.aggregate_from_dicts([], "2026-10-19")

        assert result["totals"]["total_gigs"] == 0
        assert result["seasonal"]["busiest_month"] is None
        assert result["analytics"]["best_band"] is None
        assert result["analytics"]["average_per_gig"] == 0.0


class TestDashboardTotals:
    """Summary card totals."""

    def test_paid_and_unpaid_gig_same_band(self, engine):
        gigs = [
            make_gig("paid", payment_received=True),
            make_gig("unpaid"),
        ]
        summary = engine.aggregate(gigs, TODAY)

        assert summary.totals.total_gigs == 2
        assert summary.totals.total_earnings == Decimal("1000.00")
        assert summary.totals.total_earnings_received == Decimal("500.00")
        assert summary.totals.total_earnings_pending == Decimal("500.00")
        assert summary.totals.pending_client_payments == 1

        band = summary.per_band["The Band"]
        assert band.gigs == 2
        assert band.earnings == Decimal("1000.00")
        assert band.received == Decimal("500.00")
        assert band.pending == Decimal("500.00")

    def test_advance_counts_towards_received(self, engine):
        summary = engine.aggregate([make_gig(advance_received_by_manager=100)], TODAY)

        assert summary.totals.total_earnings_received == Decimal("100.00")
        assert summary.totals.total_earnings_pending == Decimal("400.00")
        assert summary.totals.total_earnings_received + summary.totals.total_earnings_pending == summary.totals.total_earnings

    def test_outstanding_only_when_manager_distributes_and_band_unpaid(self, engine):
        gigs = [
            make_gig("owed"),
            make_gig("band-paid", band_paid=True),
            make_gig("direct", manager_handles_distribution=False),
        ]
        summary = engine.aggregate(gigs, TODAY)

        assert summary.totals.outstanding_to_band == Decimal("750.00")
        assert summary.per_band["The Band"].owed == Decimal("750.00")

    def test_charity_gig_counts_but_earns_nothing(self, engine):
        summary = engine.aggregate([make_gig(is_charity=True), make_gig("g2")], TODAY)

        assert summary.totals.total_gigs == 2
        assert summary.totals.total_earnings == Decimal("500.00")
        assert summary.totals.outstanding_to_band == Decimal("750.00")

    def test_convenience_function(self):
        assert aggregate([make_gig()], TODAY).totals.total_earnings == Decimal("500.00")


class TestPendingByBand:
    """Client money still outstanding, grouped by band."""

    def test_whole_gig_amount_minus_advance(self, engine):
        summary = engine.aggregate([make_gig(advance_received_by_manager=300)], TODAY)

        assert len(summary.pending_by_band) == 1
        pending = summary.pending_by_band[0]
        assert pending.band == "The Band"
        assert pending.amount == Decimal("950.00")
        assert pending.count == 1

    def test_advance_above_total_still_counts_gig(self, engine):
        summary = engine.aggregate([make_gig(advance_received_by_manager=5000)], TODAY)

        assert summary.pending_by_band[0].amount == Decimal("0")
        assert summary.pending_by_band[0].count == 1

    def test_paid_gigs_excluded(self, engine):
        summary = engine.aggregate([make_gig(payment_received=True)], TODAY)
        assert summary.pending_by_band == []

    def test_sorted_by_amount_and_unknown_band(self, engine):
        gigs = [
            make_gig("a", performers="Small Combo", performance_fee=100, technical_fee=0, manager_bonus_amount=0),
            make_gig("b", performers="Big Orchestra", performance_fee=5000),
            make_gig("c", performers=""),
        ]
        summary = engine.aggregate(gigs, TODAY)

        assert [p.band for p in summary.pending_by_band] == ["Big Orchestra", "Unknown", "Small Combo"]


class TestPerBand:
    """Per-band drill-down ordering."""

    def test_ordered_by_received(self, engine):
        gigs = [
            make_gig("a", performers="Quiet Trio", payment_received=True, performance_fee=300),
            make_gig("b", performers="Busy Quartet", payment_received=True),
            make_gig("c", performers="Busy Quartet", payment_received=True),
            make_gig("d", performers="Unpaid Duo"),
        ]
        summary = engine.aggregate(gigs, TODAY)

        assert list(summary.per_band) == ["Busy Quartet", "Quiet Trio", "Unpaid Duo"]
        assert summary.per_band["Busy Quartet"].received == Decimal("1000.00")


class TestGigPartition:
    """Active vs handled split relative to an injected today."""

    def test_partition_and_ordering(self, engine):
        gigs = [
            make_gig("future", performance_date="2026-12-01"),
            make_gig("old-done", performance_date="2026-01-10", payment_received=True, band_paid=True),
            make_gig("recent-done", performance_date="2026-09-30", payment_received=True, band_paid=True),
            make_gig("past-unpaid", performance_date="2026-08-01", payment_received=True),
            make_gig("today-done", performance_date=TODAY, payment_received=True, band_paid=True),
            make_gig("undated", performance_date=None),
            make_gig("next-week", performance_date="2026-10-26"),
        ]
        summary = engine.aggregate(gigs, TODAY)

        assert [g.id for g in summary.active_gigs] == ["past-unpaid", "today-done", "next-week", "future", "undated"]
        assert [g.id for g in summary.handled_gigs] == ["recent-done", "old-done"]

    def test_every_gig_in_exactly_one_list(self, engine):
        gigs = [make_gig(str(i), payment_received=i % 2 == 0, band_paid=i % 3 == 0) for i in range(10)]
        summary = engine.aggregate(gigs, TODAY)

        ids = [g.id for g in summary.active_gigs] + [g.id for g in summary.handled_gigs]
        assert sorted(ids) == sorted(g.id for g in gigs)


class TestAggregateFromDicts:
    """JSON-ready output of the whole pipeline."""

    def test_output_shape(self, engine):
        gigs = [
            {
                "id": "1",
                "eventName": "Spring Gala",
                "date": "2026-04-18",
                "performers": "The Band",
                "numberOfMusicians": 4,
                "performanceFee": 1000,
                "technicalFee": 200,
                "managerBonusAmount": 50,
                "paymentReceived": True,
                "bandPaid": True,
            },
            {
                "id": "2",
                "eventName": "Autumn Ball",
                "date": "2026-11-07",
                "performers": "The Band",
                "numberOfMusicians": 4,
                "performanceFee": 1000,
                "technicalFee": 200,
                "managerBonusAmount": 50,
            },
        ]
        result = engine.aggregate_from_dicts(gigs, "2026-10-19")

        assert set(result) == {
            "totals", "pending_by_band", "per_band", "monthly", "seasonal",
            "analytics", "metrics", "active_gigs", "handled_gigs",
        }
        assert result["totals"]["total_earnings"] == 1000.0
        assert result["totals"]["outstanding_to_band"] == 750.0
        assert result["pending_by_band"] == [{"band": "The Band", "amount": 1250.0, "count": 1}]
        assert result["per_band"]["The Band"]["received"] == 500.0
        assert [g["id"] for g in result["active_gigs"]] == ["2"]
        assert result["handled_gigs"][0]["date"] == "2026-04-18"
        assert result["analytics"]["best_band"]["name"] == "The Band"
        assert result["metrics"]["total_client_revenue"] == 1200.0

    def test_bad_date_gig_still_renders_as_undated(self, engine):
        gigs = [
            {"id": "bad", "date": "15/03/2026", "performers": "The Band", "performanceFee": 400},
            {"id": "good", "date": "2026-03-15", "performers": "The Band", "performanceFee": 400},
        ]
        result = engine.aggregate_from_dicts(gigs, "2026-10-19")

        assert result["totals"]["total_gigs"] == 2
        assert result["totals"]["total_earnings"] == 800.0
        assert [g["id"] for g in result["active_gigs"]] == ["good", "bad"]
        assert result["active_gigs"][1]["date"] is None
        assert [m["month"] for m in result["monthly"]] == ["2026-03"]

    def test_huge_fee_does_not_break_dashboard(self, engine):
        gigs = [{"id": "1", "date": "2026-03-15", "performers": "The Band", "performanceFee": "1e30"}]
        result = engine.aggregate_from_dicts(gigs, "2026-10-19")

        assert result["totals"]["total_earnings"] == 1e30


class TestAggregateContext:
    """Aggregating a prebuilt context reuses its calculations."""

    def test_matches_aggregate(self, engine):
        gigs = [make_gig("a", payment_received=True), make_gig("b", performers="Jazz Trio")]
        ctx = engine.build_context(gigs, TODAY)

        assert engine.aggregate_context(ctx) == engine.aggregate(gigs, TODAY)
