"""
Calculators Package

Provides the per-gig calculator and every aggregation step built on it.
"""

from .analytics import EarningsAnalyticsCalculator
from .bands import BandBreakdownCalculator
from .gig import GigFinancialCalculator
from .monthly import MonthlyBreakdownCalculator
from .timeline import GigPartitioner
from .totals import DashboardTotalsCalculator

__all__ = [
    "GigFinancialCalculator",
    "DashboardTotalsCalculator",
    "BandBreakdownCalculator",
    "MonthlyBreakdownCalculator",
    "EarningsAnalyticsCalculator",
    "GigPartitioner",
]
