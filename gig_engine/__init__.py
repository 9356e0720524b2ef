"""
GIG LEDGER ENGINE
Earnings calculation and aggregation for band managers
"""

from .aggregator import AggregationEngine
from .calculators import GigFinancialCalculator
from .models import AggregateSummary, GigCalculation, GigRecord

__all__ = ['AggregationEngine', 'GigFinancialCalculator', 'GigRecord', 'GigCalculation', 'AggregateSummary']
