"""
Calculators Package

Provides all calculation components for quote pricing.
"""

from .deposits import DepositAllocator, default_deposits
from .discount import DiscountResolver
from .line_items import LineItemAggregator
from .pricing_mode import PricingModeReconciler

__all__ = [
    "LineItemAggregator",
    "DiscountResolver",
    "PricingModeReconciler",
    "DepositAllocator",
    "default_deposits",
]
