"""
QUOTE PRICING & PAYMENT ALLOCATION ENGINE
"""

from .cache import CalculationCache
from .editor import QuoteEditor
from .models import Deposit, DoorRow, LineItem, PricingMode, QuoteCategory, QuoteInputs, QuoteTotals
from .processor import (
    QuoteProcessor,
    calculate_case_totals,
    calculate_door_totals,
    calculate_furniture_totals,
    calculate_hardware_totals,
    calculate_stairs_totals,
    clear_calculation_cache,
    memoized_calculation,
    process_quote_from_dict,
    process_quote_from_json,
)

__all__ = [
    'QuoteProcessor',
    'QuoteEditor',
    'CalculationCache',
    'QuoteInputs',
    'QuoteTotals',
    'LineItem',
    'DoorRow',
    'Deposit',
    'PricingMode',
    'QuoteCategory',
    'calculate_door_totals',
    'calculate_furniture_totals',
    'calculate_stairs_totals',
    'calculate_hardware_totals',
    'calculate_case_totals',
    'memoized_calculation',
    'clear_calculation_cache',
    'process_quote_from_dict',
    'process_quote_from_json',
]
