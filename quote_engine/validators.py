"""
Input Validation for the Quote Pricing Engine

Checks the structure of raw payloads before they are parsed.
Numbers are never rejected here: malformed amounts are coerced to zero by
the models so a half-edited form can still be priced. Raises ValueError with
clear messages for structural problems only.
"""

from .models import PricingMode, QuoteCategory

LINE_ITEM_SECTIONS = ("products", "surcharges", "hardware", "installation")
DOOR_PARTS = ("door", "frame", "trim", "blank")


class InputValidator:
    """Validates quote payloads according to structural rules."""

    def validate(self, data) -> None:
        """
        Run all validations. Raises ValueError if any check fails.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Payload must be a JSON object, got: {type(data).__name__}")

        category = self._validate_category(data.get("category"))

        if category == QuoteCategory.CASES:
            self._validate_item_list("items", data.get("items"))
        else:
            self._validate_quote(data.get("quote"), category)

        if data.get("deposits") is not None:
            self._validate_deposits(data["deposits"])

    def _validate_category(self, category) -> QuoteCategory:
        valid = [c.value for c in QuoteCategory]
        if category not in valid:
            raise ValueError(f"Invalid category: {category}. Must be one of {valid}")
        return QuoteCategory(category)

    def _validate_quote(self, quote, category: QuoteCategory) -> None:
        """Validate quote-level structure."""
        if quote is None:
            raise ValueError("quote is required for this category")
        if not isinstance(quote, dict):
            raise ValueError(f"quote must be an object, got: {type(quote).__name__}")

        for section in LINE_ITEM_SECTIONS:
            self._validate_item_list(section, quote.get(section))

        if category == QuoteCategory.DOORS:
            self._validate_door_rows(quote.get("products") or [])

        mode = quote.get("pricing_mode")
        if mode:
            valid = [m.value for m in PricingMode]
            if mode not in valid:
                raise ValueError(f"Invalid pricing_mode: {mode}. Must be one of {valid}")

    def _validate_item_list(self, section: str, items) -> None:
        if items is None:
            return
        if not isinstance(items, list):
            raise ValueError(f"{section} must be a list, got: {type(items).__name__}")
        for i, item in enumerate(items):
            if not isinstance(item, dict):
                raise ValueError(f"{section}[{i}] must be an object, got: {type(item).__name__}")

    def _validate_door_rows(self, rows: list) -> None:
        for i, row in enumerate(rows):
            for part in DOOR_PARTS:
                value = row.get(part)
                if value is not None and not isinstance(value, dict):
                    raise ValueError(f"products[{i}].{part} must be an object, got: {type(value).__name__}")

    def _validate_deposits(self, deposits) -> None:
        """Deposits need a list of objects with unique ids."""
        if not isinstance(deposits, list):
            raise ValueError(f"deposits must be a list, got: {type(deposits).__name__}")

        seen = set()
        for i, deposit in enumerate(deposits):
            if not isinstance(deposit, dict):
                raise ValueError(f"deposits[{i}] must be an object, got: {type(deposit).__name__}")
            deposit_id = deposit.get("id")
            if deposit_id is None or deposit_id == "":
                raise ValueError(f"deposits[{i}] is missing an id")
            if str(deposit_id) in seen:
                raise ValueError(f"Duplicate deposit id: {deposit_id}")
            seen.add(str(deposit_id))
