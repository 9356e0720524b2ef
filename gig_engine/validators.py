"""
Input Validation for gig create/update requests

The engine itself sanitizes whatever it is given; this is the strict check
applied at the boundary where gigs are created or changed.
Raises ValueError listing every constraint violation.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation

from .models import BONUS_TYPES


def _number(value):
    """Parse a numeric field, None when missing or not a finite number."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


class InputValidator:
    """Validates a raw gig payload according to business rules."""

    MONEY_FIELDS = ("performanceFee", "technicalFee")
    OPTIONAL_MONEY_FIELDS = ("managerBonusAmount", "advanceReceivedByManager", "advanceToMusicians")

    def validate(self, data: dict) -> None:
        """
        Run all validations. Raises ValueError if any check fails.
        """
        errors = self.collect_errors(data)
        if errors:
            raise ValueError("; ".join(f"{field}: {message}" for field, message in errors))

    def collect_errors(self, data: dict) -> list[tuple[str, str]]:
        errors = []
        errors.extend(self._validate_identity(data))
        errors.extend(self._validate_musicians(data))
        errors.extend(self._validate_money(data))
        errors.extend(self._validate_bonus(data))
        errors.extend(self._validate_technical_claim(data))
        return errors

    def _validate_identity(self, data: dict) -> list[tuple[str, str]]:
        errors = []
        event_name = data.get("eventName")
        if not isinstance(event_name, str) or not event_name.strip():
            errors.append(("eventName", "Event name is required."))

        raw_date = data.get("date")
        if not raw_date:
            errors.append(("date", "Date is required."))
        else:
            try:
                datetime.strptime(str(raw_date)[:10], "%Y-%m-%d")
            except ValueError:
                errors.append(("date", "Invalid date format."))

        performers = data.get("performers")
        if not isinstance(performers, str) or not performers.strip():
            errors.append(("performers", "Performers is required."))
        return errors

    def _validate_musicians(self, data: dict) -> list[tuple[str, str]]:
        musicians = _number(data.get("numberOfMusicians"))
        if musicians is None or musicians < 1 or musicians != musicians.to_integral_value():
            return [("numberOfMusicians", "Must be a whole number ≥ 1.")]
        return []

    def _validate_money(self, data: dict) -> list[tuple[str, str]]:
        errors = []
        for field in self.MONEY_FIELDS:
            amount = _number(data.get(field))
            if amount is None or amount < 0:
                errors.append((field, "Must be ≥ 0."))
        for field in self.OPTIONAL_MONEY_FIELDS:
            if data.get(field) in (None, ""):
                continue
            amount = _number(data.get(field))
            if amount is None or amount < 0:
                errors.append((field, "Must be ≥ 0."))
        return errors

    def _validate_bonus(self, data: dict) -> list[tuple[str, str]]:
        bonus_type = data.get("managerBonusType")
        if bonus_type and bonus_type not in BONUS_TYPES:
            return [("managerBonusType", "Must be 'fixed' or 'percentage'.")]

        amount = _number(data.get("managerBonusAmount"))
        if bonus_type == "percentage" and amount is not None and amount > 100:
            return [("managerBonusAmount", "Percentage must be ≤ 100.")]
        return []

    def _validate_technical_claim(self, data: dict) -> list[tuple[str, str]]:
        claim = data.get("technicalFeeClaimAmount")
        if claim in (None, ""):
            return []

        claim_amount = _number(claim)
        technical_fee = _number(data.get("technicalFee")) or Decimal("0")
        if claim_amount is None or claim_amount < 0:
            return [("technicalFeeClaimAmount", "Must be ≥ 0.")]
        if claim_amount > technical_fee:
            return [("technicalFeeClaimAmount", "Cannot exceed the technical fee.")]
        return []
