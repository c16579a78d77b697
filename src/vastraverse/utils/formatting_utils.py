from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from vastraverse.exceptions import ValidationError


class FormattingUtils:
    """
    Money conversion and display helpers.

    Amounts live in the database as integer paise ("cents"); the API speaks
    rupees. All conversions go through Decimal so 0.1 + 0.2 style float
    errors never reach a stored total.
    """

    CURRENCY_SYMBOL = "₹"

    @classmethod
    def to_cents(cls, amount: Union[int, float, str, Decimal]) -> int:
        """
        Convert a rupee amount to integer paise.

        Examples:
            to_cents(1299) -> 129900
            to_cents("19.99") -> 1999
        """
        try:
            value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValidationError(f"Invalid amount: {amount}")
        return int(value * 100)

    @classmethod
    def from_cents(cls, amount_cents: int) -> float:
        return float(Decimal(int(amount_cents)) / 100)

    @classmethod
    def group_indian(cls, whole: int) -> str:
        """
        Group digits the Indian way: last three, then pairs.

        Examples:
            group_indian(1234567) -> "12,34,567"
        """
        digits = str(whole)
        if len(digits) <= 3:
            return digits
        head, tail = digits[:-3], digits[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        return ",".join(pairs) + "," + tail

    @classmethod
    def format_money(cls, amount_cents: int, include_symbol: bool = True) -> str:
        """
        Format paise for display in en-IN style.

        Examples:
            format_money(129950) -> "₹1,299.50"
            format_money(12345678900) -> "₹12,34,56,789.00"
        """
        sign = "-" if amount_cents < 0 else ""
        whole, paise = divmod(abs(int(amount_cents)), 100)
        formatted = f"{cls.group_indian(whole)}.{paise:02d}"
        if include_symbol:
            formatted = f"{cls.CURRENCY_SYMBOL}{formatted}"
        return f"{sign}{formatted}"
