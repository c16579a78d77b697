import re

from email_validator import EmailNotValidError, validate_email


class ValidationUtils:
    """Input normalization shared by the services and request schemas."""

    MIN_PASSWORD_LENGTH = 6
    MAX_PASSWORD_LENGTH = 128
    MAX_PRICE = 10_000_000  # rupees
    MAX_STOCK = 1_000_000
    MAX_ORDER_QUANTITY = 1_000
    MAX_ID = 2**63 - 1
    PHONE_PATTERN = re.compile(r"^\+?[0-9][0-9\s\-]{6,18}$")

    @classmethod
    def normalize_email(cls, email: str) -> str:
        """
        Normalize an email address for storage and lookups.

        Deliverability (DNS) is not checked; storefront signups must work offline.
        """
        try:
            validated = validate_email(email.strip(), check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email address: {email}") from e
        return validated.normalized.lower()

    @classmethod
    def is_valid_phone(cls, phone: str) -> bool:
        return bool(cls.PHONE_PATTERN.match(phone.strip()))
