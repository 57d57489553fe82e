"""Sensitive field detection and value masking."""
import re
from typing import Any

from datamapper.schema.values import to_text


class SensitiveFieldDetector:
    """Classifies field names as sensitive and masks their values."""

    SENSITIVE_KEYWORDS = (
        "ssn", "social", "password", "pass", "pin", "cvv", "card", "credit",
        "phone", "mobile", "telephone", "email", "mail", "dob", "birth",
        "address", "street", "zip", "postcode", "account", "iban", "swift",
    )

    EMAIL_KEYWORDS = ("email", "mail")

    # Compiled once; whole-word matches only ("compass" is not "pass")
    SENSITIVE_PATTERN = re.compile(r'\b(' + "|".join(SENSITIVE_KEYWORDS) + r')\b', re.IGNORECASE)
    EMAIL_PATTERN = re.compile(r'\b(' + "|".join(EMAIL_KEYWORDS) + r')\b', re.IGNORECASE)

    NULL_MASK = "[NULL]"

    @classmethod
    def is_sensitive(cls, field_name: str) -> bool:
        if not field_name:
            return False
        return cls.SENSITIVE_PATTERN.search(field_name) is not None

    @classmethod
    def is_email_field(cls, field_name: str) -> bool:
        if not field_name:
            return False
        return cls.EMAIL_PATTERN.search(field_name) is not None

    @classmethod
    def mask_value(cls, value: Any, is_email: bool = False) -> str:
        """
        Mask the rendered form of a value

        - null/empty -> "[NULL]"
        - email fields keep the domain: "ada@example.org" -> "a***a@example.org"
        - anything else keeps first and last character: "123456789" -> "1***9"
        """
        text = to_text(value)
        if not text:
            return cls.NULL_MASK

        if is_email and "@" in text:
            return cls._mask_email(text)

        if len(text) <= 2:
            return "**"
        return f"{text[0]}***{text[-1]}"

    @classmethod
    def mask_for_field(cls, field_name: str, value: Any) -> str:
        return cls.mask_value(value, is_email=cls.is_email_field(field_name))

    @staticmethod
    def _mask_email(email: str) -> str:
        user, domain = email.split("@", 1)
        if len(user) <= 2:
            return f"***@{domain}"
        return f"{user[0]}***{user[-1]}@{domain}"
