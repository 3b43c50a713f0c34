"""Customer tax id (CPF) handling.

A tax id is identified by its digits alone. Formatting characters typed by
the user are stripped; no check-digit validation is performed, so two
entries with identical digits always refer to the same customer.
"""

import re

TAX_ID_LENGTH = 11

_FORMATTING = re.compile(r"[.\-/\s]")
_DIGITS = re.compile(rf"[0-9]{{{TAX_ID_LENGTH}}}")


def normalize_tax_id(value: str) -> str:
    """Strip formatting characters from a tax id.

    The result is not guaranteed to be valid; use :func:`is_valid_tax_id`.

    Examples:
        >>> normalize_tax_id("123.456.789-09")
        '12345678909'
    """
    return _FORMATTING.sub("", value)


def is_valid_tax_id(value: str) -> bool:
    """Check that a tax id has exactly 11 digits once formatting is removed."""
    return _DIGITS.fullmatch(normalize_tax_id(value)) is not None


def format_tax_id(value: str) -> str:
    """Render a tax id as ``000.000.000-00``.

    Values that do not normalize to 11 digits are returned normalized but
    otherwise untouched.
    """
    digits = normalize_tax_id(value)
    if not is_valid_tax_id(digits):
        return digits
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"
