"""Contact detail checks shared by checkout, registration and the address book."""

import re

_PHONE_CHARS = re.compile(r"^\+?[\d\s\-()]+$")
_POSTCODE = re.compile(r"^\d{5}$")
_FORBIDDEN_EMAIL_CHARS = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def is_valid_email(email: str) -> bool:
    """Structural check: one @, sane local and domain parts, a dotted domain."""
    if not email or any(ch.isspace() for ch in email):
        return False
    if email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)
    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return False
    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        return False
    if "." not in domain_part:
        return False
    if ".." in local_part or ".." in domain_part:
        return False
    if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
        return False
    return not any(ch in email for ch in _FORBIDDEN_EMAIL_CHARS)


def is_valid_phone(number: str) -> bool:
    """Digits with optional leading +, spaces, hyphens and parentheses; 9 to 15 digits."""
    if not number or not _PHONE_CHARS.match(number):
        return False
    digits = re.sub(r"\D", "", number)
    return 9 <= len(digits) <= 15


def is_valid_postcode(postcode: str) -> bool:
    """Malaysian postcodes are exactly five digits."""
    return bool(postcode) and bool(_POSTCODE.match(postcode))
