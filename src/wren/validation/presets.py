"""Ready-made rules for common fields and forms.

Single-field rules are module constants::

    FormController(rules={"email": EMAIL, "password": PASSWORD})

Whole-form rule tables are functions returning a fresh dict, so callers
can add or replace entries without affecting anyone else::

    rules = registration_rules()
    rules["confirm_password"] = combine(rules["confirm_password"], confirmation(...))
"""

import re
from typing import Any

from wren.validation.rules import Rule
from wren.validation.validators import EMAIL_RE, PHONE_RE, URL_RE, past_date

# At least one letter and one digit
_PASSWORD_RE = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d@$!%*#?&]")
_STRONG_PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]")
_NAME_RE = re.compile(r"^[a-zA-Z\s\-']+$")


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def luhn_valid(number: str) -> bool:
    """Luhn checksum over the digits of *number*; spaces and dashes ignored."""
    digits = [int(ch) for ch in re.sub(r"[\s-]", "", number)]
    total = 0
    for index, digit in enumerate(reversed(digits)):
        if index % 2:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def _check_card(value: Any) -> str | None:
    if not luhn_valid(str(value)):
        return "Please enter a valid credit card number"
    return None


def _check_age(value: Any) -> str | None:
    try:
        age = float(value)
    except (TypeError, ValueError):
        return "Age must be a number"
    if age < 18:
        return "You must be at least 18 years old"
    if age > 120:
        return "Please enter a valid age"
    return None


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------

EMAIL = Rule(required=True, pattern=EMAIL_RE, message="Please enter a valid email address")

PASSWORD = Rule(
    required=True,
    min_length=8,
    pattern=_PASSWORD_RE,
    message="Password must be at least 8 characters with at least one letter and one number",
)

STRONG_PASSWORD = Rule(
    required=True,
    min_length=8,
    pattern=_STRONG_PASSWORD_RE,
    message=(
        "Password must contain at least 8 characters with uppercase, "
        "lowercase, number, and special character"
    ),
)

PHONE = Rule(pattern=PHONE_RE, message="Please enter a valid phone number")

URL = Rule(pattern=URL_RE, message="Please enter a valid URL")

CREDIT_CARD = Rule(
    pattern=r"^[0-9]{13,19}$",
    check=_check_card,
    message="Please enter a valid credit card number",
)

ZIP_CODE = Rule(pattern=r"^\d{5}(-\d{4})?$", message="Please enter a valid ZIP code")

NAME = Rule(
    required=True,
    min_length=2,
    max_length=50,
    pattern=_NAME_RE,
    message="Name must contain only letters, spaces, hyphens, and apostrophes",
)

USERNAME = Rule(
    required=True,
    pattern=r"^[a-zA-Z0-9_]{3,20}$",
    message="Username must be 3-20 characters and contain only letters, numbers, and underscores",
)

AGE = Rule(required=True, check=_check_age, message="Please enter a valid age")

PAST_DATE = past_date()

REQUIRED = Rule(required=True, message="This field is required")

NUMERIC = Rule(pattern=r"^\d+$", message="This field must contain only numbers")

DECIMAL = Rule(
    pattern=r"^\d+(\.\d{1,2})?$",
    message="Please enter a valid decimal number (up to 2 decimal places)",
)


# ---------------------------------------------------------------------------
# Form rule tables
# ---------------------------------------------------------------------------


def _person_name(label: str) -> Rule:
    return Rule(
        required=True,
        min_length=2,
        max_length=50,
        pattern=_NAME_RE,
        message=f"{label} must contain only letters, spaces, hyphens, and apostrophes",
    )


def login_rules() -> dict[str, Rule]:
    """Email and password for a sign-in form."""
    return {
        "email": EMAIL,
        "password": Rule(
            required=True,
            min_length=6,
            message="Password must be at least 6 characters",
        ),
    }


def registration_rules() -> dict[str, Rule]:
    """Account sign-up. Password confirmation equality is left to the caller."""
    return {
        "first_name": _person_name("First name"),
        "last_name": _person_name("Last name"),
        "email": EMAIL,
        "password": PASSWORD,
        "confirm_password": Rule(required=True, message="Please confirm your password"),
    }


def contact_rules() -> dict[str, Rule]:
    """Name, email, subject and message for a contact form."""
    return {
        "name": Rule(
            required=True,
            min_length=2,
            max_length=100,
            message="Name must be between 2 and 100 characters",
        ),
        "email": EMAIL,
        "subject": Rule(
            required=True,
            min_length=5,
            max_length=200,
            message="Subject must be between 5 and 200 characters",
        ),
        "message": Rule(
            required=True,
            min_length=10,
            max_length=1000,
            message="Message must be between 10 and 1000 characters",
        ),
    }


def profile_rules() -> dict[str, Rule]:
    """User profile; phone and website are optional."""
    return {
        "first_name": _person_name("First name"),
        "last_name": _person_name("Last name"),
        "email": EMAIL,
        "phone": PHONE,
        "website": URL,
    }
