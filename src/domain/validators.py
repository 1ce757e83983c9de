"""Profile and medicine form validation functions."""
import re
from typing import Optional, Tuple


EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def validate_username(username: str) -> Tuple[bool, str]:
    """
    Validate a username.

    Usernames are 3-30 characters of letters, digits, dots,
    underscores or hyphens.

    Args:
        username: Username to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not username or not username.strip():
        return False, "Username is required"

    username = username.strip()

    if len(username) < 3:
        return False, "Username must be at least 3 characters long"

    if len(username) > 30:
        return False, "Username is too long (max 30 characters)"

    if not re.match(r'^[a-zA-Z0-9._-]+$', username):
        return False, "Username can only contain letters, numbers, dots, underscores, and hyphens"

    return True, ""


def validate_email(email: str) -> Tuple[bool, str]:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not email or not email.strip():
        return False, "Email is required"

    email = email.strip().lower()

    if len(email) > 254:  # RFC 5321
        return False, "Email is too long"

    if not re.match(EMAIL_PATTERN, email) or '..' in email:
        return False, "Invalid email format"

    local_part = email.rsplit('@', 1)[0]
    if local_part.startswith('.') or local_part.endswith('.'):
        return False, "Invalid email format"

    return True, ""


def _parse_number(value, field_name: str) -> Tuple[Optional[float], str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, f"{field_name} is required"
    try:
        return float(value), ""
    except (TypeError, ValueError):
        return None, f"{field_name} must be a number"


def validate_age(age) -> Tuple[bool, str]:
    """Age in years, 1 to 120."""
    number, error = _parse_number(age, "Age")
    if number is None:
        return False, error
    if not number.is_integer():
        return False, "Age must be a whole number"
    if number < 1 or number > 120:
        return False, "Age must be between 1 and 120"
    return True, ""


def validate_height(height) -> Tuple[bool, str]:
    """Height in cm, at least 50."""
    number, error = _parse_number(height, "Height")
    if number is None:
        return False, error
    if number < 50:
        return False, "Height must be at least 50 cm"
    return True, ""


def validate_weight(weight) -> Tuple[bool, str]:
    """Weight in kg, at least 10."""
    number, error = _parse_number(weight, "Weight")
    if number is None:
        return False, error
    if number < 10:
        return False, "Weight must be at least 10 kg"
    return True, ""


def validate_medicine_name(name: str) -> Tuple[bool, str]:
    if not name or len(name.strip()) < 2:
        return False, "Medicine name required"
    return True, ""


def validate_dosage(dosage: str) -> Tuple[bool, str]:
    if not dosage or not dosage.strip():
        return False, "Dosage required"
    return True, ""
