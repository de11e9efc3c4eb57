"""Syntactic checks for recipients and sender identifiers."""

import re
from typing import Optional

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9_+&*-]+(?:\.[a-zA-Z0-9_+&*-]+)*@(?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{2,7}$"
)

# E.164, leading + optional
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")

PHONE_SEPARATORS = re.compile(r"[\s\-()]")

URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)

MIN_DEVICE_TOKEN_LENGTH = 32


def is_not_blank(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


def is_valid_email(email: Optional[str]) -> bool:
    return email is not None and EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_phone_number(phone_number: Optional[str]) -> bool:
    """Validate a phone number, ignoring spaces, dashes and parentheses."""
    if phone_number is None:
        return False
    cleaned = PHONE_SEPARATORS.sub("", phone_number)
    return PHONE_PATTERN.fullmatch(cleaned) is not None


def is_valid_url(url: Optional[str]) -> bool:
    return url is not None and URL_PATTERN.fullmatch(url) is not None


def is_valid_device_token(token: Optional[str]) -> bool:
    """Basic device token check; real formats depend on the push backend."""
    return is_not_blank(token) and len(token) >= MIN_DEVICE_TOKEN_LENGTH


def is_valid_chat_target(target: Optional[str]) -> bool:
    """A chat target is a #channel name or a webhook URL."""
    if not is_not_blank(target):
        return False
    return target.startswith("#") or is_valid_url(target)
