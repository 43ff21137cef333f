"""
Utility functions
"""
import re
import time
import uuid
from datetime import datetime, date
from typing import Optional, Union


def parse_date(date_string: str) -> Optional[datetime]:
    """
    Parse a date string

    Args:
        date_string: date string

    Returns:
        datetime or None
    """
    # Supported formats
    date_formats = [
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d",
        "%Y/%m/%d",
        "%d/%m/%Y",
    ]

    for fmt in date_formats:
        try:
            return datetime.strptime(date_string, fmt)
        except ValueError:
            continue

    return None


def format_date(value: Union[datetime, date], format_string: str = "%Y-%m-%d") -> str:
    """
    Format a date

    Args:
        value: datetime or date
        format_string: strftime format

    Returns:
        formatted string
    """
    return value.strftime(format_string)


def is_blank(value: Optional[str]) -> bool:
    """True when the value is None, empty or whitespace only"""
    return value is None or not str(value).strip()


def mask_personal_info(text: str, mask_char: str = "*") -> str:
    """
    Mask personal data in free text

    Args:
        text: original text
        mask_char: mask character

    Returns:
        masked text
    """
    # Phone numbers (077-123-4567 -> 077-***-4567)
    text = re.sub(r'(\d{3})-(\d{3})-(\d{4})', r'\1-***-\3', text)

    # Emails (user@example.com -> use***@example.com)
    text = re.sub(r'(\w{1,3})(\w*)(@\w+\.\w+)', r'\1' + mask_char * 3 + r'\3', text)

    # NIC numbers (old 9 digits + V/X, new 12 digits)
    text = re.sub(r'\b(\d{4})\d{5}([VvXx])\b', r'\1*****\2', text)
    text = re.sub(r'\b(\d{4})\d{8}\b', r'\1********', text)

    return text


def generate_uuid() -> str:
    """
    Generate a UUID

    Returns:
        UUID string
    """
    return str(uuid.uuid4())


def timestamp_suffix(length: int = 6) -> str:
    """
    Last digits of the current epoch time in milliseconds

    Args:
        length: number of digits

    Returns:
        digit string
    """
    return str(int(time.time() * 1000))[-length:]
