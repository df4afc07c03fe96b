import re
from typing import Optional


_ALLOWED_LOOKUP_KEY = re.compile(r'[A-Za-z0-9_-]+')


def sanitize_lookup_key(raw: Optional[str]) -> Optional[str]:
    """
    Trim a booking id / ticket code and check it against the allow-list.

    Returns:
        The trimmed key, or None when it is empty or contains any character
        outside alphanumerics, hyphen and underscore. None must never reach
        a persistence lookup.
    """
    if not isinstance(raw, str):
        return None
    key = raw.strip()
    if not _ALLOWED_LOOKUP_KEY.fullmatch(key):
        return None
    return key
