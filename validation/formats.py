"""
String format predicates and date parsing used by the leaf validators.
"""
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
import ipaddress
import re
from typing import Callable, Dict, Optional, Tuple

EMAIL_RE = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
URL_RE = re.compile(r"^https?://[a-zA-Z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+$")
UUID_RE = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$')
BASE64_RE = re.compile(r'^[A-Za-z0-9+/]*={0,2}$')
HEX_RE = re.compile(r'^[0-9a-fA-F]+$')
CUID_RE = re.compile(r'^c[0-9a-z]{24}$')
CUID2_RE = re.compile(r'^[a-z][0-9a-z]{23,31}$')
# Crockford base32: no I, L, O or U
ULID_RE = re.compile(r'^[0-9A-HJKMNP-TV-Z]{26}$')
NANOID_RE = re.compile(r'^[A-Za-z0-9_-]{10,64}$')


def is_email(value: str) -> bool:
    return EMAIL_RE.match(value) is not None


def is_url(value: str) -> bool:
    return URL_RE.match(value) is not None


def is_uuid(value: str) -> bool:
    return UUID_RE.match(value.lower()) is not None


def is_ipv4(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def is_ipv6(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return '%' not in value


def is_ip(value: str) -> bool:
    return is_ipv4(value) or is_ipv6(value)


def is_base64(value: str) -> bool:
    return bool(value) and len(value) % 4 == 0 and BASE64_RE.match(value) is not None


def is_hex(value: str) -> bool:
    return HEX_RE.match(value) is not None


def is_cuid(value: str) -> bool:
    return CUID_RE.match(value) is not None


def is_cuid2(value: str) -> bool:
    return CUID2_RE.match(value) is not None


def is_ulid(value: str) -> bool:
    return ULID_RE.match(value) is not None


def is_nanoid(value: str) -> bool:
    return NANOID_RE.match(value) is not None


# Checked in this order; the first failing format is reported.
STRING_FORMATS: Dict[str, Tuple[Callable[[str], bool], str]] = {
    'email': (is_email, "Invalid email format"),
    'url': (is_url, "Invalid URL format"),
    'uuid': (is_uuid, "Invalid UUID format"),
    'ip': (is_ip, "Invalid IP address"),
    'ipv4': (is_ipv4, "Invalid IPv4 address"),
    'ipv6': (is_ipv6, "Invalid IPv6 address"),
    'base64': (is_base64, "Invalid base64 string"),
    'hex': (is_hex, "Invalid hexadecimal string"),
    'cuid': (is_cuid, "Invalid CUID format"),
    'cuid2': (is_cuid2, "Invalid CUID2 format"),
    'ulid': (is_ulid, "Invalid ULID format"),
    'nanoid': (is_nanoid, "Invalid Nanoid format"),
}

DATE_FORMATS = (
    '%Y-%m-%d',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%dT%H:%M:%S',
    '%m/%d/%Y',
    '%m/%d/%Y %H:%M:%S',
    '%d-%m-%Y',
    '%d-%m-%Y %H:%M:%S',
    '%A, %d-%b-%y %H:%M:%S %Z',
)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_datetime(value) -> Optional[datetime]:
    """Convert ``datetime``/``date`` instances to an aware ``datetime``."""
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return None


def parse_date(text: str) -> Optional[datetime]:
    """
    Parse a date string in one of the accepted layouts.

    Tries ISO-8601 / RFC 3339 first, then RFC 2822 style dates, then the
    explicit ``DATE_FORMATS``. Returns ``None`` when nothing matches.
    """
    candidate = text.strip()
    if not candidate:
        return None

    iso = candidate[:-1] + '+00:00' if candidate.endswith(('Z', 'z')) else candidate
    try:
        return ensure_aware(datetime.fromisoformat(iso))
    except ValueError:
        pass

    try:
        return ensure_aware(parsedate_to_datetime(candidate))
    except (TypeError, ValueError, IndexError):
        pass

    for layout in DATE_FORMATS:
        try:
            return ensure_aware(datetime.strptime(candidate, layout))
        except ValueError:
            continue
    return None
