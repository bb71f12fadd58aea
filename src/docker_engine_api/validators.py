"""
Parameter validation
Pure checks run by the resource clients before any request is sent
"""

import base64
import binascii
import ipaddress
import json
import re
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import InvalidParameter

NAME_PATTERN = re.compile(r'[A-Za-z0-9][A-Za-z0-9_.-]*')
HEX_ID_PATTERN = re.compile(r'[a-f0-9]{12,64}')
HEX_CHARS_PATTERN = re.compile(r'[a-f0-9]{10,}')
PORT_PATTERN = re.compile(r'\d+/(tcp|udp|sctp)')
ENV_PATTERN = re.compile(r'[A-Za-z_][A-Za-z0-9_]*=.*', re.DOTALL)
IPV4_CIDR_PATTERN = re.compile(r'(?:\d{1,3}\.){3}\d{1,3}/\d{1,2}')
TIMESTAMP_PATTERN = re.compile(r'\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}')
RELATIVE_TIME_PATTERN = re.compile(r'\d+[smhd]')

VALID_SIGNALS = (
    'SIGABRT', 'SIGALRM', 'SIGBUS', 'SIGCHLD', 'SIGCONT', 'SIGFPE', 'SIGHUP',
    'SIGILL', 'SIGINT', 'SIGIO', 'SIGIOT', 'SIGKILL', 'SIGPIPE', 'SIGPOLL',
    'SIGPROF', 'SIGPWR', 'SIGQUIT', 'SIGSEGV', 'SIGSTKFLT', 'SIGSTOP',
    'SIGSYS', 'SIGTERM', 'SIGTRAP', 'SIGTSTP', 'SIGTTIN', 'SIGTTOU',
    'SIGURG', 'SIGUSR1', 'SIGUSR2', 'SIGVTALRM', 'SIGWINCH', 'SIGXCPU', 'SIGXFSZ',
)


def require_non_empty(value: Any, name: str) -> None:
    """Fail if value is None, empty or otherwise falsy"""
    if not value:
        raise InvalidParameter(f"Parameter '{name}' cannot be empty")


def require_string(value: Any, name: str) -> None:
    """Fail if value is not a non-empty string"""
    if value is None or not isinstance(value, str) or value == '':
        raise InvalidParameter(f"Parameter '{name}' must be a non-empty string")


def require_array(value: Any, name: str, allow_empty: bool = True) -> None:
    """
    Fail if value is not a list, tuple or mapping

    Args:
        value: Value to check
        name: Parameter name for the error message
        allow_empty: Accept an empty container
    """
    if not isinstance(value, (list, tuple, dict)):
        raise InvalidParameter(f"Parameter '{name}' must be an array")

    if not allow_empty and not value:
        raise InvalidParameter(f"Parameter '{name}' cannot be an empty array")


def require_mapping(value: Any, name: str, allow_empty: bool = True) -> None:
    """Fail unless value is a mapping (JSON object)"""
    if not isinstance(value, dict):
        raise InvalidParameter(f"Parameter '{name}' must be an array")

    if not allow_empty and not value:
        raise InvalidParameter(f"Parameter '{name}' cannot be an empty array")


def require_int_range(value: Any, name: str, min_value: Optional[int] = None,
                      max_value: Optional[int] = None) -> None:
    """
    Fail if an optional integer lies outside [min_value, max_value]

    None means the field was not supplied and is accepted.
    """
    if value is None:
        return

    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameter(f"Parameter '{name}' must be an integer")

    if min_value is not None and value < min_value:
        raise InvalidParameter(f"Parameter '{name}' must be at least {min_value}")

    if max_value is not None and value > max_value:
        raise InvalidParameter(f"Parameter '{name}' must be at most {max_value}")


def require_enum(value: Any, allowed: Iterable[Any], name: str) -> None:
    """
    Fail if an optional value is not one of the allowed values

    Comparison is type strict: '0' and 0 are different values, and so are
    True and 1.
    """
    if value is None:
        return

    allowed = list(allowed)
    for candidate in allowed:
        if type(candidate) is type(value) and candidate == value:
            return

    allowed_text = ', '.join(str(a) for a in allowed)
    raise InvalidParameter(f"Parameter '{name}' must be one of: {allowed_text}")


def require_id(value: Any, name: str) -> None:
    """
    Fail unless value is a name-like token or a short/full hex content ID

    A lowercase hex string of 10 or more characters mixing digits and letters
    is read as a content ID and must be 12 to 64 characters long. Shorter
    tokens such as 'db1' are plain names.
    """
    require_string(value, name)

    if HEX_CHARS_PATTERN.fullmatch(value) and _mixes_digits_and_letters(value):
        if HEX_ID_PATTERN.fullmatch(value):
            return
        raise InvalidParameter(f"Parameter '{name}' must be a valid Docker ID or name")

    if not NAME_PATTERN.fullmatch(value):
        raise InvalidParameter(f"Parameter '{name}' must be a valid Docker ID or name")


def _mixes_digits_and_letters(value: str) -> bool:
    return any(c.isdigit() for c in value) and any(c.isalpha() for c in value)


def require_name(value: Any, name: str, label: str = 'Name') -> None:
    """Fail unless value starts alphanumeric and holds only [A-Za-z0-9_.-]"""
    require_string(value, name)
    if not NAME_PATTERN.fullmatch(value):
        raise InvalidParameter(
            f"{label} must start with alphanumeric character and contain only "
            f"alphanumeric, underscore, period, or hyphen characters"
        )


def require_json(text: Any, name: str) -> None:
    """Fail if text does not parse as JSON"""
    try:
        json.loads(text)
    except (TypeError, ValueError) as e:
        raise InvalidParameter(f"Parameter '{name}' must be valid JSON: {e}") from e


def require_port(text: Any, name: str) -> None:
    """Fail unless text looks like '80/tcp'"""
    if not isinstance(text, str) or not PORT_PATTERN.fullmatch(text):
        raise InvalidParameter(
            f"Parameter '{name}' must be in format 'port/protocol' (e.g., '80/tcp')"
        )


def require_signal(value: Any, name: str) -> None:
    """Fail unless value is a known signal name or a bare signal number"""
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return
    if isinstance(value, str) and (value in VALID_SIGNALS or re.fullmatch(r'\d+', value)):
        return
    raise InvalidParameter(f"Parameter '{name}' must be a valid signal name or number")


def require_bool(value: Any, name: str) -> None:
    """Fail if an optional value is not a boolean"""
    if value is not None and not isinstance(value, bool):
        raise InvalidParameter(f"Field '{name}' must be a boolean value")


def require_string_map(value: Any, name: str) -> None:
    """Fail unless value maps strings to strings"""
    if not isinstance(value, dict):
        raise InvalidParameter(f"Parameter '{name}' must be an array")
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise InvalidParameter(f"{name} must be string key-value pairs")


def require_string_list(value: Any, name: str, allow_empty: bool = True) -> None:
    """Fail unless value is a list of strings"""
    if not isinstance(value, (list, tuple)):
        raise InvalidParameter(f"Parameter '{name}' must be an array")
    if not allow_empty and not value:
        raise InvalidParameter(f"Parameter '{name}' cannot be an empty array")
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise InvalidParameter(f"{name}[{index}] must be a string")


def require_env_list(value: Any, name: str) -> None:
    """Fail unless every entry is a 'KEY=value' string"""
    require_string_list(value, name)
    for index, entry in enumerate(value):
        if not ENV_PATTERN.fullmatch(entry):
            raise InvalidParameter(f"{name}[{index}] must be in format 'KEY=value'")


def require_keys(mapping: Dict[str, Any], required: Iterable[str], name: str) -> None:
    """Fail if any required key is missing from mapping"""
    for key in required:
        if key not in mapping or mapping[key] is None:
            raise InvalidParameter(f"Field '{key}' is required in {name}")


def require_base64(value: Any, name: str) -> None:
    """
    Fail unless value is canonical base64 text

    The value is decoded and re-encoded; anything that does not survive the
    round trip unchanged is rejected.
    """
    if not isinstance(value, str):
        raise InvalidParameter(f"{name} must be a string")
    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidParameter(f"{name} must be base64 encoded") from e
    if base64.b64encode(decoded).decode('ascii') != value:
        raise InvalidParameter(f"{name} must be base64 encoded")


def require_cidr(value: Any, name: str, ipv4_only: bool = False) -> None:
    """Fail unless value is a subnet in CIDR notation (or a bare address)"""
    if not isinstance(value, str):
        raise InvalidParameter(f"{name} must be a valid CIDR notation")
    if ipv4_only:
        if not IPV4_CIDR_PATTERN.fullmatch(value):
            raise InvalidParameter(f"{name} must be a valid CIDR notation")
        return
    try:
        ipaddress.ip_network(value, strict=False)
    except ValueError as e:
        raise InvalidParameter(f"Invalid subnet format in {name}") from e


def require_ip(value: Any, name: str, version: int = 4) -> None:
    """Fail unless value is an IP address of the given version"""
    try:
        address = ipaddress.ip_address(value)
    except ValueError as e:
        raise InvalidParameter(f"Invalid IPv{version} address format in {name}") from e
    if address.version != version:
        raise InvalidParameter(f"Invalid IPv{version} address format in {name}")


def require_filters(filters: Any, allowed: Iterable[str], name: str = 'filters') -> Dict[str, Any]:
    """
    Check a filters mapping against an allow-list of keys

    Args:
        filters: Mapping, JSON text encoding a mapping, or None
        allowed: Filter keys the endpoint understands
        name: Parameter name for the error message

    Returns:
        The filters as a mapping (empty when none were given)
    """
    if filters is None or filters == '':
        return {}

    if isinstance(filters, str):
        require_json(filters, name)
        filters = json.loads(filters)

    if not isinstance(filters, dict):
        raise InvalidParameter(f"Parameter '{name}' must be an array")

    allowed = list(allowed)
    for key in filters:
        if key not in allowed:
            raise InvalidParameter(
                f"Invalid filter key '{key}'. Valid keys are: {', '.join(allowed)}"
            )
    return filters


def filter_values(filters: Dict[str, Any], key: str) -> List[Any]:
    """Values of one filter key, whichever shape the caller used"""
    if key not in filters or filters[key] is None:
        return []
    value = filters[key]
    if isinstance(value, dict):
        return list(value.keys())
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def require_filter_enum(filters: Dict[str, Any], key: str, allowed: Iterable[str]) -> None:
    """Fail if any value of filter key is outside allowed"""
    allowed = list(allowed)
    for value in filter_values(filters, key):
        require_enum(value, allowed, f'{key} filter')


def require_filter_bool(filters: Dict[str, Any], key: str) -> None:
    """Fail if any value of filter key is not a boolean"""
    for value in filter_values(filters, key):
        if not isinstance(value, bool):
            raise InvalidParameter(f"Filter '{key}' must be a boolean value")


def require_log_time(value: Any, name: str) -> None:
    """
    Fail unless an optional log bound is a timestamp

    Accepted: integer Unix time, ISO 8601 text ('2024-01-02T03:04:05...')
    or a relative duration ('10m', '2h', ...).
    """
    if value is None:
        return
    if isinstance(value, int) and not isinstance(value, bool):
        return
    if not isinstance(value, str):
        raise InvalidParameter(f"Option '{name}' must be an integer timestamp or string")
    if not TIMESTAMP_PATTERN.match(value) and not RELATIVE_TIME_PATTERN.fullmatch(value):
        raise InvalidParameter(f"Option '{name}' must be a valid timestamp or relative time format")


def require_tail(value: Any, name: str = 'tail') -> None:
    """Fail unless value is 'all', a digit string or a non-negative integer"""
    if value is None or value == 'all':
        return
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise InvalidParameter(f"Option '{name}' must be a non-negative integer")
        return
    if not isinstance(value, str) or not value.isdigit():
        raise InvalidParameter(f"Option '{name}' must be 'all' or a numeric string")
