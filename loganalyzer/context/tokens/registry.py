r"""
Token Registry: field name -> (value type, matching sub-pattern)

Supplies matching fragments to the format compiler and coercion rules to
the parser. Each registry holds its own overrides layered over the
immutable DEFAULT_TOKENS map:

    registry = TokenRegistry()
    registry.register('request-id', r'[a-f0-9\-]{36}')
    registry.get('request-id')   # instance override
    registry.get('status')       # falls back to the default
"""

import re
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Union

from dateutil import parser as date_parser

from loganalyzer.models import Token, ValueType

DEFAULT_PATTERN = r'[^ ]+'

DEFAULT_TOKENS = MappingProxyType({
    token.name: token for token in (
        Token('url', ValueType.TEXT, r'[^ ]+'),
        Token('method', ValueType.TEXT, r'\w+'),
        Token('response-time', ValueType.NUMBER, r'[\d\.]+'),
        Token('datetime', ValueType.TIMESTAMP, r'[\w\-\.\/,:+ ]+'),
        Token('status', ValueType.NUMBER, r'\d+'),
        Token('referrer', ValueType.TEXT, r'[^ ]+'),
        Token('remote-addr', ValueType.TEXT, r'[\w\.,: ]+'),
        Token('remote-user', ValueType.TEXT, r'\w+'),
        Token('http-version', ValueType.NUMBER, r'\d\.\d'),
        Token('user-agent', ValueType.TEXT, r'.*'),
        Token('content-length', ValueType.NUMBER, r'\d+'),
    )
})

# Leading numeric prefix, so "1.5ms" coerces to 1.5
_NUMBER_PREFIX = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')

# Tried before falling back to dateutil
TIMESTAMP_FORMATS = [
    '%d/%b/%Y:%H:%M:%S %z',         # 10/Oct/2000:13:55:36 -0700 (Common Log Format)
    '%a %b %d %H:%M:%S %Y',         # Thu Jun 09 06:07:04 2005 (Apache error log)
    '%Y-%m-%d %H:%M:%S',            # 2025-11-23 14:25:30
    '%Y-%m-%dT%H:%M:%S.%fZ',        # 2025-11-23T14:25:30.123Z
    '%Y-%m-%dT%H:%M:%S%z',          # 2025-11-23T14:25:30+00:00
]

_TYPE_ALIASES = {
    str: ValueType.TEXT,
    int: ValueType.NUMBER,
    float: ValueType.NUMBER,
    datetime: ValueType.TIMESTAMP,
}


def to_number(text: str) -> Optional[float]:
    """Lenient float parse: the longest numeric prefix, or None."""
    try:
        return float(text)
    except ValueError:
        match = _NUMBER_PREFIX.match(text)
        return float(match.group(1)) if match else None


def to_timestamp(text: str) -> Optional[datetime]:
    """Parse a log timestamp in one of the known formats, then via dateutil."""
    text = text.strip()
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return date_parser.parse(text)
    except (ValueError, OverflowError):
        return None


_COERCERS = {
    ValueType.TEXT: lambda text: text,
    ValueType.NUMBER: to_number,
    ValueType.TIMESTAMP: to_timestamp,
}


def coerce(value_type: ValueType, text: Optional[str]) -> Any:
    """Coerce captured text to the token's value type (None stays None)."""
    if text is None:
        return None
    return _COERCERS[value_type](text)


def resolve_value_type(value_type: Union[ValueType, str, type, None]) -> ValueType:
    """Normalize a value type given as enum, enum value or Python type."""
    if value_type is None:
        return ValueType.TEXT
    if isinstance(value_type, ValueType):
        return value_type
    if isinstance(value_type, str):
        return ValueType(value_type.lower())
    if value_type in _TYPE_ALIASES:
        return _TYPE_ALIASES[value_type]
    raise ValueError(f"Unsupported token value type: {value_type!r}")


def pattern_source(pattern: Any) -> str:
    """Regex source of a pattern given as text or a compiled re/regex pattern."""
    if pattern is None:
        return DEFAULT_PATTERN
    return getattr(pattern, 'pattern', pattern)


class TokenRegistry:
    """
    Two-level token lookup: instance overrides, then DEFAULT_TOKENS.

    Registering never mutates the defaults, so registries built for
    different analyzers never see each other's tokens.
    """

    def __init__(self, overrides: Optional[Dict[str, Token]] = None):
        self._tokens: Dict[str, Token] = dict(overrides or {})

    def register(self, name: str, pattern: Any = None,
                 value_type: Union[ValueType, str, type, None] = None) -> Token:
        """
        Add or overwrite a token definition.

        Args:
            name: Field name as referenced in the format (without ':')
            pattern: Sub-pattern (text or compiled), defaults to non-space run
            value_type: ValueType, its value ('number'), or a Python type

        Returns:
            The registered Token
        """
        token = Token(name, resolve_value_type(value_type), pattern_source(pattern))
        self._tokens[name] = token
        return token

    def get(self, name: str) -> Optional[Token]:
        token = self._tokens.get(name)
        if token is None:
            token = DEFAULT_TOKENS.get(name)
        return token

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def names(self) -> List[str]:
        """Effective token names: defaults first, then instance-only tokens."""
        names = list(DEFAULT_TOKENS)
        names.extend(name for name in self._tokens if name not in DEFAULT_TOKENS)
        return names

    def copy(self) -> 'TokenRegistry':
        return TokenRegistry(self._tokens)
