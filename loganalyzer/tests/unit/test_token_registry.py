"""
Unit tests for the token registry and value coercion
"""

import re
from datetime import datetime, timedelta, timezone

import pytest
import regex

from loganalyzer.models import ValueType
from loganalyzer.context.tokens.registry import (
    DEFAULT_TOKENS,
    TokenRegistry,
    coerce,
    resolve_value_type,
    to_number,
    to_timestamp,
)


class TestDefaultTokens:
    """Built-in token definitions"""

    def test_defaults_cover_access_log_fields(self):
        expected = {
            'url', 'method', 'response-time', 'datetime', 'status', 'referrer',
            'remote-addr', 'remote-user', 'http-version', 'user-agent', 'content-length',
        }
        assert set(DEFAULT_TOKENS) == expected

    def test_default_types(self):
        assert DEFAULT_TOKENS['status'].value_type == ValueType.NUMBER
        assert DEFAULT_TOKENS['response-time'].value_type == ValueType.NUMBER
        assert DEFAULT_TOKENS['datetime'].value_type == ValueType.TIMESTAMP
        assert DEFAULT_TOKENS['url'].value_type == ValueType.TEXT

    @pytest.mark.parametrize("name", sorted(DEFAULT_TOKENS))
    def test_default_patterns_have_no_capture_groups(self, name):
        assert regex.compile(DEFAULT_TOKENS[name].pattern).groups == 0

    def test_defaults_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_TOKENS['status'] = None


class TestTokenRegistry:
    """Instance overrides layered over the defaults"""

    def test_lookup_falls_back_to_defaults(self):
        registry = TokenRegistry()
        assert registry.get('status') is DEFAULT_TOKENS['status']
        assert registry.get('unknown-field') is None
        assert 'method' in registry

    def test_override_does_not_touch_defaults(self):
        first = TokenRegistry()
        first.register('status', r'\w+', 'text')

        second = TokenRegistry()
        assert first.get('status').value_type == ValueType.TEXT
        assert second.get('status').value_type == ValueType.NUMBER
        assert DEFAULT_TOKENS['status'].pattern == r'\d+'

    def test_register_defaults(self):
        token = TokenRegistry().register('request-id')
        assert token.pattern == r'[^ ]+'
        assert token.value_type == ValueType.TEXT

    def test_register_compiled_pattern(self):
        token = TokenRegistry().register('code', re.compile(r'\d{3}'), ValueType.NUMBER)
        assert token.pattern == r'\d{3}'

    def test_names_include_custom_tokens_once(self):
        registry = TokenRegistry()
        registry.register('request-id')
        registry.register('status', r'\d{3}')
        names = registry.names()
        assert names.count('status') == 1
        assert names[-1] == 'request-id'

    def test_copy_is_independent(self):
        registry = TokenRegistry()
        clone = registry.copy()
        clone.register('request-id')
        assert 'request-id' not in registry


class TestValueTypes:
    """Value type normalization"""

    @pytest.mark.parametrize("given,expected", [
        (None, ValueType.TEXT),
        (ValueType.TIMESTAMP, ValueType.TIMESTAMP),
        ('number', ValueType.NUMBER),
        ('Timestamp', ValueType.TIMESTAMP),
        (float, ValueType.NUMBER),
        (int, ValueType.NUMBER),
        (str, ValueType.TEXT),
        (datetime, ValueType.TIMESTAMP),
    ])
    def test_resolve_value_type(self, given, expected):
        assert resolve_value_type(given) == expected

    def test_resolve_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            resolve_value_type('bogus')
        with pytest.raises(ValueError):
            resolve_value_type(list)


class TestCoercion:
    """Captured text -> typed values"""

    def test_number(self):
        assert to_number('12.5') == 12.5
        assert to_number('200') == 200.0

    def test_number_uses_leading_prefix(self):
        assert to_number('1.2.3') == 1.2
        assert to_number('15ms') == 15.0

    def test_number_without_digits_is_none(self):
        assert to_number('-') is None
        assert to_number('abc') is None

    def test_common_log_format_timestamp(self):
        value = to_timestamp('10/Oct/2000:13:55:36 -0700')
        assert value == datetime(2000, 10, 10, 13, 55, 36, tzinfo=timezone(timedelta(hours=-7)))

    def test_iso_timestamp(self):
        assert to_timestamp('2024-11-23 10:15:32') == datetime(2024, 11, 23, 10, 15, 32)

    def test_dateutil_fallback(self):
        assert to_timestamp('November 23, 2024') == datetime(2024, 11, 23)

    def test_unparseable_timestamp_is_none(self):
        assert to_timestamp('not a date') is None

    def test_text_is_unchanged(self):
        assert coerce(ValueType.TEXT, ' GET ') == ' GET '

    def test_none_stays_none(self):
        for value_type in ValueType:
            assert coerce(value_type, None) is None
