r"""
Format Compiler: log-line template -> anchored whole-line pattern

A template mixes literal text with field references (':field-name'):

    ':remote-addr - - [:datetime] ":method :url HTTP/:http-version" :status'

compiles to one case-insensitive pattern anchored at both ends, with one
capture group per field reference in left-to-right order. Each group accepts
the field's sub-pattern or the placeholder literal, so an absent value
rendered as '-' still matches:

    ^(<remote-addr>|-) - - \[(<datetime>|-)\] ...\Z    (literals escaped)

Field order is the authoritative index -> field name mapping for the parser.
"""

import logging
from typing import List, Optional

import regex

from loganalyzer.models import CompiledLinePattern
from loganalyzer.context.tokens.registry import DEFAULT_PATTERN, TokenRegistry

logger = logging.getLogger(__name__)

# ':' followed by word characters and hyphens, not ending on a hyphen
FIELD_PATTERN = regex.compile(r':[\w\-]+\b')


def uncapture(source: str) -> str:
    """
    Rewrite every capturing group in a regex source to non-capturing.

    Handles plain '(...)' and named '(?P<name>...)' / '(?<name>...)' groups;
    escaped parentheses and parentheses inside character classes are kept.
    """
    out: List[str] = []
    i = 0
    n = len(source)
    in_class = False

    while i < n:
        ch = source[i]

        if ch == '\\':
            out.append(source[i:i + 2])
            i += 2
            continue

        if in_class:
            if ch == ']':
                in_class = False
            out.append(ch)
            i += 1
            continue

        if ch == '[':
            in_class = True
            out.append(ch)
            i += 1
            # ']' directly after '[' or '[^' is a literal member
            if source.startswith('^', i):
                out.append('^')
                i += 1
            if source.startswith(']', i):
                out.append(']')
                i += 1
            continue

        if ch == '(':
            rest = source[i + 1:]
            if rest.startswith('?P<') or (rest.startswith('?<') and not rest.startswith(('?<=', '?<!'))):
                out.append('(?:')
                i = source.index('>', i) + 1
                continue
            if not rest.startswith('?'):
                out.append('(?:')
                i += 1
                continue

        out.append(ch)
        i += 1

    return ''.join(out)


def field_names(template: str) -> List[str]:
    """Field references of a template, in order (duplicates kept)."""
    return [match.group(0)[1:] for match in FIELD_PATTERN.finditer(template)]


def compile_format(template: str, registry: Optional[TokenRegistry] = None,
                   placeholder: str = '-') -> CompiledLinePattern:
    """
    Compile a log-line template into a CompiledLinePattern.

    Args:
        template: Format with literal text and ':field' references
        registry: Token lookups; unknown fields match a non-space run
        placeholder: Literal accepted in place of any field value

    Returns:
        CompiledLinePattern with fields in template order
    """
    if registry is None:
        registry = TokenRegistry()

    escaped_placeholder = regex.escape(placeholder)
    parts = ['^']
    fields = []
    last_end = 0

    for match in FIELD_PATTERN.finditer(template):
        name = match.group(0)[1:]
        token = registry.get(name)
        sub_pattern = token.pattern if token else DEFAULT_PATTERN

        parts.append(regex.escape(template[last_end:match.start()]))
        parts.append(f'({uncapture(sub_pattern)}|{escaped_placeholder})')
        fields.append(name)
        last_end = match.end()

    parts.append(regex.escape(template[last_end:]))
    parts.append(r'\Z')

    source = ''.join(parts)
    pattern = regex.compile(source, regex.IGNORECASE)
    logger.debug("Compiled format %r into %d fields: %s", template, len(fields), source)

    return CompiledLinePattern(
        template=template,
        source=source,
        pattern=pattern,
        fields=tuple(fields),
    )
