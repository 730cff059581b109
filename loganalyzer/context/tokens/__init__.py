"""
Token registry and type coercion.
"""

from loganalyzer.context.tokens.registry import TokenRegistry, DEFAULT_TOKENS, coerce

__all__ = ['TokenRegistry', 'DEFAULT_TOKENS', 'coerce']
