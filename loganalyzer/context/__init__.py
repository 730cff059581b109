"""
Context layer - domain-specific implementations.
"""

from loganalyzer.context.tokens import TokenRegistry, DEFAULT_TOKENS
from loganalyzer.context.compilation import compile_format
from loganalyzer.context.routing import compile_route_path, match_route

__all__ = [
    'TokenRegistry',
    'DEFAULT_TOKENS',
    'compile_format',
    'compile_route_path',
    'match_route',
]
