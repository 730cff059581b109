"""
Format compilation context.
"""

from loganalyzer.context.compilation.format_compiler import compile_format, field_names, uncapture

__all__ = ['compile_format', 'field_names', 'uncapture']
