"""
Command-line interface for loganalyzer.
"""

from loganalyzer.cli.commands import analyze, tokens

__all__ = ['analyze', 'tokens']
