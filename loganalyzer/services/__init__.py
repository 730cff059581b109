"""
Services layer - application orchestration.
"""

from loganalyzer.services.parser import LogParser, StreamParser
from loganalyzer.services.aggregator import AggregationEngine, merge, stat_access_logs
from loganalyzer.services.analyzer import Analyzer, StreamSession

# Provide consistent naming
Parser = LogParser
Aggregator = AggregationEngine

__all__ = [
    'LogParser',
    'StreamParser',
    'AggregationEngine',
    'merge',
    'stat_access_logs',
    'Analyzer',
    'StreamSession',
    # Aliases
    'Parser',
    'Aggregator',
]
