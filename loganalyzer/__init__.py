"""
loganalyzer - Template-Driven Log Parsing and Aggregation

Compiles a declarative log-line format into a matcher, parses raw log
records against it, buckets them by request route and reduces each bucket
into overview statistics and grouped tables.

Architecture:
- Models: Pure data structures (Token, Record, RouteRule, AnalysisOutcome)
- Protocols: Interface contracts (LineParserProtocol, AggregatorProtocol)
- Context: Domain implementations (Tokens, Compilation, Routing)
- Services: Application orchestration (LogParser, AggregationEngine, Analyzer)
- CLI: User interface (analyze, tokens commands)
"""

__version__ = "1.0.0"
__license__ = "MIT"

from loganalyzer import models, protocols
from loganalyzer.models import ValueType, Token, Record, AnalysisOutcome
from loganalyzer.exceptions import LogMismatchError, StreamError
from loganalyzer.config import AnalyzerOptions
from loganalyzer.context import TokenRegistry, DEFAULT_TOKENS, compile_format, compile_route_path, match_route
from loganalyzer.services import Analyzer, LogParser, StreamParser, AggregationEngine, merge, stat_access_logs

__all__ = [
    'models',
    'protocols',
    'ValueType',
    'Token',
    'Record',
    'AnalysisOutcome',
    'LogMismatchError',
    'StreamError',
    'AnalyzerOptions',
    'TokenRegistry',
    'DEFAULT_TOKENS',
    'compile_format',
    'compile_route_path',
    'match_route',
    'Analyzer',
    'LogParser',
    'StreamParser',
    'AggregationEngine',
    'merge',
    'stat_access_logs',
]
