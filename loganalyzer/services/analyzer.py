"""
Analyzer: format + routes + aggregation in one pipeline

    analyzer = Analyzer(':method :url :status :response-time')
    analyzer.use('/users/:id').use('POST', '/login')
    analyzer.group('status')
    result = analyzer.analyze(open('access.log').read())

    result['overall']['overview']['totalRequests']
    result['/users/:id']['groups']['status']
    result['POST /login']['overview']['failedRequests']

The line pattern is compiled at the start of every run, so configuration
may change between runs. Streaming runs (analyze_stream / analyze_file /
start_stream) report through an AnalysisOutcome and an optional
callback(error, result) that fires exactly once.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

from loganalyzer.models import AnalysisOutcome, CompiledLinePattern, Record, RouteRule
from loganalyzer.config import AnalyzerOptions
from loganalyzer.context.tokens.registry import TokenRegistry
from loganalyzer.context.compilation.format_compiler import compile_format
from loganalyzer.context.routing.route_matcher import OVERALL, make_route, select
from loganalyzer.services.parser import LogParser, StreamParser
from loganalyzer.services.aggregator import AggregationEngine
from loganalyzer.exceptions import StreamError

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[BaseException], Optional[Dict[str, Any]]], Any]

DEFAULT_CHUNK_SIZE = 64 * 1024


class StreamSession:
    """
    One in-flight streaming run, driven by chunk / end / error events.

    The pending line buffer, error flag and parsed records belong to this
    session only. Once it completes (result or error) further events are
    ignored and the callback is never called again.
    """

    def __init__(self, analyzer: 'Analyzer', stream: StreamParser, callback: Optional[Callback] = None):
        self.analyzer = analyzer
        self.stream = stream
        self.callback = callback
        self.outcome: Optional[AnalysisOutcome] = None

    @property
    def done(self) -> bool:
        return self.outcome is not None

    def feed(self, chunk: Union[str, bytes]) -> 'StreamSession':
        if self.done:
            return self
        self.stream.feed(chunk)
        if self.stream.error is not None:
            self._complete()
        return self

    def end(self) -> AnalysisOutcome:
        if not self.done:
            self.stream.end()
            self._complete()
        return self.outcome

    def fail(self, error: BaseException) -> AnalysisOutcome:
        if not self.done:
            self.stream.fail(StreamError.wrap(error))
            self._complete()
        return self.outcome

    def _complete(self):
        stream = self.stream
        if stream.error is not None:
            outcome = AnalysisOutcome(error=stream.error, skipped=stream.parser.skipped)
        else:
            result = self.analyzer.analyze_records(stream.records)
            outcome = AnalysisOutcome(
                result=result,
                record_count=len(stream.records),
                skipped=stream.parser.skipped,
            )
        # Records are only held for the duration of the run
        stream.records = []
        self.outcome = outcome

        if self.callback is not None:
            self.callback(outcome.error, outcome.result)


class Analyzer:
    """
    Log analyzer configured with a format, tokens, routes and aggregations.

    Configuration methods return the analyzer so calls can be chained.
    """

    def __init__(self, log_format: Optional[str] = None, options: Optional[AnalyzerOptions] = None,
                 **overrides):
        """
        Args:
            log_format: Line template with ':field' references
            options: AnalyzerOptions; keyword overrides (separator,
                placeholder, encoding, ignore_mismatches) are applied on top
        """
        options = options or AnalyzerOptions()
        if overrides:
            options = options.replace(**overrides)

        self.options = options
        self.log_format = log_format or ''
        self.tokens = TokenRegistry()
        self.requests: List[RouteRule] = []
        self.engine = AggregationEngine(placeholder=options.placeholder)

    @property
    def separator(self) -> str:
        return self.options.separator

    @property
    def placeholder(self) -> str:
        return self.options.placeholder

    @property
    def ignore_mismatches(self) -> bool:
        return self.options.ignore_mismatches

    # Configuration

    def token(self, name: str, pattern: Any = None, value_type: Any = None) -> 'Analyzer':
        """Define (or override) the token matching a field."""
        self.tokens.register(name, pattern, value_type)
        return self

    def format(self, log_format: Optional[str] = None) -> str:
        """Set the log format when given; returns the current format."""
        if log_format:
            self.log_format = log_format
        return self.log_format

    def use(self, method: Any, path: Any = None) -> 'Analyzer':
        """Add a request route: use('/path'), use('GET', '/path') or a compiled pattern."""
        if path is None:
            method, path = '', method
        self.requests.append(make_route(method, path))
        return self

    def overview(self, fn: Callable[[List[Record]], Optional[Dict[str, Any]]]) -> 'Analyzer':
        """Add an overview function; its mapping is merged over earlier ones."""
        self.engine.add_overview(fn)
        return self

    def group(self, name: str, group_by: Union[str, Callable, None] = None,
              calculator: Optional[Callable[[List[Record]], Any]] = None) -> 'Analyzer':
        """Add an analysis group keyed by a field (default: name) or a key function."""
        self.engine.add_group(name, group_by, calculator)
        return self

    # Parsing

    def compile(self) -> CompiledLinePattern:
        return compile_format(self.log_format, self.tokens, self.placeholder)

    def parser(self) -> LogParser:
        """A LogParser bound to a freshly compiled line pattern."""
        return LogParser(
            self.compile(),
            self.tokens,
            placeholder=self.placeholder,
            separator=self.separator,
            ignore_mismatches=self.ignore_mismatches,
        )

    def parse(self, logs: Union[str, Iterable[str]]) -> List[Record]:
        """
        Parse a log string (split by the separator) or an iterable of lines.

        Raises:
            LogMismatchError: unmatched line while ignore_mismatches is off
        """
        return self.parser().parse_many(logs)

    # Analysis

    def analyze(self, logs: Union[str, Iterable[str]]) -> Dict[str, Dict[str, Any]]:
        """Parse and analyze in-memory logs; raises on the first mismatch."""
        return self.analyze_records(self.parse(logs))

    def analyze_records(self, records: List[Record]) -> Dict[str, Dict[str, Any]]:
        """Analyze already parsed records: 'overall' first, then routes in order."""
        records = list(records)
        result = {}
        for route in [OVERALL] + self.requests:
            result[route.label] = self.engine.aggregate(select(records, route))
        logger.info("Analyzed %d records across %d routes", len(records), len(result))
        return result

    def start_stream(self, callback: Optional[Callback] = None) -> StreamSession:
        """Begin an event-driven run; feed chunks, then end() or fail()."""
        stream = StreamParser(self.parser(), encoding=self.options.encoding)
        return StreamSession(self, stream, callback)

    def analyze_stream(self, chunks: Iterable[Union[str, bytes]],
                       callback: Optional[Callback] = None) -> AnalysisOutcome:
        """
        Analyze a chunked stream of text or bytes.

        Any exception raised by the chunk source becomes a StreamError.
        Pulling from the source stops as soon as the run fails.

        Returns:
            AnalysisOutcome with either result or error set
        """
        session = self.start_stream(callback)
        iterator = iter(chunks)
        try:
            while not session.done:
                try:
                    chunk = next(iterator)
                except StopIteration:
                    session.end()
                    break
                except Exception as error:
                    session.fail(error)
                    break
                session.feed(chunk)
        finally:
            close = getattr(iterator, 'close', None)
            if close is not None:
                close()

        outcome = session.outcome
        if outcome.ok:
            logger.info("Stream finished: %d records, %d skipped", outcome.record_count, outcome.skipped)
        return outcome

    def analyze_file(self, filename: Union[str, Path], callback: Optional[Callback] = None,
                     chunk_size: int = DEFAULT_CHUNK_SIZE) -> AnalysisOutcome:
        """Stream a log file through analyze_stream; open/read failures are stream errors."""
        return self.analyze_stream(read_chunks(filename, chunk_size), callback)


def read_chunks(filename: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield raw byte chunks of a file."""
    with open(filename, 'rb') as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            yield chunk
