"""
Log Parser: raw log lines -> typed records

Applies a CompiledLinePattern to each line and coerces the captured text
per token type. Supports in-memory batches (LogParser.parse_many) and
chunked streaming input (StreamParser), where a line split across two
chunks is held back until the rest of it arrives.
"""

import codecs
import logging
from typing import Iterable, List, Optional, Union

from loganalyzer.models import CompiledLinePattern, Record, ValueType
from loganalyzer.protocols import LineParserProtocol
from loganalyzer.context.tokens.registry import TokenRegistry, coerce
from loganalyzer.exceptions import LogMismatchError, StreamError

logger = logging.getLogger(__name__)


class LogParser(LineParserProtocol):
    """
    Parse log lines against one compiled line pattern.

    Captured text equal to the placeholder (ignoring case) becomes None; everything
    else is coerced by the field's token type (unknown fields stay text).
    """

    def __init__(self, compiled: CompiledLinePattern, registry: Optional[TokenRegistry] = None,
                 placeholder: str = '-', separator: str = '\n', ignore_mismatches: bool = False):
        self.compiled = compiled
        self.registry = registry if registry is not None else TokenRegistry()
        self.placeholder = placeholder
        self.separator = separator
        self.ignore_mismatches = ignore_mismatches
        self.skipped = 0

        # Lines match case-insensitively, so the placeholder does too
        self._placeholder = placeholder.casefold()
        self._value_types = tuple(self._value_type(name) for name in compiled.fields)

    def _value_type(self, name: str) -> ValueType:
        token = self.registry.get(name)
        return token.value_type if token else ValueType.TEXT

    def parse_line(self, line: str) -> Optional[Record]:
        match = self.compiled.pattern.match(line)
        if match is None:
            return None

        values = {}
        for name, value_type, text in zip(self.compiled.fields, self._value_types, match.groups()):
            if text is not None and text.casefold() == self._placeholder:
                text = None
            values[name] = coerce(value_type, text)
        return Record(values)

    def parse_many(self, lines: Union[str, Iterable[str]]) -> List[Record]:
        """
        Parse a batch of lines, skipping blank ones.

        Raises:
            LogMismatchError: on the first unmatched line, unless
                ignore_mismatches is set (then the line is skipped)
        """
        if isinstance(lines, str):
            lines = lines.split(self.separator)

        records = []
        for raw in lines:
            line = raw.strip()
            if not line:
                continue

            record = self.parse_line(line)
            if record is not None:
                records.append(record)
            elif self.ignore_mismatches:
                self.skipped += 1
                logger.debug("Skipping unmatched line: %s", line)
            else:
                raise LogMismatchError(line, self.compiled.template)

        return records


class StreamParser:
    """
    Incremental parser fed with arbitrarily-sized text or byte chunks.

    Complete lines are parsed as soon as their chunk arrives; a trailing
    unterminated line is kept pending until the next chunk or end().
    After the first error every later event is a no-op.
    """

    def __init__(self, parser: LogParser, encoding: str = 'utf-8'):
        self.parser = parser
        self.records: List[Record] = []
        self.error: Optional[BaseException] = None
        self.finished = False

        self._pending = ''
        self._decoder = codecs.getincrementaldecoder(encoding)()

    @property
    def closed(self) -> bool:
        return self.finished or self.error is not None

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, chunk: Union[str, bytes]) -> List[Record]:
        """Consume one chunk; returns the records completed by it."""
        if self.closed:
            return []

        try:
            if isinstance(chunk, (bytes, bytearray)):
                chunk = self._decoder.decode(chunk)
        except UnicodeDecodeError as error:
            self.fail(StreamError.wrap(error))
            return []

        lines = (self._pending + chunk).split(self.parser.separator)
        # Last element is '' when the chunk ended on a separator
        self._pending = lines.pop()
        return self._parse(lines)

    def end(self) -> List[Record]:
        """Flush the pending line; returns all records of the run."""
        if self.closed:
            return self.records

        try:
            self._pending += self._decoder.decode(b'', final=True)
        except UnicodeDecodeError as error:
            self.fail(StreamError.wrap(error))
            return self.records

        pending, self._pending = self._pending, ''
        if pending.strip():
            self._parse([pending])
        if self.error is None:
            self.finished = True
        return self.records

    def fail(self, error: BaseException):
        """Mark the run as failed; only the first error is kept."""
        if self.closed:
            return
        self.error = error
        logger.warning("Stream aborted after %d records: %s", len(self.records), error)

    def _parse(self, lines: List[str]) -> List[Record]:
        try:
            parsed = self.parser.parse_many(lines)
        except LogMismatchError as error:
            self.fail(error)
            return []
        self.records.extend(parsed)
        return parsed
