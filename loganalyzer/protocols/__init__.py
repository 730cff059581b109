"""
Protocols (interfaces) for loganalyzer components.

This module defines abstract contracts that implementations must follow.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Union
from loganalyzer.models import Record

__all__ = [
    'LineParserProtocol',
    'AggregatorProtocol',
]


class LineParserProtocol(ABC):
    """Protocol for turning raw log lines into records."""

    @abstractmethod
    def parse_line(self, line: str) -> Optional[Record]:
        """
        Parse a single log line.

        Args:
            line: Raw log string

        Returns:
            Record, or None when the line does not match
        """
        pass

    @abstractmethod
    def parse_many(self, lines: Union[str, Iterable[str]]) -> List[Record]:
        """
        Parse a batch of log lines, skipping blank ones.

        Args:
            lines: Log string or iterable of log strings

        Returns:
            Parsed records in input order
        """
        pass


class AggregatorProtocol(ABC):
    """Protocol for reducing a record subset into statistics."""

    @abstractmethod
    def overview(self, records: List[Record]) -> Dict[str, Any]:
        """Scalar summary statistics over the records."""
        pass

    @abstractmethod
    def groups(self, records: List[Record]) -> Dict[str, Dict[Any, Any]]:
        """Grouped frequency / derived tables over the records."""
        pass
