"""
Data models for loganalyzer.

This module contains pure data structures with no business logic.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Union
from enum import Enum

__all__ = [
    'ValueType',
    'Token',
    'Record',
    'CompiledLinePattern',
    'RouteRule',
    'GroupDefinition',
    'AnalysisOutcome',
]


class ValueType(Enum):
    """Value types a token's captured text is coerced to."""
    TEXT = "text"
    NUMBER = "number"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class Token:
    """Named field definition: value type + matching sub-pattern."""
    name: str
    value_type: ValueType
    pattern: str  # regex source, must not rely on its own capture groups


class Record(Mapping):
    """One successfully parsed, type-coerced log entry (read-only)."""

    __slots__ = ('_values',)

    def __init__(self, values: Dict[str, Any]):
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self):
        return f"Record({self._values!r})"


@dataclass(frozen=True)
class CompiledLinePattern:
    """Anchored whole-line pattern with one capture group per field."""
    template: str
    source: str
    pattern: Any  # compiled regex.Pattern
    fields: Tuple[str, ...]

    @property
    def group_count(self) -> int:
        return self.pattern.groups


@dataclass(frozen=True)
class RouteRule:
    """A (method, path) pair used to bucket records."""
    method: str  # upper-cased, '' matches any method
    path: Any  # path template string or compiled pattern
    label: str


@dataclass
class GroupDefinition:
    """Frequency or derived-summary table keyed by a field or computed key."""
    name: str
    group_by: Union[str, Callable[[Record], Any]]
    calculator: Optional[Callable[[list], Any]] = None


@dataclass
class AnalysisOutcome:
    """Outcome of a streaming run: either a result or an error."""
    result: Optional[Dict[str, Dict[str, Any]]] = None
    error: Optional[BaseException] = None
    record_count: int = 0
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Dict[str, Dict[str, Any]]:
        """Return the result or raise the error."""
        if self.error is not None:
            raise self.error
        return self.result
