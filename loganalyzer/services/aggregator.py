"""
Aggregation Engine: record subset -> overview + grouped tables

Overview functions each return a mapping; the mappings are shallow-merged
in registration order (built-in stat_access_logs first, later keys win).
Groups are independent frequency tables keyed by a field value or a
computed key; a group with a calculator maps each key to the calculator's
result over that key's records instead of a count.
"""

from collections import defaultdict
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Union

from loganalyzer.context.tokens.registry import to_number
from loganalyzer.models import GroupDefinition, Record
from loganalyzer.protocols import AggregatorProtocol

OverviewFunction = Callable[[List[Record]], Optional[Dict[str, Any]]]


def merge(base: Optional[Dict[str, Any]], *contributions: Any) -> Dict[str, Any]:
    """Shallow merge into base; later contributions win, non-mappings are ignored."""
    target = base if base is not None else {}
    for contribution in contributions:
        if isinstance(contribution, Mapping):
            target.update(contribution)
    return target


def _number(value: Any) -> Optional[float]:
    # Fields re-registered as text still arrive as strings
    if value is None or isinstance(value, (int, float)):
        return value
    return to_number(str(value))


def stat_access_logs(records: List[Record]) -> Dict[str, Any]:
    """
    Built-in overview of an access log subset.

    Returns:
        totalRequests, abortedRequests (no response time), failedRequests
        (status >= 400), avgTimeServed (three decimals, 0 when every request
        was aborted) and bandWidth (sum of content-length)
    """
    total_requests = len(records)
    aborted_requests = 0
    failed_requests = 0
    total_time = 0.0
    band_width = 0

    for record in records:
        response_time = _number(record.get('response-time'))
        if response_time:
            total_time += response_time
        else:
            aborted_requests += 1

        status = _number(record.get('status'))
        if status is not None and status >= 400:
            failed_requests += 1

        content_length = _number(record.get('content-length'))
        if content_length:
            band_width += content_length

    avg_time_served = 0
    if total_requests > aborted_requests:
        avg_time_served = f"{total_time / (total_requests - aborted_requests):.3f}"

    return {
        'totalRequests': total_requests,
        'abortedRequests': aborted_requests,
        'failedRequests': failed_requests,
        'avgTimeServed': avg_time_served,
        'bandWidth': band_width,
    }


class AggregationEngine(AggregatorProtocol):
    """Ordered overview functions plus named group definitions."""

    def __init__(self, placeholder: str = '-'):
        self.placeholder = placeholder
        self.overviews: List[OverviewFunction] = [stat_access_logs]
        self.group_definitions: Dict[str, GroupDefinition] = {}

    def add_overview(self, fn: OverviewFunction):
        self.overviews.append(fn)

    def add_group(self, name: str, group_by: Union[str, Callable, None] = None,
                  calculator: Optional[Callable[[List[Record]], Any]] = None) -> GroupDefinition:
        """Register (or replace) a group; group_by defaults to the group name."""
        definition = GroupDefinition(name=name, group_by=group_by or name, calculator=calculator)
        self.group_definitions[name] = definition
        return definition

    def overview(self, records: List[Record]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for fn in self.overviews:
            merge(result, fn(records))
        return result

    def groups(self, records: List[Record]) -> Dict[str, Dict[Any, Any]]:
        return {
            name: self._group(definition, records)
            for name, definition in self.group_definitions.items()
        }

    def aggregate(self, records: List[Record]) -> Dict[str, Any]:
        return {
            'overview': self.overview(records),
            'groups': self.groups(records),
        }

    def _key(self, definition: GroupDefinition, record: Record) -> Any:
        if callable(definition.group_by):
            key = definition.group_by(record)
        else:
            key = record.get(definition.group_by)
        # Zero is a real key; other falsy keys (False included) are missing values
        if key is False or (not key and key != 0):
            key = self.placeholder
        return key

    def _group(self, definition: GroupDefinition, records: List[Record]) -> Dict[Any, Any]:
        if definition.calculator is None:
            counts: Dict[Any, int] = {}
            for record in records:
                key = self._key(definition, record)
                counts[key] = counts.get(key, 0) + 1
            return counts

        buckets: Dict[Any, List[Record]] = defaultdict(list)
        for record in records:
            buckets[self._key(definition, record)].append(record)
        return {key: definition.calculator(bucket) for key, bucket in buckets.items()}
