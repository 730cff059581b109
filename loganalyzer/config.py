"""
Analyzer configuration: runtime options and JSON analysis files.

An analysis file describes one analyzer:

    {
        "format": ":method :url :status :response-time",
        "options": {"placeholder": "-", "ignore_mismatches": true},
        "tokens": {"request-id": {"pattern": "[a-f0-9\\\\-]+", "type": "text"}},
        "routes": ["/", "GET /users/:id"],
        "groups": ["status", "method"]
    }
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

__all__ = ['AnalyzerOptions', 'load_config', 'build_analyzer', 'parse_route']


@dataclass
class AnalyzerOptions:
    """Runtime options shared by parsing and aggregation."""
    separator: str = '\n'
    placeholder: str = '-'
    encoding: str = 'utf-8'
    ignore_mismatches: bool = False

    def __post_init__(self):
        if not self.separator:
            raise ValueError("separator must be a non-empty string")
        if not isinstance(self.placeholder, str):
            raise ValueError("placeholder must be a string")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnalyzerOptions':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown analyzer options: {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def replace(self, **overrides) -> 'AnalyzerOptions':
        return AnalyzerOptions.from_dict({**self.to_dict(), **overrides})


def parse_route(text: str):
    """'GET /users/:id' -> ('GET', '/users/:id'); '/users' -> ('', '/users')."""
    parts = text.split(None, 1)
    if len(parts) == 2 and not parts[0].startswith('/'):
        return parts[0], parts[1].strip()
    return '', text.strip()


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Read and validate an analysis file."""
    config_path = Path(path)
    with open(config_path, 'r', encoding='utf-8') as f:
        config = json.load(f)

    if not isinstance(config, dict):
        raise ValueError(f"{config_path}: expected a JSON object")
    if 'format' in config and not isinstance(config['format'], str):
        raise ValueError(f"{config_path}: 'format' must be a string")
    for key in ('routes', 'groups'):
        if not isinstance(config.get(key, []), list):
            raise ValueError(f"{config_path}: '{key}' must be a list")
    for key in ('options', 'tokens'):
        if not isinstance(config.get(key, {}), dict):
            raise ValueError(f"{config_path}: '{key}' must be an object")

    return config


def build_analyzer(config: Dict[str, Any]):
    """Create a configured Analyzer from an analysis file mapping."""
    from loganalyzer.services.analyzer import Analyzer

    analyzer = Analyzer(
        config.get('format'),
        options=AnalyzerOptions.from_dict(config.get('options', {})),
    )
    for name, token in config.get('tokens', {}).items():
        if not isinstance(token, dict):
            raise ValueError(f"Token '{name}' must be an object")
        analyzer.token(name, token.get('pattern'), token.get('type'))
    for route in config.get('routes', []):
        method, path = parse_route(route)
        analyzer.use(method, path)
    for group in config.get('groups', []):
        analyzer.group(group)
    return analyzer
