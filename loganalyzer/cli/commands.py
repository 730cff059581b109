"""
CLI commands for loganalyzer.
"""

import codecs
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from loganalyzer.config import AnalyzerOptions, build_analyzer, load_config, parse_route
from loganalyzer.context.tokens.registry import DEFAULT_TOKENS


def _display(value):
    """Readable form of record values used as keys or overview values."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _jsonable(value):
    if isinstance(value, dict):
        return {str(_display(k)): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return _display(value)


def _render_tables(console: Console, result: dict):
    for label, analysis in result.items():
        overview = Table(title=escape(f"{label} - overview"))
        overview.add_column("Metric", style="cyan")
        overview.add_column("Value", justify="right")
        for key, value in analysis['overview'].items():
            overview.add_row(escape(str(key)), escape(str(_display(value))))
        console.print(overview)

        for name, table_data in analysis['groups'].items():
            group = Table(title=escape(f"{label} - {name}"))
            group.add_column(escape(name), style="green")
            group.add_column("Value", justify="right")
            for key, value in table_data.items():
                group.add_row(escape(str(_display(key))), escape(str(_jsonable(value))))
            console.print(group)


@click.command()
@click.argument('logfile')
@click.option('--format', '-f', 'log_format', help='Log line format, e.g. ":method :url :status"')
@click.option('--config', '-c', 'config_file', help='JSON analysis file (format, tokens, routes, groups)')
@click.option('--route', '-r', multiple=True, help='Route to analyze, e.g. "GET /users/:id" (repeatable)')
@click.option('--group', '-g', multiple=True, help='Field to group by (repeatable)')
@click.option('--ignore-mismatches', is_flag=True, help='Skip lines that do not match the format')
@click.option('--placeholder', default=None, help='Literal used for missing values (default: -)')
@click.option('--separator', default=None, help='Line separator, escape sequences allowed (default: \\n)')
@click.option('--encoding', default=None, help='Log file encoding (default: utf-8)')
@click.option('--table', '-t', is_flag=True, help='Render results as tables instead of JSON')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def analyze(logfile, log_format, config_file, route, group, ignore_mismatches,
            placeholder, separator, encoding, table, verbose):
    """
    Analyze a log file against a line format.

    Example:
        loganalyzer analyze access.log -f ':method :url :status :response-time' -r /api -g status
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    log_path = Path(logfile)
    if not log_path.exists():
        click.echo(f"Error: Log file not found: {logfile}", err=True)
        sys.exit(1)

    config = {}
    if config_file:
        try:
            config = load_config(config_file)
        except (OSError, ValueError) as error:
            click.echo(f"Error: Invalid config {config_file}: {error}", err=True)
            sys.exit(1)

    overrides = {}
    if ignore_mismatches:
        overrides['ignore_mismatches'] = True
    if placeholder is not None:
        overrides['placeholder'] = placeholder
    if separator is not None:
        overrides['separator'] = codecs.decode(separator, 'unicode_escape')
    if encoding is not None:
        overrides['encoding'] = encoding

    try:
        options = AnalyzerOptions.from_dict(config.get('options', {})).replace(**overrides)
        analyzer = build_analyzer({**config, 'options': options.to_dict()})
    except ValueError as error:
        click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    analyzer.format(log_format)
    if not analyzer.format():
        click.echo("Error: Specify --format or a config file with a format", err=True)
        sys.exit(1)

    for route_text in route:
        method, path = parse_route(route_text)
        analyzer.use(method, path)
    for field in group:
        analyzer.group(field)

    if verbose:
        click.echo(f"Analyzing {log_path.name}...", err=True)

    outcome = analyzer.analyze_file(log_path)
    if not outcome.ok:
        click.echo(f"Error: {outcome.error}", err=True)
        sys.exit(1)

    if table:
        _render_tables(Console(), outcome.result)
    else:
        click.echo(json.dumps(_jsonable(outcome.result), indent=2))

    if verbose:
        click.echo(f"✓ {outcome.record_count} records analyzed, {outcome.skipped} skipped", err=True)


@click.command()
def tokens():
    """
    List the built-in field tokens.

    Example:
        loganalyzer tokens
    """
    listing = Table(title="Built-in tokens")
    listing.add_column("Field", style="cyan")
    listing.add_column("Type")
    listing.add_column("Pattern", style="magenta")
    for token in DEFAULT_TOKENS.values():
        listing.add_row(f":{token.name}", token.value_type.value, escape(token.pattern))
    Console().print(listing)
