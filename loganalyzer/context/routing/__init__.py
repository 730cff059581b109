"""
Route classification context.
"""

from loganalyzer.context.routing.route_matcher import (
    OVERALL,
    compile_route_path,
    make_route,
    match_route,
)

__all__ = ['OVERALL', 'compile_route_path', 'make_route', 'match_route']
