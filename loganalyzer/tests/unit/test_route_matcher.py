"""
Unit tests for route classification
"""

import re

import pytest

from loganalyzer.models import Record
from loganalyzer.context.routing.route_matcher import (
    OVERALL,
    compile_route_path,
    make_route,
    match_route,
    select,
)


@pytest.fixture
def records():
    return [
        Record({'method': 'GET', 'url': '/users/42'}),
        Record({'method': 'get', 'url': '/users/42/edit'}),
        Record({'method': 'POST', 'url': '/users/42'}),
        Record({'method': 'GET', 'url': '/accounts/42'}),
        Record({'method': None, 'url': None}),
    ]


class TestCompileRoutePath:
    """Path template -> prefix-anchored pattern"""

    def test_param_matches_one_segment_prefix(self):
        pattern = compile_route_path('/users/:id')
        assert pattern.match('/users/42')
        assert pattern.match('/users/42/edit')
        assert not pattern.match('/accounts/42')
        assert not pattern.match('/users/')

    def test_literal_segments_are_escaped(self):
        pattern = compile_route_path('/files/:name.txt')
        assert pattern.match('/files/report.txt')
        assert not pattern.match('/files/reportXtxt')

    def test_prefix_anchor_only(self):
        pattern = compile_route_path('/api')
        assert pattern.match('/api/v1/items?page=2')
        assert not pattern.search('/v2/api')

    def test_multiple_params(self):
        pattern = compile_route_path('/users/:id/posts/:post')
        assert pattern.match('/users/1/posts/99')
        assert not pattern.match('/users/1/comments/99')


class TestMatchRoute:
    """Record subsets per route"""

    def test_path_only(self, records):
        matched = match_route(records, '', '/users/:id')
        assert [r['url'] for r in matched] == ['/users/42', '/users/42/edit', '/users/42']

    def test_method_is_case_insensitive(self, records):
        matched = match_route(records, 'get', '/users/:id')
        assert [r['url'] for r in matched] == ['/users/42', '/users/42/edit']

    def test_raw_pattern(self, records):
        matched = match_route(records, 'POST', re.compile(r'^/users/\d+$'))
        assert len(matched) == 1

    def test_missing_url_never_matches_a_route(self, records):
        assert all(r['url'] is not None for r in match_route(records, '', '/'))

    def test_overall_takes_every_record(self, records):
        assert select(records, OVERALL) == records


class TestMakeRoute:
    """Result labels"""

    def test_labels(self):
        assert make_route('post', '/login').label == 'POST /login'
        assert make_route('', '/login').label == '/login'
        assert make_route(None, re.compile(r'\.gif$')).label == r'\.gif$'

    def test_overall_label(self):
        assert OVERALL.label == 'overall'
        assert OVERALL.method == ''
