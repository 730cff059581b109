"""
Pytest configuration and shared fixtures for loganalyzer tests
"""

import pytest
from typing import List

SIMPLE_FORMAT = ':method :url :status :response-time :content-length'

COMBINED_FORMAT = (
    ':remote-addr - :remote-user [:datetime] ":method :url HTTP/:http-version" '
    ':status :content-length ":referrer" ":user-agent"'
)


@pytest.fixture
def simple_format() -> str:
    return SIMPLE_FORMAT


@pytest.fixture
def combined_format() -> str:
    return COMBINED_FORMAT


@pytest.fixture
def sample_lines() -> List[str]:
    """Access log lines in SIMPLE_FORMAT"""
    return [
        "GET /users/42 200 12.5 512",
        "GET /users/42/edit 200 7.5 1024",
        "POST /login 401 3 64",
        "POST /login 500 - -",
        "GET /accounts/7 404 1 -",
        "GET /static/app.js 304 0.5 0",
    ]


@pytest.fixture
def combined_lines() -> List[str]:
    """Apache combined log format lines"""
    return [
        '127.0.0.1 - frank [10/Oct/2000:13:55:36 -0700] "GET /apache_pb.gif HTTP/1.0" 200 2326 '
        '"http://www.example.com/start.html" "Mozilla/4.08 [en] (Win98; I ;Nav)"',
        '10.0.0.5 - - [10/Oct/2000:13:56:01 -0700] "POST /api/orders HTTP/1.1" 503 - '
        '"-" "curl/7.68.0"',
    ]


@pytest.fixture(scope="session")
def test_data_dir(tmp_path_factory):
    """Create temporary log files"""
    data_dir = tmp_path_factory.mktemp("test_data")

    access_log = data_dir / "access.log"
    access_log.write_text(
        "GET /users/1 200 10 100\n"
        "GET /users/2 200 20 200\n"
        "POST /login 302 5 -\n" * 50,
        encoding="utf-8",
    )

    broken_log = data_dir / "broken.log"
    broken_log.write_text(
        "GET /users/1 200 10 100\n"
        "this line does not match\n"
        "GET /users/2 200 20 200\n",
        encoding="utf-8",
    )

    return data_dir
