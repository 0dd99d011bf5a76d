"""
Unit tests for request line parsing.
"""

import pytest

from filehost.errors import MalformedRequest
from filehost.http.request import RequestLine, first_line, parse_request_line


class TestParseRequestLine:
    """Tests for parse_request_line()."""

    def test_parse_simple_get(self):
        """Test parsing a full HTTP request line."""
        request = parse_request_line(b"GET /a.txt HTTP/1.1\r\nHost: localhost\r\n\r\n")

        assert request == RequestLine(method="GET", path="/a.txt", raw="GET /a.txt HTTP/1.1")

    def test_headers_are_ignored(self):
        """Only the first line matters, whatever follows."""
        raw = b"GET /a.txt HTTP/1.1\r\nX-Path: /b.txt\r\n\r\nbody /c.txt"
        assert parse_request_line(raw).path == "/a.txt"

    def test_bare_lf_line_ending(self):
        assert parse_request_line(b"GET /a.txt HTTP/1.0\nHost: x\n").path == "/a.txt"

    def test_no_line_ending(self):
        """A request that never sent a newline still has a first line."""
        assert parse_request_line(b"GET /a.txt HTTP/1.1").path == "/a.txt"

    def test_two_tokens_is_enough(self):
        assert parse_request_line(b"GET /a.txt\r\n").path == "/a.txt"

    def test_method_is_not_validated(self):
        request = parse_request_line(b"FETCH /a.txt whatever\r\n")
        assert request.method == "FETCH"
        assert request.path == "/a.txt"

    def test_path_is_verbatim(self):
        """No URL decoding, no query splitting."""
        assert parse_request_line(b"GET /a%20b.txt?x=1 HTTP/1.1").path == "/a%20b.txt?x=1"

    def test_double_space_is_malformed(self):
        """Fields are split on single spaces, so the path token is empty."""
        with pytest.raises(MalformedRequest):
            parse_request_line(b"GET  /a.txt HTTP/1.1")

    def test_trailing_space_is_malformed(self):
        with pytest.raises(MalformedRequest):
            parse_request_line(b"GET \r\n")

    def test_invalid_utf8_is_replaced(self):
        request = parse_request_line(b"GET /\xff.txt HTTP/1.1\r\n")
        assert request.path == "/\ufffd.txt"

    def test_empty_request_is_malformed(self):
        with pytest.raises(MalformedRequest):
            parse_request_line(b"")

    def test_single_token_is_malformed(self):
        with pytest.raises(MalformedRequest):
            parse_request_line(b"GET\r\nHost: test\r\n\r\n")

    def test_empty_first_line_is_malformed(self):
        with pytest.raises(MalformedRequest):
            parse_request_line(b"\r\nGET /a.txt HTTP/1.1\r\n")

    def test_malformed_status_code(self):
        assert MalformedRequest.status_code == 400


class TestFirstLine:
    """Tests for first_line()."""

    def test_strips_crlf(self):
        assert first_line("one\r\ntwo") == "one"

    def test_keeps_inner_cr(self):
        assert first_line("a\rb\nc") == "a\rb"

    def test_empty_raises(self):
        with pytest.raises(MalformedRequest):
            first_line("")
