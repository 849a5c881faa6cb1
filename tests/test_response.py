"""Tests for incremental HttpResponse parsing."""

import pytest

from tcpsession import HttpParseError, HttpResponse, HttpVersion


RAW = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: text/plain\r\n"
    b"Content-Length: 11\r\n"
    b"X-Padded:    spaced value   \r\n"
    b"\r\n"
    b"hello world"
)


def parse(*chunks: bytes) -> HttpResponse:
    response = HttpResponse()
    for chunk in chunks:
        response.append(chunk)
    return response


def summary(response: HttpResponse):
    return (
        response.http_version,
        response.status_code,
        response.reason,
        response.get_headers(),
        response.body.to_bytes(),
    )


def test_three_chunk_scenario():
    response = parse(b"HTTP/1.1 200 OK\r\nContent-Leng", b"th: 5\r\n\r\nHel", b"lo")

    assert response.header_complete
    assert response.http_version is HttpVersion.HTTP_1_1
    assert response.status_code == 200
    assert response.reason == "OK"
    assert response.get_headers() == [("Content-Length", "5")]
    assert response.content_length == 5
    assert response.body.to_bytes() == b"Hello"


def test_single_chunk():
    response = parse(RAW)

    assert summary(response) == (
        HttpVersion.HTTP_1_1,
        200,
        "OK",
        [
            ("Content-Type", "text/plain"),
            ("Content-Length", "11"),
            ("X-Padded", "spaced value"),
        ],
        b"hello world",
    )


def test_every_two_way_split_matches_single_chunk():
    expected = summary(parse(RAW))
    for i in range(len(RAW) + 1):
        assert summary(parse(RAW[:i], RAW[i:])) == expected, f"split at {i}"


def test_boundary_split_across_chunks():
    boundary = RAW.index(b"\r\n\r\n")
    expected = summary(parse(RAW))
    for offset in range(1, 4):
        cut = boundary + offset
        response = parse(RAW[:cut])
        assert not response.header_complete
        response.append(RAW[cut:])
        assert summary(response) == expected


def test_byte_at_a_time():
    chunks = [RAW[i:i + 1] for i in range(len(RAW))]
    assert summary(parse(*chunks)) == summary(parse(RAW))


@pytest.mark.parametrize("size", [2, 3, 7, 16, 50])
def test_fixed_size_chunks(size):
    chunks = [RAW[i:i + size] for i in range(0, len(RAW), size)]
    assert summary(parse(*chunks)) == summary(parse(RAW))


def test_header_complete_flips_exactly_at_boundary():
    end_of_header = RAW.index(b"\r\n\r\n") + 4
    response = HttpResponse()

    for i in range(len(RAW)):
        response.append(RAW[i:i + 1])
        assert response.header_complete == (i + 1 >= end_of_header)
        if not response.header_complete:
            assert len(response.body) == 0
            assert response.status_code == 0


def test_body_bytes_after_header_bypass_parsing():
    response = parse(b"HTTP/1.0 404 Not Found\r\n\r\n")
    response.append(b"HTTP/1.1 200 OK\r\nX: y\r\n\r\n")

    assert response.status_code == 404
    assert response.reason == "Not Found"
    assert response.http_version is HttpVersion.HTTP_1_0
    assert response.get_headers() == []
    assert response.body.to_bytes() == b"HTTP/1.1 200 OK\r\nX: y\r\n\r\n"


def test_incomplete_header_waits_for_more_data():
    response = parse(b"HTTP/1.1 200 OK\r\nHost: x\r\n")

    assert not response.header_complete
    assert response.status_code == 0
    assert response.get_headers() == []


def test_reason_keeps_spaces_and_may_be_empty():
    assert parse(b"HTTP/1.1 500 Internal Server Error\r\n\r\n").reason == "Internal Server Error"
    assert parse(b"HTTP/1.1 204\r\n\r\n").reason == ""


def test_duplicate_header_last_occurrence_wins():
    response = parse(
        b"HTTP/1.1 200 OK\r\n"
        b"Set-Cookie: a=1\r\n"
        b"Vary: Accept\r\n"
        b"set-cookie: b=2\r\n"
        b"\r\n"
    )

    assert response.get_headers() == [("Set-Cookie", "b=2"), ("Vary", "Accept")]


def test_line_without_colon_is_skipped():
    response = parse(b"HTTP/1.1 200 OK\r\nbogus line\r\nA: 1\r\n\r\n")
    assert response.get_headers() == [("A", "1")]


def test_value_may_contain_colons():
    response = parse(b"HTTP/1.1 301 Moved\r\nLocation: http://example.org:8080/x\r\n\r\n")
    assert response.get_header("location") == "http://example.org:8080/x"


@pytest.mark.parametrize("raw", [
    b"HTTP/3.0 200 OK\r\n\r\n",
    b"HTTX/1.1 200 OK\r\n\r\n",
    b"HTTP/1.1 abc OK\r\n\r\n",
    b"HTTP/1.1 -1_0 OK\r\n\r\n",
    b"HTTP/1.1 +200 OK\r\n\r\n",
    b"HTTP/1.1 2_00 OK\r\n\r\n",
    b"HTTP/1.1 20 OK\r\n\r\n",
    b"HTTP/1.1 2000 OK\r\n\r\n",
    b"HTTP/1.1\r\n\r\n",
    b"\r\n\r\n",
])
def test_malformed_status_line_raises(raw):
    response = HttpResponse()
    with pytest.raises(HttpParseError):
        response.append(raw)
    assert not response.header_complete
    assert response.status_code == 0


def test_parse_error_is_sticky():
    response = HttpResponse()
    with pytest.raises(HttpParseError):
        response.append(b"HTTP/1.1 xyz Bad\r\nA: 1\r\n\r\nbody")

    with pytest.raises(HttpParseError):
        response.append(b"more")
    with pytest.raises(HttpParseError):
        response.append(b"HTTP/1.1 200 OK\r\n\r\n")

    assert not response.header_complete
    assert response.status_code == 0
    assert response.get_headers() == []
    assert len(response.body) == 0


def test_content_length_missing_or_invalid():
    assert parse(b"HTTP/1.1 200 OK\r\n\r\n").content_length is None
    assert parse(b"HTTP/1.1 200 OK\r\nContent-Length: many\r\n\r\n").content_length is None


def test_to_bytes_reserializes_parsed_response():
    assert parse(b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\n", b"Hello").to_bytes() == (
        b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\nHello"
    )
