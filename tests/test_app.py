import json
import sqlite3

import pytest

from nvrch.app import handle_request, main, search_courses
from nvrch.http import HttpStatus, parse_request


class _Recorder:
    def __init__(self):
        self.sent = b""

    def sendall(self, data):
        self.sent += data


@pytest.fixture
def db():
    connection = sqlite3.connect(":memory:")
    connection.execute("CREATE TABLE courses (department TEXT, number INTEGER, title TEXT)")
    connection.executemany(
        "INSERT INTO courses VALUES (?, ?, ?)",
        [
            ("CSC", 101, "Intro"),
            ("csc", 202, "Data Structures"),
            ("MATH", 101, "Calculus"),
            ("Csc", 303, None),
        ],
    )
    yield connection
    connection.close()


def test_search_matches_department_case_insensitively(db):
    courses = json.loads(search_courses(db))
    assert [c["department"] for c in courses] == ["CSC", "csc", "Csc"]


def test_search_values_are_strings_or_null(db):
    courses = json.loads(search_courses(db))
    assert courses[0] == {"department": "CSC", "number": "101", "title": "Intro"}
    assert courses[2]["title"] is None


def test_search_limit(db):
    db.executemany(
        "INSERT INTO courses VALUES (?, ?, ?)",
        [("CSC", n, "Extra") for n in range(20)],
    )
    assert len(json.loads(search_courses(db))) == 15


def test_search_without_table_raises():
    with sqlite3.connect(":memory:") as empty:
        with pytest.raises(sqlite3.Error):
            search_courses(empty)


def test_course_search_request_is_answered(db):
    request = parse_request('POST /api/course_search HTTP/1.1\r\nHost: a\r\n\r\n{"q":"csc"}')
    request.connection = _Recorder()
    response = handle_request(request, db)
    assert response.status == HttpStatus.OK
    assert response.body == search_courses(db)
    head, _, body = request.connection.sent.decode().partition("\r\n\r\n")
    assert head.startswith("HTTP/1.1 200\r\nContent-Type: text/plain\r\n")
    assert json.loads(body) == json.loads(response.body)


def test_other_paths_are_not_found(db):
    request = parse_request("GET /elsewhere HTTP/1.1\r\nHost: a\r\n\r\n")
    request.connection = _Recorder()
    response = handle_request(request, db)
    assert response.status == HttpStatus.NOT_FOUND
    assert response.body is None
    assert request.connection.sent == b""


def test_failed_query_is_not_found():
    request = parse_request("GET /api/course_search HTTP/1.1\r\nHost: a\r\n\r\n")
    request.connection = _Recorder()
    with sqlite3.connect(":memory:") as empty:
        response = handle_request(request, empty)
    assert response.status == HttpStatus.NOT_FOUND
    assert request.connection.sent == b""


def test_request_is_logged(db, capsys):
    request = parse_request("GET /api/course_search HTTP/1.1\r\nHost: a\r\n\r\n[1]")
    handle_request(request, db)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "GET /api/course_search {Host:a}, [1]"
    assert lines[1] == "[1.000000]"


def test_main_reports_unopenable_database(tmp_path, capsys):
    assert main(["--database", str(tmp_path / "missing" / "catalog.db")]) == 1
    assert "Cannot open database" in capsys.readouterr().err