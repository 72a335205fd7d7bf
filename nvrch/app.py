"""Course catalogue server: answers course searches from a SQLite database."""

from __future__ import annotations

import argparse
import sqlite3
import sys
from collections.abc import Sequence
from typing import Any

from .http import (
    CONTENT_TYPE_TEXT,
    HttpRequest,
    HttpResponse,
    HttpServer,
    HttpStatus,
    headers_to_string,
    respond,
)
from .jsonvalue import JsonElement, parse

SEARCH_SQL = "SELECT * FROM courses WHERE LOWER(department) LIKE 'csc' LIMIT 15;"


def _cell(value: Any) -> JsonElement:
    if value is None:
        return JsonElement.null()
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return JsonElement.string(str(value))


def search_courses(db: sqlite3.Connection) -> str:
    """Return a JSON array of matching courses, each column as a string or null.

    Raises sqlite3.Error if the query fails.
    """
    cursor = db.execute(SEARCH_SQL)
    columns = [column[0] for column in cursor.description]
    out = JsonElement.array()
    for row in cursor:
        course = JsonElement.object()
        for name, value in zip(columns, row):
            course.set_key(name, _cell(value))
        out.append(course)
    return out.stringify(False)


def handle_request(request: HttpRequest, db: sqlite3.Connection) -> HttpResponse:
    """Log ``request``, answer it and return the response that was built.

    The response is sent only when it has a body and the request has a
    connection; a not-found response goes out empty-handed.
    """
    print(
        request.method.value,
        request.request_uri,
        headers_to_string(request.headers, False),
        request.body,
    )
    response = HttpResponse()
    if "/api/course_search" in request.request_uri:
        print(parse(request.body).stringify(False))
        try:
            response.body = search_courses(db)
        except sqlite3.Error as exc:
            print(f"SQL error: {exc}", file=sys.stderr)

    response.status = HttpStatus.OK if response.body else HttpStatus.NOT_FOUND
    response.set_header("Content-Type", CONTENT_TYPE_TEXT)
    if response.body is not None and request.connection is not None:
        respond(response, request.connection)
    return response


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="nvrchserver", description="Serve the course catalogue.")
    parser.add_argument("--database", default="catalog.db", help="SQLite catalogue file")
    parser.add_argument("--port", default="8080", help="port to listen on")
    args = parser.parse_args(argv)

    try:
        db = sqlite3.connect(args.database)
    except sqlite3.Error as exc:
        print(f"Cannot open database {exc}", file=sys.stderr)
        return 1

    try:
        with HttpServer(args.port, handle_request, db) as server:
            server.listen()
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"server error: {exc}", file=sys.stderr)
    finally:
        db.close()
    return 1


if __name__ == "__main__":
    sys.exit(main())