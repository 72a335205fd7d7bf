# nvrch

A small HTTP server that answers course catalogue searches with JSON read
from a SQLite database.

## Installing

```
pip install .
```

## Running

```
nvrch
```

By default the server opens `catalog.db` in the current directory and
listens on port 8080. Both can be changed:

```
nvrch --database path/to/catalog.db --port 9000
```

If the database cannot be opened the command prints
`Cannot open database ...` and exits with status 1. Stop the server with
Ctrl-C.

Then query it:

```
curl -X POST http://localhost:8080/api/course_search -d '{}'
```

## What the server does

- Each connection carries one request. The server reads the request in a
  single read of at most 2047 bytes, handles it and closes the connection.
- Every request is logged to standard output: method, URI, headers in
  compact `{key:value},` form, and body.
- A request whose URI contains `/api/course_search` has its body parsed as
  JSON and echoed to standard output. The answer is a `200` response of type
  `text/plain` whose body is a JSON array of up to 15 rows from the `courses`
  table where `LOWER(department)` is like `csc`. Each row is an object keyed
  by column name, with every value written as a string, or `null`.
- Requests that cannot be parsed (unknown method, unknown HTTP version, no
  empty line ending the headers) are reported on standard error and the
  connection is closed.

## What it does not do

- Requests to any other path are given no response: the connection is
  simply closed. The same happens when the database query fails; the error
  is printed as `SQL error: ...` on standard error.
- The request body is not used to filter the search; the query is fixed.
- There is no keep-alive, no chunked transfer and no support for requests
  larger than one read.

## Using the pieces

### JSON values

`nvrch.jsonvalue` has a small JSON model built around `JsonElement`, whose
kind is a `JsonType`:

```python
from nvrch.jsonvalue import JsonElement, parse, stringify

obj = JsonElement.object("name", JsonElement.string("Algorithms"))
obj.set_key("credits", JsonElement.number(3))
print(stringify(obj, False))   # {"name":"Algorithms","credits":3.000000}

doc = parse('{"tags": ["a", "b"], "open": true}')
print(doc.get_key("tags").get_index(1).stringify(False))   # "b"
```

- `JsonElement.string`, `number`, `boolean`, `null`, `array` and `object`
  build values. Numbers are held as single-precision floats and written with
  six decimal places.
- `get_key` and `set_key` work on objects; setting a key to `None` removes
  it. `append`, `pop` and `get_index` work on arrays. Using them on the
  wrong kind of value raises `TypeError`.
- `stringify` writes compact JSON and escapes forward slashes. Passing
  `None` to the module-level `stringify` gives an empty string.
- `parse` is lenient: malformed input yields a null element, and anything
  after the first value is ignored.

### HTTP

`nvrch.http` provides:

- `parse_request(data)` turning raw bytes or text into an `HttpRequest`
  (method as `HttpMethod`, version as `HttpVersion`, headers as a list of
  `(key, value)` pairs, body); it raises `HttpParseError` on bad input.
- `headers_to_string(headers, pretty_print)`.
- `HttpResponse` with `set_header` and `encode`, and `respond(response,
  connection)`, which adds a `Content-Length` header and sends the response;
  it raises `ValueError` if the response has no body.
- `HttpStatus` with `OK` and `NOT_FOUND`.
- `HttpServer(port, entrypoint, context)`, a single-threaded server. Its
  `listen()` serves until `close()` is called, calling
  `entrypoint(request, context)` for each request. It can be used as a
  context manager, and its `port` property gives the bound port.

### Serving from code

`nvrch.app` offers `search_courses(db)`, returning the JSON text for a
`sqlite3` connection, and `handle_request(request, db)`, which logs and
answers a request and returns the `HttpResponse` it built.

### Text helpers

`nvrch.textutil` provides `join_with_delim(strings, delimiter)` and
`strip_whitespace(text)`.

## Tests

```
pip install ".[test]"
pytest
```