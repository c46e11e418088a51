"""In-memory customer service answering with the ``{code, data}`` envelope.

Run it with ``TSTIT_URL=http://127.0.0.1:8080 TSTIT_TKN=secret`` exported, then
point tstit at ``examples/customer`` with the same variables set.
"""
from __future__ import annotations

import itertools
import json
import os
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlsplit

PREFIX = "/v1/customer"

_customers: Dict[int, Any] = {}
_ids = itertools.count(1)


class CustomerHandler(BaseHTTPRequestHandler):
    def do_GET(self) -> None:
        self._dispatch("GET")

    def do_POST(self) -> None:
        self._dispatch("POST")

    def do_PUT(self) -> None:
        self._dispatch("PUT")

    def do_PATCH(self) -> None:
        self._dispatch("PATCH")

    def do_DELETE(self) -> None:
        self._dispatch("DELETE")

    def _dispatch(self, method: str) -> None:
        expected_token = os.environ.get("TSTIT_TKN", "")
        if not expected_token or self.headers.get("Authorization") != expected_token:
            self._reply(HTTPStatus.UNAUTHORIZED, "UNAUTHORIZED")
            return
        path = urlsplit(self.path).path.rstrip("/")
        if not path.startswith(PREFIX):
            self._reply(HTTPStatus.NOT_FOUND, "NOT_FOUND")
            return
        customer_id = _parse_id(path[len(PREFIX):])
        try:
            body = self._read_json() if method in {"POST", "PUT", "PATCH"} else None
        except ValueError:
            self._reply(HTTPStatus.BAD_REQUEST, "BAD_REQUEST")
            return
        status, data = _handle(method, customer_id, body)
        self._reply(status, data)

    def _read_json(self) -> Any:
        length = int(self.headers.get("Content-Length") or 0)
        return json.loads(self.rfile.read(length) or b"null")

    def _reply(self, status: HTTPStatus, data: Any) -> None:
        code = 0 if status < 400 else int(status)
        payload = json.dumps({"code": code, "data": data}).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)


def _parse_id(rest: str) -> Optional[int]:
    rest = rest.strip("/")
    if not rest:
        return None
    return int(rest) if rest.isdigit() else -1


def _handle(method: str, customer_id: Optional[int], body: Any) -> Tuple[HTTPStatus, Any]:
    if customer_id is None:
        if method == "POST":
            new_id = next(_ids)
            _customers[new_id] = body
            return HTTPStatus.CREATED, new_id
        if method == "GET":
            return HTTPStatus.OK, list(_customers.values())
        return HTTPStatus.NOT_FOUND, "NOT_FOUND"
    if customer_id not in _customers:
        return HTTPStatus.NOT_FOUND, "NOT_FOUND"
    if method == "GET":
        return HTTPStatus.OK, _customers[customer_id]
    if method == "PUT":
        _customers[customer_id] = body
    elif method == "PATCH":
        current = _customers[customer_id]
        if isinstance(current, dict) and isinstance(body, dict):
            current.update(body)
    elif method == "DELETE":
        del _customers[customer_id]
    else:
        return HTTPStatus.NOT_FOUND, "NOT_FOUND"
    return HTTPStatus.OK, customer_id


def main() -> None:
    url = os.environ.get("TSTIT_URL")
    if not url:
        raise SystemExit("TSTIT_URL env var is not set!")
    address = urlsplit(url)
    server = ThreadingHTTPServer((address.hostname or "127.0.0.1", address.port or 80), CustomerHandler)
    print(f"fake_server is running @ {url}")
    server.serve_forever()


if __name__ == "__main__":
    main()
