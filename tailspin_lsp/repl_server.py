"""
Simple TCP REPL server for Tailspin.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "(define x 1)"}
- Response: {"ok": true, "result": "<printed datum>"} or {"ok": false, "error": <message>}
- Request: {"cmd": "complete", "line": "(def", "cursor": 4}
- Response: {"ok": true, "start": 1, "matches": ["define"], "close": ")"}

Clients are served one at a time on the calling thread. A single Interpreter
is kept alive so that definitions persist across requests and connections.
"""

from __future__ import annotations

import json
import logging
import socket
from typing import Any, Dict, Optional, Tuple

from tailspin import config
from tailspin.errors import TailspinSyntaxError
from tailspin.interpreter import Interpreter
from tailspin.reader.error_printing import render_error
from tailspin.repl import closing_parens, complete_identifier

log = logging.getLogger("ReplServer")


class ReplServer:
    def __init__(self, host: Optional[str] = None, port: Optional[int] = None):
        default_host, default_port = config.get_repl_address()
        self.host = host or default_host
        self.port = port if port is not None else default_port
        # Keep a single interpreter to maintain session state
        self.interp = Interpreter()

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            log.info("Listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                self._handle_client(conn, addr)

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        log.debug("Client connected: %s:%d", *addr)
        with conn:
            buf = b""
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                buf += data
                while b"\n" in buf:
                    line, buf = buf.split(b"\n", 1)
                    if not line.strip():
                        continue
                    resp = self.handle_request(line)
                    conn.sendall((json.dumps(resp) + "\n").encode("utf-8"))
        log.debug("Client disconnected: %s:%d", *addr)

    def handle_request(self, line: bytes | str) -> Dict[str, Any]:
        """Decode one request line and return the response object."""
        try:
            text = line.decode("utf-8") if isinstance(line, bytes) else line
            req = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as ex:
            return {"ok": False, "error": f"Invalid request: {ex}"}
        if not isinstance(req, dict):
            return {"ok": False, "error": "Invalid request: expected a JSON object"}

        cmd = req.get("cmd")
        if cmd == "eval":
            return self._eval(str(req.get("code", "")))
        if cmd == "complete":
            return self._complete(str(req.get("line", "")), req.get("cursor"))
        return {"ok": False, "error": f"Unknown cmd: {cmd}"}

    def _eval(self, code: str) -> Dict[str, Any]:
        try:
            result = self.interp.eval(code)
        except TailspinSyntaxError as ex:
            return {"ok": False, "error": render_error(code, ex)}
        printed = self.interp.to_string(result)
        payload = result.as_condition()
        if payload is not None:
            message = payload.as_string()
            return {
                "ok": False,
                "error": message if message is not None else self.interp.to_string(payload),
                "result": printed,
            }
        return {"ok": True, "result": printed}

    def _complete(self, line: str, cursor: Any) -> Dict[str, Any]:
        if not isinstance(cursor, int) or not 0 <= cursor <= len(line):
            cursor = len(line)
        start, matches = complete_identifier(line, cursor, self.interp.names())
        return {"ok": True, "start": start, "matches": matches, "close": closing_parens(line)}


if __name__ == "__main__":
    logging.basicConfig(level=config.get_log_level())
    ReplServer().serve_forever()
