from __future__ import annotations

"""
Simple TCP REPL server for stackcalc.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "3 4 add"}
- Response: {"ok": true, "stack": ["7"], "top": "7", "output": ""} or
            {"ok": false, "stack": [...], "error": {"kind": ..., "message": ...,
             "word": ..., "trace": [...]}}
- Request: {"cmd": "words"} -> {"ok": true, "words": [...]}

Eval responses also carry "output", the text `print` wrote during that
request. Each client connection gets its own Interpreter so that definitions
and the stack persist across that client's evaluations only; its stdin is
empty, so `stdin` fails with UnexpectedEndOfInput instead of blocking.
"""

import dataclasses
import io
import json
import logging
import socket
import threading
from typing import Any, Tuple

from stackcalc.config import get_log_level, get_repl_address
from stackcalc.interpreter import Interpreter
from stackcalc.types.values import format_value

logger = logging.getLogger(__name__)


def new_session(prelude: str | None = 'auto') -> Interpreter:
    """An Interpreter for one client: output is captured, stdin is empty."""
    return Interpreter(prelude, stdin=io.StringIO(), stdout=io.StringIO())


def drain_output(interp: Interpreter) -> str:
    """Return and clear the text the session has printed so far."""
    out = interp.evaluator.stdout
    if not isinstance(out, io.StringIO):
        return ""
    text = out.getvalue()
    out.seek(0)
    out.truncate()
    return text


def handle_request(interp: Interpreter, req: Any) -> dict:
    """Answer one decoded request against `interp`."""
    if not isinstance(req, dict):
        return {"ok": False, "error": "Invalid request: expected a JSON object"}
    cmd = req.get("cmd")
    if cmd == "eval":
        code = req.get("code", "")
        if not isinstance(code, str):
            return {"ok": False, "error": "Invalid request: code must be a string"}
        result = interp.evaluate_line(code)
        resp: dict = {
            "ok": result.ok,
            "stack": [format_value(v) for v in result.stack],
            "output": drain_output(interp),
        }
        if result.ok:
            resp["top"] = format_value(result.top) if result.stack else None
        else:
            resp["error"] = dataclasses.asdict(result.error)
        return resp
    if cmd == "words":
        return {"ok": True, "words": interp.dictionary.names()}
    return {"ok": False, "error": f"Unknown cmd: {cmd}"}


class ReplServer:
    def __init__(self, host: str | None = None, port: int | None = None):
        default_host, default_port = get_repl_address()
        self.host = host or default_host
        self.port = port or default_port

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            logger.info("listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                threading.Thread(target=self._handle_client, args=(conn, addr), daemon=True).start()

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        logger.info("client connected from %s:%d", *addr)
        # One session per client
        interp = new_session()
        with conn:
            buf = b""
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                buf += data
                while b"\n" in buf:
                    line, buf = buf.split(b"\n", 1)
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        req = json.loads(line.decode("utf-8"))
                    except (UnicodeDecodeError, json.JSONDecodeError) as ex:
                        resp = {"ok": False, "error": f"Invalid request: {ex}"}
                    else:
                        resp = handle_request(interp, req)
                    conn.sendall((json.dumps(resp) + "\n").encode("utf-8"))
        logger.info("client %s:%d disconnected", *addr)


def main() -> None:
    logging.basicConfig(level=get_log_level())
    ReplServer().serve_forever()


if __name__ == "__main__":
    main()
