import json
import logging
import threading
import time
import uuid
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from types import SimpleNamespace

import pytest


# ---- Local webhook endpoint ------------------------------------------------

class _WebhookRequestHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        server = self.server
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length)
        server.received.append(
            SimpleNamespace(
                path=self.path,
                headers=dict(self.headers),
                json=json.loads(body or b"null"),
            )
        )
        if server.delay:
            time.sleep(server.delay)
        try:
            self.send_response(server.status)
            self.send_header("Content-Length", "0")
            self.end_headers()
        except (BrokenPipeError, ConnectionResetError):
            # Client gave up (timeout tests).
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def webhook_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _WebhookRequestHandler)
    server.daemon_threads = True
    server.received = []
    server.status = 204
    server.delay = 0
    server.url = f"http://127.0.0.1:{server.server_address[1]}/api/webhooks/1/token"

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()


# ---- Logging helpers -------------------------------------------------------

@pytest.fixture
def make_record():
    def _make(level=logging.WARNING, msg="disk low", args=(), name="tests.app", **extra):
        return logging.getLogger(name).makeRecord(
            name, level, __file__, 1, msg, args, None, extra=extra or None
        )
    return _make


@pytest.fixture
def attach():
    """Attach a handler to a fresh, non-propagating logger."""
    loggers = []

    def _attach(handler):
        logger = logging.getLogger(f"tests.{uuid.uuid4().hex}")
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.addHandler(handler)
        loggers.append((logger, handler))
        return logger

    yield _attach

    for logger, handler in loggers:
        logger.removeHandler(handler)
