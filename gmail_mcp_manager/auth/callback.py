"""One-shot local HTTP listener for the OAuth2 redirect.

The listener binds the loopback port named in the redirect URI, serves
requests on a background thread, and resolves exactly once: with the
authorization code, with the error reported by Google, or with a timeout.
Every outcome goes through ``_resolve()`` and every exit path goes through
``close()``, which releases the port exactly once.

Requests for any other path (browsers ask for ``/favicon.ico``) get a 404
and leave the flow pending.
"""

from __future__ import annotations

import errno
import logging
import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from types import TracebackType
from urllib.parse import parse_qs, urlparse

from gmail_mcp_manager.utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

DEFAULT_FLOW_TIMEOUT = 300.0

# Idle connections (browser pre-connects) are dropped after this many seconds.
REQUEST_TIMEOUT = 10.0

SUCCESS_PAGE = (
    b"<html><body><h1>Authentication Successful!</h1>"
    b"<p>You can close this window and return to the terminal.</p>"
    b"</body></html>"
)
FAILURE_PAGE = (
    b"<html><body><h1>Authentication Failed</h1>"
    b"<p>%s</p><p>You can close this window.</p></body></html>"
)


@dataclass
class CallbackResult:
    """Outcome of the OAuth callback."""

    code: str | None = None
    error: AuthenticationError | None = None


class CallbackListener:
    """Loopback HTTP listener that captures a single OAuth2 redirect.

    Use as a context manager so the port is released on every exit path:

        >>> with CallbackListener(3000, "/oauth2callback") as listener:
        ...     webbrowser.open(auth_url)
        ...     code = listener.wait(timeout=300)
    """

    def __init__(self, port: int, path: str, host: str = "localhost") -> None:
        self._host = host
        self._port = port
        self._path = path
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None
        self._result: CallbackResult | None = None
        self._resolved = threading.Event()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def port(self) -> int:
        """Port the listener is bound to."""
        return self._port

    @property
    def closed(self) -> bool:
        """True once the listener has released its port."""
        return self._closed

    @property
    def resolved(self) -> bool:
        """True once an outcome has been recorded."""
        return self._resolved.is_set()

    def _resolve(self, result: CallbackResult) -> bool:
        """Record the outcome if none has been recorded yet.

        Returns:
            True if this call won, False if the flow was already resolved.
        """
        with self._lock:
            if self._result is not None:
                return False
            self._result = result
            self._resolved.set()
            return True

    def _handle_callback(self, query: str) -> tuple[int, bytes, CallbackResult]:
        """Turn callback query parameters into a response and an outcome."""
        params = parse_qs(query)

        if "error" in params:
            error_msg = params["error"][0]
            logger.warning("OAuth callback returned error: %s", error_msg)
            return (
                400,
                FAILURE_PAGE % f"Authentication failed: {error_msg}".encode(),
                CallbackResult(
                    error=AuthenticationError(
                        f"OAuth2 error: {error_msg}",
                        details={"oauth_error": error_msg},
                    )
                ),
            )

        code = params.get("code", [None])[0]
        if not code:
            logger.warning("OAuth callback carried no authorization code")
            return (
                400,
                FAILURE_PAGE % b"No authorization code received.",
                CallbackResult(
                    error=AuthenticationError(
                        "No authorization code received",
                        details={"params": sorted(params.keys())},
                    )
                ),
            )

        logger.info("Authorization code received: %s...", code[:10])
        return 200, SUCCESS_PAGE, CallbackResult(code=code)

    def _make_handler(self) -> type[BaseHTTPRequestHandler]:
        listener = self

        class CallbackHandler(BaseHTTPRequestHandler):
            """HTTP request handler for the OAuth callback."""

            timeout = REQUEST_TIMEOUT

            def do_GET(handler_self) -> None:  # noqa: N802, N805
                parsed = urlparse(handler_self.path)

                if parsed.path != listener._path:
                    handler_self.send_response(404)
                    handler_self.end_headers()
                    return

                if listener.resolved:
                    handler_self.send_response(409)
                    handler_self.end_headers()
                    return

                status, page, result = listener._handle_callback(parsed.query)
                try:
                    handler_self.send_response(status)
                    handler_self.send_header("Content-type", "text/html")
                    handler_self.end_headers()
                    handler_self.wfile.write(page)
                except OSError as e:
                    logger.warning("Failed to write OAuth callback response: %s", e)
                finally:
                    listener._resolve(result)

            def log_message(handler_self, format: str, *args: object) -> None:  # noqa: N805
                logger.debug("OAuth callback server: %s", format % args)

        return CallbackHandler

    def start(self) -> None:
        """Bind the port and start serving on a background thread.

        Raises:
            AuthenticationError: If the port is already in use.
        """
        try:
            self._server = ThreadingHTTPServer(
                (self._host, self._port), self._make_handler()
            )
        except OSError as e:
            if e.errno == errno.EADDRINUSE or "Address already in use" in str(e):
                raise AuthenticationError(
                    f"Could not bind OAuth callback port {self._port}: "
                    "port already in use",
                    details={"port": self._port},
                ) from e
            raise

        self._server.daemon_threads = True
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            kwargs={"poll_interval": 0.05},
            name=f"oauth-callback-{self._port}",
            daemon=True,
        )
        self._thread.start()
        logger.info("Local server started on http://%s:%d", self._host, self._port)

    def wait(self, timeout: float = DEFAULT_FLOW_TIMEOUT) -> str:
        """Block until the callback resolves or the timeout fires.

        Args:
            timeout: Seconds to wait for the redirect.

        Returns:
            The authorization code.

        Raises:
            AuthenticationError: On OAuth error, missing code, or timeout.
        """
        if not self._resolved.wait(timeout):
            self._resolve(
                CallbackResult(
                    error=AuthenticationError(
                        "Authentication timeout - please try again",
                        details={"timeout_seconds": timeout},
                    )
                )
            )

        result = self._result
        assert result is not None  # _resolve() always records an outcome
        if result.error is not None:
            raise result.error
        assert result.code is not None
        return result.code

    def close(self) -> None:
        """Stop serving and release the port. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True

        if self._server is None:
            return
        if self._thread is not None:
            self._server.shutdown()
            self._thread.join(timeout=5)
        self._server.server_close()
        logger.debug("OAuth callback server on port %d closed", self._port)

    def __enter__(self) -> CallbackListener:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = [
    "CallbackListener",
    "CallbackResult",
    "DEFAULT_FLOW_TIMEOUT",
    "REQUEST_TIMEOUT",
]
