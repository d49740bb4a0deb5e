"""
Elastical Transport — Request Descriptors and HTTP Dispatch
===========================================================

The client never talks to sockets itself. It assembles a ``Request``
describing one HTTP call and hands it to a ``Transport``:

    Request ──► Transport.perform() ──► TransportResponse ──► Response

``ElasticTransport`` is the default transport. It sends each request through
a short-lived ``elastic_transport.Urllib3HttpNode`` (the HTTP layer of the
official Elasticsearch client), so connections are established as needed and
are not persistent. Any object with a matching ``perform`` method can be
injected instead.
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, NamedTuple, Optional, Protocol, Tuple
from urllib.parse import unquote, urlsplit

from elastic_transport import HttpHeaders, NodeConfig, SerializationError, Urllib3HttpNode
from elasticsearch.serializer import JSONSerializer

_logger = logging.getLogger(__name__)

_serializer = JSONSerializer()

# Transport options understood by the urllib3 node.
_NODE_OPTIONS = ("verify_certs", "ca_certs", "client_cert", "client_key",
                 "connections_per_node", "http_compress", "ssl_show_warn")

# Options consumed while building the request itself.
_REQUEST_OPTIONS = ("headers",)


def dumps(data: Any) -> str:
    """Serialize ``data`` to compact JSON text (dates become ISO strings)."""
    return _serializer.dumps(data).decode("utf-8")


def decode_body(raw: Optional[bytes]) -> Tuple[Any, bool]:
    """
    Opportunistically decode a response payload as JSON.

    Args:
        raw: Response payload

    Returns:
        Tuple of (body, decoded). ``decoded`` is False when the payload was
        kept as text. An empty payload becomes an empty dict.
    """
    if raw is None:
        return {}, False

    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    if not raw:
        return {}, False

    try:
        return _serializer.loads(bytes(raw)), True
    except (SerializationError, ValueError):
        return raw.decode("utf-8", "replace"), False


@dataclass
class Request:
    """
    Fully assembled HTTP request, built fresh for every call.

    Attributes:
        method: HTTP method
        url: Absolute URL including the query string
        path: Resource path including the query string
        json: JSON-serializable body, if any
        body: Raw str/bytes body, if any (wins over ``json``)
        timeout: Request timeout in milliseconds
        headers: Extra request headers
        options: Merged transport options
    """

    method: str
    url: str
    path: str
    json: Any = None
    body: Any = None
    timeout: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)

    def payload(self) -> Tuple[Optional[bytes], Optional[str]]:
        """Return the encoded body and its content type."""
        if self.body is not None:
            if isinstance(self.body, str):
                return self.body.encode("utf-8"), "application/x-ndjson"
            return bytes(self.body), "application/octet-stream"
        if self.json is not None:
            return dumps(self.json).encode("utf-8"), "application/json"
        return None, None


class TransportResponse(NamedTuple):
    """Raw outcome of a dispatched request."""

    status: int
    headers: Dict[str, str]
    body: bytes


@dataclass
class Response:
    """
    Classified server response.

    Attributes:
        status: HTTP status code
        headers: Response headers
        body: Decoded JSON value, or the payload text when ``decoded`` is False
        decoded: Whether the payload parsed as JSON
    """

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = field(default_factory=dict)
    decoded: bool = True

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299

    @classmethod
    def from_transport(cls, raw: TransportResponse) -> "Response":
        body, decoded = decode_body(raw.body)
        return cls(status=raw.status, headers=dict(raw.headers or {}), body=body, decoded=decoded)


class Transport(Protocol):
    """Anything able to execute a Request."""

    def perform(self, request: Request) -> TransportResponse:
        """
        Execute the request.

        Args:
            request: Assembled request

        Returns:
            TransportResponse with status, headers and raw payload

        Raises:
            elastic_transport.TransportError: On network failure or timeout
        """


class ElasticTransport:
    """
    Transport backed by ``elastic_transport.Urllib3HttpNode``.

    Supported options: ``headers``, ``verify_certs``, ``ca_certs``,
    ``client_cert``, ``client_key``, ``connections_per_node``,
    ``http_compress`` and ``ssl_show_warn``. Other options (proxies, cookie
    jars, redirect policies) have no node equivalent and are ignored.
    """

    def perform(self, request: Request) -> TransportResponse:
        parts = urlsplit(request.url)
        node = Urllib3HttpNode(self._node_config(parts, request))

        target = parts.path or "/"
        if parts.query:
            target += "?" + parts.query

        headers = HttpHeaders(request.headers)
        if parts.username is not None:
            credentials = "%s:%s" % (unquote(parts.username), unquote(parts.password or ""))
            headers["authorization"] = "Basic " + base64.b64encode(credentials.encode("utf-8")).decode("ascii")

        body, content_type = request.payload()
        if content_type and "content-type" not in headers:
            headers["content-type"] = content_type

        try:
            meta, raw = node.perform_request(
                request.method,
                target,
                body=body,
                headers=headers,
                request_timeout=_seconds(request.timeout),
            )
        finally:
            node.close()

        return TransportResponse(status=meta.status, headers=dict(meta.headers), body=raw)

    def _node_config(self, parts, request: Request) -> NodeConfig:
        """Build the node configuration for one request."""
        scheme = parts.scheme or "http"
        port = parts.port or (443 if scheme == "https" else 80)

        config_kwargs: Dict[str, Any] = {
            "scheme": scheme,
            "host": parts.hostname or "localhost",
            "port": port,
            "request_timeout": _seconds(request.timeout),
        }

        for key, value in request.options.items():
            if key in _NODE_OPTIONS:
                config_kwargs[key] = value
            elif key not in _REQUEST_OPTIONS:
                _logger.debug("Ignoring unsupported transport option '%s'", key)

        return NodeConfig(**config_kwargs)


def _seconds(timeout_ms: Optional[int]) -> Optional[float]:
    if timeout_ms is None:
        return None
    return timeout_ms / 1000.0
