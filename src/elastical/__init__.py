"""
Elastical — Elasticsearch REST Client
=====================================

A small client that exposes Elasticsearch's REST API as plain Python calls.
Options become properly encoded requests (method, path, query string, JSON
body); responses come back as parsed bodies with normalized errors.

Key Features:
- One request primitive shared by every operation
- Cached per-index handles for document operations
- Search, count, bulk, multi-get, stats, analyze, aliases, rivers and
  percolators
- Pluggable transport, defaulting to the Elasticsearch HTTP node

Usage:
    from elastical import Client

    client = Client()  # http://127.0.0.1:9200

    client.create_index("blog")
    client.index("blog", "post", {"title": "Hello"}, id="1")
    doc, res = client.get("blog", "1")
    hits, res = client.search(query="hello")

License: MIT
"""

__version__ = "0.1.0"

from .client import Client
from .errors import (
    ElasticalError,
    HttpError,
    InvalidOptionError,
    NotFoundError,
    PartialFailureError,
)
from .index import Index
from .transport import ElasticTransport, Request, Response

__all__ = [
    "Client",
    "ElasticTransport",
    "ElasticalError",
    "HttpError",
    "Index",
    "InvalidOptionError",
    "NotFoundError",
    "PartialFailureError",
    "Request",
    "Response",
]
