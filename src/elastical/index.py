"""
Elastical Index — Index-Scoped Operations
=========================================

Creating, deleting and interacting with Elasticsearch indices.

Two flavours of every operation live here:

    - module-level functions taking a Client first, for operations that may
      target several indices at once (``create``, ``delete``, ``exists``,
      ``refresh``, mappings, settings, aliases, percolators)
    - ``Index`` methods, bound to a single index name, for document-level
      operations (``get``, ``index``, ``delete``) and thin delegations

Every function builds the URL path and query string, sends it through
``client.request()`` and post-processes the response body.

Example:
    client = Client()
    index, _ = create(client, "blog")
    index.index("post", {"title": "Hello"}, id="1")
    doc, res = index.get("1")
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from . import util
from .errors import ElasticalError, HttpError, InvalidOptionError, TransportError, is_missing

_logger = logging.getLogger(__name__)

Names = Union[None, str, Sequence[str]]


# -- Index-level operations ----------------------------------------------------

def create(client, name: str, options: Optional[Dict[str, Any]] = None) -> Tuple["Index", dict]:
    """
    Create a new index.

    Args:
        client: Client instance
        name: Name of the new index
        options: Index settings and mappings, sent as the request body

    Returns:
        Tuple of (Index handle, response body)
    """
    res = client.request("/" + util.encode(name), method="PUT", json=options or None)
    return client.get_index(name), res.body


def delete(client, names: Names = None) -> dict:
    """
    Delete one or more indices.

    If no names are given, ALL indices on the server are deleted.

    Args:
        client: Client instance
        names: Index name or list of names

    Returns:
        Response body
    """
    return client.request("/" + util.join_names(names), method="DELETE").body


def exists(client, names: Names) -> bool:
    """
    Check whether all the given indices exist.

    Any error, including network failures, is reported as ``False``.
    """
    try:
        client.request("/" + util.join_names(names), method="HEAD")
    except (ElasticalError, TransportError) as exc:
        _logger.debug("Existence check for %r failed: %s", names, exc)
        return False
    return True


def refresh(client, names: Names = None) -> dict:
    """Refresh the given indices, or all indices."""
    path = "/" + util.join_names(names, "_all") + "/_refresh"
    return client.request(path, method="POST").body


def optimize(client, names: Names = None, options: Optional[Dict[str, Any]] = None, **kwargs) -> dict:
    """
    Optimize (force merge) the given indices, or all indices.

    Options such as ``max_num_segments``, ``only_expunge_deletes``,
    ``flush`` or ``wait_for_merge`` go to the query string.
    """
    params = util.options(options, kwargs)
    path = util.with_query("/" + util.join_names(names, "_all") + "/_optimize", params)
    return client.request(path, method="POST").body


def get_mapping(client, names: Names = None, type: Names = None) -> dict:
    """
    Get the mapping of the given indices, optionally limited to types.

    Args:
        client: Client instance
        names: Index name(s), all indices when omitted
        type: Type name(s)

    Returns:
        Mapping definitions keyed by index
    """
    path = "/" + util.join_names(names, "_all")
    if type:
        path += "/" + util.join_names(type)
    return client.request(path + "/_mapping", method="GET").body


def put_mapping(client, names: Names, type: str, mapping: Dict[str, Any]) -> dict:
    """Register a mapping for ``type`` in the given indices."""
    path = "/" + util.join_names(names, "_all") + "/" + util.encode(type) + "/_mapping"
    return client.request(path, method="PUT", json=mapping).body


def delete_mapping(client, name: str, type: str) -> dict:
    """Delete a type mapping, along with its documents."""
    path = "/" + util.encode(name) + "/" + util.encode(type)
    return client.request(path, method="DELETE").body


def get_settings(client, names: Names = None) -> dict:
    """Get the settings of the given indices, or all indices."""
    path = "/" + util.join_names(names, "_all") + "/_settings"
    return client.request(path, method="GET").body


def update_settings(client, names: Names, settings: Dict[str, Any]) -> dict:
    """Update live settings of the given indices (all indices for None)."""
    path = "/" + util.join_names(names, "_all") + "/_settings"
    return client.request(path, method="PUT", json=settings).body


def get_aliases(client, names: Names = None) -> dict:
    """Get the aliases of the given indices, or of all indices."""
    segment = util.join_names(names)
    path = ("/" + segment if segment else "") + "/_aliases"
    return client.request(path, method="GET").body


def set_percolator(client, index: str, name: str, query: Dict[str, Any]) -> dict:
    """
    Register a percolator query.

    Args:
        client: Client instance
        index: Index the query applies to
        name: Percolator name
        query: Percolator document, e.g. ``{"query": {...}}``

    Returns:
        Response body
    """
    return client.request(_percolator_path(index, name), method="POST", json=query).body


def get_percolator(client, index: str, name: str) -> Tuple[Optional[dict], dict]:
    """Fetch a registered percolator; returns (source, response body)."""
    body = client.request(_percolator_path(index, name), method="GET").body
    return util.field(body, "_source"), body


def delete_percolator(client, index: str, name: str) -> dict:
    """Remove a registered percolator."""
    return client.request(_percolator_path(index, name), method="DELETE").body


def percolate(client, index: str, type: str, doc: Dict[str, Any],
              query: Optional[Dict[str, Any]] = None) -> Tuple[List[str], dict]:
    """
    Find the registered percolators matching a document.

    A bare document is wrapped into ``{"doc": ...}``.

    Args:
        client: Client instance
        index: Index name
        type: Document type
        doc: Document, bare or already wrapped in ``{"doc": ...}``
        query: Optional query restricting the percolators to run

    Returns:
        Tuple of (matching percolator names, response body)
    """
    payload = util.merge(doc) if "doc" in doc else {"doc": doc}
    if query is not None:
        payload["query"] = query

    path = "/" + util.encode(index) + "/" + util.encode(type) + "/_percolate"
    body = client.request(path, method="GET", json=payload).body
    return util.field(body, "matches", []), body


def _percolator_path(index: str, name: str) -> str:
    return "/_percolator/" + util.encode(index) + "/" + util.encode(name)


# -- Index handle ----------------------------------------------------------------

class Index:
    """
    Handle bound to one index on the server.

    Obtain instances through ``Client.get_index()``, which caches them so the
    same name always yields the same object.

    Example:
        blog = client.get_index("blog")
        blog.index("post", {"title": "Welcome"}, id="1", refresh=True)
        hits, res = blog.search(query="welcome")
    """

    def __init__(self, client, name: str):
        self.client = client
        self.name = name

    def __repr__(self):
        return "Index(%r)" % self.name

    # -- Documents ---------------------------------------------------------

    def get(self, id: Any, options: Optional[Dict[str, Any]] = None, **kwargs) -> Tuple[Optional[dict], dict]:
        """
        Get a document by id.

        Args:
            id: Document id
            options: Get options, also accepted as keyword arguments:
                fields: Field name or list of names to retrieve
                ignore_missing: Return a None document instead of raising
                    when the index, type or document does not exist
                type: Restrict to this type (default "_all")
                preference, realtime, refresh, routing: Passed through

        Returns:
            Tuple of (document source or fields, response body)

        Raises:
            HttpError: On failure, unless ignored via ``ignore_missing``
        """
        params = util.options(options, kwargs)

        if isinstance(params.get("fields"), (list, tuple)):
            params["fields"] = ",".join(params["fields"])

        ignore_missing = params.pop("ignore_missing", False)
        type = params.pop("type", None) or "_all"

        path = "/" + "/".join(util.encode(part) for part in (self.name, type, id))

        try:
            res = self.client.request(util.with_query(path, params), method="GET")
        except HttpError as exc:
            if ignore_missing and is_missing(exc.status, exc.body):
                return None, exc.body
            raise

        body = res.body
        doc = util.field(body, "fields", util.field(body, "_source"))
        return doc, body

    def index(self, type: str, doc: Dict[str, Any], options: Optional[Dict[str, Any]] = None, **kwargs) -> dict:
        """
        Add or replace a document.

        If no id is given one is generated by the server (POST), otherwise the
        document is put at that id (PUT).

        Args:
            type: Document type
            doc: Document data
            options: Index options, also accepted as keyword arguments:
                create: Only create the document if it does not exist yet
                id: Document id
                version: Document version; sets ``version_type`` to
                    "external" unless given
                consistency, parent, percolate, refresh, replication,
                routing, timeout, version_type: Passed through

        Returns:
            Response body
        """
        params = util.options(options, kwargs)

        if params.pop("create", None):
            params["op_type"] = "create"

        id = params.pop("id", None)
        has_id = id is not None and id != ""

        if params.get("version") and not params.get("version_type"):
            params["version_type"] = "external"

        path = "/" + util.encode(self.name) + "/" + util.encode(type)
        if has_id:
            path += "/" + util.encode(id)

        return self.client.request(
            util.with_query(path, params),
            method="PUT" if has_id else "POST",
            json=doc,
        ).body

    # Historical alias.
    set = index

    def delete(self, type: str, id: Any = None, options: Optional[Dict[str, Any]] = None, **kwargs) -> dict:
        """
        Delete a document, or every document matching a query.

        Args:
            type: Document type
            id: Document id (ignored in delete-by-query mode)
            options: Delete options, also accepted as keyword arguments:
                query: Delete all documents matching this query instead
                ignore_missing: Do not raise when the index, type or document
                    does not exist
                consistency, parent, refresh, replication, routing, version:
                    Passed through

        Returns:
            Response body (the failure body when a miss was ignored)
        """
        params = util.options(options, kwargs)
        ignore_missing = params.pop("ignore_missing", False)
        query = params.pop("query", None)

        path = "/" + util.encode(self.name) + "/" + util.encode(type)
        if query is not None:
            path += "/_query"
            if isinstance(query, str):
                query = {"query_string": {"query": query}}
        else:
            if id is None:
                raise InvalidOptionError("A document id or a query option is required.")
            path += "/" + util.encode(id)

        try:
            res = self.client.request(util.with_query(path, params), method="DELETE", json=query)
        except HttpError as exc:
            if ignore_missing and is_missing(exc.status, exc.body):
                return exc.body
            raise

        return res.body

    def multi_get(self, type: Optional[str] = None, docs: Optional[Sequence[Any]] = None,
                  options: Optional[Dict[str, Any]] = None, **kwargs) -> Tuple[List[dict], dict]:
        """Fetch several documents of this index in one request."""
        return self.client.multi_get(self.name, type, docs, options, **kwargs)

    # -- Search ------------------------------------------------------------

    def search(self, options: Optional[Dict[str, Any]] = None, **kwargs) -> Tuple[Optional[dict], dict]:
        """Search documents of this index. See ``Client.search()``."""
        return self.client.search(util.merge(util.options(options, kwargs), {"index": self.name}))

    def count(self, query: Any = None, options: Optional[Dict[str, Any]] = None, **kwargs) -> Tuple[int, dict]:
        """Count documents of this index. See ``Client.count()``."""
        return self.client.count(query, util.merge(util.options(options, kwargs), {"index": self.name}))

    def bulk(self, operations: Sequence[Dict[str, Any]], options: Optional[Dict[str, Any]] = None, **kwargs) -> dict:
        """Run bulk operations against this index. See ``Client.bulk()``."""
        return self.client.bulk(operations, util.merge(util.options(options, kwargs), {"index": self.name}))

    def analyze(self, text: str, options: Optional[Dict[str, Any]] = None, **kwargs) -> dict:
        """Analyze text with this index's analyzers. See ``Client.analyze()``."""
        return self.client.analyze(text, util.merge(util.options(options, kwargs), {"index": self.name}))

    def stats(self, options: Optional[Dict[str, Any]] = None, **kwargs) -> dict:
        """Get statistics of this index. See ``Client.stats()``."""
        return self.client.stats(util.merge(util.options(options, kwargs), {"index": self.name}))

    # -- Index management --------------------------------------------------

    def delete_index(self) -> dict:
        """Delete this index."""
        return delete(self.client, self.name)

    def exists(self) -> bool:
        """Check whether this index exists on the server."""
        return exists(self.client, self.name)

    def refresh(self) -> dict:
        """Refresh this index."""
        return refresh(self.client, self.name)

    def optimize(self, options: Optional[Dict[str, Any]] = None, **kwargs) -> dict:
        """Optimize this index. See ``optimize()``."""
        return optimize(self.client, self.name, options, **kwargs)

    def get_mapping(self, type: Names = None) -> dict:
        """Get the mappings of this index."""
        return get_mapping(self.client, self.name, type)

    def put_mapping(self, type: str, mapping: Dict[str, Any]) -> dict:
        """Register a mapping for a type of this index."""
        return put_mapping(self.client, self.name, type, mapping)

    def delete_mapping(self, type: str) -> dict:
        """Delete a type mapping of this index."""
        return delete_mapping(self.client, self.name, type)

    def get_settings(self) -> dict:
        """Get the settings of this index."""
        return get_settings(self.client, self.name)

    def update_settings(self, settings: Dict[str, Any]) -> dict:
        """Update the settings of this index."""
        return update_settings(self.client, self.name, settings)

    def get_aliases(self) -> dict:
        """Get the aliases of this index."""
        return get_aliases(self.client, self.name)

    # -- Percolation -------------------------------------------------------

    def set_percolator(self, name: str, query: Dict[str, Any]) -> dict:
        """Register a percolator query on this index."""
        return set_percolator(self.client, self.name, name, query)

    def get_percolator(self, name: str) -> Tuple[Optional[dict], dict]:
        """Fetch a percolator of this index."""
        return get_percolator(self.client, self.name, name)

    def delete_percolator(self, name: str) -> dict:
        """Remove a percolator of this index."""
        return delete_percolator(self.client, self.name, name)

    def percolate(self, type: str, doc: Dict[str, Any], query: Optional[Dict[str, Any]] = None) -> Tuple[List[str], dict]:
        """Find the percolators of this index matching a document."""
        return percolate(self.client, self.name, type, doc, query)
