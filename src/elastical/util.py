"""
Elastical Util — Option Shaping Helpers
=======================================

Pure helpers shared by every operation: layered option merging, iteration
over sequences or mappings, and the encoding rules used to turn option bags
into URL path segments and query strings.

None of these functions perform I/O.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union
from urllib.parse import quote, urlsplit


# Left unescaped in path segments and query components, on top of the
# characters quote() never touches.
_COMPONENT_SAFE = "!*'()"


def each(obj: Union[Sequence, Mapping], visitor: Callable[[Any, Any], Any]) -> None:
    """
    Call ``visitor(value, key)`` for every item of a sequence or mapping.

    For sequences the key is the item index, for mappings it is the key.
    Definition order is preserved.
    """
    if isinstance(obj, Mapping):
        for key in list(obj.keys()):
            visitor(obj[key], key)
    else:
        for i, value in enumerate(obj):
            visitor(value, i)


def merge(*sources: Optional[Mapping]) -> Dict[str, Any]:
    """
    Deep merge option sources into a brand new dict.

    Later sources take precedence over earlier ones. Nested dicts are merged
    recursively into fresh dicts, so the inputs are never mutated. Lists,
    dates and every other value are copied by reference. ``None`` values are
    copied as-is.

    Args:
        *sources: Zero or more mappings, lowest priority first

    Returns:
        Merged dict
    """
    return mix({}, *sources)


def mix(target: Dict[str, Any], *sources: Optional[Mapping]) -> Dict[str, Any]:
    """
    Like merge(), but augments ``target`` instead of returning a new dict.

    Args:
        target: Dict receiving the merged values
        *sources: Mappings to mix into target, lowest priority first

    Returns:
        The same target dict
    """
    for source in sources:
        if not source:
            continue

        for key, value in source.items():
            if value is None:
                target[key] = value
            elif isinstance(value, Mapping):
                if not isinstance(target.get(key), dict):
                    target[key] = {}
                mix(target[key], value)
            else:
                target[key] = value

    return target


def values(obj: Union[Sequence, Mapping]) -> List[Any]:
    """Return the values of a mapping, or a copy of a sequence, as a list."""
    if isinstance(obj, Mapping):
        return [obj[key] for key in obj]
    return list(obj)


def options(opts: Optional[Mapping] = None, kwargs: Optional[Mapping] = None) -> Dict[str, Any]:
    """
    Build a fresh option bag from an options dict and keyword arguments.

    Keyword names with a trailing underscore lose it, so Python keywords can
    be passed (``from_=10`` becomes ``from``).

    Args:
        opts: Option dict supplied by the caller
        kwargs: Keyword arguments supplied by the caller

    Returns:
        New option dict, keyword arguments winning over ``opts``
    """
    renamed = {}
    for key, value in (kwargs or {}).items():
        if key.endswith("_") and len(key) > 1:
            key = key[:-1]
        renamed[key] = value

    return merge(opts, renamed)


def wire_value(value: Any) -> str:
    """Render a query-string value; booleans become "1" or "0"."""
    if value is True:
        return "1"
    if value is False:
        return "0"
    if isinstance(value, (list, tuple)):
        return ",".join(wire_value(v) for v in value)
    return str(value)


def encode(value: Any) -> str:
    """Percent-encode a single path segment or query component."""
    return quote(str(value), safe=_COMPONENT_SAFE)


def join_names(names: Union[None, str, Sequence[str]], default: Optional[str] = None) -> str:
    """
    Turn one name or a list of names into a single encoded path segment.

    ``["foo", "bar"]`` becomes ``foo%2Cbar``. Empty or missing names fall back
    to ``default`` (for instance ``_all``), or to an empty string.
    """
    if isinstance(names, (list, tuple)):
        names = ",".join(str(name) for name in names)

    if names is None or names == "":
        return encode(default) if default else ""

    return encode(names)


def query_string(params: Mapping[str, Any]) -> str:
    """
    Build an ordered ``key=value&...`` query string.

    ``None`` values are skipped and booleans are coerced to "1"/"0".
    """
    pairs = []
    for name, value in params.items():
        if value is None:
            continue
        pairs.append(encode(name) + "=" + encode(wire_value(value)))
    return "&".join(pairs)


def with_query(url: str, params: Mapping[str, Any]) -> str:
    """Append the query string built from ``params`` to ``url`` if non-empty."""
    query = query_string(params)
    if query:
        return url + "?" + query
    return url


def field(body: Any, key: str, default: Any = None) -> Any:
    """
    Read ``key`` from a decoded response body.

    Bodies that are not JSON objects (plain text from a proxy, for instance)
    yield ``default``.
    """
    if isinstance(body, Mapping):
        return body.get(key, default)
    return default


def strip_auth(url: str) -> str:
    """Remove the "user:password@" part of a URL."""
    parts = urlsplit(url)
    return parts._replace(netloc=parts.netloc.rpartition("@")[2]).geturl()
