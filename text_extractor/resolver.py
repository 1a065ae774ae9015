"""
Result Resolver

Locates the parsed text inside a parser response whose shape is not fixed.

Resolution order for one payload (first usable string wins):
    markdown -> text -> content -> parsed_content
    -> result  (string, or its markdown/text/content)
    -> data    (string, or its markdown/text/content)
    -> document(string, or its markdown/text/content)
    -> the payload itself when it is a string

When no field is recognized, the caller may fall back to `find_long_string`
(first string longer than a threshold, depth-first) and finally to
`serialize_payload` (the whole response as text).
"""

import json
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from logs.logging_config import get_llm_logger
from .schemas import ResolvedField, ExtractionSource

logger = get_llm_logger()

TEXT_FIELDS = ("markdown", "text", "content", "parsed_content")
CONTAINER_FIELDS = ("result", "data", "document")
NESTED_TEXT_FIELDS = ("markdown", "text", "content")


def _usable(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def resolve_field(payload: Any) -> Optional[ResolvedField]:
    """
    Apply the fixed field precedence to one payload.

    Returns:
        ResolvedField with the exact string value, or None if nothing matched
    """
    if isinstance(payload, str):
        return ResolvedField(text=payload, path="$") if _usable(payload) else None

    if not isinstance(payload, Mapping):
        return None

    for name in TEXT_FIELDS:
        if _usable(payload.get(name)):
            return ResolvedField(text=payload[name], path=name)

    for container in CONTAINER_FIELDS:
        value = payload.get(container)
        if _usable(value):
            return ResolvedField(text=value, path=container)
        if isinstance(value, Mapping):
            for name in NESTED_TEXT_FIELDS:
                if _usable(value.get(name)):
                    return ResolvedField(text=value[name], path=f"{container}.{name}")

    return None


def _walk(node: Any, path: str) -> Iterator[Tuple[str, Any]]:
    """Depth-first (path, value) pairs in document order."""
    if isinstance(node, Mapping):
        for key, value in node.items():
            child = f"{path}.{key}" if path else str(key)
            yield child, value
            yield from _walk(value, child)
    elif isinstance(node, (list, tuple)):
        for index, value in enumerate(node):
            child = f"{path}[{index}]"
            yield child, value
            yield from _walk(value, child)


def find_long_string(payload: Any, min_length: int) -> Optional[ResolvedField]:
    """First string value longer than `min_length` anywhere in the tree."""
    for path, value in _walk(payload, ""):
        if isinstance(value, str) and len(value) > min_length:
            return ResolvedField(text=value, path=path)
    return None


def serialize_payload(payload: Any) -> str:
    """Render the whole payload as text."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def extract_unstructured(payloads: List[Any], min_length: int) -> Tuple[ResolvedField, ExtractionSource]:
    """
    Last-resort extraction when no payload has a recognized field.

    The long-string search runs over `payloads` in order; when it finds
    nothing, the first payload is serialized whole. Both outcomes are logged
    as warnings: reaching this point means the parser response schema
    differs from every shape we know.
    """
    for payload in payloads:
        found = find_long_string(payload, min_length)
        if found is not None:
            logger.warning(
                f"[RESOLVER] No recognized field, using first long string | "
                f"path={found.path} | chars={len(found.text)}"
            )
            return found, ExtractionSource.UNSTRUCTURED

    payload = payloads[0]
    keys = list(payload.keys()) if isinstance(payload, Mapping) else type(payload).__name__
    logger.warning(f"[RESOLVER] Unexpected response format, using serialized payload | keys={keys}")
    return ResolvedField(text=serialize_payload(payload), path="$"), ExtractionSource.DEGRADED
