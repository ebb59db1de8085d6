import re
from typing import Any, Dict, Optional

from ...exceptions import LinkNotFound


def get_href(resource: Dict[str, Any]) -> Optional[str]:
    """Return the resource's own URL (``_meta.href``), or None when absent."""
    meta = resource.get("_meta") if isinstance(resource, dict) else None
    if isinstance(meta, dict):
        return meta.get("href")
    return None


def find_link(resource: Dict[str, Any], rel: str) -> Optional[str]:
    """Return the first hyperlink named *rel* on the resource, or None when absent."""
    meta = resource.get("_meta") if isinstance(resource, dict) else None
    if not isinstance(meta, dict):
        return None
    for link in meta.get("links") or []:
        if isinstance(link, dict) and link.get("rel") == rel and link.get("href"):
            return link["href"]
    return None


def get_link(resource: Dict[str, Any], rel: str) -> str:
    """
    Return the hyperlink named *rel* on the resource.

    Raises:
        LinkNotFound: If the relation is not present on the resource.
    """
    link = find_link(resource, rel)
    if link is None:
        href = get_href(resource)
        raise LinkNotFound(
            f"Link '{rel}' not found on resource {href or '<unknown>'}",
            code="link_not_found",
            details={"rel": rel, "href": href},
        )
    return link


def id_from_link(link: Optional[str], collection: str) -> Optional[str]:
    """
    Extract the identifier that follows ``/<collection>/`` in a Hub URL.

    ``id_from_link(".../components/abc/versions/def", "versions")`` returns ``"def"``.
    """
    if not link:
        return None
    match = re.search(rf"/{re.escape(collection)}/([^/?#]+)", link)
    return match.group(1) if match else None


def last_path_segment(value: str) -> str:
    """Return the last path segment of a URL, or the value itself if it is not a URL."""
    stripped = value.split("?", 1)[0].rstrip("/")
    return stripped.rsplit("/", 1)[-1] if "/" in stripped else stripped
