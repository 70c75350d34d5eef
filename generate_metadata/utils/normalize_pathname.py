"""
Path normalization

Every cache key, outbound ``path`` query parameter and webhook path goes
through :func:`normalize_pathname`, so differently spelled routes for the same
page always land on the same cache entry.
"""

from urllib.parse import quote, unquote

# RFC 3986 ``pchar`` characters (besides unreserved ones) left unescaped
_SEGMENT_SAFE = "!$&'()*+,;=:@"


def normalize_pathname(path: str | None) -> str | None:
    """
    Canonicalize a route path.

    - ``None`` or ``""`` returns ``None`` (the root/layout level)
    - query string and fragment are stripped
    - repeated, leading ``//`` and trailing slashes are collapsed
    - each segment is percent-decoded on its own, then re-encoded canonically,
      so an encoded ``/`` inside a segment stays inside that segment
    - ``.`` and ``..`` segments are resolved
    - the result always starts with ``/`` and only ``/`` itself ends with one

    The function is idempotent.

    Example:
        >>> normalize_pathname("test/page/?q=1#top")
        '/test/page'
    """
    if not path:
        return None

    path = path.split("#", 1)[0].split("?", 1)[0]

    segments: list[str] = []
    for segment in path.split("/"):
        decoded = unquote(segment)
        if decoded in ("", "."):
            continue
        if decoded == "..":
            if segments:
                segments.pop()
            continue
        segments.append(quote(decoded, safe=_SEGMENT_SAFE))

    return "/" + "/".join(segments)
