"""Route Paths — API-prefix stripping and the declared-path pattern.

Invariants:
    - normalize_request_path always returns a path starting with "/"
    - Only the first occurrence of the prefix, at the start of the path, is stripped
    - DECLARED_PATH_PATTERN (letters, digits, "/", "-", "_") is enforced by the request schemas
"""

DECLARED_PATH_PATTERN = r"^/[A-Za-z0-9/_-]*$"


def normalize_request_path(path: str, api_prefix: str) -> str:
    """Strip the API prefix from an inbound path and ensure a leading slash."""
    prefix = api_prefix.rstrip("/")
    if prefix and (path == prefix or path.startswith(prefix + "/")):
        path = path[len(prefix):]
    if not path.startswith("/"):
        path = "/" + path
    return path

