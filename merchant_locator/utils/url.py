from typing import Iterable, List, Tuple
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

DEFAULT_PORTS = {"http": 80, "https": 443}


def percent_encode(value) -> str:
    """
    RFC 3986 percent-encoding: everything but ``A-Z a-z 0-9 - . _ ~`` is escaped.
    """
    return quote(str(value), safe="")


def normalize_base_url(url: str) -> str:
    """
    Scheme, host and path of ``url``, lowercasing scheme and host and
    dropping the default port, the query and the fragment.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"

    port = parts.port
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"

    return urlunsplit((scheme, host, parts.path or "/", "", ""))


def query_parameters(url: str) -> List[Tuple[str, str]]:
    """Decoded query parameters of ``url``, in order, blank values kept."""
    return parse_qsl(urlsplit(url).query, keep_blank_values=True)


def set_query_parameters(url: str, parameters: Iterable[Tuple[str, str]]) -> str:
    """
    Set each parameter on ``url`` the way ``URLSearchParams.set`` does:
    the first existing occurrence is replaced in place, later ones are dropped,
    and unknown names are appended.
    """
    parts = urlsplit(url)
    pairs = parse_qsl(parts.query, keep_blank_values=True)

    for name, value in parameters:
        replaced = False
        updated = []
        for existing_name, existing_value in pairs:
            if existing_name != name:
                updated.append((existing_name, existing_value))
            elif not replaced:
                updated.append((name, value))
                replaced = True

        if not replaced:
            updated.append((name, value))

        pairs = updated

    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(pairs), parts.fragment))
