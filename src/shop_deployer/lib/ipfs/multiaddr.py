"""Translate HTTP(S) service URLs to and from peer multiaddrs.

IPFS cluster clients address their API as a multiaddr such as
``/dns4/cluster.example.com/tcp/443/https/api``.  The host segment carries
the URL's host exactly as written, explicit port included, so
``https://10.0.0.1:9094/foo`` becomes ``/ip4/10.0.0.1:9094/tcp/9094/https/foo``.
IPv6 hosts are not supported.
"""

import re
from urllib.parse import urlsplit

_IPV4_RE = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+$")

DEFAULT_PORTS: dict[str, int] = {
    "https": 443,
    "http": 80,
}


class AddressTranslationError(ValueError):
    """A URL cannot be expressed as a peer multiaddr."""


class UnsupportedProtocolError(AddressTranslationError):
    """The URL scheme is neither http nor https."""

    def __init__(self, scheme: str) -> None:
        self.scheme = scheme
        super().__init__(f"Unsupported protocol {scheme}:")


def url_to_multiaddr(url: str) -> str:
    """Convert an HTTP or HTTPS URL into a multiaddr string.

    Args:
        url: Absolute ``http://`` or ``https://`` URL.

    Returns:
        ``/{ip4|dns4}/{host}/tcp/{port}/{scheme}{path}``.

    Raises:
        UnsupportedProtocolError: If the scheme is not http or https.
        AddressTranslationError: If the host is missing or an IPv6 literal.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise UnsupportedProtocolError(scheme)

    hostname = parts.hostname
    if not hostname:
        msg = f"URL has no host: {url!r}"
        raise AddressTranslationError(msg)
    if ":" in hostname:
        msg = f"IPv6 hosts are not supported: {url!r}"
        raise AddressTranslationError(msg)

    try:
        explicit_port = parts.port
    except ValueError as exc:
        msg = f"Invalid port in URL: {url!r}"
        raise AddressTranslationError(msg) from exc

    # netloc minus any userinfo, i.e. host[:port] as written
    host = parts.netloc.rsplit("@", 1)[-1]
    addr_proto = "ip4" if _IPV4_RE.match(hostname) else "dns4"
    port = explicit_port if explicit_port is not None else DEFAULT_PORTS[scheme]
    path = parts.path or "/"

    return f"/{addr_proto}/{host}/tcp/{port}/{scheme}{path}"


def multiaddr_to_url(maddr: str) -> str:
    """Rebuild the HTTP URL a multiaddr produced by :func:`url_to_multiaddr` points at.

    Args:
        maddr: Multiaddr of the form ``/{ip4|dns4}/{host}/tcp/{port}/{scheme}{path}``.

    Returns:
        ``{scheme}://{host}{path}`` with any trailing slash removed.

    Raises:
        AddressTranslationError: If the multiaddr does not have that shape.
    """
    segments = maddr.split("/")
    # ['', proto, host, 'tcp', port, scheme, *path]
    if len(segments) < 6 or segments[1] not in ("ip4", "dns4") or segments[3] != "tcp":
        msg = f"Unrecognized multiaddr: {maddr!r}"
        raise AddressTranslationError(msg)

    host, port, scheme = segments[2], segments[4], segments[5]
    if scheme not in DEFAULT_PORTS:
        raise UnsupportedProtocolError(scheme)

    if ":" not in host and port != str(DEFAULT_PORTS[scheme]):
        host = f"{host}:{port}"
    path = "/".join(segments[6:])
    base = f"{scheme}://{host}"
    return f"{base}/{path}".rstrip("/") if path else base
