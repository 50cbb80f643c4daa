import ipaddress
from typing import Optional

from starlette.requests import Request

DEFAULT_CLIENT_IP = "127.0.0.1"

# (заголовок, может ли содержать список через запятую); первый валидный адрес побеждает
PROXY_HEADERS = (
    ("x-forwarded-for", True),
    ("x-real-ip", False),
    ("cf-connecting-ip", False),
    ("x-forwarded", True),
    ("true-client-ip", False),
)


def _parse_ip(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    candidate = value.strip()
    try:
        ipaddress.ip_address(candidate)
    except ValueError:
        return None
    return candidate


def _normalize_peer(host: Optional[str]) -> Optional[str]:
    """IPv4-mapped IPv6 (::ffff:1.2.3.4) collapses to plain IPv4; non-IP hosts are dropped"""
    if not host:
        return None
    try:
        addr = ipaddress.ip_address(host)
    except ValueError:
        return None
    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        return str(addr.ipv4_mapped)
    return str(addr)


def get_client_ip(request: Request, trust_proxy_headers: bool = True) -> str:
    """
    Best guess of the caller's IP.

    Priority: X-Forwarded-For (first valid entry), X-Real-IP,
    CF-Connecting-IP, X-Forwarded, True-Client-IP, socket peer, 127.0.0.1.
    """
    if trust_proxy_headers:
        for name, is_list in PROXY_HEADERS:
            raw = request.headers.get(name)
            if not raw:
                continue
            candidates = raw.split(",") if is_list else [raw]
            for candidate in candidates:
                ip = _parse_ip(candidate)
                if ip:
                    return ip

    peer = _normalize_peer(request.client.host if request.client else None)
    return peer or DEFAULT_CLIENT_IP
