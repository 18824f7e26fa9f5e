# relay/core/security.py
from __future__ import annotations

from typing import Iterable, List
from urllib.parse import urlsplit


def _origin(url: str) -> str:
    """``https://cdn.socket.io/4.7.5/x.js`` -> ``https://cdn.socket.io``."""
    parts = urlsplit((url or "").strip())
    if not parts.scheme or not parts.netloc:
        return ""
    return f"{parts.scheme}://{parts.netloc}"


def build_csp(extra_origins: Iterable[str] = ()) -> str:
    """
    Content-Security-Policy du relais :
    - scripts/styles/connexions limités à 'self' + le CDN Socket.IO
    - connect-src autorise aussi ws:/wss: (transport websocket vers self)
    """
    origins: List[str] = []
    for o in extra_origins:
        o = _origin(o)
        if o and o not in origins:
            origins.append(o)
    allowed = " ".join(["'self'", *origins])

    directives = [
        f"default-src {allowed}",
        f"script-src {allowed}",
        f"style-src {allowed} 'unsafe-inline'",
        f"connect-src {allowed} ws: wss:",
        "img-src 'self' data:",
    ]
    return "; ".join(directives)
