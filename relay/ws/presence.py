# relay/ws/presence.py

from __future__ import annotations

import time
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Dict, List, Optional


@dataclass
class Connection:
    sid: str
    connected_at: float = field(default_factory=lambda: time.time())


class ConnectionRegistry:
    """
    Ensemble in-memory des connexions Socket.IO vivantes.
    - Alimenté par connect/disconnect, purement observationnel (/healthz)
    - Le fan-out lui-même passe par Socket.IO, pas par ce registre
    """

    def __init__(self) -> None:
        self.by_sid: Dict[str, Connection] = {}
        self._lock = RLock()

    def add(self, sid: str) -> Connection:
        with self._lock:
            c = Connection(sid=str(sid))
            self.by_sid[c.sid] = c
            return c

    def remove(self, sid: str) -> Optional[Connection]:
        with self._lock:
            return self.by_sid.pop(str(sid), None)

    def count(self) -> int:
        with self._lock:
            return len(self.by_sid)

    def snapshot(self) -> List[Dict[str, Any]]:
        """Debug: une entrée par connexion."""
        with self._lock:
            return [{"sid": c.sid, "connected_at": c.connected_at} for c in self.by_sid.values()]
