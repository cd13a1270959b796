# wordspy/transport/ws_manager.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Set

from fastapi import WebSocket
from loguru import logger


@dataclass
class Conn:
    pid: str
    ws: WebSocket


class WSManager:
    """
    In-memory connection registry.
    - pid -> websocket
    - room_code -> set of pids (socket-level room membership)
    Transport-only: no game rules.
    """
    def __init__(self) -> None:
        self._conns: Dict[str, Conn] = {}
        self._rooms: Dict[str, Set[str]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, pid: str, ws: WebSocket) -> None:
        async with self._lock:
            self._conns[pid] = Conn(pid=pid, ws=ws)

    async def disconnect(self, pid: str) -> None:
        async with self._lock:
            self._conns.pop(pid, None)
            for code in [c for c, members in self._rooms.items() if pid in members]:
                self._drop_member(code, pid)

    async def join(self, room_code: str, pid: str) -> None:
        async with self._lock:
            self._rooms.setdefault(room_code, set()).add(pid)

    async def leave(self, room_code: str, pid: str) -> None:
        async with self._lock:
            self._drop_member(room_code, pid)

    def _drop_member(self, room_code: str, pid: str) -> None:
        members = self._rooms.get(room_code)
        if not members:
            return
        members.discard(pid)
        if not members:
            self._rooms.pop(room_code, None)

    async def send_to_pid(self, pid: str, event: dict) -> None:
        async with self._lock:
            conn = self._conns.get(pid)
        if conn is None:
            return
        try:
            await conn.ws.send_json(event)
        except Exception as e:
            # dead socket; ws.py cleans up on disconnect
            logger.debug("send to {} failed: {}", pid, e)

    async def broadcast(self, room_code: str, event: dict, exclude_pid: Optional[str] = None) -> None:
        # copy conns under lock, send outside lock
        async with self._lock:
            pids = self._rooms.get(room_code, set())
            conns = [self._conns[p] for p in pids if p in self._conns]

        for c in conns:
            if exclude_pid and c.pid == exclude_pid:
                continue
            try:
                await c.ws.send_json(event)
            except Exception as e:
                logger.debug("broadcast to {} failed: {}", c.pid, e)

    async def deliver(self, room_code: Optional[str], events: Iterable[Dict[str, Any]], exclude_pid: Optional[str] = None) -> None:
        """
        Room delivery for dumped events. Events carrying "targets" are unicast to
        those pids (sender included); everything else is broadcast to the room.
        """
        for e in events:
            if "targets" in e:
                payload = {k: v for k, v in e.items() if k != "targets"}
                for t in e.get("targets") or []:
                    await self.send_to_pid(t, payload)
                continue
            if room_code:
                await self.broadcast(room_code, e, exclude_pid=exclude_pid)

    async def close_pid(self, pid: str, code: int = 4000) -> None:
        """
        Close a specific player's websocket and remove it from the registry.
        """
        async with self._lock:
            conn = self._conns.get(pid)
        if conn is None:
            return
        try:
            await conn.ws.close(code=code)
        except Exception as e:
            logger.debug("close {} failed: {}", pid, e)
        await self.disconnect(pid)

    async def room_size(self, room_code: str) -> int:
        async with self._lock:
            return len(self._rooms.get(room_code, set()))
