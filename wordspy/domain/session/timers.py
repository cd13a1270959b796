# wordspy/domain/session/timers.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Set

from loguru import logger

from wordspy.domain.game.engine import current_speaker_id
from wordspy.store.models import Room


@dataclass(frozen=True)
class Fingerprint:
    """
    The slice of room state a deferred callback was scheduled against.
    A callback whose fingerprint no longer matches the live room is stale.
    """
    room_id: str
    game_no: int
    phase: str
    round: int
    speaker_id: Optional[str]

    @classmethod
    def of(cls, room: Room) -> "Fingerprint":
        return cls(
            room_id=room.id,
            game_no=room.game_no,
            phase=room.state.phase,
            round=room.state.round,
            speaker_id=current_speaker_id(room),
        )


class PhaseTimers:
    """
    One-shot deferred callbacks for phase advancement.
    Individual timers are never cancelled: callbacks re-check the room when they
    fire. Outstanding tasks are only cancelled on shutdown.
    """

    def __init__(self) -> None:
        self._tasks: Set[asyncio.Task] = set()

    def schedule(self, delay_ms: int, callback: Callable[[], Awaitable[None]]) -> None:
        task = asyncio.get_running_loop().create_task(self._run(delay_ms, callback))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, delay_ms: int, callback: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(max(delay_ms, 0) / 1000)
        try:
            await callback()
        except Exception:
            logger.exception("Phase timer callback failed")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def shutdown(self) -> None:
        tasks = list(self._tasks)
        for t in tasks:
            t.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
