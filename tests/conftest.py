import asyncio
import random
from types import SimpleNamespace

import pytest
import pytest_asyncio

from wordspy.domain.session.timers import PhaseTimers
from wordspy.settings import Settings
from wordspy.store.models import GameSettings
from wordspy.store.registry import RoomRegistry
from wordspy.transport.dispatcher import dispatch_message
from wordspy.transport.ws_manager import WSManager
from wordspy.words.provider import WordDataset, WordDomain, WordEntry, WordProvider


class FakeSocket:
    def __init__(self):
        self.sent = []
        self.closed_with = None
        self.broken = False

    async def send_json(self, data):
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(data)

    async def close(self, code=1000):
        self.closed_with = code


def make_words(seed=7):
    dataset = WordDataset(
        domains=[
            WordDomain(
                name="test",
                words=[
                    WordEntry(primary="Apple", similar=["Pear", "Peach"]),
                    WordEntry(primary="Lion", similar=["Tiger"]),
                ],
            )
        ]
    )
    return WordProvider(dataset, rng=random.Random(seed))


class FakeApp:
    """Stands in for the FastAPI app: same `state` layout as main.create_app()."""

    def __init__(self, **settings_overrides):
        # timers stay quiet unless a test shortens them
        opts = {"ROLE_REVEAL_DELAY_MS": 60_000, "ELIMINATION_PAUSE_MS": 60_000}
        opts.update(settings_overrides)
        settings = Settings(**opts)
        self.state = SimpleNamespace(
            settings=settings,
            words=make_words(),
            registry=RoomRegistry(
                defaults=GameSettings(
                    speaking_time_seconds=settings.SPEAKING_TIME_MS / 1000,
                    min_players=settings.MIN_PLAYERS,
                    max_players=settings.MAX_PLAYERS,
                ),
                rng=random.Random(11),
            ),
            wsman=WSManager(),
            timers=PhaseTimers(),
            lock=asyncio.Lock(),
        )
        self.sockets = {}

    async def connect(self, pid):
        sock = FakeSocket()
        await self.state.wsman.connect(pid, sock)
        self.sockets[pid] = sock
        return sock

    async def send(self, pid, raw):
        """Same sequence as transport/ws.py for one inbound frame."""
        async with self.state.lock:
            room_code, to_sender, to_room = await dispatch_message(app=self, pid=pid, raw=raw)
            for e in to_sender:
                await self.state.wsman.send_to_pid(pid, e)
            await self.state.wsman.deliver(room_code, to_room, exclude_pid=pid)
        return to_sender

    def inbox(self, pid, type_=None):
        events = self.sockets[pid].sent
        if type_ is None:
            return list(events)
        return [e for e in events if e.get("type") == type_]

    def clear_inboxes(self):
        for sock in self.sockets.values():
            sock.sent.clear()

    def room_of(self, pid):
        return self.state.registry.get_room_by_player(pid)


async def seat_players(app, n):
    """Connect n players; p0 creates the room, the rest join. Returns (room_code, pids)."""
    pids = [f"p{i}" for i in range(n)]
    for pid in pids:
        await app.connect(pid)
    await app.send(pids[0], {"type": "create_room", "player_name": "Host"})
    code = app.room_of(pids[0]).id
    for i, pid in enumerate(pids[1:], start=1):
        await app.send(pid, {"type": "join_room", "room_code": code, "player_name": f"Player{i}"})
    app.clear_inboxes()
    return code, pids


@pytest_asyncio.fixture
async def app():
    fake = FakeApp()
    yield fake
    await fake.state.timers.shutdown()


@pytest.fixture
def words():
    return make_words()
