# wordspy/settings.py
from __future__ import annotations

from pydantic import BaseModel
import os


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "y", "on")


class Settings(BaseModel):
    APP_NAME: str = "wordspy-server"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # Dev
    LOG_LEVEL: str = "INFO"

    # WebSocket origin policy (comma-separated)
    WS_ALLOWED_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"
    # Dev helper: allow any private LAN IP on port 3000
    WS_ALLOW_LAN_ORIGINS: bool = True

    # Game timing (milliseconds)
    ROLE_REVEAL_DELAY_MS: int = 5000
    SPEAKING_TIME_MS: int = 30000
    ELIMINATION_PAUSE_MS: int = 3000

    # Room limits
    MIN_PLAYERS: int = 4
    MAX_PLAYERS: int = 10

    # Word dataset; empty = bundled words.json
    WORDS_PATH: str = ""


def get_settings() -> Settings:
    return Settings(
        APP_NAME=os.getenv("APP_NAME", "wordspy-server"),
        HOST=os.getenv("HOST", "0.0.0.0"),
        PORT=int(os.getenv("PORT", "3001")),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),

        WS_ALLOWED_ORIGINS=os.getenv(
            "WS_ALLOWED_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        ),
        WS_ALLOW_LAN_ORIGINS=_env_bool("WS_ALLOW_LAN_ORIGINS", "true"),

        ROLE_REVEAL_DELAY_MS=int(os.getenv("ROLE_REVEAL_DELAY_MS", "5000")),
        SPEAKING_TIME_MS=int(os.getenv("SPEAKING_TIME_MS", "30000")),
        ELIMINATION_PAUSE_MS=int(os.getenv("ELIMINATION_PAUSE_MS", "3000")),

        MIN_PLAYERS=int(os.getenv("MIN_PLAYERS", "4")),
        MAX_PLAYERS=int(os.getenv("MAX_PLAYERS", "10")),

        WORDS_PATH=os.getenv("WORDS_PATH", ""),
    )
