# wordspy/words/provider.py
from __future__ import annotations

import random
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field

DEFAULT_WORDS_PATH = Path(__file__).parent / "data" / "words.json"


class WordDatasetError(RuntimeError):
    """The word dataset cannot back a game. Raised at startup, never per call."""


class WordEntry(BaseModel):
    primary: str
    similar: List[str] = Field(default_factory=list)


class WordDomain(BaseModel):
    name: str
    words: List[WordEntry] = Field(default_factory=list)


class WordDataset(BaseModel):
    domains: List[WordDomain] = Field(default_factory=list)


class WordPair(BaseModel):
    primary: str
    similar: str


class WordProvider:
    def __init__(self, dataset: WordDataset, rng: Optional[random.Random] = None) -> None:
        entries = [w for d in dataset.domains for w in d.words]
        if not entries:
            raise WordDatasetError("Word dataset is empty")
        missing = [e.primary for e in entries if not e.similar]
        if missing:
            raise WordDatasetError(f"Entries without similar words: {', '.join(missing)}")
        self._entries = entries
        self._rng = rng or random.Random()

    @classmethod
    def from_path(cls, path: Union[str, Path, None] = None, rng: Optional[random.Random] = None) -> "WordProvider":
        p = Path(path) if path else DEFAULT_WORDS_PATH
        try:
            dataset = WordDataset.model_validate_json(p.read_text(encoding="utf-8"))
        except OSError as e:
            raise WordDatasetError(f"Cannot read word dataset {p}: {e}") from e
        except ValueError as e:
            raise WordDatasetError(f"Invalid word dataset {p}: {e}") from e
        return cls(dataset, rng=rng)

    def __len__(self) -> int:
        return len(self._entries)

    def random_word(self) -> WordEntry:
        return self._rng.choice(self._entries)

    def random_pair(self) -> WordPair:
        entry = self.random_word()
        return WordPair(primary=entry.primary, similar=self._rng.choice(entry.similar))
