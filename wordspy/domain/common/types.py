# wordspy/domain/common/types.py
from __future__ import annotations

from typing import Dict, Literal

Mode = Literal["infiltrator", "spy"]
Role = Literal["citizen", "infiltrator", "agent", "spy"]
Phase = Literal["lobby", "role_reveal", "speaking", "voting", "elimination", "game_over"]
Winner = Literal["citizens", "infiltrator", "agents", "spy"]

# One odd player per game; everyone else shares the majority role.
ODD_ROLE: Dict[str, Role] = {"infiltrator": "infiltrator", "spy": "spy"}
MAJORITY_ROLE: Dict[str, Role] = {"infiltrator": "citizen", "spy": "agent"}

ODD_WINNER: Dict[str, Winner] = {"infiltrator": "infiltrator", "spy": "spy"}
MAJORITY_WINNER: Dict[str, Winner] = {"infiltrator": "citizens", "spy": "agents"}
