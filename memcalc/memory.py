import logging
from dataclasses import dataclass
from typing import Optional

from memcalc.errors import CalcError

logger = logging.getLogger(__name__)


@dataclass
class MemoryFullError(CalcError):
    name: str
    max_slots: int

    def __str__(self) -> str:
        return f"Memory is full ({self.max_slots} slots), cannot create slot {self.name!r}"


class MemoryStore:
    """Named memory slots holding floats. Unknown slots read as 0.0."""

    def __init__(self, max_slots: Optional[int] = None) -> None:
        self.max_slots = max_slots
        self._slots: dict[str, float] = dict()

    def get(self, name: str) -> float:
        return self._slots.get(name, 0.0)

    def accumulate(self, name: str, delta: float) -> float:
        if name in self._slots:
            self._slots[name] += delta
        else:
            if self.max_slots is not None and len(self._slots) >= self.max_slots:
                raise MemoryFullError(name=name, max_slots=self.max_slots)
            self._slots[name] = delta
            logger.debug("Created memory slot %r", name)
        return self._slots[name]

    def slots(self) -> dict[str, float]:
        return dict(self._slots)

    def __contains__(self, name: object) -> bool:
        return name in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"MemoryStore({self._slots!r}, max_slots={self.max_slots!r})"
