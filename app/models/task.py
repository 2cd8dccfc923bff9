from dataclasses import dataclass
from enum import Enum
from typing import Optional

GUESS_MIN = 1
GUESS_MAX = 5


class TaskKind(str, Enum):
    VIDEO = "video"
    AD = "ad"
    GUESS = "guess"


REWARDS = {
    TaskKind.VIDEO: 5,
    TaskKind.AD: 3,
    TaskKind.GUESS: 2,
}


@dataclass(frozen=True)
class PendingTask:
    """The single outstanding action a user has to resolve to get a reward."""

    kind: TaskKind
    target: Optional[int] = None

    def __post_init__(self):
        if self.kind is TaskKind.GUESS:
            if self.target is None or not GUESS_MIN <= self.target <= GUESS_MAX:
                raise ValueError(f"guess target must be in [{GUESS_MIN}, {GUESS_MAX}], got {self.target!r}")
        elif self.target is not None:
            raise ValueError(f"{self.kind.value} task takes no target")

    @classmethod
    def video(cls) -> "PendingTask":
        return cls(TaskKind.VIDEO)

    @classmethod
    def ad(cls) -> "PendingTask":
        return cls(TaskKind.AD)

    @classmethod
    def guess(cls, target: int) -> "PendingTask":
        return cls(TaskKind.GUESS, target)

    @property
    def reward(self) -> int:
        return REWARDS[self.kind]
