"""Result types separating a committed operation from its best-effort side effects."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SideEffect:
    """Outcome of one post-commit side effect (notification, status persistence)."""

    name: str
    delivered: bool
    detail: str | None = None


@dataclass(frozen=True)
class Outcome:
    """A committed result plus whatever happened after the commit."""

    result: Any
    side_effects: list[SideEffect] = field(default_factory=list)

    @property
    def side_effects_ok(self) -> bool:
        return all(effect.delivered for effect in self.side_effects)
