from __future__ import annotations

from dataclasses import dataclass, field

from pygame.math import Vector2


@dataclass(slots=True)
class Agent:
    position: Vector2 = field(default_factory=Vector2)
    heading: float = 0.0

    def copy(self) -> "Agent":
        return Agent(position=Vector2(self.position), heading=self.heading)
