"""Lightweight annotation stand-ins for renderer and translator tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4


@dataclass(frozen=True)
class FakeAnnotation:
    """Has the fields the renderer reads, nothing else."""

    position_start: int
    position_end: int
    color: str = "yellow"
    content: str = ""
    id: UUID = field(default_factory=uuid4)
