from __future__ import annotations
from dataclasses import dataclass, field
from typing import List


@dataclass
class AsciiArt:
    """
    Data object holding a rendered character grid.
    Rows may carry ANSI escape sequences when produced by a colour renderer.
    """
    width: int                               # requested columns
    rows: List[str] = field(default_factory=list)

    @property
    def height(self) -> int:
        return len(self.rows)

    def to_text(self) -> str:
        return "\n".join(self.rows)
