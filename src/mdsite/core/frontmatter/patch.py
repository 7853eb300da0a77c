"""Front matter patch contract: merge modes, array strategies, and the immutable patch model"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MergeMode(str, Enum):
    deep = "deep"
    replace = "replace"
    set_if_missing = "set_if_missing"


class ArrayStrategy(str, Enum):
    replace = "replace"
    union = "union"
    append = "append"


class FrontMatterPatch(BaseModel):
    """A named, prioritized contribution to a page's front matter.

    Higher priority applies later, so it wins under deep and replace modes.
    set_if_missing never overwrites regardless of priority. array_strategy
    only matters for deep merges where both sides hold sequences.
    """
    model_config = ConfigDict(frozen=True)

    source:         str = Field(default="", description="Provenance shown in diagnostics")
    mode:           MergeMode = MergeMode.deep
    priority:       int = 0
    data:           dict[str, Any] = Field(default_factory=dict)
    array_strategy: ArrayStrategy = ArrayStrategy.union

    def is_empty(self) -> bool:
        return not self.data

    def __str__(self) -> str:
        keys = ", ".join(sorted(self.data))
        return f"FrontMatterPatch({self.source or '?'}, {self.mode.value}, p={self.priority}, keys=[{keys}])"
