"""
Stage Ordering Engine

Keeps the stage list of a pipeline configuration contiguous and 1-based:
after every operation stages[i].order == i + 1 and stage ids are preserved.

All functions are pure. They return a new list and never mutate the list
or the stages they are given.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .entities import Stage


def _check_index(stages: list["Stage"], index: int, name: str = "index") -> None:
    # Negative indices are rejected rather than counted from the end
    if index < 0 or index >= len(stages):
        raise IndexError(f"Stage {name} {index} out of range for {len(stages)} stages")


def renumber(stages: list["Stage"]) -> list["Stage"]:
    """Return copies of the stages with order set from their position."""
    return [
        stage if stage.order == position else stage.model_copy(update={"order": position})
        for position, stage in enumerate(stages, start=1)
    ]


def add_stage(stages: list["Stage"], stage: "Stage") -> list["Stage"]:
    """Append a stage with order = current count + 1."""
    if any(existing.id == stage.id for existing in stages):
        raise ValueError(f"Stage id {stage.id} is already in the pipeline")
    return list(stages) + [stage.model_copy(update={"order": len(stages) + 1})]


def update_stage(stages: list["Stage"], index: int, stage: "Stage") -> list["Stage"]:
    """
    Replace the stage at index.

    The replacement takes over the id and position of the stage it replaces,
    so a freshly built Stage cannot change either.
    """
    _check_index(stages, index)
    updated = list(stages)
    updated[index] = stage.model_copy(update={"id": stages[index].id, "order": index + 1})
    return updated


def delete_stage(stages: list["Stage"], index: int) -> list["Stage"]:
    """Remove the stage at index and renumber the remainder."""
    _check_index(stages, index)
    remaining = [stage for i, stage in enumerate(stages) if i != index]
    return renumber(remaining)


def reorder_stages(stages: list["Stage"], from_index: int, to_index: int) -> list["Stage"]:
    """
    Move the stage at from_index so it ends up at to_index.

    This is a splice-move, not a swap: the stages in between shift by one.
    """
    _check_index(stages, from_index, "from_index")
    _check_index(stages, to_index, "to_index")

    if from_index == to_index:
        return list(stages)

    moved = list(stages)
    stage = moved.pop(from_index)
    moved.insert(to_index, stage)
    return renumber(moved)
