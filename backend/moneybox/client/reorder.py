"""Drag-and-drop reordering computed on the client before it is pushed."""

from typing import Any


def move_item(items: list[dict[str, Any]], from_index: int, to_index: int) -> list[dict[str, Any]]:
    """Move the dragged item onto the drop slot and renumber every order.

    ``to_index`` is the index of the row the item was dropped on, in the
    list as it was before the drag. Dropping below the original position
    shifts the target up by one once the item has been spliced out.
    Returns new dicts with ``order`` set to the 1-based position; the input
    is left untouched. A drop on the item's own row is a no-op.
    """
    if not 0 <= from_index < len(items) or not 0 <= to_index < len(items):
        raise IndexError("drag indexes out of range")
    if from_index == to_index:
        return [dict(item) for item in items]

    reordered = list(items)
    dragged = reordered.pop(from_index)
    insert_at = to_index - 1 if from_index < to_index else to_index
    reordered.insert(insert_at, dragged)
    return [{**item, "order": position} for position, item in enumerate(reordered, start=1)]


def reorder_command(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """``productOrders`` body for PUT /categories/{id}/products/reorder."""
    return [{"id": item["id"], "order": item["order"]} for item in items]
