"""How items are shared out between the workers of a world.

Every worker but the last takes ``n_item // world_size + 1`` items; the
last takes what remains.
"""

from __future__ import annotations

__all__ = ["item_num", "split_items"]


def item_num(rank: int, n_item: int, world_size: int) -> int:
    """Return how many of ``n_item`` items worker ``rank`` handles."""
    if world_size <= 0:
        raise ValueError(f"world size must be positive: {world_size}")
    if n_item < 0:
        raise ValueError(f"item count must not be negative: {n_item}")
    if not 0 <= rank < world_size:
        raise ValueError(f"rank {rank} outside a world of {world_size}")
    share = n_item // world_size + 1
    if rank != world_size - 1:
        return share
    rest = n_item - share * (world_size - 1)
    if rest < 0:
        raise ValueError(
            f"{n_item} items are too few to share out among {world_size} workers"
        )
    return rest


def split_items(n_item: int, world_size: int) -> list[int]:
    """Return the item count of every worker, in rank order."""
    return [item_num(rank, n_item, world_size) for rank in range(world_size)]