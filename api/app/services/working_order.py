"""Working copy of the display order used while an admin rearranges artworks."""

import logging
from typing import Callable, Iterable, List

logger = logging.getLogger(__name__)


class OrderNotSaved(RuntimeError):
    """The commit reported that the order was not fully persisted."""

    pass


class WorkingOrder:
    """Proposed order of artwork IDs, kept apart from the persisted order.

    Moves mark the copy dirty; ``save`` hands the full sequence to a commit
    callback and clears the flag only when the commit succeeds, so a failed
    save can be retried as is. The commit is usually
    ``lambda ids: reorder_artworks(store, ids)``.

    Example:
        >>> order = WorkingOrder(["a", "b", "c"])
        >>> order.move(2, 0)
        >>> order.ids
        ['c', 'a', 'b']
        >>> order.dirty
        True
    """

    def __init__(self, ids: Iterable[str]):
        self._ids: List[str] = list(ids)
        self.dirty = False
        self.saving = False

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def move(self, from_index: int, to_index: int) -> None:
        """Drag the item at ``from_index`` so it lands at ``to_index``."""
        if from_index == to_index:
            return
        self._check_index(from_index)
        self._check_index(to_index)
        moved = self._ids.pop(from_index)
        self._ids.insert(to_index, moved)
        self.dirty = True

    def move_up(self, index: int) -> bool:
        return self._swap(index, -1)

    def move_down(self, index: int) -> bool:
        return self._swap(index, 1)

    def _swap(self, index: int, step: int) -> bool:
        self._check_index(index)
        other = index + step
        if other < 0 or other >= len(self._ids):
            return False
        self._ids[index], self._ids[other] = self._ids[other], self._ids[index]
        self.dirty = True
        return True

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._ids):
            raise IndexError(f"Position {index} out of range for {len(self._ids)} items")

    def save(self, commit: Callable[[List[str]], object]) -> bool:
        """Submit the working copy.

        Returns False without calling ``commit`` when there is nothing to
        save or a save is already running. Exceptions from ``commit``
        propagate and leave the copy dirty. A commit may also return a
        ``ReorderResult``; one that was not accepted or has failed rows
        raises OrderNotSaved and leaves the copy dirty too.
        """
        if not self.dirty or self.saving:
            return False

        self.saving = True
        try:
            result = commit(self.ids)
            if getattr(result, "accepted", True) is False:
                raise OrderNotSaved("Order was rejected")
            if getattr(result, "failed", None):
                raise OrderNotSaved(f"Order not saved for: {', '.join(result.failed)}")
        except Exception:
            logger.warning("Saving new order failed; keeping unsaved changes")
            raise
        else:
            self.dirty = False
        finally:
            self.saving = False
        return True
