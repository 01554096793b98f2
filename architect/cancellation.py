"""Cooperative cancellation for the analysis flow."""

from __future__ import annotations


class FlowCancelled(Exception):
    """Raised at a checkpoint once cancellation has been requested."""

    def __init__(self, checkpoint: str) -> None:
        self.checkpoint = checkpoint
        super().__init__(f"Cancelled at checkpoint '{checkpoint}'")


class CancellationContext:
    """Flag checked by a flow at its checkpoints.

    Requesting cancellation never interrupts work already in flight; the
    flow stops at the next checkpoint it reaches.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def checkpoint(self, name: str) -> None:
        if self._cancelled:
            raise FlowCancelled(name)


__all__ = ["CancellationContext", "FlowCancelled"]
