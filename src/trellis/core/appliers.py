"""
Position Appliers - Strategies that realize computed node positions.

The arrangement pass computes where nodes should go; an applier decides how
they get there. ``InstantApplier`` writes the targets directly.
``TransitionApplier`` interpolates from the current positions over
wall-clock time as an asyncio task, and cancels any transition it started
earlier before starting a new one.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

import numpy as np

from trellis.core.config import TransitionConfig
from trellis.core.easing import EasingFunction, get_easing
from trellis.core.graph_model import GraphModel, Position

logger = logging.getLogger(__name__)


class TransitionHandle:
    """
    Handle to a started position change.

    Wraps the asyncio task of an animated transition, or nothing when the
    positions were written immediately.
    """

    def __init__(self, task: Optional[asyncio.Task] = None):
        self._task = task

    @property
    def done(self) -> bool:
        return self._task is None or self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._task is not None and self._task.cancelled()

    def cancel(self) -> bool:
        """Stop the transition where it is. Returns False if already finished."""
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    async def wait(self) -> None:
        """Wait until the transition finishes or is cancelled."""
        if self._task is None:
            return
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            # Only swallow the cancellation of the transition itself
            if not self._task.cancelled():
                raise


class PositionApplier(ABC):
    """Realizes a set of target positions onto the nodes of a graph."""

    def __init__(
        self,
        on_tick: Optional[Callable[[float], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        self._tick_callbacks: List[Callable[[float], None]] = []
        self._complete_callbacks: List[Callable[[], None]] = []
        if on_tick is not None:
            self._tick_callbacks.append(on_tick)
        if on_complete is not None:
            self._complete_callbacks.append(on_complete)

    def on_tick(self, callback: Callable[[float], None]) -> None:
        """Register callback invoked with the eased progress after each position write."""
        self._tick_callbacks.append(callback)

    def on_complete(self, callback: Callable[[], None]) -> None:
        """Register callback invoked once the targets have been reached."""
        self._complete_callbacks.append(callback)

    def _notify_tick(self, progress: float) -> None:
        for callback in self._tick_callbacks:
            try:
                callback(progress)
            except Exception as e:
                logger.error(f"Tick callback error: {e}")

    def _notify_complete(self) -> None:
        for callback in self._complete_callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"Complete callback error: {e}")

    @abstractmethod
    def apply(self, graph: GraphModel, positions: Dict[str, Position]) -> TransitionHandle:
        """Move the nodes of ``graph`` to ``positions``."""


class InstantApplier(PositionApplier):
    """Writes target positions immediately."""

    def apply(self, graph: GraphModel, positions: Dict[str, Position]) -> TransitionHandle:
        for node_id, position in positions.items():
            node = graph.get_node(node_id)
            if node is not None:
                node.position = position
        self._notify_tick(1.0)
        self._notify_complete()
        return TransitionHandle()


class TransitionApplier(PositionApplier):
    """
    Animates nodes from their current to their target positions.

    Must be used from a running event loop. Starting a new transition
    cancels the one in flight; nodes then continue from wherever the
    cancelled transition left them.
    """

    def __init__(
        self,
        duration: float = 0.5,
        easing: EasingFunction = None,
        frame_interval: float = 1.0 / 60.0,
        on_tick: Optional[Callable[[float], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        super().__init__(on_tick=on_tick, on_complete=on_complete)
        self._duration = max(0.0, duration)
        self._easing = easing or get_easing("ease_in_out")
        self._frame_interval = frame_interval
        self._active: Optional[TransitionHandle] = None

    @classmethod
    def from_config(cls, config: TransitionConfig, **kwargs) -> "TransitionApplier":
        return cls(
            duration=config.duration,
            easing=get_easing(config.easing),
            frame_interval=config.frame_interval,
            **kwargs,
        )

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def active(self) -> Optional[TransitionHandle]:
        """The transition in flight, if any."""
        if self._active is not None and self._active.done:
            return None
        return self._active

    def cancel(self) -> bool:
        """Cancel the transition in flight."""
        if self._active is None:
            return False
        return self._active.cancel()

    def apply(self, graph: GraphModel, positions: Dict[str, Position]) -> TransitionHandle:
        """
        Start a transition to ``positions``.

        Raises:
            RuntimeError: If no event loop is running
        """
        loop = asyncio.get_running_loop()
        if self.cancel():
            logger.debug("Superseded in-flight transition")

        node_ids = [node_id for node_id in positions if graph.get_node(node_id) is not None]
        start = np.array(
            [graph.get_node(node_id).position.as_tuple() for node_id in node_ids],
            dtype=float,
        ).reshape(-1, 2)
        target = np.array(
            [positions[node_id].as_tuple() for node_id in node_ids],
            dtype=float,
        ).reshape(-1, 2)

        task = loop.create_task(self._run(graph, node_ids, start, target))
        self._active = TransitionHandle(task)
        return self._active

    async def _run(
        self,
        graph: GraphModel,
        node_ids: List[str],
        start: np.ndarray,
        target: np.ndarray,
    ) -> None:
        loop = asyncio.get_running_loop()
        began = loop.time()
        delta = target - start

        while True:
            elapsed = loop.time() - began
            linear = 1.0 if self._duration == 0 else min(1.0, elapsed / self._duration)
            progress = self._easing(linear)
            self._write(graph, node_ids, start + delta * progress)
            self._notify_tick(progress)
            if linear >= 1.0:
                break
            await asyncio.sleep(self._frame_interval)

        # Final write lands exactly on the targets
        self._write(graph, node_ids, target)
        logger.debug(f"Transition of {len(node_ids)} nodes complete")
        self._notify_complete()

    @staticmethod
    def _write(graph: GraphModel, node_ids: List[str], coords: np.ndarray) -> None:
        for node_id, (x, y) in zip(node_ids, coords):
            node = graph.get_node(node_id)
            # Nodes removed mid-transition are skipped
            if node is not None:
                node.translate(float(x), float(y))
