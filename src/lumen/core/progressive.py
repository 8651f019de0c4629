"""Progressive render-trigger loop.

This module keeps a frame up to date with a changing scene. The
ProgressiveRenderer polls a SceneManager for snapshots and re-renders the
whole frame whenever the camera value differs from the one it last rendered.
A camera change that arrives mid-render does not cancel the render; it is
picked up by the next poll.

The renderer holds only a weak reference to its frame. ``spawn_worker`` runs
the loop on a daemon thread that stops on its own once the frame has been
dropped (for example when a resize replaced it with a new Frame).

Example:
    >>> from lumen.core.frame import Frame
    >>> from lumen.scene.manager import SceneManager
    >>> from lumen.scene.random_scene import create_simple_scene, simple_camera
    >>>
    >>> frame = Frame(64, 32)
    >>> manager = SceneManager(simple_camera(), create_simple_scene())
    >>> renderer = ProgressiveRenderer(frame, manager)
    >>> renderer.poll()  # First poll always renders
    True
    >>> renderer.poll()  # Camera unchanged
    False
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import TYPE_CHECKING

from lumen.core.sampling import MULTISAMPLE_8X_PATTERN, SamplePattern
from lumen.core.scheduler import FrameScheduler, FrameStats

if TYPE_CHECKING:
    from lumen.camera.thin_lens import Camera
    from lumen.core.frame import Frame
    from lumen.scene.manager import SceneManager

logger = logging.getLogger(__name__)

# Seconds between polls when the camera has not changed
DEFAULT_POLL_INTERVAL = 0.01


class ProgressiveRenderer:
    """Re-renders a frame whenever the scene manager's camera changes.

    Attributes:
        manager: Source of scene snapshots.
        scheduler: Renders each full frame.
        pattern: Sub-pixel sample offsets used for every frame.
        poll_interval: Seconds to sleep between polls in ``run``.
    """

    def __init__(
        self,
        frame: Frame,
        manager: SceneManager,
        scheduler: FrameScheduler | None = None,
        pattern: SamplePattern = MULTISAMPLE_8X_PATTERN,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._frame_ref = weakref.ref(frame)
        self.manager = manager
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.pattern = pattern
        self.poll_interval = poll_interval
        self._last_camera: Camera | None = None
        self._frames_rendered = 0

    @property
    def frame(self) -> Frame | None:
        """The target frame, or None once it has been garbage collected."""
        return self._frame_ref()

    @property
    def last_camera(self) -> Camera | None:
        """The camera of the most recent completed render, or None."""
        return self._last_camera

    @property
    def frames_rendered(self) -> int:
        return self._frames_rendered

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(frame={self.frame!r}, "
            f"frames_rendered={self._frames_rendered})"
        )

    def render_once(self) -> FrameStats | None:
        """Render the current snapshot unconditionally.

        Returns:
            The frame statistics, or None if the frame is gone.
        """
        frame = self.frame
        if frame is None:
            return None
        snapshot = self.manager.snapshot()
        stats = self.scheduler.render_frame(frame, snapshot.camera, snapshot.world, self.pattern)
        self._last_camera = snapshot.camera
        self._frames_rendered += 1
        return stats

    def poll(self) -> bool:
        """Render a frame if the camera changed since the last render.

        Returns:
            True if a frame was rendered. False if the camera is unchanged or
            the frame is gone.
        """
        frame = self.frame
        if frame is None:
            return False

        snapshot = self.manager.snapshot()
        if snapshot.camera == self._last_camera:
            logger.debug("Camera unchanged, skipping render")
            return False

        logger.info("Camera changed, starting frame render")
        self.scheduler.render_frame(frame, snapshot.camera, snapshot.world, self.pattern)
        self._last_camera = snapshot.camera
        self._frames_rendered += 1
        return True

    def run(self, stop_event: threading.Event) -> None:
        """Poll until ``stop_event`` is set or the frame is dropped.

        A render pass that raises is logged and ends the loop.
        """
        logger.info("Render worker started")
        while not stop_event.is_set():
            if self.frame is None:
                logger.info("Render worker lost its frame, stopping")
                return
            try:
                rendered = self.poll()
            except Exception:
                logger.exception("Render pass failed, stopping render worker")
                return
            if not rendered:
                stop_event.wait(self.poll_interval)
        logger.info("Render worker stopped")


def spawn_worker(
    frame: Frame,
    manager: SceneManager,
    scheduler: FrameScheduler | None = None,
    pattern: SamplePattern = MULTISAMPLE_8X_PATTERN,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> tuple[threading.Thread, threading.Event]:
    """Start a daemon thread that keeps ``frame`` rendered.

    Args:
        frame: The frame to keep up to date. Only weakly referenced.
        manager: Source of scene snapshots.
        scheduler: Frame scheduler (default settings if None).
        pattern: Sub-pixel sample offsets.
        poll_interval: Seconds to sleep between polls.

    Returns:
        The started thread and the event that stops it.
    """
    renderer = ProgressiveRenderer(frame, manager, scheduler, pattern, poll_interval)
    stop_event = threading.Event()
    thread = threading.Thread(
        target=renderer.run, args=(stop_event,), name="lumen-progressive", daemon=True
    )
    thread.start()
    return thread, stop_event
