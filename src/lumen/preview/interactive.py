"""Interactive preview window using Taichi GGUI.

This module shows a frame buffer in a Taichi ``ti.ui.Window`` while a
background worker keeps re-rendering it. Keyboard input moves the camera
through the SceneManager; every camera change triggers a full re-render,
which becomes visible chunk by chunk.

Controls:
    - W / Up arrow: move forward
    - S / Down arrow: move backward
    - A / Left arrow: move left
    - D / Right arrow: move right
    - E: move up
    - Q: move down

Resizing the window replaces the frame with one of the new size and restarts
the worker on it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lumen.preview.interactive import InteractivePreview
    >>> from lumen.scene import SceneManager, create_random_scene, default_camera
    >>>
    >>> manager = SceneManager(default_camera(), create_random_scene())
    >>> preview = InteractivePreview(800, 600, manager)
    >>> preview.run()  # Blocks until the window is closed
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from lumen.core.frame import Frame
from lumen.core.progressive import spawn_worker
from lumen.core.sampling import MULTISAMPLE_8X_PATTERN, SamplePattern
from lumen.core.scheduler import FrameScheduler
from lumen.preview.export import save_png

if TYPE_CHECKING:
    import threading

    from lumen.scene.manager import SceneManager

logger = logging.getLogger(__name__)

# Keys held for each movement control; the arrow names match ti.ui.UP etc.
KEY_BINDINGS: dict[str, tuple[str, ...]] = {
    "forward": ("w", "Up"),
    "backward": ("s", "Down"),
    "left": ("a", "Left"),
    "right": ("d", "Right"),
    "up": ("e",),
    "down": ("q",),
}

# Camera movement speed in world units per second
DEFAULT_MOVE_SPEED = 2.0


def _allocate_display(width: int, height: int) -> ti.MatrixField:
    # Taichi fields use (x, y) indexing, i.e. shape (width, height)
    return ti.Vector.field(3, dtype=ti.f32, shape=(width, height))


def controls_from_keys(is_pressed: Callable[[str], bool]) -> dict[str, bool]:
    """Map the current key state to movement controls.

    Args:
        is_pressed: Returns True while the named key is held
            (``ti.ui.Window.is_pressed``).

    Returns:
        Control name to pressed state for every control in KEY_BINDINGS.
    """
    return {
        name: any(is_pressed(key) for key in keys) for name, keys in KEY_BINDINGS.items()
    }


class InteractivePreview:
    """Interactive preview window using Taichi GGUI.

    The window owns the frame; the render worker only holds a weak
    reference to it.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        manager: Scene state shared with the render worker.
        frame: The frame the worker renders into.
        display_image: Taichi field storing the display image (RGB float).
    """

    def __init__(
        self,
        width: int,
        height: int,
        manager: SceneManager,
        *,
        scheduler: FrameScheduler | None = None,
        pattern: SamplePattern = MULTISAMPLE_8X_PATTERN,
        move_speed: float = DEFAULT_MOVE_SPEED,
        title: str = "Lumen - Interactive Preview",
    ) -> None:
        """Initialize the interactive preview.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            manager: Scene state to render and to move with the keyboard.
            scheduler: Frame scheduler for the worker (default settings if None).
            pattern: Sub-pixel sample offsets for every frame.
            move_speed: Camera speed in world units per second.
            title: Window title.

        Note:
            Taichi must already be initialized. The window is created lazily
            when run() is called.
        """
        self.width = width
        self.height = height
        self.manager = manager
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.pattern = pattern
        self.move_speed = move_speed
        self._title = title
        self._is_initialized = False

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self._worker: threading.Thread | None = None
        self._stop_event: threading.Event | None = None

        self.frame = Frame(width, height)
        self.display_image = _allocate_display(width, height)

    def _initialize_window(self) -> None:
        """Initialize the Taichi GGUI window and canvas."""
        if self._is_initialized:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()
        self._is_initialized = True

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    def update_image_from_frame(self) -> None:
        """Copy the current frame contents into the display field.

        The frame's row 0 is the bottom image row, which matches Taichi's
        bottom-left origin, so only a transpose is needed.
        """
        pixels = self.frame.snapshot()
        image = pixels.reshape(self.height, self.width, -1)[..., :3].astype(np.float32) / 255.0
        self.display_image.from_numpy(np.ascontiguousarray(np.transpose(image, (1, 0, 2))))

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the display image."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def poll_controls(self) -> None:
        """Forward the keyboard state to the scene manager."""
        for name, pressed in controls_from_keys(self.window.is_pressed).items():
            self.manager.set_control(name, pressed)

    @property
    def worker(self) -> threading.Thread | None:
        """The render worker thread for the current frame, if started."""
        return self._worker

    def start_worker(self) -> None:
        """Start the background render worker for the current frame."""
        if self._stop_event is not None:
            return
        self._worker, self._stop_event = spawn_worker(
            self.frame, self.manager, self.scheduler, self.pattern
        )

    def stop_worker(self) -> None:
        """Ask the render worker to stop after its current frame."""
        if self._stop_event is not None:
            self._stop_event.set()
        self._worker = None
        self._stop_event = None

    def resize(self, width: int, height: int) -> bool:
        """Switch to a new frame and display field of the given size.

        A running worker is stopped and a new one is started on the new
        frame. The old worker finishes its pass on the old frame, which is
        then dropped. Zero sizes (a minimized window) are ignored.

        Returns:
            True if the size changed.
        """
        if width <= 0 or height <= 0 or (width, height) == (self.width, self.height):
            return False

        restart = self._stop_event is not None
        self.stop_worker()
        self.width = width
        self.height = height
        self.frame = Frame(width, height)
        self.display_image = _allocate_display(width, height)
        logger.info("Window resized to %dx%d", width, height)
        if restart:
            self.start_worker()
        return True

    def run(self) -> None:
        """Run the main window event loop.

        This blocks until the window is closed. Each iteration applies the
        held movement keys to the camera, copies the frame into the display
        field, draws the GUI panel and presents the window. A change in
        window size swaps in a new frame.
        """
        self._initialize_window()
        self.start_worker()

        last_time = time.perf_counter()
        try:
            while self.is_running():
                now = time.perf_counter()
                elapsed, last_time = now - last_time, now

                self.resize(*self.window.get_window_shape())
                self.poll_controls()
                self.manager.advance(elapsed, self.move_speed)

                self.update_image_from_frame()
                self._draw_gui_panel()
                self.show_frame()
        finally:
            self.stop_worker()
            self.manager.release_all()

    def close(self) -> None:
        """Close the preview window, stop the worker and its render processes."""
        self.stop_worker()
        self.scheduler.close()
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # On macOS, display is always available unless in SSH without forwarding
        if os.uname().sysname == "Darwin":
            return not (os.environ.get("SSH_CONNECTION") and not display)

        return bool(display or wayland)

    # =========================================================================
    # GUI Panel
    # =========================================================================

    def _draw_gui_panel(self) -> None:
        """Draw the camera lens controls and the export button."""
        camera = self.manager.camera

        with self.window.GUI.sub_window("Camera", 0.02, 0.02, 0.28, 0.18) as gui:
            new_fov = gui.slider_float(
                "FOV", camera.vertical_fov_degrees, minimum=5.0, maximum=120.0
            )
            new_aperture = gui.slider_float(
                "Aperture", camera.aperture, minimum=0.0, maximum=1.0
            )
            new_focus = gui.slider_float(
                "Focus", camera.focus_distance, minimum=0.1, maximum=30.0
            )
            export_clicked = gui.button("Export PNG")

        changes = {}
        if abs(new_fov - camera.vertical_fov_degrees) > 1e-6:
            changes["vertical_fov_degrees"] = new_fov
        if abs(new_aperture - camera.aperture) > 1e-6:
            changes["aperture"] = new_aperture
        if abs(new_focus - camera.focus_distance) > 1e-6:
            changes["focus_distance"] = new_focus
        if changes:
            self.manager.update_camera(**changes)

        if export_clicked:
            self.export_png()

    def export_png(self, filename: str | None = None) -> str:
        """Export the current frame to a PNG file.

        Args:
            filename: Output path. Defaults to ``lumen_YYYYMMDD_HHMMSS.png``.

        Returns:
            The path written.
        """
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"lumen_{timestamp}.png"

        save_png(self.frame, filename)
        logger.info("Exported %s", filename)
        return filename
