"""Parallel row-chunk scheduler that fills a frame buffer.

A frame is split into chunks of ``lines_per_work`` full image rows. Each
chunk is rendered in a worker process into a private float buffer and
converted to the frame's pixel format; the calling thread then copies the
finished block into the frame under its lock in one step. Chunks complete in
any order; every pixel is written exactly once per frame.

The integrator is pure Python, so chunks run in a ``ProcessPoolExecutor``
rather than a thread pool. The viewport, scene tree and sample pattern are
pickled to the workers with each chunk. A scheduler with a single worker
renders inline and never starts a process.

Randomness is deterministic per chunk: one ``SeedSequence`` is created per
frame from ``RenderSettings.seed`` and spawned into one child sequence per
chunk, so a seeded render produces the same image whatever the worker count
or completion order.

Example:
    >>> from lumen.core.frame import Frame
    >>> from lumen.core.sampling import SamplePattern
    >>> from lumen.core.settings import RenderSettings
    >>> from lumen.scene.random_scene import create_simple_scene, simple_camera
    >>>
    >>> frame = Frame(32, 16)
    >>> with FrameScheduler(RenderSettings(max_bounces=4, seed=1)) as scheduler:
    ...     stats = scheduler.render_frame(
    ...         frame, simple_camera(), create_simple_scene(), SamplePattern.standard(1)
    ...     )
    >>> stats.pixels
    512
"""

from __future__ import annotations

import logging
import multiprocessing
import os
import threading
import time
from collections.abc import Callable, Iterator
from concurrent.futures import FIRST_COMPLETED, Future, ProcessPoolExecutor, wait
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from lumen.core.integrator import render_pixel
from lumen.core.settings import RenderSettings, ShadingMode
from lumen.errors import ConfigurationError

if TYPE_CHECKING:
    from lumen.camera.thin_lens import Camera, Viewport
    from lumen.core.color import PixelFormat
    from lumen.core.frame import Frame
    from lumen.core.sampling import SamplePattern
    from lumen.geometry.hittable import SceneObject

logger = logging.getLogger(__name__)

# Called with the pixel range of each chunk once it is in the frame
ChunkCallback = Callable[[range], None]

# Scene inputs shared by every chunk of a pass, and one chunk with its seed
ChunkArgs = tuple["Viewport", "SceneObject", "SamplePattern"]
Job = tuple[range, np.random.SeedSequence]

# Workers are started fresh rather than forked from a process that may hold
# GUI or render threads
MP_CONTEXT = "spawn"


def chunk_ranges(width: int, height: int, lines_per_work: int) -> list[range]:
    """Split the pixel range ``[0, width * height)`` into row chunks.

    Each chunk spans ``width * lines_per_work`` pixels; a shorter final chunk
    covers the remainder. The chunks are ordered, contiguous and do not
    overlap.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        lines_per_work: Rows per chunk.

    Returns:
        The list of pixel index ranges.

    Raises:
        ConfigurationError: If any argument is not positive.
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"Image size must be positive, got {width}x{height}")
    if lines_per_work <= 0:
        raise ConfigurationError(f"lines_per_work must be positive, got {lines_per_work}")

    total = width * height
    step = width * lines_per_work
    chunks = [range(start, start + step) for start in range(0, total - step + 1, step)]
    covered = len(chunks) * step
    if covered < total:
        chunks.append(range(covered, total))
    return chunks


def render_chunk(
    viewport: Viewport,
    world: SceneObject,
    pattern: SamplePattern,
    chunk: range,
    width: int,
    seed: np.random.SeedSequence,
    max_bounces: int,
    shading: ShadingMode,
    pixel_format: type[PixelFormat],
) -> npt.NDArray[np.generic]:
    """Render the pixels of one chunk and convert them to ``pixel_format``.

    Runs in a worker process, so it touches no shared state and returns the
    finished block for the caller to copy into the frame.

    Returns:
        Pixels of shape ``(len(chunk), pixel_format.channels)``.
    """
    rng = np.random.default_rng(seed)
    colors = np.empty((len(chunk), 4), dtype=np.float64)
    for offset, i in enumerate(chunk):
        color = render_pixel(
            i % width,
            i // width,
            viewport,
            world,
            pattern,
            rng,
            max_bounces=max_bounces,
            shading=shading,
        )
        colors[offset] = color.to_tuple()
    return pixel_format.from_colors(colors)


@dataclass
class FrameStats:
    """Summary of one render pass.

    Attributes:
        chunks: Number of chunks written to the frame.
        pixels: Number of pixels written to the frame.
        elapsed: Wall-clock seconds for the pass.
        cancelled: True if ``should_cancel`` skipped at least one chunk.
    """

    chunks: int = 0
    pixels: int = 0
    elapsed: float = 0.0
    cancelled: bool = False


class FrameScheduler:
    """Renders whole frames by fanning row chunks out to worker processes.

    The scene and camera are treated as immutable for the whole pass. The
    only shared mutable state is the frame, which is locked just long enough
    to copy each finished chunk in.

    The process pool is created on first use and reused for later frames.
    Call ``close()`` (or use the scheduler as a context manager) to shut it
    down.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings if settings is not None else RenderSettings()
        self.workers = self.settings.workers or os.cpu_count() or 1
        self._pool: ProcessPoolExecutor | None = None
        self._pool_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"FrameScheduler({self.settings!r})"

    def __enter__(self) -> FrameScheduler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the worker processes, if any were started."""
        with self._pool_lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=True, cancel_futures=True)

    def _get_pool(self) -> ProcessPoolExecutor:
        with self._pool_lock:
            if self._pool is None:
                logger.debug("Starting %d render processes", self.workers)
                self._pool = ProcessPoolExecutor(
                    max_workers=self.workers,
                    mp_context=multiprocessing.get_context(MP_CONTEXT),
                )
            return self._pool

    def _discard_pool(self, pool: ProcessPoolExecutor) -> None:
        with self._pool_lock:
            if self._pool is pool:
                self._pool = None
        pool.shutdown(wait=False, cancel_futures=True)

    def render_frame(
        self,
        frame: Frame,
        camera: Camera,
        world: SceneObject,
        pattern: SamplePattern,
        *,
        should_cancel: Callable[[], bool] | None = None,
        on_chunk: ChunkCallback | None = None,
    ) -> FrameStats:
        """Render one complete frame into ``frame``.

        Args:
            frame: Destination buffer; its size sets the viewport size.
            camera: Camera value for this pass.
            world: Root of the scene tree.
            pattern: Sub-pixel sample offsets.
            should_cancel: Checked before each chunk starts. Returning True
                skips the chunk and every chunk after it.
            on_chunk: Called after each chunk has been copied into the frame.

        Returns:
            Statistics for the pass.

        Raises:
            FrameLockError: If the frame lock cannot be taken or the frame is
                poisoned.
            Exception: Any failure while rendering a chunk aborts the pass and
                is re-raised after pending chunks are cancelled.
        """
        settings = self.settings
        width, height = frame.width, frame.height
        viewport = camera.viewport(width, height)
        chunks = chunk_ranges(width, height, settings.lines_per_work)
        seeds = np.random.SeedSequence(settings.seed).spawn(len(chunks))

        logger.info(
            "Rendering %dx%d frame in %d chunks (%d samples/pixel, %d bounces)",
            width,
            height,
            len(chunks),
            len(pattern),
            settings.max_bounces,
        )

        stats = FrameStats()
        start_time = time.perf_counter()
        jobs = zip(chunks, seeds)
        args = (viewport, world, pattern)

        if self.workers == 1:
            self._render_inline(frame, args, jobs, stats, should_cancel, on_chunk)
        else:
            self._render_pooled(frame, args, jobs, stats, should_cancel, on_chunk)

        stats.elapsed = time.perf_counter() - start_time
        if stats.cancelled:
            logger.warning(
                "Render cancelled after %d of %d chunks (%.2fs)",
                stats.chunks,
                len(chunks),
                stats.elapsed,
            )
        else:
            logger.info("Rendered %d pixels in %.2fs", stats.pixels, stats.elapsed)
        return stats

    def _render_inline(
        self,
        frame: Frame,
        args: ChunkArgs,
        jobs: Iterator[Job],
        stats: FrameStats,
        should_cancel: Callable[[], bool] | None,
        on_chunk: ChunkCallback | None,
    ) -> None:
        for chunk, seed in jobs:
            if should_cancel is not None and should_cancel():
                stats.cancelled = True
                return
            block = render_chunk(*args, chunk, frame.width, seed, *self._chunk_options(frame))
            self._commit(frame, chunk, block, stats, on_chunk)

    def _render_pooled(
        self,
        frame: Frame,
        args: ChunkArgs,
        jobs: Iterator[Job],
        stats: FrameStats,
        should_cancel: Callable[[], bool] | None,
        on_chunk: ChunkCallback | None,
    ) -> None:
        pool = self._get_pool()
        options = self._chunk_options(frame)
        in_flight: dict[Future[npt.NDArray[np.generic]], range] = {}
        try:
            while True:
                # At most one chunk per worker in flight
                while len(in_flight) < self.workers and not stats.cancelled:
                    job = next(jobs, None)
                    if job is None:
                        break
                    if should_cancel is not None and should_cancel():
                        stats.cancelled = True
                        break
                    chunk, seed = job
                    future = pool.submit(render_chunk, *args, chunk, frame.width, seed, *options)
                    in_flight[future] = chunk
                if not in_flight:
                    return
                done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                for future in done:
                    chunk = in_flight.pop(future)
                    self._commit(frame, chunk, future.result(), stats, on_chunk)
        except BrokenProcessPool:
            self._discard_pool(pool)
            raise
        except BaseException:
            for pending in in_flight:
                pending.cancel()
            raise

    def _chunk_options(self, frame: Frame) -> tuple[int, ShadingMode, type[PixelFormat]]:
        return (self.settings.max_bounces, self.settings.shading, frame.pixel_format)

    def _commit(
        self,
        frame: Frame,
        chunk: range,
        block: npt.NDArray[np.generic],
        stats: FrameStats,
        on_chunk: ChunkCallback | None,
    ) -> None:
        """Copy a finished chunk into the frame and account for it."""
        frame.write(chunk.start, block, timeout=self.settings.lock_timeout)
        logger.debug("Chunk [%d, %d) written", chunk.start, chunk.stop)
        stats.chunks += 1
        stats.pixels += len(chunk)
        if on_chunk is not None:
            on_chunk(chunk)
