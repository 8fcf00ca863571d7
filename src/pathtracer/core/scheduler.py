"""Chunk-based parallel render scheduler.

The image is partitioned into square chunks (clipped at the right and bottom
edges). One RenderJob per chunk is enqueued on a bounded queue sized to the
chunk count, then a fixed pool of worker threads pulls jobs until it reads
the "closed" sentinel. Each worker renders its chunk into the shared buffer
and ticks the progress tracker once per chunk.

Shared state:
    - The output buffer: chunks are disjoint, so pixel writes need no lock.
    - The job queue: queue.Queue handles concurrent pulls.
    - The progress tracker: ticks are enqueued, consumed by one thread.

Scene, camera, and parameters are read-only during the render. Each chunk
owns a random generator seeded from (seed, x0, y0), so workers never share
random state and every chunk is reproducible regardless of which worker
renders it or in what order.

Workers are OS threads running Python-level vector code, which holds the
interpreter lock: on a standard CPython build they interleave on one core
rather than running in parallel. Free-threaded builds run them concurrently
with no code change.

There is no per-job fault isolation: the first worker exception stops every
worker from taking new jobs and is re-raised from render() once all workers
have exited. There is no cancellation or timeout.

Example:
    >>> from pathtracer.core.scheduler import ImageBuffer, RenderParams, render
    >>> from pathtracer.scene.presets import create_skylight_scene
    >>> scene, camera = create_skylight_scene(64, 48)
    >>> buffer = ImageBuffer(64, 48)
    >>> stats = render(scene, camera, buffer, RenderParams(samples_per_pixel=4))
"""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
from dataclasses import dataclass
from typing import Protocol

import numpy as np
import numpy.typing as npt

from pathtracer.camera.pinhole import PinholeCamera
from pathtracer.core.integrator import DEFAULT_MAX_BOUNCES, sample_pixel
from pathtracer.core.progress import ProgressCallback, ProgressTracker
from pathtracer.core.ray import radiance_to_color
from pathtracer.materials.material import AIR, Material
from pathtracer.scene.intersection import Scene

logger = logging.getLogger(__name__)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================


class PixelBuffer(Protocol):
    """Anything render() can write into."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def set_pixel(self, x: int, y: int, color: tuple[int, int, int]) -> None: ...


class ImageBuffer:
    """A mutable 2D grid of 8-bit RGB pixels.

    Row 0 is the top of the image. The backing array has shape
    (height, width, 3) and dtype uint8, the layout Pillow expects.
    """

    def __init__(self, width: int, height: int) -> None:
        """Create a black image.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Raises:
            ValueError: If either dimension is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self._pixels = np.zeros((height, width, 3), dtype=np.uint8)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._pixels.shape[0]

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Pixel ({x}, {y}) outside {self.width}x{self.height} image"
            )

    def set_pixel(self, x: int, y: int, color: tuple[int, int, int]) -> None:
        """Set the color at column x, row y.

        Raises:
            IndexError: If (x, y) is outside the image.
        """
        self._check_bounds(x, y)
        self._pixels[y, x] = color

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int]:
        """Get the color at column x, row y.

        Raises:
            IndexError: If (x, y) is outside the image.
        """
        self._check_bounds(x, y)
        r, g, b = self._pixels[y, x]
        return int(r), int(g), int(b)

    def to_numpy(self) -> npt.NDArray[np.uint8]:
        """Copy of the pixels as a (height, width, 3) uint8 array."""
        return self._pixels.copy()

    def __repr__(self) -> str:
        return f"ImageBuffer(width={self.width}, height={self.height})"


# =============================================================================
# Render Configuration
# =============================================================================


@dataclass(frozen=True)
class RenderParams:
    """Sampling and scheduling parameters for a render.

    Attributes:
        samples_per_pixel: Independent jittered samples averaged per pixel.
        max_bounces: Path length budget for the integrator.
        chunk_size: Edge length in pixels of the square work chunks.
        seed: Base seed combined with each chunk's position.

    Raises:
        ValueError: If samples_per_pixel, max_bounces, or chunk_size is not
            positive.
    """

    samples_per_pixel: int = 16
    max_bounces: int = DEFAULT_MAX_BOUNCES
    chunk_size: int = 32
    seed: int = 0

    def __post_init__(self) -> None:
        for name in ("samples_per_pixel", "max_bounces", "chunk_size"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class Chunk:
    """Half-open pixel rectangle [x0, x1) x [y0, y1)."""

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def area(self) -> int:
        return self.width * self.height

    def pixels(self) -> list[tuple[int, int]]:
        """All (x, y) coordinates in the chunk, row by row."""
        return [(x, y) for y in range(self.y0, self.y1) for x in range(self.x0, self.x1)]


@dataclass(frozen=True, eq=False)
class RenderJob:
    """One chunk of work, consumed by exactly one worker."""

    chunk: Chunk
    scene: Scene
    camera: PinholeCamera
    params: RenderParams
    buffer: PixelBuffer
    ambient: Material = AIR


@dataclass(frozen=True)
class RenderStats:
    """Summary of a finished render."""

    width: int
    height: int
    chunks: int
    samples: int
    elapsed: float

    @property
    def time_per_sample_ms(self) -> float:
        """Wall-clock milliseconds per camera sample."""
        if self.samples == 0:
            return 0.0
        return 1000.0 * self.elapsed / self.samples


# =============================================================================
# Chunk Partitioning and Rendering
# =============================================================================


def partition_chunks(width: int, height: int, chunk_size: int) -> list[Chunk]:
    """Tile a width x height image with chunk_size x chunk_size chunks.

    Chunks are returned in row-major order. Chunks on the right and bottom
    edges are clipped to the image, so together the chunks cover every pixel
    exactly once.

    Raises:
        ValueError: If any argument is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    return [
        Chunk(x, y, min(x + chunk_size, width), min(y + chunk_size, height))
        for y in range(0, height, chunk_size)
        for x in range(0, width, chunk_size)
    ]


def chunk_rng(seed: int, chunk: Chunk) -> np.random.Generator:
    """Create the random generator owned by one chunk.

    The generator depends only on the base seed and the chunk's top-left
    corner, so a chunk renders identically on any worker.
    """
    return np.random.default_rng([seed, chunk.x0, chunk.y0])


def render_chunk(job: RenderJob) -> None:
    """Render every pixel of a job's chunk into its buffer.

    Pixels outside the buffer are skipped, so chunks overhanging the image
    edge are safe.
    """
    chunk = job.chunk
    params = job.params
    width, height = job.buffer.width, job.buffer.height
    rng = chunk_rng(params.seed, chunk)

    for y in range(chunk.y0, chunk.y1):
        if y >= height:
            break
        for x in range(chunk.x0, chunk.x1):
            if x >= width:
                break
            radiance = sample_pixel(
                job.camera,
                job.scene,
                x,
                y,
                params.samples_per_pixel,
                params.max_bounces,
                rng,
                job.ambient,
            )
            job.buffer.set_pixel(x, y, radiance_to_color(radiance))


# =============================================================================
# Worker Pool
# =============================================================================


def default_worker_count() -> int:
    """Available hardware parallelism (at least 1)."""
    return os.cpu_count() or 1


def _worker(
    jobs: queue.Queue[RenderJob | None],
    progress: ProgressTracker,
    abort: threading.Event,
    errors: list[BaseException],
) -> None:
    """Pull and render jobs until the closed sentinel is reached."""
    while True:
        job = jobs.get()
        if job is None:
            return
        if abort.is_set():
            # drain remaining jobs without rendering after a failure
            continue
        try:
            render_chunk(job)
        except Exception as exc:
            logger.exception("Worker failed rendering chunk %s", job.chunk)
            errors.append(exc)
            abort.set()
            continue
        logger.debug("Rendered chunk %s", job.chunk)
        progress.tick()


def render(
    scene: Scene,
    camera: PinholeCamera,
    buffer: PixelBuffer,
    params: RenderParams | None = None,
    *,
    workers: int | None = None,
    callback: ProgressCallback | None = None,
    ambient: Material = AIR,
) -> RenderStats:
    """Render the scene into buffer using a pool of worker threads.

    Blocks until every worker has exited and the progress stream is drained.

    Args:
        scene: The scene's geometries (read-only during the render).
        camera: The camera; normally built for the buffer's dimensions.
        buffer: The output buffer, written once per pixel.
        params: Sampling parameters (defaults to RenderParams()).
        workers: Number of worker threads (defaults to the CPU count).
        callback: Optional progress callback receiving
            (completed_chunks, total_chunks), called from one thread.
        ambient: The medium surrounding the scene and the camera.

    Returns:
        Timing and size statistics for the render.

    Raises:
        ValueError: If workers is not positive.
        Exception: The first exception raised inside any worker; the buffer
            is then only partially rendered.
    """
    if params is None:
        params = RenderParams()
    if workers is None:
        workers = default_worker_count()
    if workers <= 0:
        raise ValueError(f"workers must be positive, got {workers}")

    chunks = partition_chunks(buffer.width, buffer.height, params.chunk_size)
    logger.info(
        "Rendering %dx%d image: %d chunks, %d workers, %d spp, %d bounces",
        buffer.width,
        buffer.height,
        len(chunks),
        workers,
        params.samples_per_pixel,
        params.max_bounces,
    )

    jobs: queue.Queue[RenderJob | None] = queue.Queue(maxsize=len(chunks))
    for chunk in chunks:
        jobs.put(RenderJob(chunk, scene, camera, params, buffer, ambient))

    abort = threading.Event()
    errors: list[BaseException] = []
    start = time.perf_counter()

    with ProgressTracker(total=len(chunks), callback=callback) as progress:
        threads = [
            threading.Thread(
                target=_worker,
                args=(jobs, progress, abort, errors),
                name=f"pathtracer-worker-{i}",
                daemon=True,
            )
            for i in range(workers)
        ]
        for thread in threads:
            thread.start()
        # One sentinel per worker closes the queue; blocks until workers make room
        for _ in range(workers):
            jobs.put(None)
        for thread in threads:
            thread.join()

    elapsed = time.perf_counter() - start

    if errors:
        raise errors[0]

    stats = RenderStats(
        width=buffer.width,
        height=buffer.height,
        chunks=len(chunks),
        samples=buffer.width * buffer.height * params.samples_per_pixel,
        elapsed=elapsed,
    )
    logger.info(
        "Render complete in %.2fs (%.5f ms/sample)", elapsed, stats.time_per_sample_ms
    )
    return stats
