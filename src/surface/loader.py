"""Image loading: decode a path or image handle and draw it onto a surface."""

import logging
import os
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import numpy as np
import sentry_sdk
from PIL import Image, UnidentifiedImageError

from engine.errors import NotARenderableSurface
from surface.base import Surface

logger = logging.getLogger(__name__)


class InvalidImageSource(ValueError):
    """The image source could not be opened or decoded."""


class LoadStatus(Enum):
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class LoadJob:
    """Tracks state of an image load onto a surface."""

    status: LoadStatus = LoadStatus.RUNNING
    error: str | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock)
    _thread: threading.Thread | None = field(default=None, repr=False)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the load finishes. Returns True if it has finished."""
        if self._thread is not None:
            self._thread.join(timeout)
            return not self._thread.is_alive()
        return True


def load_image(src) -> np.ndarray:
    """Resolve ``src`` into an (H, W, 4) uint8 RGBA array.

    Args:
        src: A file path, a PIL image, or an (H, W, 3|4) uint8 array.

    Raises:
        InvalidImageSource: If the source cannot be decoded.
    """
    if isinstance(src, np.ndarray):
        if src.ndim != 3 or src.shape[2] not in (3, 4):
            raise InvalidImageSource(f"expected (H, W, 3|4) array, got {src.shape}")
        src = Image.fromarray(np.clip(src, 0, 255).astype(np.uint8))

    if isinstance(src, (str, os.PathLike)):
        try:
            with Image.open(src) as img:
                img.load()
                return np.array(img.convert("RGBA"))
        except (OSError, UnidentifiedImageError) as e:
            raise InvalidImageSource(f"cannot load image {os.fspath(src)!r}") from e

    if isinstance(src, Image.Image):
        return np.array(src.convert("RGBA"))

    raise InvalidImageSource(f"unsupported image source: {type(src).__name__}")


def _draw_onto(image, surface: Surface, callback: Callable[[], None] | None):
    pixels = load_image(image)
    height, width = pixels.shape[:2]
    surface.resize(width, height)
    surface.draw_image(pixels, 0, 0)
    logger.debug("Drew %dx%d image onto surface", width, height)
    if callback is not None:
        callback()


def to_canvas(
    image,
    surface: Surface,
    callback: Callable[[], None] | None = None,
    *,
    background: bool = False,
) -> LoadJob:
    """Draw ``image`` onto ``surface``, resizing the surface to fit.

    ``callback`` runs once the image has been drawn. With ``background=True``
    the decode and draw happen on a daemon thread; poll or ``wait()`` on the
    returned job. Errors in the foreground path propagate to the caller.
    """
    if not isinstance(surface, Surface):
        raise NotARenderableSurface(
            f"{type(surface).__name__} is not a renderable surface"
        )

    job = LoadJob()
    if not background:
        _draw_onto(image, surface, callback)
        job.status = LoadStatus.COMPLETE
        return job

    thread = threading.Thread(
        target=_run_load, args=(job, image, surface, callback), daemon=True
    )
    job._thread = thread
    thread.start()
    return job


def _run_load(job: LoadJob, image, surface: Surface, callback):
    try:
        _draw_onto(image, surface, callback)
        with job._lock:
            job.status = LoadStatus.COMPLETE
    except Exception as e:
        sentry_sdk.capture_exception(e)
        logger.exception("Image load failed")
        with job._lock:
            job.status = LoadStatus.ERROR
            job.error = f"Image load failed: {type(e).__name__}"
