import logging
import multiprocessing
import time
from pathlib import Path

import numpy as np

from almond.complex_number import Complex
from almond.config import PlotConfig
from almond.divergence import divergence_at, divergence_grid

logger = logging.getLogger(__name__)

METHODS = ("sequential", "parallel", "vectorized")


def pixel_to_complex(x: int, y: int, config: PlotConfig) -> Complex:
    """Pixel (x, y) -> (x*delta + cx - r, y*delta + cy - r)."""
    delta = config.delta
    return Complex.from_pair(
        x * delta + config.center_x - config.radius,
        y * delta + config.center_y - config.radius,
    )


def pixel_axes(config: PlotConfig):
    """Real axis (per column x) and imaginary axis (per row y)."""
    idx = np.arange(config.size, dtype=np.float64)
    xs = idx * config.delta + config.center_x - config.radius
    ys = idx * config.delta + config.center_y - config.radius
    return xs, ys


def brightness(iterations, max_iterations: int):
    """
    floor(255 * iterations / max_iterations), forced to 0 for points that never
    escaped (iterations == max_iterations).
    """
    iters = np.asarray(iterations, dtype=np.int64)
    b = np.where(iters < max_iterations, (255 * iters) // max_iterations, 0)
    if b.ndim == 0:
        return int(b)
    return b


def colorize(iterations, max_iterations: int) -> np.ndarray:
    """Map iteration counts to RGB: (b, b^2 mod 255, b^3 mod 255)."""
    b = np.asarray(brightness(iterations, max_iterations), dtype=np.int64)
    r = b
    g = (b * b) % 255
    bl = (b * b * b) % 255
    return np.stack([r, g, bl], axis=-1).astype(np.uint8)


# ---------- grid drivers ----------

def _row_counts(args):
    """Counts for one row; top-level so the pool can pickle it."""
    y, config = args
    return y, [divergence_at(pixel_to_complex(x, y, config), config.max_iterations) for x in range(config.size)]


def _iterations_sequential(config: PlotConfig) -> np.ndarray:
    iters = np.zeros((config.size, config.size), dtype=np.int64)
    for y in range(config.size):
        for x in range(config.size):
            iters[y, x] = divergence_at(pixel_to_complex(x, y, config), config.max_iterations)
    return iters


def _iterations_parallel(config: PlotConfig, workers=None) -> np.ndarray:
    iters = np.zeros((config.size, config.size), dtype=np.int64)
    tasks = [(y, config) for y in range(config.size)]
    with multiprocessing.Pool(processes=workers) as pool:
        # each row owns its own slice of the buffer, so arrival order is irrelevant
        for y, row in pool.imap_unordered(_row_counts, tasks):
            iters[y, :] = row
    return iters


def _iterations_vectorized(config: PlotConfig) -> np.ndarray:
    xs, ys = pixel_axes(config)
    return divergence_grid(xs[None, :], ys[:, None], config.max_iterations)


def iteration_grid(config: PlotConfig, method: str = "sequential", workers=None) -> np.ndarray:
    """
    Escape counts for every pixel, indexed [y, x].

    method:
        "sequential" -> one divergence_at call per pixel
        "parallel"   -> rows spread over a multiprocessing pool
        "vectorized" -> numpy over the whole grid
    """
    config.validate()
    start = time.time()

    if method == "sequential":
        iters = _iterations_sequential(config)
    elif method == "parallel":
        iters = _iterations_parallel(config, workers=workers)
    elif method == "vectorized":
        iters = _iterations_vectorized(config)
    else:
        raise ValueError(f"Unknown method: {method}")

    logger.debug("%s grid %dx%d in %.3fs", method, config.size, config.size, time.time() - start)
    return iters


def render_grid(config: PlotConfig, method: str = "sequential", workers=None) -> np.ndarray:
    """Render a size x size x 3 uint8 RGB buffer."""
    iters = iteration_grid(config, method=method, workers=workers)
    return colorize(iters, config.max_iterations)


# ---------- sinks ----------

def save_image(rgb: np.ndarray, path) -> Path:
    """Write an RGB buffer to disk; row 0 is the top of the image."""
    from PIL import Image

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.asarray(rgb, dtype=np.uint8)).save(path)
    return path


def plot_iterations(iters: np.ndarray, config: PlotConfig, path) -> Path:
    """Diagnostic figure of raw escape counts."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    xs, ys = pixel_axes(config)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(8, 8))
    im = ax.imshow(iters, cmap="magma", origin="upper", extent=[xs[0], xs[-1], ys[-1], ys[0]])
    ax.set_title(f"Divergence map ({config.size}x{config.size}, N={config.max_iterations})")
    ax.set_xlabel("Re(c)")
    ax.set_ylabel("Im(c)")
    fig.colorbar(im, ax=ax, label="Iterations to escape")
    ax.set_aspect("equal", adjustable="box")
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return path
