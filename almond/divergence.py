import numpy as np

from almond.complex_number import Complex

ESCAPE_RADIUS = 2.0
ESCAPE_SQ = ESCAPE_RADIUS * ESCAPE_RADIUS


def _check_cap(max_iterations):
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)):
        raise ValueError(f"max_iterations must be an int, got {max_iterations!r}")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be positive, got {max_iterations}")


def divergence_at(c, max_iterations: int) -> int:
    """
    Escape-time count for one point.

    Iterates z_0 = 0, z_{k+1} = z_k^2 + c and returns the first index i < max_iterations
    with |z_i|^2 > 4, or max_iterations if the orbit stays bounded that long.
    Since z_1 = c, any |c| > 2 gives 1.
    """
    _check_cap(max_iterations)
    c = Complex.coerce(c)
    z = Complex.from_real(0.0)

    i = 0
    while z.squared_magnitude() <= ESCAPE_SQ and i < max_iterations:
        z = z.squared().add(c)
        i += 1
    return i


def divergence_grid(reals, imags, max_iterations: int) -> np.ndarray:
    """
    Vectorized escape-time counts.

    reals / imags are broadcast together (e.g. xs[None, :] and ys[:, None]).
    The update is written term by term in the same order as
    Complex.squared().add(c) so counts match divergence_at exactly.
    """
    _check_cap(max_iterations)
    cr, ci = np.broadcast_arrays(np.asarray(reals, dtype=np.float64), np.asarray(imags, dtype=np.float64))

    zr = np.zeros(cr.shape, dtype=np.float64)
    zi = np.zeros(cr.shape, dtype=np.float64)
    counts = np.full(cr.shape, max_iterations, dtype=np.int64)
    active = np.ones(cr.shape, dtype=bool)

    for i in range(max_iterations):
        # points escaping at z_i get count i
        escaped_now = active & (zr * zr + zi * zi > ESCAPE_SQ)
        counts[escaped_now] = i
        active &= ~escaped_now
        if not active.any():
            break

        ar, ai = zr[active], zi[active]
        zr[active] = (ar * ar - ai * ai) + cr[active]
        zi[active] = (2 * ar * ai) + ci[active]

    return counts
