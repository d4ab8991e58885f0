# -*- coding: utf-8 -*-
"""
Ray/DEM Intersection - Vectorized terrain intersection of camera rays.

Each ray is parameterized by a height ``h``: ``P(h)`` is where the ray
first meets the datum ellipsoid inflated by ``h`` (semi-axes
``a + h, a + h, b + h``). The residual::

    r(h) = terrain_height(P(h)) - geodetic_height(P(h))

is negative above the terrain and positive below it. Its root is found
by regula falsi with the Illinois modification, starting from a bracket
just outside the DEM's height range. Rays whose bracket ends fall off
the DEM are sampled along the part inside coverage to find the first
crossing. A ray converges when ``|r| <= tolerance`` meters.

Rays that miss the inflated ellipsoid, cross DEM nodata or leave DEM
coverage, are not bracketed, or do not converge within
``max_iterations`` produce NaN points. Failures are never logged per
ray; callers report aggregate counts.

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-16

Modified
--------
2026-10-16
"""

# Standard library
from typing import Tuple

# Third-party
import numpy as np

# SatSim internal
from satsim.elevation.base import ElevationModel

#: Default residual tolerance, meters.
DEFAULT_TOLERANCE = 1.0e-3

#: Default iteration bound per ray.
DEFAULT_MAX_ITERATIONS = 100

# Margin added around the DEM height range so the bracket ends lie
# clear of the terrain
_BRACKET_MARGIN = 1.0
_BRACKET_MARGIN_FRACTION = 1.0e-2

# Samples per ray when the bracket ends lie off the DEM, and bisection
# steps toward the coverage edge
_MARCH_SAMPLES = 64
_EDGE_ITERATIONS = 40


def _residual(
    dem: ElevationModel,
    origins: np.ndarray,
    directions: np.ndarray,
    h: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """Residual and ray point for height parameters ``h``."""
    points = dem.datum.intersect_ellipsoid(origins, directions, h)
    terrain, height = dem.height_below(points)
    return terrain - height, points


def _march_bracket(
    dem: ElevationModel,
    origins: np.ndarray,
    directions: np.ndarray,
    lower: np.ndarray,
    upper: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Bracket the first terrain crossing of rays whose ends are off the DEM.

    Samples each ray from ``upper`` down to ``lower`` and takes the pair
    around the first sample below the terrain. When the sample above it
    has no residual (the ray enters coverage between the two), the
    coverage edge is bisected for a point above the terrain.

    Returns
    -------
    tuple
        ``(found, a, fa, b, fb)`` with ``a`` below and ``b`` above the
        terrain for rays where ``found`` is True.
    """
    m = len(lower)
    rows = np.arange(m)
    fractions = np.linspace(0.0, 1.0, _MARCH_SAMPLES)
    heights = upper[:, None] - fractions[None, :] * (upper - lower)[:, None]
    f, _ = _residual(
        dem,
        np.repeat(origins, _MARCH_SAMPLES, axis=0),
        np.repeat(directions, _MARCH_SAMPLES, axis=0),
        heights.ravel(),
    )
    f = f.reshape(m, _MARCH_SAMPLES)

    below = f > 0.0
    k = np.argmax(below, axis=1)
    found = below[rows, k] & (k > 0)
    prev = np.maximum(k - 1, 0)

    a = heights[rows, k]
    fa = f[rows, k]
    b = heights[rows, prev]
    fb = f[rows, prev]

    # The ray enters coverage below the sample above the terrain crossing
    edge = found & ~np.isfinite(fb)
    idx = np.flatnonzero(edge)
    hi = b[idx].copy()
    lo = a[idx].copy()
    flo = fa[idx].copy()
    hit = np.zeros(idx.size, dtype=bool)
    hit_h = np.full(idx.size, np.nan)
    hit_f = np.full(idx.size, np.nan)
    for _ in range(_EDGE_ITERATIONS):
        open_ = ~hit
        if not open_.any():
            break
        mid = 0.5 * (lo + hi)
        fm, _ = _residual(dem, origins[idx], directions[idx], mid)
        above = open_ & (fm <= 0.0)
        hit_h[above] = mid[above]
        hit_f[above] = fm[above]
        hit |= above
        under = open_ & (fm > 0.0)
        lo[under] = mid[under]
        flo[under] = fm[under]
        outside = open_ & ~np.isfinite(fm)
        hi[outside] = mid[outside]

    a[idx] = lo
    fa[idx] = flo
    b[idx] = hit_h
    fb[idx] = hit_f
    found[idx] = hit
    return found, a, fa, b, fb


def intersect_dem(
    origins: np.ndarray,
    directions: np.ndarray,
    dem: ElevationModel,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> np.ndarray:
    """Intersect rays with the DEM surface.

    Parameters
    ----------
    origins : np.ndarray
        Ray origins in the DEM datum's Cartesian frame, shape ``(N, 3)``.
    directions : np.ndarray
        Ray directions, shape ``(N, 3)``.
    dem : ElevationModel
        Terrain to intersect.
    tolerance : float, default=1e-3
        Height error tolerance in meters.
    max_iterations : int, default=100
        Iteration bound per ray.

    Returns
    -------
    np.ndarray
        Ground points, shape ``(N, 3)``; NaN rows where no intersection
        was found.
    """
    origins = np.atleast_2d(np.asarray(origins, dtype=np.float64))
    directions = np.atleast_2d(np.asarray(directions, dtype=np.float64))
    n = len(origins)
    result = np.full((n, 3), np.nan)
    if n == 0:
        return result

    lo_height, hi_height = dem.height_range()
    margin = _BRACKET_MARGIN + _BRACKET_MARGIN_FRACTION * max(
        abs(lo_height), abs(hi_height)
    )

    # a: below the terrain (r > 0), b: above the terrain (r < 0)
    a = np.full(n, lo_height - margin)
    b = np.full(n, hi_height + margin)
    fa, pa = _residual(dem, origins, directions, a)
    fb, pb = _residual(dem, origins, directions, b)

    done_a = np.abs(fa) <= tolerance
    done_b = np.abs(fb) <= tolerance
    result[done_b] = pb[done_b]
    result[done_a & ~done_b] = pa[done_a & ~done_b]

    # NaN residuals fail both comparisons
    active = (fa > 0.0) & (fb < 0.0) & ~done_a & ~done_b

    # Bracket ends off the DEM: search the ray inside coverage instead
    off = ~active & ~done_a & ~done_b & ~(np.isfinite(fa) & np.isfinite(fb))
    idx = np.flatnonzero(off)
    if idx.size:
        found, ma, mfa, mb, mfb = _march_bracket(
            dem, origins[idx], directions[idx], a[idx], b[idx]
        )
        idx = idx[found]
        a[idx], fa[idx] = ma[found], mfa[found]
        b[idx], fb[idx] = mb[found], mfb[found]
        active[idx] = True

    side = np.zeros(n, dtype=np.int8)

    for _ in range(max_iterations):
        idx = np.flatnonzero(active)
        if idx.size == 0:
            break

        fa_i, fb_i = fa[idx], fb[idx]
        c = (a[idx] * fb_i - b[idx] * fa_i) / (fb_i - fa_i)
        fc, pc = _residual(dem, origins[idx], directions[idx], c)

        failed = ~np.isfinite(fc)
        converged = ~failed & (np.abs(fc) <= tolerance)
        result[idx[converged]] = pc[converged]
        active[idx[failed | converged]] = False

        moving = ~failed & ~converged
        above = moving & (fc < 0.0)
        below = moving & (fc > 0.0)

        # Illinois step: halve the stale end's residual when the same
        # end is replaced twice in a row
        i_above = idx[above]
        b[i_above] = c[above]
        fb[i_above] = fc[above]
        stale = i_above[side[i_above] == -1]
        fa[stale] *= 0.5
        side[i_above] = -1

        i_below = idx[below]
        a[i_below] = c[below]
        fa[i_below] = fc[below]
        stale = i_below[side[i_below] == 1]
        fb[stale] *= 0.5
        side[i_below] = 1

    return result
