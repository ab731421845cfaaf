import logging
from dataclasses import dataclass
from typing import Dict, List

import numpy as np
from scipy.interpolate import PchipInterpolator

from .exceptions import ConfigurationError, InvalidGridError

logger = logging.getLogger(__name__)


@dataclass
class RefineCriteria:
    """Criteria handed to the external grid refiner"""
    ratio: float = 10.0  # Max ratio of neighboring cell sizes
    slope: float = 0.8  # Max fraction of the range spanned by one cell
    curve: float = 0.8  # Max fraction of the slope range spanned by one cell
    prune: float = -0.001  # Removal threshold (negative disables pruning)
    grid_min: float = 1e-10  # Minimum cell size
    max_points: int = 1000  # Maximum number of grid points


class Refiner:
    """
    Bookkeeping for the adaptive mesh refinement that happens outside this
    package: which components feed the refinement criteria, and the
    criteria themselves.
    """
    def __init__(self, n_components: int):
        self.n_components = n_components
        self.criteria = RefineCriteria()
        self._active = np.ones(n_components, dtype=bool)

    def set_criteria(self, ratio: float = 10.0, slope: float = 0.8,
                     curve: float = 0.8, prune: float = -0.1):
        """Set refinement criteria, rejecting inconsistent combinations"""
        if ratio < 2.0:
            raise ConfigurationError(f"'ratio' must be greater than 2.0 ({ratio} was specified).")
        if slope < 0.0 or slope > 1.0:
            raise ConfigurationError(f"'slope' must be between 0 and 1 ({slope} was specified).")
        if curve < 0.0 or curve > 1.0:
            raise ConfigurationError(f"'curve' must be between 0 and 1 ({curve} was specified).")
        if prune > curve or prune > slope:
            raise ConfigurationError(
                f"'prune' must be less than 'curve' or 'slope' ({prune} was specified).")
        self.criteria.ratio = ratio
        self.criteria.slope = slope
        self.criteria.curve = curve
        self.criteria.prune = prune

    def set_grid_min(self, grid_min: float):
        self.criteria.grid_min = grid_min

    def set_max_points(self, max_points: int):
        self.criteria.max_points = int(max_points)

    def set_active(self, n: int, active: bool = True):
        """Include (or exclude) component n in the refinement criteria"""
        self._active[n] = active

    def is_active(self, n: int) -> bool:
        return bool(self._active[n])

    def active_components(self) -> List[int]:
        """Indices of the components the refiner should examine"""
        return [int(n) for n in np.flatnonzero(self._active)]

    def as_dict(self) -> Dict[str, float]:
        return {
            'ratio': self.criteria.ratio,
            'slope': self.criteria.slope,
            'curve': self.criteria.curve,
            'prune': self.criteria.prune,
            'grid-min': self.criteria.grid_min,
            'max-points': self.criteria.max_points,
        }


class OneDimGrid:
    """
    One-dimensional grid for a flow domain: strictly increasing points,
    cell widths and control-volume widths.
    """
    def __init__(self, x=None):
        # Grid points
        self.x = np.zeros(0)
        self.nPoints = 0
        self.jj = -1  # nPoints - 1

        # Grid metrics
        self.hh = np.zeros(0)  # Cell widths, hh[j] = x[j+1] - x[j]
        self.dlj = np.zeros(0)  # Half width of the control volume around j

        if x is not None:
            self.setupGrid(x)

    def setSize(self, new_nPoints: int):
        """Set grid size"""
        self.nPoints = new_nPoints
        self.jj = new_nPoints - 1

    def setupGrid(self, x) -> bool:
        """
        Replace the grid points.

        Args:
            x: New point locations, strictly increasing

        Returns:
            True if the number of points changed
        """
        x = np.array(x, dtype=float).ravel()
        if x.size < 2:
            raise InvalidGridError(f"A grid needs at least 2 points ({x.size} given).")
        bad = np.flatnonzero(np.diff(x) <= 0.0)
        if bad.size:
            j = int(bad[0])
            raise InvalidGridError(
                f"grid points must be monotonically increasing "
                f"(z[{j}] = {x[j]}, z[{j+1}] = {x[j+1]})")

        resized = x.size != self.nPoints
        self.x = x
        self.setSize(x.size)
        self.updateValues()
        logger.debug("Grid set up with %d points on [%g, %g]",
                     self.nPoints, self.x[0], self.x[-1])
        return resized

    def updateValues(self):
        """Update grid metrics"""
        self.hh = np.diff(self.x)
        self.dlj = np.zeros(self.nPoints)
        self.dlj[1:self.jj] = 0.5 * (self.x[2:] - self.x[:-2])

    @property
    def dz(self) -> np.ndarray:
        return self.hh

    def normalized(self) -> np.ndarray:
        """Point locations mapped onto [0, 1]"""
        return (self.x - self.x[0]) / (self.x[self.jj] - self.x[0])

    def interpolate(self, x_new, values) -> np.ndarray:
        """
        Remap a profile given on this grid onto other locations
        (monotone piecewise cubic).
        """
        return interpolate_profile(self.x, values, x_new)


def interpolate_profile(x: np.ndarray, y: np.ndarray, x_new) -> np.ndarray:
    """Shape-preserving interpolation of y(x) at x_new, clamped at the end values"""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    x_new = np.clip(np.asarray(x_new, dtype=float), x[0], x[-1])
    return PchipInterpolator(x, y, axis=-1)(x_new)
