"""Distance and neighborhood calculations for SOM."""

import numpy as np


class DistanceCalculator:
    """Calculate input-space and grid-space distances."""

    # exp() arguments below this are clamped to avoid underflow warnings
    UNDERFLOW_PROTECTION = -50.0

    @staticmethod
    def squared_euclidean(a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Calculate squared Euclidean distance along the last axis."""
        diff = a - b
        return np.sum(diff * diff, axis=-1)

    @staticmethod
    def euclidean(a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Calculate Euclidean distance."""
        return np.linalg.norm(a - b, axis=-1)

    @staticmethod
    def grid_coordinates(width: int, height: int) -> np.ndarray:
        """(x, y) coordinates of every cell, row-major with X outer."""
        return np.array(
            [[x, y] for x in range(width) for y in range(height)], dtype=np.float64
        )

    @staticmethod
    def grid_distance(coords: np.ndarray, cell) -> np.ndarray:
        """Euclidean distance between each grid coordinate and ``cell``."""
        return DistanceCalculator.euclidean(coords, np.asarray(cell, dtype=np.float64))

    @staticmethod
    def gaussian(distances: np.ndarray, width: float) -> np.ndarray:
        """Gaussian neighborhood kernel over grid distances."""
        distances = np.asarray(distances, dtype=np.float64)
        # Scale before squaring: width**2 underflows to 0.0 for tiny widths
        with np.errstate(over="ignore"):
            exponent = -0.5 * (distances / width) ** 2
        exponent = np.maximum(exponent, DistanceCalculator.UNDERFLOW_PROTECTION)
        return np.where(distances == 0, 1.0, np.exp(exponent))
