import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from distance import tour_distance

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 1000


@dataclass
class TwoOptResult:
    tour: List[int]
    distance: float
    iterations: int
    improvements: int
    limit_reached: bool


def two_opt_swap(tour: List[int], i: int, j: int) -> List[int]:
    """Return a copy of ``tour`` with positions ``i..j`` (inclusive) reversed."""
    return tour[:i] + tour[i:j + 1][::-1] + tour[j + 1:]


def two_opt(tour: List[int], matrix: np.ndarray, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> TwoOptResult:
    """
    Improve a closed tour ``[start, l1, ..., ln, start]`` by segment reversal.

    Each pass tries every ``1 <= i < j <= n`` and keeps a reversal only if the
    recomputed tour length strictly drops. Stops after a pass without any
    accepted move, or after ``max_iterations`` passes. Hitting the cap is
    not an error: the best tour so far is returned with ``limit_reached``.
    """
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1 (got {max_iterations})")

    best = list(tour)
    best_distance = tour_distance(best, matrix)
    n = len(best) - 2
    iterations = 0
    improvements = 0
    improved = True

    while improved and iterations < max_iterations:
        improved = False
        iterations += 1
        for i in range(1, n):
            for j in range(i + 1, n + 1):
                candidate = two_opt_swap(best, i, j)
                candidate_distance = tour_distance(candidate, matrix)
                if candidate_distance < best_distance:
                    best = candidate
                    best_distance = candidate_distance
                    improvements += 1
                    improved = True

    limit_reached = improved and iterations >= max_iterations
    if limit_reached:
        logger.warning(
            "2-opt stopped at the iteration cap (%d passes, %d improvements); returning best tour so far",
            iterations, improvements,
        )
    else:
        logger.debug("2-opt converged after %d passes, %d improvements", iterations, improvements)

    return TwoOptResult(
        tour=best,
        distance=best_distance,
        iterations=iterations,
        improvements=improvements,
        limit_reached=limit_reached,
    )
