"""Utility functions shared by the board, the inference engine and the front ends."""

from typing import Dict, List, Tuple

# Module-level cache: size -> {(row, col): ((nrow, ncol), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[int, Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]] = {}


def get_neighborhoods(size: int) -> Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]:
    """
    Precompute and cache 8-connected neighbor coordinates for every cell of a square grid.

    Args:
        size: Grid side length (rows == columns). Must be positive.

    Returns:
        Mapping from each cell (row, col) to a tuple of valid neighboring
        coordinates (nrow, ncol), listed in row-major order.

    Raises:
        ValueError: If size is non-positive.
    """
    if size <= 0:
        raise ValueError("size must be positive.")

    cached = _NEIGHBORHOODS_CACHE.get(size)
    if cached is not None:
        return cached

    neighborhoods: Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]] = {}
    for row in range(size):
        for col in range(size):
            nbrs: List[Tuple[int, int]] = []
            for drow in (-1, 0, 1):
                for dcol in (-1, 0, 1):
                    if drow == 0 and dcol == 0:
                        continue
                    nrow, ncol = row + drow, col + dcol
                    if 0 <= nrow < size and 0 <= ncol < size:
                        nbrs.append((nrow, ncol))
            neighborhoods[(row, col)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[size] = neighborhoods
    return neighborhoods


def round_percent(numerator: int, denominator: int) -> int:
    """
    Return 100 * numerator / denominator rounded half-up to an int.

    Integer arithmetic keeps .5 cases exact (12.5 -> 13), unlike round().
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive.")
    return (200 * numerator + denominator) // (2 * denominator)


def format_elapsed(seconds: float) -> str:
    """Format an elapsed duration as MM:SS (whole seconds, truncated)."""
    elapsed = max(0, int(seconds))
    return f"{elapsed // 60:02d}:{elapsed % 60:02d}"
