"""
Local refinement for the Sudoku GA.

Greedy hill climbing over single sub-block swaps.
"""

import numpy as np

from .chromosome import Chromosome
from .grid import SudokuGrid
from .mutation import mutate_subblock


def local_search(
    parent: Chromosome,
    num_candidates: int,
    rng: np.random.Generator
) -> Chromosome:
    """
    Try ``num_candidates`` single-block mutations of ``parent``, keep the best.

    Every candidate is mutated from the parent itself, not from the current
    incumbent. A candidate replaces the incumbent only if its fitness is
    strictly higher; worse or equal candidates are discarded.

    Args:
        parent: Chromosome to refine (not modified)
        num_candidates: Number of mutated copies to try
        rng: Random number generator

    Returns:
        Best chromosome found; a copy of the parent if nothing improved
    """
    best = parent.copy()

    for _ in range(num_candidates):
        candidate = parent.copy()
        block = int(rng.integers(0, SudokuGrid.NUM_SUBBLOCKS))
        mutate_subblock(candidate, block, rng)
        candidate.recalculate_fitness()

        if candidate.fitness > best.fitness:
            best = candidate

    return best
