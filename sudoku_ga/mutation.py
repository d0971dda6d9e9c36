"""
Mutation operators for the Sudoku GA.

Mutations swap two non-fixed cells inside one sub-block. The digits in the
block stay the same, only their rows and columns change.
"""

from typing import List, Optional, Tuple

import numpy as np

from .chromosome import Chromosome
from .grid import SudokuGrid


Position = Tuple[int, int]


def mutate_subblock(
    chromosome: Chromosome,
    subblock_index: int,
    rng: np.random.Generator
) -> Optional[Tuple[Position, Position]]:
    """
    Swap two random non-fixed cells within one sub-block.

    Does not recalculate fitness; callers must do that.

    Args:
        chromosome: Chromosome to mutate in place
        subblock_index: Sub-block to mutate (0-8)
        rng: Random number generator

    Returns:
        The two swapped positions, or None if the block has fewer than two
        free cells
    """
    positions = chromosome.grid.get_subblock_non_fixed_positions(subblock_index)

    if len(positions) < 2:
        return None

    idx1, idx2 = rng.choice(len(positions), size=2, replace=False)
    (r1, c1), (r2, c2) = positions[idx1], positions[idx2]

    grid = chromosome.grid
    value1 = grid.get(r1, c1)
    grid.set(r1, c1, grid.get(r2, c2))
    grid.set(r2, c2, value1)

    return (r1, c1), (r2, c2)


def mutate(
    chromosome: Chromosome,
    mutation_rate: float,
    rng: np.random.Generator
) -> List[int]:
    """
    Mutate each sub-block independently with probability ``mutation_rate``.

    Fitness is recalculated once at the end, and only if a block was touched.

    Args:
        chromosome: Chromosome to mutate in place
        mutation_rate: Per-block mutation probability
        rng: Random number generator

    Returns:
        Indices of the sub-blocks that were selected for mutation
    """
    mutated_blocks = []

    for block in range(SudokuGrid.NUM_SUBBLOCKS):
        if rng.random() < mutation_rate:
            mutate_subblock(chromosome, block, rng)
            mutated_blocks.append(block)

    if mutated_blocks:
        chromosome.recalculate_fitness()

    return mutated_blocks
