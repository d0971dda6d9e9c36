"""
Crossover operator for the Sudoku GA.

Region-exchange recombination over row bands and column stacks. Bands and
stacks are block-aligned, so copying one never splits a sub-block and the
children keep every sub-block a permutation of 1-9.
"""

from typing import Dict, Tuple

from .chromosome import Chromosome
from .grid import SudokuGrid


def crossover(parent_a: Chromosome, parent_b: Chromosome) -> Tuple[Chromosome, Chromosome]:
    """
    Combine two parents into two children.

    Child A starts as a copy of parent A and takes each row band from
    parent B only where B's band scores strictly higher. Child B is built
    per column stack the same way: B's stack where it scores strictly
    higher, A's stack otherwise. Ties go to parent A in both children.

    No randomness is used, so fixed parents always give the same children.

    Args:
        parent_a: First parent
        parent_b: Second parent

    Returns:
        Tuple of (child_a, child_b), fitness recalculated
    """
    child_a, child_b = parent_a.copy(), parent_a.copy()

    mask = crossover_mask(parent_a, parent_b)

    for band in range(SudokuGrid.NUM_BANDS):
        if mask[('band', band)] == "B":
            child_a.grid.copy_row_band_from(parent_b.grid, band)

    for stack in range(SudokuGrid.NUM_STACKS):
        donor = parent_b if mask[('stack', stack)] == "B" else parent_a
        child_b.grid.copy_column_stack_from(donor.grid, stack)

    child_a.recalculate_fitness()
    child_b.recalculate_fitness()

    return child_a, child_b


def crossover_mask(parent_a: Chromosome, parent_b: Chromosome) -> Dict[Tuple[str, int], str]:
    """
    Decide which parent donates each band and stack.

    Args:
        parent_a: First parent
        parent_b: Second parent

    Returns:
        Dict mapping ('band', i) and ('stack', i) to "A" or "B"
    """
    mask = {}

    for band in range(SudokuGrid.NUM_BANDS):
        score_a = parent_a.grid.get_row_band_score(band)
        score_b = parent_b.grid.get_row_band_score(band)
        mask[('band', band)] = "B" if score_b > score_a else "A"

    for stack in range(SudokuGrid.NUM_STACKS):
        score_a = parent_a.grid.get_column_stack_score(stack)
        score_b = parent_b.grid.get_column_stack_score(stack)
        mask[('stack', stack)] = "B" if score_b > score_a else "A"

    return mask
