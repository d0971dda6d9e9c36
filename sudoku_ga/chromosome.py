"""
Candidate solutions for the Sudoku GA.

A chromosome wraps a SudokuGrid and caches its fitness. Random
initialization fills every sub-block with the digits it is missing, so each
sub-block is always a permutation of 1-9 and fitness only has to score rows
and columns.
"""

from typing import Optional

import numpy as np

from .grid import InvalidPuzzleError, SudokuGrid


class Chromosome:
    """A candidate solution: grid plus cached fitness"""

    def __init__(self, puzzle: Optional[SudokuGrid] = None):
        """
        Create a chromosome.

        The puzzle's givens are copied; empty cells stay empty until
        initialize_random() is called.

        Args:
            puzzle: Optional puzzle grid (empty grid if omitted)
        """
        self.grid = puzzle.copy() if puzzle is not None else SudokuGrid()
        self._fitness = 0

    @property
    def fitness(self) -> int:
        """Cached fitness. Stale after direct grid edits until recalculated."""
        return self._fitness

    def recalculate_fitness(self) -> int:
        self._fitness = self.grid.get_total_score()
        return self._fitness

    def is_solution(self) -> bool:
        return self._fitness == SudokuGrid.MAX_SCORE

    def initialize_random(self, rng: np.random.Generator):
        """
        Fill every non-fixed cell so each sub-block holds 1-9 exactly once.

        Args:
            rng: Random number generator

        Raises:
            InvalidPuzzleError: If a sub-block's givens repeat a digit
        """
        for block in range(SudokuGrid.NUM_SUBBLOCKS):
            self._fill_subblock_random(block, rng)
        self.recalculate_fitness()

    def _fill_subblock_random(self, subblock_index: int, rng: np.random.Generator):
        positions = self.grid.get_subblock_non_fixed_positions(subblock_index)

        top, left = SudokuGrid.subblock_top_left(subblock_index)
        given = [
            self.grid.get(r, c)
            for r in range(top, top + SudokuGrid.SUBBLOCK_SIZE)
            for c in range(left, left + SudokuGrid.SUBBLOCK_SIZE)
            if self.grid.is_fixed(r, c)
        ]
        missing = [d for d in range(1, 10) if d not in given]

        if len(missing) != len(positions):
            raise InvalidPuzzleError(
                f"Sub-block {subblock_index} has repeated givens and cannot be completed"
            )

        for (r, c), digit in zip(positions, rng.permutation(missing)):
            self.grid.set(r, c, int(digit))

    def copy(self) -> 'Chromosome':
        """Deep copy of grid and fitness"""
        clone = Chromosome.__new__(Chromosome)
        clone.grid = self.grid.copy()
        clone._fitness = self._fitness
        return clone

    def __lt__(self, other: 'Chromosome') -> bool:
        return self._fitness < other._fitness

    def __gt__(self, other: 'Chromosome') -> bool:
        return self._fitness > other._fitness

    def __str__(self) -> str:
        text = f"{self.grid}Fitness: {self._fitness} / {SudokuGrid.MAX_SCORE}"
        if self.is_solution():
            text += " [SOLVED]"
        return text

    def __repr__(self) -> str:
        return f"Chromosome(fitness={self._fitness})"
