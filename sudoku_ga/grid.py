"""
Sudoku board state.

Holds the 9x9 value grid and the mask of cells given by the original puzzle,
and answers the uniqueness-scoring queries the GA uses for fitness and
crossover. Sub-blocks are numbered left-to-right, top-to-bottom:

     0 | 1 | 2
    ---+---+---
     3 | 4 | 5
    ---+---+---
     6 | 7 | 8
"""

from typing import List, Optional, Tuple

import numpy as np


class InvalidPuzzleError(ValueError):
    """Raised when a puzzle definition cannot be turned into a grid."""
    pass


class SudokuGrid:
    """9x9 Sudoku board with a fixed-cell mask"""

    SIZE = 9
    SUBBLOCK_SIZE = 3
    NUM_SUBBLOCKS = 9
    NUM_BANDS = 3
    NUM_STACKS = 3

    # 9 distinct digits in each of 9 rows and 9 columns
    MAX_SCORE = 162

    BAND_SEPARATOR = "------+-------+------"

    def __init__(self,
                 values: Optional[np.ndarray] = None,
                 fixed: Optional[np.ndarray] = None):
        """
        Create a grid. With no arguments every cell is empty and non-fixed.

        Args:
            values: Optional 9x9 array of digits (0 = empty)
            fixed: Optional 9x9 boolean mask of given cells
        """
        shape = (self.SIZE, self.SIZE)

        if values is None:
            self._values = np.zeros(shape, dtype=np.int8)
        else:
            self._values = np.array(values, dtype=np.int8)
            if self._values.shape != shape:
                raise ValueError(f"Grid values must have shape {shape}, got {self._values.shape}")
            if self._values.min() < 0 or self._values.max() > 9:
                raise ValueError("Grid values must be in the range 0-9")

        if fixed is None:
            self._fixed = np.zeros(shape, dtype=bool)
        else:
            self._fixed = np.array(fixed, dtype=bool)
            if self._fixed.shape != shape:
                raise ValueError(f"Fixed mask must have shape {shape}, got {self._fixed.shape}")

    @classmethod
    def from_string(cls, puzzle: str) -> 'SudokuGrid':
        """
        Build a grid from a row-major puzzle string.

        Digits '1'-'9' become fixed givens; any other character ('0', '.',
        space, ...) is an empty cell. Characters past the 81st are ignored.

        Args:
            puzzle: Puzzle definition, at least 81 characters

        Returns:
            New SudokuGrid

        Givens are not checked against each other. A sub-block whose givens
        repeat a digit parses fine, but Chromosome.initialize_random() later
        raises InvalidPuzzleError for it.

        Raises:
            InvalidPuzzleError: If the definition is shorter than 81 characters
        """
        cell_count = cls.SIZE * cls.SIZE
        if len(puzzle) < cell_count:
            raise InvalidPuzzleError(
                f"Puzzle string must have at least {cell_count} characters, got {len(puzzle)}"
            )

        grid = cls()
        for i, char in enumerate(puzzle[:cell_count]):
            if '1' <= char <= '9':
                row, col = divmod(i, cls.SIZE)
                grid._values[row, col] = int(char)
                grid._fixed[row, col] = True

        return grid

    # --- Cell access ---

    def get(self, row: int, col: int) -> int:
        return int(self._values[row, col])

    def set(self, row: int, col: int, value: int):
        if not 0 <= value <= 9:
            raise ValueError(f"Cell value must be in the range 0-9, got {value}")
        self._values[row, col] = value

    def is_fixed(self, row: int, col: int) -> bool:
        return bool(self._fixed[row, col])

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the value grid"""
        view = self._values.view()
        view.flags.writeable = False
        return view

    @property
    def fixed_mask(self) -> np.ndarray:
        """Read-only view of the fixed-cell mask"""
        view = self._fixed.view()
        view.flags.writeable = False
        return view

    def count_empty(self) -> int:
        """Number of cells holding 0"""
        return int(np.count_nonzero(self._values == 0))

    # --- Scoring ---

    @staticmethod
    def _count_unique(lines: np.ndarray) -> np.ndarray:
        """
        Count distinct nonzero digits in each row of a 2D array.

        Sorting each line turns "distinct values" into "1 + number of value
        changes"; an empty cell contributes the value 0, which is removed.
        """
        ordered = np.sort(lines, axis=1)
        changes = np.count_nonzero(np.diff(ordered, axis=1), axis=1)
        has_empty = ordered[:, 0] == 0
        return 1 + changes - has_empty

    def get_row_scores(self) -> np.ndarray:
        """Scores of all 9 rows"""
        return self._count_unique(self._values)

    def get_column_scores(self) -> np.ndarray:
        """Scores of all 9 columns"""
        return self._count_unique(self._values.T)

    def get_row_score(self, row: int) -> int:
        return int(self._count_unique(self._values[row:row + 1])[0])

    def get_column_score(self, col: int) -> int:
        return int(self._count_unique(self._values.T[col:col + 1])[0])

    def get_total_score(self) -> int:
        """Sum of all row and column scores (max 162)"""
        return int(self.get_row_scores().sum() + self.get_column_scores().sum())

    def get_row_band_score(self, band_index: int) -> int:
        """Score of the 3 rows of a band (0 = rows 0-2, 1 = rows 3-5, 2 = rows 6-8)"""
        start_row = band_index * self.SUBBLOCK_SIZE
        band = self._values[start_row:start_row + self.SUBBLOCK_SIZE]
        return int(self._count_unique(band).sum())

    def get_column_stack_score(self, stack_index: int) -> int:
        """Score of the 3 columns of a stack"""
        start_col = stack_index * self.SUBBLOCK_SIZE
        stack = self._values[:, start_col:start_col + self.SUBBLOCK_SIZE]
        return int(self._count_unique(stack.T).sum())

    def is_solved(self) -> bool:
        return self.get_total_score() == self.MAX_SCORE

    # --- Sub-blocks ---

    @classmethod
    def subblock_top_left(cls, subblock_index: int) -> Tuple[int, int]:
        """Grid coordinates of the top-left cell of a sub-block"""
        if not 0 <= subblock_index < cls.NUM_SUBBLOCKS:
            raise IndexError(f"Sub-block index out of range: {subblock_index}")
        block_row, block_col = divmod(subblock_index, cls.SUBBLOCK_SIZE)
        return block_row * cls.SUBBLOCK_SIZE, block_col * cls.SUBBLOCK_SIZE

    def get_subblock_values(self, subblock_index: int) -> List[int]:
        """Values of a sub-block in row-major order"""
        top, left = self.subblock_top_left(subblock_index)
        block = self._values[top:top + self.SUBBLOCK_SIZE, left:left + self.SUBBLOCK_SIZE]
        return [int(v) for v in block.flatten()]

    def get_subblock_non_fixed_positions(self, subblock_index: int) -> List[Tuple[int, int]]:
        """
        Positions of the cells in a sub-block that the GA may change.

        Args:
            subblock_index: Sub-block index (0-8)

        Returns:
            List of (row, col) positions in row-major order
        """
        top, left = self.subblock_top_left(subblock_index)
        return [
            (r, c)
            for r in range(top, top + self.SUBBLOCK_SIZE)
            for c in range(left, left + self.SUBBLOCK_SIZE)
            if not self._fixed[r, c]
        ]

    def is_subblock_complete(self, subblock_index: int) -> bool:
        """True if the sub-block holds each digit 1-9 exactly once"""
        return sorted(self.get_subblock_values(subblock_index)) == list(range(1, 10))

    # --- Region copies (crossover) ---

    def copy_row_band_from(self, other: 'SudokuGrid', band_index: int):
        """Copy the 3 rows of a band, values and fixed mask, from another grid"""
        rows = slice(band_index * self.SUBBLOCK_SIZE, (band_index + 1) * self.SUBBLOCK_SIZE)
        self._values[rows] = other._values[rows]
        self._fixed[rows] = other._fixed[rows]

    def copy_column_stack_from(self, other: 'SudokuGrid', stack_index: int):
        """Copy the 3 columns of a stack, values and fixed mask, from another grid"""
        cols = slice(stack_index * self.SUBBLOCK_SIZE, (stack_index + 1) * self.SUBBLOCK_SIZE)
        self._values[:, cols] = other._values[:, cols]
        self._fixed[:, cols] = other._fixed[:, cols]

    def copy(self) -> 'SudokuGrid':
        return SudokuGrid(self._values.copy(), self._fixed.copy())

    # --- Text forms ---

    def to_string(self, empty: str = '0') -> str:
        """81-character row-major representation"""
        return ''.join(str(v) if v else empty for v in self._values.flatten())

    def render(self) -> str:
        """
        Human-readable layout with sub-block separators.

        Example row: ' . . . | 2 6 . | 7 . 1'
        """
        lines = []
        for row in range(self.SIZE):
            if row > 0 and row % self.SUBBLOCK_SIZE == 0:
                lines.append(self.BAND_SEPARATOR)

            parts = []
            for col in range(self.SIZE):
                if col > 0 and col % self.SUBBLOCK_SIZE == 0:
                    parts.append(" |")
                value = self._values[row, col]
                parts.append(f" {value}" if value else " .")
            lines.append(''.join(parts))

        return '\n'.join(lines) + '\n'

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"SudokuGrid('{self.to_string()}')"

    def __eq__(self, other) -> bool:
        if not isinstance(other, SudokuGrid):
            return NotImplemented
        return (np.array_equal(self._values, other._values)
                and np.array_equal(self._fixed, other._fixed))

    __hash__ = None
