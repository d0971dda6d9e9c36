"""
Tests for chromosomes: random initialization and cached fitness.
"""

import unittest

import numpy as np

from sudoku_ga.chromosome import Chromosome
from sudoku_ga.grid import InvalidPuzzleError, SudokuGrid


WORKED_EXAMPLE = (
    "000260701680070090190004500820100040004602900"
    "050003028009300074040050036703018000"
)

SOLUTION = (
    "534678912672195348198342567859761423426853791"
    "713924856961537284287419635345286179"
)


class TestInitialization(unittest.TestCase):
    """Test random initialization."""

    def setUp(self):
        self.puzzle = SudokuGrid.from_string(WORKED_EXAMPLE)

    def test_every_subblock_is_permutation(self):
        """After initialization each sub-block holds 1-9 exactly once."""
        for seed in range(20):
            chromosome = Chromosome(self.puzzle)
            chromosome.initialize_random(np.random.default_rng(seed))

            for block in range(9):
                self.assertTrue(chromosome.grid.is_subblock_complete(block),
                                f"Seed {seed}: block {block} is not a permutation")

    def test_givens_preserved(self):
        """Fixed cells keep their values and stay fixed."""
        chromosome = Chromosome(self.puzzle)
        chromosome.initialize_random(np.random.default_rng(1))

        for row in range(9):
            for col in range(9):
                if self.puzzle.is_fixed(row, col):
                    self.assertTrue(chromosome.grid.is_fixed(row, col))
                    self.assertEqual(chromosome.grid.get(row, col), self.puzzle.get(row, col))
                else:
                    self.assertFalse(chromosome.grid.is_fixed(row, col))
                    self.assertNotEqual(chromosome.grid.get(row, col), 0)

    def test_fitness_matches_grid(self):
        """Cached fitness equals the grid's total score."""
        chromosome = Chromosome(self.puzzle)
        chromosome.initialize_random(np.random.default_rng(2))

        self.assertEqual(chromosome.fitness, chromosome.grid.get_total_score())
        self.assertGreater(chromosome.fitness, 0)
        self.assertLessEqual(chromosome.fitness, SudokuGrid.MAX_SCORE)

    def test_puzzle_not_modified(self):
        """The source puzzle is copied, not filled in place."""
        chromosome = Chromosome(self.puzzle)
        chromosome.initialize_random(np.random.default_rng(3))
        self.assertEqual(self.puzzle.count_empty(), 45)

    def test_same_seed_same_fill(self):
        """Equal seeds give equal grids."""
        a = Chromosome(self.puzzle)
        b = Chromosome(self.puzzle)
        a.initialize_random(np.random.default_rng(99))
        b.initialize_random(np.random.default_rng(99))
        self.assertEqual(a.grid, b.grid)

    def test_complete_puzzle(self):
        """A complete puzzle initializes to a solution."""
        chromosome = Chromosome(SudokuGrid.from_string(SOLUTION))
        chromosome.initialize_random(np.random.default_rng(0))

        self.assertEqual(chromosome.fitness, SudokuGrid.MAX_SCORE)
        self.assertTrue(chromosome.is_solution())
        self.assertEqual(chromosome.grid.to_string(), SOLUTION)

    def test_repeated_givens_rejected(self):
        """A sub-block with a repeated given parses but cannot be completed."""
        puzzle = SudokuGrid.from_string("11" + "0" * 79)
        self.assertEqual(puzzle.count_empty(), 79)
        chromosome = Chromosome(puzzle)

        with self.assertRaises(InvalidPuzzleError):
            chromosome.initialize_random(np.random.default_rng(0))


class TestChromosomeBehaviour(unittest.TestCase):
    """Test copying, comparison and the fitness cache."""

    def setUp(self):
        self.chromosome = Chromosome(SudokuGrid.from_string(WORKED_EXAMPLE))
        self.chromosome.initialize_random(np.random.default_rng(5))

    def test_copy_is_deep(self):
        """Editing a copy leaves the original alone."""
        clone = self.chromosome.copy()
        self.assertEqual(clone.grid, self.chromosome.grid)
        self.assertEqual(clone.fitness, self.chromosome.fitness)

        original_value = self.chromosome.grid.get(0, 0)
        clone.grid.set(0, 0, 0)
        self.assertEqual(self.chromosome.grid.get(0, 0), original_value)

    def test_fitness_cache_is_explicit(self):
        """Direct grid edits do not change fitness until recalculated."""
        cached = self.chromosome.fitness
        self.chromosome.grid.set(0, 0, 0)

        self.assertEqual(self.chromosome.fitness, cached)
        self.assertEqual(self.chromosome.recalculate_fitness(),
                         self.chromosome.grid.get_total_score())

    def test_ordering_by_fitness(self):
        """Chromosomes compare by fitness."""
        solved = Chromosome(SudokuGrid.from_string(SOLUTION))
        solved.recalculate_fitness()

        self.assertTrue(self.chromosome < solved)
        self.assertTrue(solved > self.chromosome)
        self.assertEqual(max([self.chromosome, solved]), solved)

    def test_default_chromosome_is_empty(self):
        chromosome = Chromosome()
        self.assertEqual(chromosome.fitness, 0)
        self.assertEqual(chromosome.grid.count_empty(), 81)
        self.assertFalse(chromosome.is_solution())

    def test_str_marks_solution(self):
        solved = Chromosome(SudokuGrid.from_string(SOLUTION))
        solved.recalculate_fitness()

        self.assertIn("Fitness: 162 / 162 [SOLVED]", str(solved))
        self.assertNotIn("[SOLVED]", str(self.chromosome))


if __name__ == '__main__':
    unittest.main()
