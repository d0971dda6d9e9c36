"""
Tests for the genetic operators: crossover, mutation and local search.
"""

import unittest

import numpy as np

from sudoku_ga.chromosome import Chromosome
from sudoku_ga.crossover import crossover, crossover_mask
from sudoku_ga.grid import SudokuGrid
from sudoku_ga.local_search import local_search
from sudoku_ga.mutation import mutate, mutate_subblock


WORKED_EXAMPLE = (
    "000260701680070090190004500820100040004602900"
    "050003028009300074040050036703018000"
)

SOLUTION = (
    "534678912672195348198342567859761423426853791"
    "713924856961537284287419635345286179"
)


def random_chromosome(definition, seed):
    chromosome = Chromosome(SudokuGrid.from_string(definition))
    chromosome.initialize_random(np.random.default_rng(seed))
    return chromosome


def assert_valid(test, chromosome):
    """Every sub-block is a permutation and the fitness cache is current."""
    for block in range(9):
        test.assertTrue(chromosome.grid.is_subblock_complete(block),
                        f"Block {block} is not a permutation")
    test.assertEqual(chromosome.fitness, chromosome.grid.get_total_score())


class TestCrossover(unittest.TestCase):
    """Test band/stack crossover."""

    def setUp(self):
        self.parent_a = random_chromosome(WORKED_EXAMPLE, 1)
        self.parent_b = random_chromosome(WORKED_EXAMPLE, 2)

    def test_children_take_stronger_regions(self):
        """Child A takes B's bands and child B takes B's stacks only where B scores higher."""
        child_a, child_b = crossover(self.parent_a, self.parent_b)
        a_values = self.parent_a.grid.values
        b_values = self.parent_b.grid.values

        for band in range(3):
            rows = slice(3 * band, 3 * band + 3)
            b_better = (self.parent_b.grid.get_row_band_score(band)
                        > self.parent_a.grid.get_row_band_score(band))
            donor = b_values if b_better else a_values
            np.testing.assert_array_equal(child_a.grid.values[rows], donor[rows])

        for stack in range(3):
            cols = slice(3 * stack, 3 * stack + 3)
            b_better = (self.parent_b.grid.get_column_stack_score(stack)
                        > self.parent_a.grid.get_column_stack_score(stack))
            donor = b_values if b_better else a_values
            np.testing.assert_array_equal(child_b.grid.values[:, cols], donor[:, cols])

    def test_mask_matches_scores(self):
        mask = crossover_mask(self.parent_a, self.parent_b)

        self.assertEqual(len(mask), 6)
        for band in range(3):
            expected = ("B" if self.parent_b.grid.get_row_band_score(band)
                        > self.parent_a.grid.get_row_band_score(band) else "A")
            self.assertEqual(mask[('band', band)], expected)

    def test_ties_go_to_parent_a(self):
        """Identical scores never take from parent B."""
        twin = self.parent_a.copy()
        child_a, child_b = crossover(self.parent_a, twin)

        self.assertEqual(child_a.grid, self.parent_a.grid)
        self.assertEqual(child_b.grid, self.parent_a.grid)
        self.assertTrue(all(v == "A" for v in crossover_mask(self.parent_a, twin).values()))

    def test_solution_parent_donates_imperfect_regions(self):
        """A solved parent B replaces every band of A that is not already perfect."""
        puzzle = "530070000600195000098000060800060003400803001700020006060000280000419005000080079"
        parent_a = random_chromosome(puzzle, 4)
        parent_b = Chromosome(SudokuGrid.from_string(SOLUTION))
        parent_b.recalculate_fitness()

        child_a, _ = crossover(parent_a, parent_b)

        for band in range(3):
            rows = slice(3 * band, 3 * band + 3)
            if parent_a.grid.get_row_band_score(band) < 27:
                np.testing.assert_array_equal(child_a.grid.values[rows],
                                              parent_b.grid.values[rows])
        self.assertEqual(sum(child_a.grid.get_row_scores()), 81)

    def test_deterministic(self):
        """Same parents always give the same children."""
        first = crossover(self.parent_a, self.parent_b)
        second = crossover(self.parent_a, self.parent_b)

        self.assertEqual(first[0].grid, second[0].grid)
        self.assertEqual(first[1].grid, second[1].grid)

    def test_parents_unchanged(self):
        before_a = self.parent_a.grid.copy()
        before_b = self.parent_b.grid.copy()

        crossover(self.parent_a, self.parent_b)

        self.assertEqual(self.parent_a.grid, before_a)
        self.assertEqual(self.parent_b.grid, before_b)

    def test_children_valid(self):
        for child in crossover(self.parent_a, self.parent_b):
            assert_valid(self, child)


class TestMutation(unittest.TestCase):
    """Test within-block swap mutation."""

    def setUp(self):
        self.rng = np.random.default_rng(11)
        self.chromosome = random_chromosome(WORKED_EXAMPLE, 3)

    def test_swap_keeps_block_digits(self):
        """A swap exchanges two free cells of the same block."""
        before = self.chromosome.grid.copy()

        swapped = mutate_subblock(self.chromosome, 0, self.rng)

        self.assertIsNotNone(swapped)
        (r1, c1), (r2, c2) = swapped
        self.assertNotEqual((r1, c1), (r2, c2))
        self.assertEqual(self.chromosome.grid.get(r1, c1), before.get(r2, c2))
        self.assertEqual(self.chromosome.grid.get(r2, c2), before.get(r1, c1))
        self.assertFalse(self.chromosome.grid.is_fixed(r1, c1))
        self.assertFalse(self.chromosome.grid.is_fixed(r2, c2))
        self.assertTrue(self.chromosome.grid.is_subblock_complete(0))

        # Other blocks untouched
        for block in range(1, 9):
            self.assertEqual(self.chromosome.grid.get_subblock_values(block),
                             before.get_subblock_values(block))

    def test_block_with_one_free_cell_is_noop(self):
        """Blocks with fewer than two free cells are left alone."""
        one_blank = "0" + SOLUTION[1:]
        chromosome = random_chromosome(one_blank, 0)
        before = chromosome.grid.copy()

        self.assertIsNone(mutate_subblock(chromosome, 0, self.rng))
        self.assertIsNone(mutate_subblock(chromosome, 4, self.rng))
        self.assertEqual(chromosome.grid, before)

    def test_rate_zero(self):
        before = self.chromosome.grid.copy()
        self.assertEqual(mutate(self.chromosome, 0.0, self.rng), [])
        self.assertEqual(self.chromosome.grid, before)

    def test_rate_one(self):
        """Rate 1 selects every block and refreshes fitness."""
        blocks = mutate(self.chromosome, 1.0, self.rng)

        self.assertEqual(blocks, list(range(9)))
        assert_valid(self, self.chromosome)

    def test_givens_never_move(self):
        puzzle = SudokuGrid.from_string(WORKED_EXAMPLE)
        for _ in range(50):
            mutate(self.chromosome, 0.5, self.rng)

        for row in range(9):
            for col in range(9):
                if puzzle.is_fixed(row, col):
                    self.assertEqual(self.chromosome.grid.get(row, col), puzzle.get(row, col))
        assert_valid(self, self.chromosome)


class TestLocalSearch(unittest.TestCase):
    """Test greedy refinement."""

    def setUp(self):
        self.rng = np.random.default_rng(21)
        self.parent = random_chromosome(WORKED_EXAMPLE, 8)

    def test_never_worse_than_parent(self):
        for _ in range(30):
            refined = local_search(self.parent, 5, self.rng)
            self.assertGreaterEqual(refined.fitness, self.parent.fitness)
            assert_valid(self, refined)

    def test_parent_not_modified(self):
        before = self.parent.grid.copy()
        fitness = self.parent.fitness

        local_search(self.parent, 5, self.rng)

        self.assertEqual(self.parent.grid, before)
        self.assertEqual(self.parent.fitness, fitness)

    def test_zero_candidates_returns_copy(self):
        refined = local_search(self.parent, 0, self.rng)

        self.assertIsNot(refined, self.parent)
        self.assertEqual(refined.grid, self.parent.grid)

    def test_solution_is_kept(self):
        """A solved chromosome cannot be improved and is returned as is."""
        # Two free cells in block 0, filled with their solution digits
        solved = Chromosome(SudokuGrid.from_string("0" + SOLUTION[1:10] + "0" + SOLUTION[11:]))
        solved.grid.set(0, 0, int(SOLUTION[0]))
        solved.grid.set(1, 1, int(SOLUTION[10]))
        solved.recalculate_fitness()
        self.assertTrue(solved.is_solution())

        refined = local_search(solved, 5, self.rng)
        self.assertEqual(refined.grid, solved.grid)
        self.assertTrue(refined.is_solution())


class TestOperatorSequences(unittest.TestCase):
    """Sub-block permutations survive any sequence of operators."""

    def test_random_operator_sequence(self):
        rng = np.random.default_rng(2024)
        pool = [random_chromosome(WORKED_EXAMPLE, seed) for seed in range(6)]

        for _ in range(100):
            i, j = rng.choice(len(pool), size=2, replace=False)
            child_a, child_b = crossover(pool[i], pool[j])
            mutate(child_a, 0.5, rng)
            mutate(child_b, 0.5, rng)
            child_a = local_search(child_a, 3, rng)

            assert_valid(self, child_a)
            assert_valid(self, child_b)

            pool[i], pool[j] = child_a, child_b


if __name__ == '__main__':
    unittest.main()
