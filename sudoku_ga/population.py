"""
Population container and selection for the Sudoku GA.

Selection hands out indices into the current generation's member list
rather than the members themselves; the list is only ever swapped out as a
whole by replace_generation().
"""

from typing import Iterator, List, Optional, Tuple

import numpy as np

from .chromosome import Chromosome
from .grid import SudokuGrid


MAX_SELECTION_ATTEMPTS = 10


class PopulationError(RuntimeError):
    """Raised when a population query's preconditions are not met."""
    pass


class Population:
    """Ordered collection of chromosomes"""

    def __init__(self, individuals: Optional[List[Chromosome]] = None):
        self._individuals: List[Chromosome] = list(individuals) if individuals else []

    @classmethod
    def from_puzzle(cls,
                    puzzle: SudokuGrid,
                    size: int,
                    rng: np.random.Generator) -> 'Population':
        """
        Create ``size`` independently randomized chromosomes from one puzzle.

        Args:
            puzzle: Puzzle grid (givens only)
            size: Number of individuals
            rng: Random number generator

        Returns:
            New Population
        """
        individuals = []
        for _ in range(size):
            chromosome = Chromosome(puzzle)
            chromosome.initialize_random(rng)
            individuals.append(chromosome)
        return cls(individuals)

    def __len__(self) -> int:
        return len(self._individuals)

    def __getitem__(self, index: int) -> Chromosome:
        return self._individuals[index]

    def __iter__(self) -> Iterator[Chromosome]:
        return iter(self._individuals)

    @property
    def individuals(self) -> List[Chromosome]:
        return self._individuals

    def _require_members(self, minimum: int = 1):
        if len(self._individuals) < minimum:
            if minimum == 1:
                raise PopulationError("Population is empty")
            raise PopulationError(
                f"Population must have at least {minimum} individuals, has {len(self._individuals)}"
            )

    # --- Best / worst ---

    def best_index(self) -> int:
        """Index of the first individual with the highest fitness"""
        self._require_members()
        best = 0
        for i, individual in enumerate(self._individuals):
            if individual.fitness > self._individuals[best].fitness:
                best = i
        return best

    def worst_index(self) -> int:
        """Index of the first individual with the lowest fitness"""
        self._require_members()
        worst = 0
        for i, individual in enumerate(self._individuals):
            if individual.fitness < self._individuals[worst].fitness:
                worst = i
        return worst

    def get_best(self) -> Chromosome:
        return self._individuals[self.best_index()]

    def get_worst(self) -> Chromosome:
        return self._individuals[self.worst_index()]

    # --- Selection ---

    def tournament_select(self, tournament_size: int, rng: np.random.Generator) -> int:
        """
        Tournament selection.

        Draws ``tournament_size`` distinct individuals (clamped to
        [1, population size]) and returns the index of the fittest. On ties
        the first maximal contestant drawn wins, so ties are not broken
        uniformly at random.

        Args:
            tournament_size: Number of contestants
            rng: Random number generator

        Returns:
            Index of the winner

        Raises:
            PopulationError: If the population is empty
        """
        self._require_members()

        size = len(self._individuals)
        tournament_size = max(1, min(tournament_size, size))

        contestants = rng.choice(size, size=tournament_size, replace=False)

        best_idx = int(contestants[0])
        for idx in contestants[1:]:
            if self._individuals[idx].fitness > self._individuals[best_idx].fitness:
                best_idx = int(idx)

        return best_idx

    def select_parents(self, tournament_size: int, rng: np.random.Generator) -> Tuple[int, int]:
        """
        Select two distinct parents by tournament.

        The second tournament is retried up to MAX_SELECTION_ATTEMPTS times
        while it returns the first parent; after that the first other
        individual in the list is taken.

        Args:
            tournament_size: Number of contestants per tournament
            rng: Random number generator

        Returns:
            Tuple of (index_a, index_b) with index_a != index_b

        Raises:
            PopulationError: If fewer than 2 individuals exist
        """
        self._require_members(2)

        first = self.tournament_select(tournament_size, rng)

        second = first
        for _ in range(MAX_SELECTION_ATTEMPTS):
            second = self.tournament_select(tournament_size, rng)
            if second != first:
                break

        if second == first:
            second = next(i for i in range(len(self._individuals)) if i != first)

        return first, second

    # --- Generation management ---

    def replace_generation(self, new_generation: List[Chromosome]):
        """Swap in a whole new member list; the caller keeps the size stable."""
        self._individuals = list(new_generation)

    # --- Statistics ---

    def best_fitness(self) -> int:
        if not self._individuals:
            return 0
        return self.get_best().fitness

    def worst_fitness(self) -> int:
        if not self._individuals:
            return 0
        return self.get_worst().fitness

    def average_fitness(self) -> float:
        if not self._individuals:
            return 0.0
        return sum(ind.fitness for ind in self._individuals) / len(self._individuals)

    def has_solution(self) -> bool:
        return any(ind.is_solution() for ind in self._individuals)

    def get_solution(self) -> Optional[Chromosome]:
        """First solved individual, or None"""
        for individual in self._individuals:
            if individual.is_solution():
                return individual
        return None
