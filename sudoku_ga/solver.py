"""
Genetic algorithm driver for Sudoku.

Builds the initial population, runs the generation loop (selection,
crossover, mutation, local search, elitism, replacement) and reports the
outcome. The loop is exposed lazily through EvolutionRun, one
GenerationSummary per generation; Solver.solve() consumes it and prints
progress.
"""

import statistics
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

import numpy as np

from .chromosome import Chromosome
from .crossover import crossover
from .grid import SudokuGrid
from .local_search import local_search
from .mutation import mutate
from .population import Population
from .random_source import create_rng, derive_seeds


class SolverStatus(Enum):
    """How a run ended"""
    SOLVED = "solved"
    SOLVED_AT_INIT = "solved_at_init"
    EXHAUSTED = "exhausted"


@dataclass
class SolverParams:
    """Tunable parameters of the genetic algorithm"""
    population_size: int = 150
    max_generations: int = 100000
    crossover_rate: float = 0.3
    mutation_rate: float = 0.3  # per sub-block
    tournament_size: int = 3
    local_search_candidates: int = 2
    use_local_search: bool = True
    elitism: bool = True
    report_interval: int = 1000  # 0 = quiet

    def __post_init__(self):
        # bool is an int subclass; never accept one for a numeric field
        for name in ('population_size', 'max_generations', 'crossover_rate', 'mutation_rate',
                     'tournament_size', 'local_search_candidates', 'report_interval'):
            if isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a number, got {getattr(self, name)!r}")
        if self.population_size < 1:
            raise ValueError(f"population_size must be at least 1, got {self.population_size}")
        if self.max_generations < 0:
            raise ValueError(f"max_generations must be non-negative, got {self.max_generations}")
        for name in ('crossover_rate', 'mutation_rate'):
            rate = getattr(self, name)
            if not 0.0 <= rate <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {rate}")
        if self.tournament_size < 1:
            raise ValueError(f"tournament_size must be at least 1, got {self.tournament_size}")
        if self.local_search_candidates < 0:
            raise ValueError(
                f"local_search_candidates must be non-negative, got {self.local_search_candidates}"
            )
        if self.report_interval < 0:
            raise ValueError(f"report_interval must be non-negative, got {self.report_interval}")


@dataclass(frozen=True)
class GenerationSummary:
    """Fitness statistics of one generation"""
    generation: int
    best_fitness: int
    average_fitness: float
    worst_fitness: int
    solved: bool

    @classmethod
    def from_population(cls, generation: int, population: Population) -> 'GenerationSummary':
        return cls(
            generation=generation,
            best_fitness=population.best_fitness(),
            average_fitness=population.average_fitness(),
            worst_fitness=population.worst_fitness(),
            solved=population.has_solution(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'generation': self.generation,
            'best_fitness': self.best_fitness,
            'average_fitness': round(self.average_fitness, 4),
            'worst_fitness': self.worst_fitness,
            'solved': self.solved,
        }


@dataclass
class SolverResult:
    """Outcome of a solver run"""
    solved: bool = False
    generations: int = 0
    best_fitness: int = 0
    best_individual: Chromosome = field(default_factory=Chromosome)
    elapsed_seconds: float = 0.0
    status: SolverStatus = SolverStatus.EXHAUSTED
    history: List[GenerationSummary] = field(default_factory=list)
    seed: Optional[int] = None

    @property
    def best_grid(self) -> str:
        """Rendered grid of the best individual"""
        return self.best_individual.grid.render()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert result to a JSON-serializable dictionary.

        History is left out; it is exported separately.
        """
        return {
            'solved': self.solved,
            'status': self.status.value,
            'generations': self.generations,
            'best_fitness': self.best_fitness,
            'max_fitness': SudokuGrid.MAX_SCORE,
            'elapsed_seconds': round(self.elapsed_seconds, 6),
            'seed': self.seed,
            'solution': self.best_individual.grid.to_string(),
            'best_grid': self.best_grid,
        }


class EvolutionRun:
    """
    Lazy, single-pass iteration over the generations of one solve.

    Iterating yields a GenerationSummary for generation 0 (the initial
    population) and for every generation after it, until a solution is found
    or the generation cap is reached. Once iteration finishes, ``result``
    holds the SolverResult. A run cannot be iterated twice.
    """

    def __init__(self, solver: 'Solver', puzzle: SudokuGrid):
        self.solver = solver
        self.puzzle = puzzle
        self.population: Optional[Population] = None
        self.result: Optional[SolverResult] = None
        self._started = False

    def __iter__(self) -> Iterator[GenerationSummary]:
        if self._started:
            raise RuntimeError("An EvolutionRun can only be iterated once")
        self._started = True
        return self._generations()

    def _generations(self) -> Iterator[GenerationSummary]:
        solver = self.solver
        params = solver.params
        start_time = time.perf_counter()

        self.population = Population.from_puzzle(self.puzzle, params.population_size, solver.rng)

        summary = GenerationSummary.from_population(0, self.population)
        yield summary
        if summary.solved:
            self.result = solver._build_result(
                self.population, 0, SolverStatus.SOLVED_AT_INIT, start_time
            )
            return

        for generation in range(1, params.max_generations + 1):
            solver.run_generation(self.population)

            summary = GenerationSummary.from_population(generation, self.population)
            yield summary
            if summary.solved:
                self.result = solver._build_result(
                    self.population, generation, SolverStatus.SOLVED, start_time
                )
                return

        self.result = solver._build_result(
            self.population, params.max_generations, SolverStatus.EXHAUSTED, start_time
        )


class Solver:
    """Genetic algorithm solver for 9x9 Sudoku"""

    def __init__(self,
                 params: Optional[SolverParams] = None,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None):
        """
        Initialize solver

        Args:
            params: GA parameters (defaults if omitted)
            rng: Random number generator to draw from. Takes precedence
                over ``seed``.
            seed: Seed for a new generator when ``rng`` is not given
        """
        self.params = params if params is not None else SolverParams()
        self.seed = seed
        self.rng = rng if rng is not None else create_rng(seed)

    def start(self, puzzle: SudokuGrid) -> EvolutionRun:
        """Prepare a lazy run over the generations of one solve"""
        return EvolutionRun(self, puzzle)

    def solve(self, puzzle: SudokuGrid) -> SolverResult:
        """
        Run the genetic algorithm on a puzzle.

        Args:
            puzzle: Puzzle grid

        Returns:
            SolverResult with the best individual and per-generation history
        """
        run = self.start(puzzle)
        history = []

        for summary in run:
            history.append(summary)
            self._report(summary)

        result = run.result
        result.history = history
        return result

    def run_generation(self, population: Population):
        """
        Replace ``population`` with the next generation.

        Parents are only read; every child is a fresh copy.
        """
        params = self.params
        rng = self.rng
        target_size = len(population)

        new_generation: List[Chromosome] = []

        # Elitism: carry the current best over unchanged
        if params.elitism:
            new_generation.append(population.get_best().copy())

        while len(new_generation) < target_size:
            idx_a, idx_b = population.select_parents(params.tournament_size, rng)
            parent_a, parent_b = population[idx_a], population[idx_b]

            if rng.random() < params.crossover_rate:
                child_a, child_b = crossover(parent_a, parent_b)
            else:
                child_a, child_b = parent_a.copy(), parent_b.copy()

            mutate(child_a, params.mutation_rate, rng)
            mutate(child_b, params.mutation_rate, rng)

            if params.use_local_search and params.local_search_candidates > 1:
                child_a = local_search(child_a, params.local_search_candidates, rng)
                child_b = local_search(child_b, params.local_search_candidates, rng)

            new_generation.append(child_a)
            if len(new_generation) < target_size:
                new_generation.append(child_b)

        population.replace_generation(new_generation)

    def _build_result(self,
                      population: Population,
                      generation: int,
                      status: SolverStatus,
                      start_time: float) -> SolverResult:
        solution = population.get_solution()
        best = solution if solution is not None else population.get_best()

        return SolverResult(
            solved=status is not SolverStatus.EXHAUSTED,
            generations=generation,
            best_fitness=best.fitness,
            best_individual=best.copy(),
            elapsed_seconds=time.perf_counter() - start_time,
            status=status,
            seed=self.seed,
        )

    def _report(self, summary: GenerationSummary):
        """Print progress; never feeds back into the search"""
        interval = self.params.report_interval
        if interval <= 0:
            return

        if summary.solved:
            if summary.generation > 0:
                print(f"Solution found at generation {summary.generation}!")
        elif summary.generation % interval == 0:
            print(f"Generation {summary.generation} | Best: {summary.best_fitness}"
                  f" | Avg: {summary.average_fitness:.2f} | Worst: {summary.worst_fitness}")


def run_trials(
    puzzle: SudokuGrid,
    num_trials: int,
    params: Optional[SolverParams] = None,
    seed: Optional[int] = None,
    verbose: bool = True
) -> List[SolverResult]:
    """
    Solve the same puzzle several times with independent seeds.

    Args:
        puzzle: Puzzle grid
        num_trials: Number of independent runs
        params: GA parameters shared by all runs
        seed: Root seed the per-trial seeds are derived from
        verbose: Print one line per trial

    Returns:
        List of SolverResult, one per trial, each carrying its own seed
    """
    if num_trials < 1:
        raise ValueError(f"num_trials must be at least 1, got {num_trials}")

    results = []

    for trial, trial_seed in enumerate(derive_seeds(seed, num_trials), start=1):
        result = Solver(params, seed=trial_seed).solve(puzzle)
        results.append(result)

        if verbose:
            outcome = "solved" if result.solved else "not solved"
            print(f"  Trial {trial}/{num_trials}: {outcome} in {result.generations} generations "
                  f"(fitness {result.best_fitness}, {result.elapsed_seconds:.2f}s, seed {trial_seed})")

    return results


def summarize_trials(results: List[SolverResult]) -> Dict[str, Any]:
    """
    Aggregate statistics over trial results.

    Args:
        results: Results from run_trials()

    Returns:
        Dictionary with success rate and generation/time statistics
    """
    if not results:
        raise ValueError("No trial results to summarize")

    solved = [r for r in results if r.solved]
    seconds = [r.elapsed_seconds for r in results]

    summary = {
        'trials': len(results),
        'solved': len(solved),
        'success_rate': len(solved) / len(results),
        'mean_best_fitness': statistics.mean(r.best_fitness for r in results),
        'mean_seconds': statistics.mean(seconds),
        'max_seconds': max(seconds),
        'mean_generations_to_solve': None,
        'median_generations_to_solve': None,
    }

    if solved:
        generations = [r.generations for r in solved]
        summary['mean_generations_to_solve'] = statistics.mean(generations)
        summary['median_generations_to_solve'] = statistics.median(generations)

    return summary
