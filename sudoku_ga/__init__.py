"""
Sudoku GA - Evolutionary Sudoku Solver

Solves 9x9 Sudoku puzzles with a genetic algorithm that keeps every 3x3
sub-block a permutation of 1-9 and evolves the row/column arrangement.

Modules:
- random_source: Seeded numpy generators passed to every stochastic call
- grid: Board state, scoring, region copies, parsing and rendering
- chromosome: Candidate solution with cached fitness
- population: Population statistics and tournament selection
- crossover: Row-band / column-stack crossover
- mutation: Within-sub-block swap mutation
- local_search: Hill-climbing refinement
- solver: Generation loop, parameters, results and trials
- config_loader: YAML configuration
- io_utils: Puzzle files and result export
- visualization: Fitness history and grid plots
"""

__version__ = "0.1.0"

from .grid import InvalidPuzzleError, SudokuGrid
from .chromosome import Chromosome
from .population import Population, PopulationError
from .crossover import crossover
from .mutation import mutate, mutate_subblock
from .local_search import local_search
from .solver import (
    EvolutionRun,
    GenerationSummary,
    Solver,
    SolverParams,
    SolverResult,
    SolverStatus,
    run_trials,
    summarize_trials,
)
from .random_source import create_rng

__all__ = [
    "SudokuGrid",
    "InvalidPuzzleError",
    "Chromosome",
    "Population",
    "PopulationError",
    "crossover",
    "mutate",
    "mutate_subblock",
    "local_search",
    "Solver",
    "SolverParams",
    "SolverResult",
    "SolverStatus",
    "GenerationSummary",
    "EvolutionRun",
    "run_trials",
    "summarize_trials",
    "create_rng",
]
