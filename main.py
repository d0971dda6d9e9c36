#!/usr/bin/env python3
"""
Sudoku GA - Evolutionary Sudoku Solver

Main entry point. Loads configuration, solves the puzzle with the genetic
algorithm and prints/exports the results.
"""

import sys
import argparse
import time
from pathlib import Path

from sudoku_ga.config_loader import (
    ConfigurationError,
    create_solver_params,
    get_puzzle_definition,
    get_reporting_config,
    load_config,
    print_config_summary,
    resolve_random_seed,
    validate_config,
)
from sudoku_ga.grid import SudokuGrid
from sudoku_ga.io_utils import load_puzzles, save_history_csv, save_metadata, save_result_json
from sudoku_ga.solver import Solver, run_trials, summarize_trials


def build_run_config(args):
    """Load config file and apply command-line overrides"""
    config_path = Path(args.config)
    config = load_config(str(config_path)) if config_path.exists() else {}

    if args.puzzle:
        config['puzzle'] = {'definition': args.puzzle}
    elif args.puzzle_file:
        config['puzzle'] = {'file': args.puzzle_file}

    if args.seed is not None:
        config['optimization'] = dict(config.get('optimization') or {}, random_seed=args.seed)

    if args.quiet:
        config['reporting'] = dict(config.get('reporting') or {}, report_interval=0)

    issues = validate_config(config)
    if issues:
        raise ConfigurationError("Invalid configuration:\n  - " + "\n  - ".join(issues))

    return config


def export_result(result, params, puzzle, seed, output_dir, output_name, plot=False, figsize=(12, 5)):
    """Write result JSON, history CSV, metadata YAML and (optionally) a plot"""
    output_dir = Path(output_dir)

    json_path = save_result_json(result, output_dir / f"{output_name}.json", overwrite=True)
    print(f"  ✓ Result: {json_path}")

    history_path = save_history_csv(result.history, output_dir / f"{output_name}_history.csv", overwrite=True)
    print(f"  ✓ History: {history_path}")

    metadata = {
        'puzzle': puzzle.to_string(),
        'seed': seed,
        'parameters': {
            'population_size': params.population_size,
            'max_generations': params.max_generations,
            'crossover_rate': params.crossover_rate,
            'mutation_rate': params.mutation_rate,
            'tournament_size': params.tournament_size,
            'local_search_candidates': params.local_search_candidates,
            'use_local_search': params.use_local_search,
            'elitism': params.elitism,
            'report_interval': params.report_interval,
        },
        'status': result.status.value,
    }
    meta_path = save_metadata(metadata, output_dir / f"{output_name}_meta.yaml", overwrite=True)
    print(f"  ✓ Metadata: {meta_path}")

    if plot:
        try:
            # Non-interactive backend avoids display issues
            import matplotlib
            matplotlib.use('Agg')
            from sudoku_ga.visualization import SolverVisualizer

            plot_path = output_dir / f"{output_name}_plot.png"
            SolverVisualizer().plot_run_summary(result, figsize=tuple(figsize), save_path=str(plot_path))
            print(f"  ✓ Plot: {plot_path}")
        except Exception as e:
            print(f"  ✗ Plot: Failed - {e}")


def print_result(result):
    """Print the final report of one solve"""
    print("\n" + "=" * 60)
    print("RESULT")
    print("=" * 60)

    if result.solved:
        print(f"Solved in {result.generations} generations!")
        print(f"Time: {result.elapsed_seconds:.3f} seconds\n")
        print("Solution:")
    else:
        print(f"No solution found after {result.generations} generations.")
        print(f"Best fitness achieved: {result.best_fitness} / {SudokuGrid.MAX_SCORE}")
        print(f"Time: {result.elapsed_seconds:.3f} seconds\n")
        print("Best attempt:")

    print(result.best_grid)


def run_single(config, args):
    """Solve the configured puzzle once"""
    puzzle = SudokuGrid.from_string(get_puzzle_definition(config))
    params = create_solver_params(config)
    seed = resolve_random_seed(config)
    reporting = get_reporting_config(config)

    print("\nPuzzle:")
    print(puzzle.render())
    print(f"Empty cells: {puzzle.count_empty()}")
    print("\nRunning genetic algorithm...")

    result = Solver(params, seed=seed).solve(puzzle)
    print_result(result)

    output_name = args.output_name or f"sudoku_{int(time.time())}"
    print(f"Exporting results as '{output_name}'...")
    export_result(result, params, puzzle, seed, reporting['output_dir'], output_name,
                  plot=args.plot, figsize=reporting['figure_size'])

    return result


def run_multiple_trials(config, num_trials):
    """Solve the configured puzzle several times with independent seeds"""
    puzzle = SudokuGrid.from_string(get_puzzle_definition(config))
    params = create_solver_params(config)
    seed = resolve_random_seed(config)

    print("=" * 60)
    print(f"RUNNING {num_trials} TRIALS")
    print("=" * 60)

    # Per-generation progress would drown the trial lines
    params.report_interval = 0
    results = run_trials(puzzle, num_trials, params, seed=seed)

    print("\n" + "=" * 60)
    print("TRIAL SUMMARY")
    print("=" * 60)
    print("Trial | Seed       | Solved | Generations | Fitness | Seconds")
    print("------|------------|--------|-------------|---------|--------")

    for trial, r in enumerate(results, start=1):
        print(f"{trial:5} | {r.seed:10} | {'yes' if r.solved else 'no':6} | "
              f"{r.generations:11} | {r.best_fitness:7} | {r.elapsed_seconds:7.2f}")

    stats = summarize_trials(results)
    print(f"\nSuccess rate: {stats['solved']}/{stats['trials']} ({stats['success_rate']:.0%})")
    if stats['mean_generations_to_solve'] is not None:
        print(f"Generations to solve: mean {stats['mean_generations_to_solve']:.1f}, "
              f"median {stats['median_generations_to_solve']}")
    print(f"Time per trial: mean {stats['mean_seconds']:.2f}s, max {stats['max_seconds']:.2f}s")

    return results


def main():
    """Main entry point with command-line argument parsing"""
    parser = argparse.ArgumentParser(
        description="Sudoku GA - Evolutionary Sudoku Solver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 main.py                               # Solve the puzzle in config.yaml
  python3 main.py --puzzle 0002607016800...     # Solve a puzzle given on the command line
  python3 main.py --puzzle-file puzzles.txt     # Solve the first puzzle in a file
  python3 main.py --seed 42 --plot              # Reproducible run + convergence plot
  python3 main.py --trials 10                   # Success rate over 10 independent runs
  python3 main.py --config custom.yaml          # Custom config file
        """
    )

    parser.add_argument(
        '--config', '-c',
        default='config.yaml',
        help='Configuration file path (default: config.yaml)'
    )

    puzzle_group = parser.add_mutually_exclusive_group()
    puzzle_group.add_argument(
        '--puzzle', '-p',
        metavar='TEXT',
        help='Puzzle as 81 characters, 0 or . for empty cells'
    )
    puzzle_group.add_argument(
        '--puzzle-file', '-f',
        metavar='PATH',
        help='Text file with one puzzle per line (the first is solved)'
    )

    parser.add_argument(
        '--seed', '-s',
        type=int,
        metavar='N',
        help='Random seed (overrides optimization.random_seed)'
    )

    parser.add_argument(
        '--trials', '-t',
        type=int,
        metavar='N',
        help='Run N independent trials and report the success rate'
    )

    parser.add_argument(
        '--plot',
        action='store_true',
        help='Save a fitness convergence plot'
    )

    parser.add_argument(
        '--output-name', '-n',
        type=str,
        metavar='NAME',
        help='Base name for exported files (default: sudoku_TIMESTAMP)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress per-generation progress'
    )

    parser.add_argument(
        '--list-puzzles',
        action='store_true',
        help='List the puzzles in --puzzle-file and exit'
    )

    args = parser.parse_args()

    try:
        if args.list_puzzles:
            if not args.puzzle_file:
                parser.error("--list-puzzles requires --puzzle-file")
            for i, text in enumerate(load_puzzles(args.puzzle_file), start=1):
                print(f"{i:3}: {text}")
            return

        config = build_run_config(args)

        print("=" * 60)
        print("SUDOKU GA")
        print("=" * 60)
        print_config_summary(config=config)

        if args.trials:
            run_multiple_trials(config, args.trials)
        else:
            run_single(config, args)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
