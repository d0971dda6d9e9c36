"""
Configuration Loading System

Loads YAML configuration files and converts them to solver parameters,
puzzle definitions and random seeds.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from .grid import InvalidPuzzleError, SudokuGrid
from .io_utils import load_puzzles
from .random_source import draw_seed, parse_seed
from .solver import SolverParams


class ConfigurationError(Exception):
    """Raised when configuration is invalid"""
    pass


# Keys of the 'ga' section and the type each must have
GA_PARAMETER_TYPES = {
    'population_size': int,
    'max_generations': int,
    'crossover_rate': float,
    'mutation_rate': float,
    'tournament_size': int,
    'local_search_candidates': int,
    'use_local_search': bool,
    'elitism': bool,
}


def load_config(config_path: str = "config.yaml") -> Dict[str, Any]:
    """Load configuration from YAML file"""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration file must contain a mapping at the top level")
    return config


def _coerce(name: str, value: Any, expected: type) -> Any:
    # YAML bools are ints in Python; never accept one for the other
    if expected is bool:
        if not isinstance(value, bool):
            raise ConfigurationError(f"'ga.{name}' must be true or false, got {value!r}")
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"'ga.{name}' must be a number, got {value!r}")
    if expected is int:
        if not isinstance(value, int):
            raise ConfigurationError(f"'ga.{name}' must be an integer, got {value!r}")
        return value
    if not isinstance(value, (int, float)):
        raise ConfigurationError(f"'ga.{name}' must be a number, got {value!r}")
    return float(value)


def create_solver_params(config: Dict[str, Any]) -> SolverParams:
    """
    Build SolverParams from a configuration dictionary.

    Missing keys keep their defaults.

    Args:
        config: Configuration dictionary

    Returns:
        SolverParams

    Raises:
        ConfigurationError: If a value has the wrong type or is out of range
    """
    ga_config = config.get("ga") or {}
    reporting_config = config.get("reporting") or {}

    kwargs = {}
    for name, expected in GA_PARAMETER_TYPES.items():
        if name in ga_config:
            kwargs[name] = _coerce(name, ga_config[name], expected)

    if "report_interval" in reporting_config:
        interval = reporting_config["report_interval"]
        if isinstance(interval, bool) or not isinstance(interval, int):
            raise ConfigurationError(
                f"'reporting.report_interval' must be an integer, got {interval!r}"
            )
        kwargs["report_interval"] = interval

    try:
        return SolverParams(**kwargs)
    except ValueError as e:
        raise ConfigurationError(str(e))


def resolve_random_seed(config: Dict[str, Any]) -> Optional[int]:
    """
    Determine the random seed for a run.

    ``optimization.random_seed`` may be an integer, a digit string, null or
    "random"; the last two draw a fresh seed, which is printed so the run
    can be repeated.
    """
    optimization_config = config.get("optimization") or {}
    try:
        seed = parse_seed(optimization_config.get("random_seed"))
    except ValueError as e:
        raise ConfigurationError(str(e))

    if seed is None:
        seed = draw_seed()
        print(f"Using random seed: {seed}")

    return seed


def get_puzzle_definition(config: Dict[str, Any]) -> str:
    """
    Get the puzzle string from configuration.

    Uses ``puzzle.definition`` if present, otherwise the first puzzle in
    ``puzzle.file``.
    """
    puzzle_config = config.get("puzzle") or {}

    if puzzle_config.get("definition"):
        return str(puzzle_config["definition"])

    if puzzle_config.get("file"):
        try:
            puzzles = load_puzzles(puzzle_config["file"])
        except (FileNotFoundError, InvalidPuzzleError) as e:
            raise ConfigurationError(str(e))
        if not puzzles:
            raise ConfigurationError(f"No puzzles found in {puzzle_config['file']}")
        return puzzles[0]

    raise ConfigurationError("Configuration must define 'puzzle.definition' or 'puzzle.file'")


def get_reporting_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Reporting section with defaults filled in"""
    reporting = {
        'report_interval': 1000,
        'output_dir': 'output',
        'figure_size': [12, 5],
    }
    reporting.update(config.get("reporting") or {})
    return reporting


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of issues

    Returns:
        List of validation error messages (empty if valid)
    """
    issues = []

    for section in ("puzzle", "ga", "reporting", "optimization"):
        if section in config and config[section] is not None and not isinstance(config[section], dict):
            issues.append(f"Section '{section}' must be a mapping")
    if issues:
        return issues

    ga_config = config.get("ga") or {}
    for key in ga_config:
        if key not in GA_PARAMETER_TYPES:
            issues.append(f"Unknown GA parameter: {key}")

    try:
        create_solver_params(config)
    except ConfigurationError as e:
        issues.append(str(e))

    puzzle_config = config.get("puzzle") or {}
    if "definition" in puzzle_config:
        try:
            SudokuGrid.from_string(str(puzzle_config["definition"]))
        except InvalidPuzzleError as e:
            issues.append(f"Invalid puzzle definition: {e}")
    elif "file" in puzzle_config:
        if not Path(puzzle_config["file"]).exists():
            issues.append(f"Puzzle file not found: {puzzle_config['file']}")

    try:
        parse_seed((config.get("optimization") or {}).get("random_seed"))
    except ValueError as e:
        issues.append(str(e))

    return issues


def print_config_summary(config_path: str = "config.yaml",
                         config: Optional[Dict[str, Any]] = None):
    """
    Print a summary of the configuration

    Args:
        config_path: YAML file to load when ``config`` is not given
        config: Already-loaded configuration (e.g. with command-line
            overrides applied)
    """
    try:
        if config is None:
            config = load_config(config_path)

        print("=" * 50)
        print("CONFIGURATION SUMMARY")
        print("=" * 50)

        puzzle_config = config.get("puzzle") or {}
        if puzzle_config.get("definition"):
            print(f"Puzzle: {str(puzzle_config['definition'])[:81]}")
        elif puzzle_config.get("file"):
            print(f"Puzzle file: {puzzle_config['file']}")
        else:
            print("Puzzle: (not set)")

        issues = validate_config(config)

        if not issues:
            params = create_solver_params(config)
            print(f"\nPopulation size: {params.population_size}")
            print(f"Max generations: {params.max_generations}")
            print(f"Crossover rate: {params.crossover_rate}")
            print(f"Mutation rate: {params.mutation_rate}")
            print(f"Tournament size: {params.tournament_size}")
            local_search = (f"on ({params.local_search_candidates} candidates)"
                            if params.use_local_search else "off")
            print(f"Local search: {local_search}")
            print(f"Elitism: {'on' if params.elitism else 'off'}")
            print(f"Report interval: {params.report_interval}")

        seed = (config.get("optimization") or {}).get("random_seed")
        print(f"Random seed: {seed if seed is not None else 'random'}")

        if issues:
            print(f"\nValidation Issues ({len(issues)}):")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print("\nConfiguration is valid ✓")

        print("=" * 50)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}")
