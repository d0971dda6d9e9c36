"""
I/O utilities for the Sudoku GA.

Handles puzzle file parsing, rendered-grid parsing, and export of solver
results, run history and run metadata.
"""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .grid import InvalidPuzzleError, SudokuGrid
from .solver import GenerationSummary, SolverResult


def load_puzzles(puzzle_path: Union[str, Path]) -> List[str]:
    """
    Load puzzle definitions from a text file.

    File format: one puzzle per line, 81+ characters, '0' or '.' for empty
    cells. Any other non-digit, including a leading space, is also an empty
    cell. Blank lines and lines starting with '#' are skipped.

        # easy
        000260701680070090190004500820100040004602900050003028009300074040050036703018000

    Args:
        puzzle_path: Path to puzzle file

    Returns:
        List of puzzle strings (81 characters each)

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidPuzzleError: If a line is too short to be a puzzle
    """
    puzzle_path = Path(puzzle_path)

    if not puzzle_path.exists():
        raise FileNotFoundError(f"Puzzle file not found: {puzzle_path}")

    cell_count = SudokuGrid.SIZE * SudokuGrid.SIZE
    puzzles = []

    with open(puzzle_path, 'r') as f:
        for line_number, line in enumerate(f, start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith('#'):
                continue
            # Leading spaces are empty cells
            text = line.rstrip('\r\n')
            if len(text) < cell_count:
                raise InvalidPuzzleError(
                    f"{puzzle_path}:{line_number}: puzzle must have at least {cell_count} "
                    f"characters, got {len(text)}"
                )
            puzzles.append(text[:cell_count])

    return puzzles


def parse_rendered_grid(text: str) -> SudokuGrid:
    """
    Parse the output of SudokuGrid.render() back into a grid.

    Band separator lines and ' |' column separators are dropped; '.' is an
    empty cell and digits become fixed givens.

    Args:
        text: Rendered grid

    Returns:
        SudokuGrid

    Raises:
        InvalidPuzzleError: If the text does not hold 81 cells
    """
    cells = []
    for line in text.splitlines():
        if not line.strip() or line.strip().startswith('-'):
            continue
        cells.extend(token for token in line.split() if token != '|')

    return SudokuGrid.from_string(''.join(cells))


def save_result_json(
    result: SolverResult,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save a solver result to a JSON file.

    Args:
        result: Solver result
        output_path: Path for output JSON
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = _prepare_output(output_path, overwrite)

    data = result.to_dict()
    data['saved_at'] = datetime.now().isoformat()

    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2)

    return output_path


def save_history_csv(
    history: List[GenerationSummary],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save per-generation fitness statistics to a CSV file.

    Args:
        history: Generation summaries (SolverResult.history)
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = _prepare_output(output_path, overwrite)

    with open(output_path, 'w', newline='') as f:
        fieldnames = ['generation', 'best_fitness', 'average_fitness', 'worst_fitness', 'solved']
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()

        for summary in history:
            writer.writerow(summary.to_dict())

    return output_path


def load_history_csv(csv_path: Union[str, Path]) -> List[GenerationSummary]:
    """
    Load generation summaries written by save_history_csv().

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the CSV format is invalid
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"History file not found: {csv_path}")

    history = []
    with open(csv_path, 'r') as f:
        reader = csv.DictReader(f)

        required = {'generation', 'best_fitness', 'average_fitness', 'worst_fitness', 'solved'}
        if not required.issubset(set(reader.fieldnames or [])):
            raise ValueError(f"Invalid history format in {csv_path}. Expected columns: {sorted(required)}")

        for row in reader:
            history.append(GenerationSummary(
                generation=int(row['generation']),
                best_fitness=int(row['best_fitness']),
                average_fitness=float(row['average_fitness']),
                worst_fitness=int(row['worst_fitness']),
                solved=row['solved'] == 'True',
            ))

    return history


def save_metadata(
    metadata: Dict[str, Any],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save metadata to YAML sidecar file.

    Args:
        metadata: Metadata dictionary
        output_path: Path for output YAML
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved metadata file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = _prepare_output(output_path, overwrite)

    with open(output_path, 'w') as f:
        yaml.dump(metadata, f, default_flow_style=False, sort_keys=False)

    return output_path


def _prepare_output(output_path: Union[str, Path], overwrite: bool) -> Path:
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    # Create parent directory if needed
    output_path.parent.mkdir(parents=True, exist_ok=True)

    return output_path
