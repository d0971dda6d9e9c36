"""
Random source utilities for the Sudoku GA.

Every stochastic operation takes an explicit ``np.random.Generator`` instead
of reaching for a shared global generator. Seeding a generator makes a run
reproducible; spawning gives independent streams for separate runs.
"""

from typing import List, Optional, Union

import numpy as np


def create_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create a random number generator.

    Args:
        seed: Optional seed. None draws fresh entropy from the OS.

    Returns:
        numpy Generator
    """
    return np.random.default_rng(seed)


def derive_seeds(seed: Optional[int], count: int) -> List[int]:
    """
    Derive ``count`` independent integer seeds from one root seed.

    Used for multi-trial runs: each trial gets its own generator, and its
    seed can be reported so a single trial can be replayed.

    Args:
        seed: Root seed (None for fresh entropy)
        count: Number of seeds to derive

    Returns:
        List of integer seeds
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    root = np.random.SeedSequence(seed)
    return [int(s) for s in root.generate_state(count)]


def draw_seed() -> int:
    """Draw a fresh seed that fits in a signed 32-bit integer."""
    return int(np.random.SeedSequence().generate_state(1)[0] % 2147483647)


def parse_seed(seed_spec: Union[int, str, None]) -> Optional[int]:
    """
    Normalize a seed specification.

    Accepts an int, a string of digits, or None / "random" (meaning: no
    fixed seed).

    Args:
        seed_spec: Seed specification

    Returns:
        Integer seed or None

    Raises:
        ValueError: If the specification cannot be interpreted
    """
    if seed_spec is None:
        return None
    if isinstance(seed_spec, bool):
        raise ValueError(f"Invalid random seed: {seed_spec!r}")
    if isinstance(seed_spec, int):
        if seed_spec < 0:
            raise ValueError(f"Random seed must be non-negative, got {seed_spec}")
        return seed_spec
    if isinstance(seed_spec, str):
        text = seed_spec.strip()
        if text.lower() == "random":
            return None
        if text.isdigit():
            return int(text)
    raise ValueError(f"Invalid random seed: {seed_spec!r}")
