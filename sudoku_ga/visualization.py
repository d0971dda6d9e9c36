"""
Visualization for the Sudoku GA

Plots fitness convergence over generations and the best grid found.
"""

import matplotlib.pyplot as plt
import numpy as np
from typing import List, Optional, Tuple

from .grid import SudokuGrid
from .solver import GenerationSummary, SolverResult


class SolverVisualizer:
    """Plots for solver runs"""

    def __init__(self,
                 given_color: str = "black",
                 filled_color: str = "tab:blue",
                 conflict_color: str = "mistyrose"):
        self.given_color = given_color
        self.filled_color = filled_color
        self.conflict_color = conflict_color

    def plot_run_summary(self,
                         result: SolverResult,
                         figsize: Tuple[int, int] = (12, 5),
                         save_path: Optional[str] = None,
                         show: bool = False):
        """
        Two-panel figure: fitness history on the left, best grid on the right

        Args:
            result: Solver result (with history)
            figsize: Figure size (width, height)
            save_path: Optional path to save the figure
            show: Show the figure interactively

        Returns:
            The matplotlib Figure
        """
        fig, (ax_history, ax_grid) = plt.subplots(
            1, 2, figsize=figsize, gridspec_kw={'width_ratios': [3, 2]}
        )

        self.plot_fitness_history(result.history, ax_history)

        outcome = "solved" if result.solved else "best attempt"
        self.plot_grid(
            result.best_individual.grid,
            ax_grid,
            title=f"{outcome.capitalize()} (fitness {result.best_fitness}/{SudokuGrid.MAX_SCORE})"
        )

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')

        if show:
            plt.show()

        return fig

    def plot_fitness_history(self, history: List[GenerationSummary], ax: plt.Axes = None):
        """Plot best/average/worst fitness per generation"""
        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 5))

        if not history:
            ax.text(0.5, 0.5, "No history recorded", ha='center', va='center',
                    transform=ax.transAxes)
            ax.set_axis_off()
            return ax

        generations = np.array([s.generation for s in history])
        best = np.array([s.best_fitness for s in history])
        average = np.array([s.average_fitness for s in history])
        worst = np.array([s.worst_fitness for s in history])

        ax.fill_between(generations, worst, best, color="lightsteelblue", alpha=0.4,
                        label="Worst-best range")
        ax.plot(generations, best, color="green", linewidth=1.5, label="Best")
        ax.plot(generations, average, color="orange", linewidth=1.0, label="Average")
        ax.plot(generations, worst, color="red", linewidth=0.8, alpha=0.7, label="Worst")
        ax.axhline(SudokuGrid.MAX_SCORE, color="gray", linestyle="--", linewidth=1,
                   label=f"Solved ({SudokuGrid.MAX_SCORE})")

        ax.set_xlabel("Generation")
        ax.set_ylabel("Fitness")
        ax.set_title("Fitness convergence")
        ax.legend(loc="lower right", fontsize=8)
        ax.grid(True, alpha=0.3)

        return ax

    def plot_grid(self, grid: SudokuGrid, ax: plt.Axes = None, title: Optional[str] = None):
        """
        Draw a grid: givens in bold, filled cells in color, and rows or
        columns with repeated digits shaded.
        """
        if ax is None:
            fig, ax = plt.subplots(figsize=(5, 5))

        size = SudokuGrid.SIZE

        bad_rows = [r for r, score in enumerate(grid.get_row_scores()) if score < size]
        bad_cols = [c for c, score in enumerate(grid.get_column_scores()) if score < size]
        for r in bad_rows:
            ax.add_patch(plt.Rectangle((0, size - r - 1), size, 1, color=self.conflict_color, zorder=0))
        for c in bad_cols:
            ax.add_patch(plt.Rectangle((c, 0), 1, size, color=self.conflict_color, zorder=0))

        # Thin cell lines, thick sub-block lines
        for i in range(size + 1):
            width = 2.0 if i % SudokuGrid.SUBBLOCK_SIZE == 0 else 0.5
            ax.plot([i, i], [0, size], color="black", linewidth=width)
            ax.plot([0, size], [i, i], color="black", linewidth=width)

        for row in range(size):
            for col in range(size):
                value = grid.get(row, col)
                if value == 0:
                    continue
                fixed = grid.is_fixed(row, col)
                ax.text(col + 0.5, size - row - 0.5, str(value),
                        ha='center', va='center', fontsize=14,
                        fontweight='bold' if fixed else 'normal',
                        color=self.given_color if fixed else self.filled_color)

        ax.set_xlim(0, size)
        ax.set_ylim(0, size)
        ax.set_aspect('equal')
        ax.set_xticks([])
        ax.set_yticks([])
        if title:
            ax.set_title(title)

        return ax
