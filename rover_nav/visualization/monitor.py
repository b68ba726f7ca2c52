"""
Visualization Module
====================

Presentation adapters for navigation sessions. They consume tick reports
and session state and never mutate either.

Cell colors:
- free, static obstacle, detected obstacle (blue), undetected obstacle (amber)
"""

import os
from typing import Dict, List, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap

from ..config import VisualizationConfig
from ..environment import Grid, ObstacleKnowledge, chebyshev
from ..rover import RoverStatus


FREE, STATIC, DETECTED, UNDETECTED = 0, 1, 2, 3


def cell_state_array(grid: Grid, knowledge: ObstacleKnowledge) -> np.ndarray:
    """
    Per-cell display state indexed [x, y].

    Returns:
        int array with FREE / STATIC / DETECTED / UNDETECTED values
    """
    states = np.full((grid.width, grid.height), FREE, dtype=np.int8)
    states[grid.occupancy(knowledge.static)] = STATIC
    states[grid.occupancy(knowledge.promoted)] = DETECTED
    states[grid.occupancy(knowledge.unknown)] = UNDETECTED
    return states


def _draw_cells(ax, states: np.ndarray, cmap: ListedColormap):
    return ax.imshow(states.T, cmap=cmap, origin='lower', vmin=-0.5, vmax=3.5,
                     interpolation='nearest')


class MapVisualizer:
    """
    Static map visualization.

    Creates obstacle maps with paths overlaid and per-algorithm comparison
    figures.
    """

    def __init__(self, grid: Grid, config: Optional[VisualizationConfig] = None):
        self.grid = grid
        self.config = config or VisualizationConfig()
        self.cmap = ListedColormap(self.config.cell_colors)

    def plot_map(self, knowledge: ObstacleKnowledge, start: Tuple[int, int],
                 goal: Tuple[int, int], ax=None) -> plt.Axes:
        """
        Plot the obstacle map with start and goal markers.

        Returns:
            Matplotlib axes
        """
        if ax is None:
            fig, ax = plt.subplots(figsize=self.config.figure_size)

        _draw_cells(ax, cell_state_array(self.grid, knowledge), self.cmap)
        ax.plot(start[0], start[1], 'go', markersize=10, markeredgecolor='white',
                markeredgewidth=2, label='Start')
        ax.plot(goal[0], goal[1], 'r*', markersize=15, markeredgecolor='white',
                markeredgewidth=2, label='Goal')
        ax.set_xlabel('X (cells)')
        ax.set_ylabel('Y (cells)')
        return ax

    def plot_path(self, ax, path: List[Tuple[float, float]],
                  color: str = 'blue', label: str = None,
                  linewidth: float = 2.0, alpha: float = 0.8,
                  linestyle: str = '-'):
        """Plot a path on existing axes"""
        if not path or len(path) < 2:
            return
        path_arr = np.array(path, dtype=float)
        ax.plot(path_arr[:, 0], path_arr[:, 1], color=color, linewidth=linewidth,
                alpha=alpha, label=label, linestyle=linestyle)

    def create_comparison_figure(self, knowledge: ObstacleKnowledge,
                                 start: Tuple[int, int], goal: Tuple[int, int],
                                 paths: Dict[str, List],
                                 metrics: Optional[Dict[str, Dict]] = None,
                                 title: str = 'Algorithm Comparison') -> plt.Figure:
        """
        Traveled paths of several runs over one map, plus metric bars.

        Args:
            knowledge: Final obstacle knowledge to draw
            start: Start cell
            goal: Goal cell
            paths: algorithm name -> traveled path
            metrics: algorithm name -> JourneyStats.to_dict()
            title: Figure title
        """
        ncols = 2 if metrics else 1
        fig, axes = plt.subplots(1, ncols, figsize=(8 * ncols, 6), squeeze=False)

        ax_map = axes[0, 0]
        self.plot_map(knowledge, start, goal, ax=ax_map)
        colors = ['tab:blue', 'tab:red', 'tab:green', 'tab:purple']
        for i, (name, path) in enumerate(paths.items()):
            self.plot_path(ax_map, path, color=colors[i % len(colors)], label=name)
        ax_map.legend(loc='lower left')
        ax_map.set_title('Traveled paths')

        if metrics:
            self._plot_metrics_bars(axes[0, 1], metrics)

        fig.suptitle(title, fontsize=14, fontweight='bold')
        fig.tight_layout()
        return fig

    def _plot_metrics_bars(self, ax, metrics: Dict[str, Dict]):
        methods = list(metrics.keys())
        metric_names = ['steps', 'reroute_count', 'path_efficiency']
        display_names = ['Steps', 'Re-routes', 'Efficiency (%)']

        x = np.arange(len(methods))
        width = 0.25
        for i, (metric, display) in enumerate(zip(metric_names, display_names)):
            values = [metrics[m].get(metric, 0) for m in methods]
            ax.bar(x + i * width, values, width, label=display)

        ax.set_xticks(x + width)
        ax.set_xticklabels(methods)
        ax.legend()
        ax.set_title('Metrics Comparison')

    def save_figure(self, fig: plt.Figure, filename: str, dpi: int = None):
        """Save figure to file"""
        fig.savefig(filename, dpi=dpi or self.config.dpi,
                    bbox_inches='tight', facecolor='white')


class LiveMonitor:
    """
    Live view of a navigation session.

    Shows:
    - Free / static / detected / undetected cells
    - Rover position (red when blocked)
    - Path used this tick and the traveled path
    - Field D* continuous trajectory when available
    - Statistics overlay
    """

    def __init__(self, session, config: Optional[VisualizationConfig] = None):
        """
        Initialize live monitor.

        Args:
            session: NavigationSession to display
            config: Visualization configuration
        """
        self.session = session
        self.config = config or session.config.visualization
        self.cmap = ListedColormap(self.config.cell_colors)

        self.fig = None
        self.ax = None
        self._cells_image = None
        self._rover_marker = None
        self._goal_marker = None
        self._traveled_line = None
        self._planned_line = None
        self._trajectory_line = None
        self._stats_text = None

        self._frame_count = 0
        self._initialized = False

    def initialize(self, interactive: bool = True):
        """
        Initialize the plot window.

        Args:
            interactive: Enable interactive mode for live updates
        """
        if self._initialized:
            return

        if interactive:
            plt.ion()

        session = self.session
        colors = self.config.path_colors
        self.fig, self.ax = plt.subplots(figsize=self.config.figure_size)

        self._cells_image = _draw_cells(
            self.ax, cell_state_array(session.grid, session.knowledge), self.cmap
        )
        goal = session.state.goal
        self._goal_marker, = self.ax.plot([goal[0]], [goal[1]], 'r*', markersize=15,
                                          markeredgecolor='white', markeredgewidth=2,
                                          label='Goal', zorder=10)
        self._traveled_line, = self.ax.plot([], [], '-', color=colors['traveled'],
                                            linewidth=2, alpha=0.8, label='Traveled',
                                            zorder=8)
        self._planned_line, = self.ax.plot([], [], '--', color=colors['planned'],
                                           linewidth=1.5, alpha=0.7, label='Planned',
                                           zorder=7)
        self._trajectory_line, = self.ax.plot([], [], ':', color=colors['trajectory'],
                                              linewidth=1.5, alpha=0.7,
                                              label='Field D* heading', zorder=7)
        self._rover_marker, = self.ax.plot([], [], 'o', color='green', markersize=10,
                                           markeredgecolor='white', markeredgewidth=2,
                                           label='Rover', zorder=15)

        self._stats_text = self.ax.text(
            0.02, 0.98, '', transform=self.ax.transAxes,
            verticalalignment='top', fontsize=9,
            bbox=dict(boxstyle='round', facecolor='white', alpha=0.8),
            zorder=20
        )

        self.ax.set_title('Rover Navigation')
        self.ax.legend(loc='upper right')
        self.ax.set_xlabel('X (cells)')
        self.ax.set_ylabel('Y (cells)')
        self.fig.tight_layout()

        self._initialized = True

        if interactive:
            plt.show(block=False)
            plt.pause(0.1)

    def update(self, report=None, interactive: bool = True):
        """
        Redraw from the session state and an optional tick report.

        Args:
            report: TickReport of the tick just completed
            interactive: Pump the GUI event loop after drawing
        """
        if not self._initialized:
            self.initialize(interactive=interactive)

        session = self.session
        state = session.state

        self._cells_image.set_data(cell_state_array(session.grid, session.knowledge).T)

        position = state.position
        self._rover_marker.set_data([position[0]], [position[1]])
        self._rover_marker.set_color('red' if state.status == RoverStatus.BLOCKED else 'green')
        self._goal_marker.set_data([state.goal[0]], [state.goal[1]])

        traveled = np.array(state.traveled_path)
        self._traveled_line.set_data(traveled[:, 0], traveled[:, 1])

        path = report.path if report is not None else []
        if path:
            path_arr = np.array(path)
            self._planned_line.set_data(path_arr[:, 0], path_arr[:, 1])
        else:
            self._planned_line.set_data([], [])

        trajectory = getattr(session.controller.planner, 'last_trajectory', None)
        if trajectory:
            traj_arr = np.array(trajectory, dtype=float)
            self._trajectory_line.set_data(traj_arr[:, 0], traj_arr[:, 1])
        else:
            self._trajectory_line.set_data([], [])

        self._stats_text.set_text(self._format_stats(report))
        self.ax.set_title(f'Rover Navigation - {state.algorithm.value} [{state.status.value}]')

        self.fig.canvas.draw()
        self.fig.canvas.flush_events()

        if self.config.save_frames:
            self._save_frame()

        if interactive:
            plt.pause(0.01)

    def _format_stats(self, report=None) -> str:
        session = self.session
        state = session.state
        stats = session.stats
        counts = session.knowledge.counts()

        lines = [
            f"Tick: {state.tick}",
            f"Position: ({state.position[0]}, {state.position[1]})",
            f"To Goal: {chebyshev(state.position, state.goal)} cells",
            f"Steps: {stats.steps}",
            f"Re-routes: {stats.reroute_count}",
            f"Known: {counts['static'] + counts['promoted']}  Unknown: {counts['unknown']}",
        ]
        if report is not None and report.promoted:
            lines.append(f"Detected: {len(report.promoted)} new")
        return '\n'.join(lines)

    def _save_frame(self):
        """Save current frame to file"""
        os.makedirs(self.config.frame_dir, exist_ok=True)
        filename = os.path.join(self.config.frame_dir,
                                f'frame_{self._frame_count:05d}.png')
        self.fig.savefig(filename, dpi=self.config.dpi, bbox_inches='tight')
        self._frame_count += 1

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def close(self):
        """Close the monitor window"""
        if self.fig is not None:
            plt.close(self.fig)
            self._initialized = False


def create_tick_callback(monitor: LiveMonitor, interactive: bool = True):
    """
    Create a session listener that redraws the monitor every tick.

    Usage:
        monitor = LiveMonitor(session)
        session.subscribe(create_tick_callback(monitor))
    """
    def callback(report):
        monitor.update(report, interactive=interactive)

    return callback
