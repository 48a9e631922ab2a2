from __future__ import annotations

"""
Static chart images for the game tracker.

Read-only plotting functions that consume the chart aggregates computed by
`gametracker.ui_logic.chart_aggregator` and save PNGs under
`output/plots/` (or a directory passed by the caller). They never touch the
state itself.

Usage:
    from viz.plots import generate_all_plots
    generate_all_plots(game_manager.render().charts)
"""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from gametracker.io_paths import OUTPUT_DIR  # noqa: E402
from gametracker.ui_logic.chart_aggregator import ChartBundle, ChartSeries  # noqa: E402

INTEREST_COLORS = ["#be123c", "#eab308", "#16a34a"]
SCORE_COLOR = "#16a34a"
REASON_COLORS = ["#be123c", "#9f1239", "#881337", "#7f1d1d", "#6b21a8", "#4c1d95"]


def _ensure_plots_dir(out_dir: Path | None = None) -> Path:
    """Ensure the plots directory exists and return the path."""
    plots_dir = Path(out_dir) if out_dir is not None else OUTPUT_DIR / "plots"
    plots_dir.mkdir(parents=True, exist_ok=True)
    return plots_dir


def _save_fig(fig: plt.Figure, filename: str, out_dir: Path | None = None) -> Path:
    plots_dir = _ensure_plots_dir(out_dir)
    out_path = plots_dir / filename
    fig.savefig(out_path, bbox_inches="tight", dpi=150)
    plt.close(fig)
    return out_path


def _empty_notice(ax: plt.Axes, text: str = "No data yet") -> None:
    ax.text(0.5, 0.5, text, ha="center", va="center", transform=ax.transAxes, fontsize=12)
    ax.set_axis_off()


def plot_interest_distribution(series: ChartSeries, out_dir: Path | None = None) -> Path:
    """Doughnut of want-to-play games per interest level."""
    fig, ax = plt.subplots(figsize=(5, 5))
    if series.total == 0:
        _empty_notice(ax)
    else:
        ax.pie(
            series.values,
            labels=series.labels,
            colors=INTEREST_COLORS[: len(series.values)],
            wedgeprops={"width": 0.45, "edgecolor": "#2c2c2c", "linewidth": 2},
            autopct=lambda pct: f"{pct:.0f}%" if pct > 0 else "",
        )
        ax.set_aspect("equal")
    ax.set_title(series.title)
    return _save_fig(fig, "interest_distribution.png", out_dir)


def plot_score_histogram(series: ChartSeries, out_dir: Path | None = None) -> Path:
    """Horizontal bars of finished games per star score.

    Star glyphs are not available in every Matplotlib font, so the axis
    uses "1 star" .. "5 stars" instead of the on-screen labels.
    """
    labels = [f"{n} star" + ("s" if n > 1 else "") for n in range(1, len(series.values) + 1)]
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.barh(labels, series.values, color=SCORE_COLOR, edgecolor="#22c55e")
    ax.set_title(series.title)
    ax.set_xlabel("Number of games")
    ax.xaxis.get_major_locator().set_params(integer=True)
    ax.grid(True, axis="x", alpha=0.3)
    return _save_fig(fig, "score_histogram.png", out_dir)


def plot_reason_distribution(series: ChartSeries, out_dir: Path | None = None) -> Path:
    """Pie of abandoned games per reason."""
    fig, ax = plt.subplots(figsize=(5, 5))
    if not series.labels:
        _empty_notice(ax)
    else:
        colors = [REASON_COLORS[i % len(REASON_COLORS)] for i in range(len(series.labels))]
        ax.pie(
            series.values,
            labels=series.labels,
            colors=colors,
            wedgeprops={"edgecolor": "#2c2c2c", "linewidth": 2},
        )
        ax.set_aspect("equal")
    ax.set_title(series.title)
    return _save_fig(fig, "reason_distribution.png", out_dir)


def generate_all_plots(bundle: ChartBundle, out_dir: Path | None = None) -> list[Path]:
    """Render all three charts of a bundle and return the image paths."""
    outputs: list[Path] = []
    outputs.append(plot_interest_distribution(bundle.interest, out_dir))
    outputs.append(plot_score_histogram(bundle.scores, out_dir))
    outputs.append(plot_reason_distribution(bundle.reasons, out_dir))
    return outputs
