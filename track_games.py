#!/usr/bin/env python3
from __future__ import annotations

"""
Command-line runner for the Game Tracker.

Drives the same `GameManager` as the Streamlit app, without a browser:

- `list [collection]`: print the rendered table(s)
- `export [collection|all] [--out DIR]`: write CSV files (default `exports/`)
- `plots [--out DIR]`: render the summary charts as PNG (default `output/plots/`)
- `stats`: print collection counts and the finished-games summary

`--storage` points at another JSON storage file; `--debug` enables DEBUG logs.
"""

import argparse
import logging
from pathlib import Path

import pandas as pd

from gametracker.io_paths import EXPORTS_DIR, LOGS_DIR
from gametracker.schema import SCHEMAS, CollectionKey, get_schema
from gametracker.settings import load_settings
from gametracker.ui_logic import GameManager
from gametracker.ui_logic.view_renderer import TableView
from gametracker.utils_logging import configure_logging

COLLECTION_CHOICES = [key.value for key in CollectionKey]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Game Tracker – command-line runner")
    p.add_argument("--storage", type=str, help="Path of the JSON storage file (overrides config and env)")
    p.add_argument("--debug", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="Print the records of one or all collections")
    p_list.add_argument("collection", nargs="?", choices=COLLECTION_CHOICES)

    p_export = sub.add_parser("export", help="Export collections to CSV")
    p_export.add_argument("collection", nargs="?", default="all", choices=COLLECTION_CHOICES + ["all"])
    p_export.add_argument("--out", type=str, help="Output directory (default: exports/)")

    p_plots = sub.add_parser("plots", help="Render summary charts as PNG files")
    p_plots.add_argument("--out", type=str, help="Output directory (default: output/plots/)")

    sub.add_parser("stats", help="Print collection counts and the finished-games summary")
    return p.parse_args(argv)


def _table_frame(table: TableView) -> pd.DataFrame:
    return pd.DataFrame([[cell.display for cell in row.cells] for row in table.rows], columns=table.headers)


def cmd_list(manager: GameManager, collection: str | None) -> int:
    snapshot = manager.render()
    keys = [CollectionKey(collection)] if collection else list(SCHEMAS)
    for key in keys:
        table = snapshot.tables[key]
        print(f"== {get_schema(key).title} ==")
        if not table.visible:
            print(table.placeholder)
        else:
            print(_table_frame(table).to_string(index=False))
        print()
    return 0


def cmd_export(manager: GameManager, collection: str, out_dir: Path) -> int:
    results = manager.export_all() if collection == "all" else {
        CollectionKey(collection): manager.export_csv(collection)
    }
    for key, result in results.items():
        path = result.write_to(out_dir)
        print(f"{key.value}: {path if path else result.message}")
    return 0


def cmd_plots(manager: GameManager, out_dir: Path | None) -> int:
    from viz.plots import generate_all_plots

    written: list[Path] = []
    manager.add_chart_sink(lambda bundle: written.extend(generate_all_plots(bundle, out_dir)))
    manager.render()
    for path in written:
        print(path)
    return 0 if written else 1


def cmd_stats(manager: GameManager) -> int:
    snapshot = manager.render()
    counts = manager.state_manager.counts()
    for key in CollectionKey:
        print(f"{get_schema(key).title}: {counts[key]}")
    summary = snapshot.charts.finished
    print(f"Finished total: {summary.total}")
    print(f"Average hours: {summary.average_hours:.1f}h")
    for series in (snapshot.charts.interest, snapshot.charts.scores, snapshot.charts.reasons):
        pairs = ", ".join(f"{label}={value}" for label, value in zip(series.labels, series.values))
        print(f"{series.title}: {pairs or '-'}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_settings()
    if args.storage:
        settings.storage_file = Path(args.storage)
    configure_logging(LOGS_DIR, debug=args.debug or settings.debug)
    log = logging.getLogger("track_games")

    manager = GameManager(settings=settings)
    manager.start()
    log.info("Using storage %s", settings.storage_file)

    if args.command == "list":
        return cmd_list(manager, args.collection)
    if args.command == "export":
        return cmd_export(manager, args.collection, Path(args.out) if args.out else EXPORTS_DIR)
    if args.command == "plots":
        return cmd_plots(manager, Path(args.out) if args.out else None)
    return cmd_stats(manager)


if __name__ == "__main__":
    raise SystemExit(main())
