from __future__ import annotations

"""Centralized path utilities for the project.

These provide absolute `Path` objects to key directories, avoiding
hard-coded relative paths throughout the codebase and improving
portability across environments.
"""

from pathlib import Path


# The `gametracker` package is one level below the project root
PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Canonical directories used throughout the project
DATA_DIR = PROJECT_ROOT / "data"
EXPORTS_DIR = PROJECT_ROOT / "exports"
OUTPUT_DIR = PROJECT_ROOT / "output"
LOGS_DIR = PROJECT_ROOT / "logs"

CONFIG_FILE = PROJECT_ROOT / "config.yaml"
DEFAULT_STORAGE_FILE = DATA_DIR / "storage.json"
