#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path

from pagegen.cli import main

REPO_DIR = Path(__file__).resolve().parent


if __name__ == "__main__":
    main(root=REPO_DIR)
