#!/usr/bin/env python3
"""
Main script to record today's news portal front pages with narrated headlines.
Uses the pipeline in src/news_recorder; run from project root.
"""

import sys
from pathlib import Path

# Ensure src is on path when running without installing the package
_SRC = Path(__file__).resolve().parent / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))


if __name__ == "__main__":
    from news_recorder.cli import main

    main()
