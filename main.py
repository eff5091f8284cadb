#!/usr/bin/env python3
"""PomoKeeper entry point.

Run with:
    python main.py
    python -m pomokeeper
"""

from pomokeeper.__main__ import main


if __name__ == "__main__":
    main()
