#!/usr/bin/env python3
"""CLI wrapper for the random-sampling design driver.

All implementation lives in :mod:`src.lib.design_search`.
"""

from src.lib.design_search import main

if __name__ == "__main__":
    main()
