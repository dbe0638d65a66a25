#!/usr/bin/env python3
"""
Main entry point for Quran Bookmarks.
"""

import sys
from quran_bookmarks.cli import main


if __name__ == "__main__":
    sys.exit(main())
