#!/usr/bin/env python3
"""
Resemble - Main Entry Point

Estimates structural similarity between two Rust source files by
comparing cosine similarity of their syntax-tree fingerprints.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from resemble.cli import main

if __name__ == "__main__":
    main()
