#!/usr/bin/env python3
"""
PGN reader entry point.

Usage: python pgnparse.py [input.pgn] [--json | --tokens] [--strict] [--verbose]
"""

from pgnast.reader import main

if __name__ == '__main__':
    main()
