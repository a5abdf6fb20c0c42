"""
CP_Flowpipe package entry point.

Allows running cp_flowpipe as a module:
    python -m cp_flowpipe query flowpipe.yaml --time 1.0
"""

from cp_flowpipe.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
