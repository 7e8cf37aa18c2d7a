"""
Package entry point.

Allows running the application via:

    python -m studyplan

This simply forwards execution to studyplan.cli.main().
"""

from studyplan.cli import main

if __name__ == "__main__":
    main()
