"""
Main entry point for the job_coverage package.

Usage:
    python -m job_coverage [command] [options]

See 'python -m job_coverage --help' for available commands.
"""

from job_coverage.cli import main

if __name__ == "__main__":
    main()
