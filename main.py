"""
Entry point for the Auto-Enrolment vs Private Pension projector.

Usage:
    python main.py              # launches the web app at localhost:5000
    python main.py --cli        # runs the terminal interface
    python main.py --verbose    # either mode, with debug logging
"""

import argparse
import logging


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Auto-Enrolment vs Private Pension: Ireland Pot Projector",
    )
    parser.add_argument(
        "--cli",
        action="store_true",
        help="Run in terminal mode instead of launching the web app",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.cli:
        from cli import run_cli
        run_cli()
    else:
        from app import run_web
        run_web(debug=args.verbose)


if __name__ == "__main__":
    main()
