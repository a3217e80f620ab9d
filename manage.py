#!/usr/bin/env python3
"""
Cross-platform management script for runstate.
"""

import argparse
import os
import shutil
import subprocess
import sys
from typing import List, Optional

EVENTS_FILE = "examples/events.example.yaml"
CONFIG_FILE = "config.example.yaml"


def run_command(command: List[str], env: Optional[dict] = None, check: bool = True):
    """Run a command, exiting with its return code on failure."""
    print(f"Running: {' '.join(command)}")
    try:
        subprocess.run(command, env=env, check=check)
    except subprocess.CalledProcessError as e:
        print(f"Error executing command: {e}")
        sys.exit(e.returncode)


def clean():
    """Clean up generated files."""
    print("Cleaning up...")
    for d in ["build", "dist", ".pytest_cache", "src/runstate.egg-info"]:
        if os.path.exists(d):
            print(f"Removing {d}")
            shutil.rmtree(d)

    for root, dirs, _ in os.walk("."):
        for d in dirs:
            if d == "__pycache__":
                shutil.rmtree(os.path.join(root, d))


def install():
    """Install the package in editable mode with test dependencies."""
    run_command([sys.executable, "-m", "pip", "install", "-e", ".[test]"])


def test():
    """Run all tests."""
    run_command([sys.executable, "-m", "pytest", "tests/", "-v"])


def demo(report_format: str):
    """Replay the example event log."""
    run_command(
        [
            sys.executable,
            "-m",
            "runstate.cli",
            EVENTS_FILE,
            "--config",
            CONFIG_FILE,
            "--report-format",
            report_format,
        ],
        check=False,
    )


def main():
    parser = argparse.ArgumentParser(description="Manage runstate")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("install", help="Install package and test dependencies")
    subparsers.add_parser("test", help="Run unit tests")
    subparsers.add_parser("clean", help="Clean up artifacts")
    demo_parser = subparsers.add_parser("demo", help="Replay the example event log")
    demo_parser.add_argument("--format", choices=["console", "json"], default="console")

    args = parser.parse_args()

    if args.command == "install":
        install()
    elif args.command == "test":
        test()
    elif args.command == "clean":
        clean()
    elif args.command == "demo":
        demo(args.format)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
