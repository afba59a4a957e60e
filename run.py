#!/usr/bin/env python3
"""Run FitLog API server."""

from fitlog.main import run

if __name__ == "__main__":
    run()
