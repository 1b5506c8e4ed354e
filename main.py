#!/usr/bin/env python3
"""
Cita-Checker - DGT appointment availability checker.

Main entry point for the application. Runs one check; schedule it externally
(cron, systemd timer, CI schedule) for periodic checks.
"""

import sys

from cita_checker.cli import main

if __name__ == "__main__":
    sys.exit(main())
