"""Cita-Checker - DGT appointment availability checker."""

__version__ = "1.0.0"
