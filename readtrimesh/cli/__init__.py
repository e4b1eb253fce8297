"""Command-line interface for readtrimesh."""
