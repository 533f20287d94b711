"""Command-line interface for qtcluster."""
