"""Command line interface for tallybook."""
