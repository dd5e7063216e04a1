"""Command line interface for Seed Migration."""
