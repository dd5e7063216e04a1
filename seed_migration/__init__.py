"""Seed Migration: turn TypeScript data files into MySQL schema and insert scripts."""

__version__ = "0.1.0"
