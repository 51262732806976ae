"""Typer command-line interface for pricing."""
