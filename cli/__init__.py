"""Command line interface package."""
