"""Shared helpers: logging, YAML handling, CLI messages and file output."""
