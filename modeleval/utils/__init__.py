"""Shared helpers: logging setup and scalar-generic density functions."""
