"""Normalization and highlighting for legacy newspaper archive documents."""

__version__ = "0.1.0"
