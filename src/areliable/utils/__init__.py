r"""Utility helpers for exception classification, logging and network
information."""
