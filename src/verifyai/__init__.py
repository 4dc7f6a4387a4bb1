"""Verify AI: forensic authorship reports for submitted text."""

__version__ = "0.1.0"
