"""Deterministic resume, job-description and interview-answer scoring."""

__version__ = "0.1.0"
