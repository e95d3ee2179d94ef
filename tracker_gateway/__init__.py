"""Resilient operation execution layer for the issue-tracker REST API."""

__version__ = "0.1.0"
