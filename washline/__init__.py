"""Washline — order, production record and machine assignment tracking for a wash-finishing plant."""

__version__ = "0.1.0"
