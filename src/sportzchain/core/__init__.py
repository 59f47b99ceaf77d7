"""
SportZchain Core Module

Contracts, configuration, logging and shared helpers.
"""

__all__ = []
