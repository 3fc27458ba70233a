"""
Feed Hub Backend

A FastAPI backend for a self-hosted RSS/Atom aggregator.
Provides feed ingestion, folder organization, and article management.
"""

__version__ = "1.0.0"
