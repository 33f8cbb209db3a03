"""
Exit Ticket Reports Package
===========================

Flask-based backend that turns exit ticket responses into cohort and
per-student analytics.

Structure:
- routes/: API route blueprints
- services/: Normalizer, indexer, cohort analytics, student reports
- config.py: Configuration management
"""

from .config import config, Config

__version__ = "1.0.0"

__all__ = ['config', 'Config']
