"""
Exit Ticket Services
====================

Analytics engine for exit ticket responses.

Services:
- normalizer: period validation and batch flattening
- indexer: shared lookup structures built from normalized responses
- cohort_analytics: grade-level reports (averages, deciles, fliers, strands)
- student_reports: per-student completed/missing summaries
"""

# Services are imported directly when needed
# Example: from exit_tickets.services.indexer import index_responses

__all__ = [
    'normalizer',
    'indexer',
    'cohort_analytics',
    'student_reports',
]
