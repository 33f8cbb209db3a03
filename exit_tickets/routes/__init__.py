"""
Exit Ticket API Routes
======================

All API route blueprints for the exit ticket reports application.

Usage:
    from exit_tickets.routes import register_routes
    register_routes(app)
"""
from .report_routes import reports_bp


def register_routes(app):
    """Register all route blueprints with the Flask app."""
    app.register_blueprint(reports_bp)


__all__ = [
    'register_routes',
    'reports_bp',
]
