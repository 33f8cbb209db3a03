"""
Report API routes.
Runs the analytics engine over posted exit ticket batches and returns
cohort or per-student reports as JSON.
"""
import logging
from flask import Blueprint, request, jsonify

from exit_tickets.config import config
from exit_tickets.services.normalizer import normalize_batches
from exit_tickets.services.indexer import index_responses
from exit_tickets.services.cohort_analytics import build_cohort_report, sort_teacher_period_averages
from exit_tickets.services.student_reports import build_student_reports

reports_bp = Blueprint('reports', __name__)

logger = logging.getLogger(__name__)


def _load_batches():
    """Pull the batch list out of the request body, or raise ValueError."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    batches = data.get('batches')
    if not isinstance(batches, list):
        raise ValueError("'batches' must be a list")
    return batches


@reports_bp.route('/api/reports/cohort', methods=['POST'])
def cohort_report():
    """Teacher/period averages, deciles, fliers and strand teachers."""
    try:
        records, forms = normalize_batches(_load_batches())
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Rejected cohort report request: %s", e)
        return jsonify({"error": f"Malformed batches: {e}"}), 400

    report = build_cohort_report(index_responses(records, forms))
    report["teacher_period_averages"] = sort_teacher_period_averages(report["teacher_period_averages"])
    return jsonify(report)


@reports_bp.route('/api/reports/students', methods=['POST'])
def student_reports():
    """One report per student email."""
    try:
        records, forms = normalize_batches(_load_batches())
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Rejected student report request: %s", e)
        return jsonify({"error": f"Malformed batches: {e}"}), 400

    students = build_student_reports(index_responses(records, forms), records)
    return jsonify({"students": students, "total": len(students)})


@reports_bp.route('/api/reports/settings')
def report_settings():
    """Current analytics thresholds."""
    return jsonify(config.to_dict())
