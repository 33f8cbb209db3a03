"""
Student Reports
===============
Per-student exit ticket summaries: completed and missing forms, the
student's average against their class and grade level, and the class
period they most often submit from.
All percentages are plain floats on a 0-100 scale.
"""
import logging

logger = logging.getLogger(__name__)


def _percent(score, possible):
    return score / possible * 100 if possible > 0 else 0


def _most_frequent(values):
    """Most common value; ties go to the one seen first."""
    counts = {}
    for v in values:
        counts[v] = counts.get(v, 0) + 1
    best = None
    for v, n in counts.items():
        if best is None or n > counts[best]:
            best = v
    return best


def _completed_entry(record, indexed):
    order = record["form_order"]
    form_stat = indexed["form_stats"].get(order, {"total_score": 0, "total_possible": 0, "teachers": {}})
    teacher_stat = form_stat["teachers"].get(record["teacher_name"], {"total_score": 0, "total_possible": 0})
    meta = indexed["forms"].get(order, {})
    return {
        "form_order": order,
        "form_title": meta.get("form_title"),
        "form_strand": meta.get("form_strand"),
        "student_avg": _percent(record["score"], record["possible_score"]),
        "class_avg": _percent(teacher_stat["total_score"], teacher_stat["total_possible"]),
        "grade_level_avg": _percent(form_stat["total_score"], form_stat["total_possible"]),
    }


def build_student_report(email, responses, indexed) -> dict:
    """
    Build one student's report.

    Args:
        email: the student's address
        responses: that student's records in input order
        indexed: output of index_responses()
    """
    history = indexed["student_history"].get(email, [])
    completed_orders = {r["form_order"] for r in history}

    missing = [
        {"form_order": order, "form_title": meta.get("form_title"), "form_strand": meta.get("form_strand")}
        for order, meta in indexed["forms"].items()
        if order not in completed_orders
    ]

    total_score = sum(r["score"] for r in responses)
    total_possible = sum(r["possible_score"] for r in responses)

    home = _most_frequent((r["period"], r["teacher_name"]) for r in responses)
    period, teacher = home if home else (None, None)
    class_stat = indexed["teacher_period_stats"].get(home) if home else None
    class_average = _percent(class_stat["total_score"], class_stat["total_possible"]) if class_stat else 0

    return {
        "display_name": _most_frequent(r["student_name"] for r in responses),
        "email": email,
        "completed": [_completed_entry(r, indexed) for r in history],
        "missing": missing,
        "average": _percent(total_score, total_possible),
        "period": period,
        "teacher": teacher,
        "class_average": class_average,
    }


def build_student_reports(indexed, all_responses):
    """One report per distinct email, in first-seen order."""
    by_student = {}
    for r in all_responses:
        by_student.setdefault(r["email"], []).append(r)

    reports = [build_student_report(email, responses, indexed) for email, responses in by_student.items()]
    logger.info("Built %d student reports", len(reports))
    return reports
