"""
Response Indexer
================
Builds the shared lookup structures every report reads from:
per-student histories, teacher/period totals, strand/teacher totals,
per-form totals and the catalogue of known forms.

The returned dict is finished when index_responses() returns; readers
must not modify it.
"""
import logging
from collections import defaultdict

logger = logging.getLogger(__name__)


def _totals():
    return {"total_score": 0, "total_possible": 0}


def index_responses(records, forms=None) -> dict:
    """
    Index normalized response records in a single pass.

    Args:
        records: response records from the normalizer
        forms: optional catalogue {form_order: {form_title, form_strand}};
            forms without responses still count as known forms

    Returns:
        dict with student_history, teacher_period_stats,
        strand_teacher_stats, form_stats, forms, total_forms
    """
    student_history = defaultdict(list)
    teacher_period_stats = defaultdict(_totals)
    strand_teacher_stats = defaultdict(lambda: {"total_score": 0, "total_possible": 0, "count": 0})
    form_stats = defaultdict(lambda: {"total_score": 0, "total_possible": 0, "teachers": defaultdict(_totals)})
    catalogue = dict(forms or {})
    max_order = -1

    for r in records:
        score = r["score"]
        possible = r["possible_score"]
        teacher = r["teacher_name"]
        order = r["form_order"]

        student_history[r["email"]].append(r)

        strand_entry = strand_teacher_stats[(r["strand"], teacher)]
        strand_entry["total_score"] += score
        strand_entry["total_possible"] += possible
        strand_entry["count"] += 1

        # Unknown periods stay out of period-keyed totals
        if r["period"]:
            period_entry = teacher_period_stats[(r["period"], teacher)]
            period_entry["total_score"] += score
            period_entry["total_possible"] += possible

        form_entry = form_stats[order]
        form_entry["total_score"] += score
        form_entry["total_possible"] += possible
        form_entry["teachers"][teacher]["total_score"] += score
        form_entry["teachers"][teacher]["total_possible"] += possible

        if order not in catalogue:
            catalogue[order] = {"form_title": r["form_title"], "form_strand": r["strand"]}
        max_order = max(max_order, order)

    history = {
        email: sorted(entries, key=lambda r: r["form_order"])
        for email, entries in student_history.items()
    }
    per_form = {
        order: {
            "total_score": entry["total_score"],
            "total_possible": entry["total_possible"],
            "teachers": dict(entry["teachers"]),
        }
        for order, entry in form_stats.items()
    }

    logger.info("Indexed %d responses for %d students across %d forms",
                len(records), len(history), len(catalogue))

    return {
        "student_history": history,
        "teacher_period_stats": dict(teacher_period_stats),
        "strand_teacher_stats": dict(strand_teacher_stats),
        "form_stats": per_form,
        "forms": {order: catalogue[order] for order in sorted(catalogue)},
        "total_forms": max_order + 1,
    }
