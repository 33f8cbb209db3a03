"""
Cohort Analytics
================
Grade-level reports built from indexed exit ticket data: teacher/period
averages, top and bottom deciles, momentum fliers, best/worst teacher per
strand, per-form averages and per-form rosters.
Every function reads the indexer's output and never modifies it.
"""
import math
import logging

from exit_tickets.config import config
from exit_tickets.services.normalizer import display_email

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════

def _most_recent(history):
    """The record with the highest form order."""
    return max(history, key=lambda r: r["form_order"])


def _student_entry(email, history):
    """Compact {email, student_name, teacher} entry from the latest record."""
    latest = _most_recent(history)
    return {
        "email": email,
        "student_name": latest["student_name"],
        "teacher": latest["teacher_name"],
    }


def _ratio_mean(records):
    """Mean of score/possible_score, or None if there are no records or any has no possible points."""
    if not records:
        return None
    ratios = []
    for r in records:
        if not r["possible_score"]:
            return None
        ratios.append(r["score"] / r["possible_score"])
    return sum(ratios) / len(ratios)


# ═══════════════════════════════════════════════════════
# TEACHER / PERIOD AVERAGES
# ═══════════════════════════════════════════════════════

def teacher_period_averages(indexed):
    """One {teacher_period, period, teacher, avg_score} entry per class with possible points."""
    averages = []
    for (period, teacher), stat in indexed["teacher_period_stats"].items():
        if stat["total_possible"] <= 0:
            continue
        averages.append({
            "teacher_period": f"{period}-{teacher}",
            "period": period,
            "teacher": teacher,
            "avg_score": stat["total_score"] / stat["total_possible"],
        })
    return averages


def sort_teacher_period_averages(averages):
    """Presentation order: teacher name, then numeric period."""
    return sorted(averages, key=lambda a: (a["teacher"], int(a["period"])))


# ═══════════════════════════════════════════════════════
# DECILES AND FLIERS
# ═══════════════════════════════════════════════════════

def qualifying_students(indexed, threshold=None):
    """Emails of students who completed at least `threshold` of all known forms."""
    threshold = threshold if threshold is not None else config.completion_threshold
    total_forms = indexed["total_forms"]
    if total_forms == 0:
        return []
    return [
        email for email, history in indexed["student_history"].items()
        if len(history) / total_forms >= threshold
    ]


def decile_rankings(indexed, fraction=None, threshold=None):
    """
    Top and bottom performers among completion-qualified students.

    Students are ranked by aggregate score ratio (descending, ties by
    email). Both lists hold ceil(n * fraction) students and may overlap
    when the cohort is small.

    Returns:
        (top, bottom) lists of {email, student_name, teacher}
    """
    fraction = fraction if fraction is not None else config.decile_fraction
    history = indexed["student_history"]

    ranked = []
    for email in qualifying_students(indexed, threshold):
        records = history[email]
        total_score = sum(r["score"] for r in records)
        total_possible = sum(r["possible_score"] for r in records)
        if total_possible > 0:
            ranked.append((total_score / total_possible, email))

    ranked.sort(key=lambda item: (-item[0], item[1]))

    count = math.ceil(len(ranked) * fraction)
    top = [_student_entry(email, history[email]) for _, email in ranked[:count]]
    bottom = [_student_entry(email, history[email]) for _, email in ranked[len(ranked) - count:]]

    logger.info("Ranked %d qualifying students (%d per decile)", len(ranked), count)
    return top, bottom


def detect_fliers(indexed, change_threshold=None, window=None, min_responses=None, threshold=None):
    """
    Students whose recent average moved sharply away from their own average.

    percent_change = (last_avg - overall_avg) / overall_avg, where last_avg
    covers the most recent `window` forms. Students with an undefined
    ratio (overall average of 0, or a form worth 0 points) are not
    classified.

    Returns:
        (top_fliers, bottom_fliers), each sorted by teacher then email
    """
    change_threshold = change_threshold if change_threshold is not None else config.flier_threshold
    window = window if window is not None else config.flier_window
    min_responses = min_responses if min_responses is not None else config.flier_min_responses
    history = indexed["student_history"]

    top_fliers = []
    bottom_fliers = []
    for email in qualifying_students(indexed, threshold):
        records = sorted(history[email], key=lambda r: r["form_order"])
        if len(records) < min_responses:
            continue

        overall_avg = _ratio_mean(records)
        last_avg = _ratio_mean(records[len(records) - window:])
        if not overall_avg or last_avg is None:
            logger.debug("Skipping flier check for %s: undefined average", email)
            continue

        percent_change = (last_avg - overall_avg) / overall_avg
        if percent_change >= change_threshold:
            top_fliers.append(_student_entry(email, records))
        elif percent_change <= -change_threshold:
            bottom_fliers.append(_student_entry(email, records))

    top_fliers.sort(key=lambda s: (s["teacher"], s["email"]))
    bottom_fliers.sort(key=lambda s: (s["teacher"], s["email"]))
    return top_fliers, bottom_fliers


# ═══════════════════════════════════════════════════════
# STRANDS AND FORMS
# ═══════════════════════════════════════════════════════

def best_worst_teachers(indexed):
    """
    Best and worst teacher per strand by score ratio.

    A strand with a single ranked teacher reports worst_teacher=None;
    strands with no possible points are left out.
    """
    by_strand = {}
    for (strand, teacher), stat in indexed["strand_teacher_stats"].items():
        by_strand.setdefault(strand, [])
        if stat["total_possible"] > 0:
            by_strand[strand].append((stat["total_score"] / stat["total_possible"], teacher))

    result = {}
    for strand, teachers in by_strand.items():
        if not teachers:
            continue
        teachers.sort(key=lambda t: (-t[0], t[1]))
        result[strand] = {
            "best_teacher": teachers[0][1],
            "worst_teacher": teachers[-1][1] if len(teachers) > 1 else None,
        }
    return result


def form_averages(indexed):
    """Overall and per-teacher percentage for every form that has possible points."""
    results = []
    for order, stat in sorted(indexed["form_stats"].items()):
        if stat["total_possible"] <= 0:
            continue
        teacher_avgs = {
            teacher: t["total_score"] / t["total_possible"] * 100
            for teacher, t in stat["teachers"].items()
            if t["total_possible"] > 0
        }
        results.append({
            "form_order": order,
            "form_title": indexed["forms"].get(order, {}).get("form_title", ""),
            "overall_average": stat["total_score"] / stat["total_possible"] * 100,
            "teacher_averages": teacher_avgs,
        })
    return results


def score_band(score, possible):
    """Band label for one response: >90 excellent, >75 proficient, >40 developing, else low."""
    if possible <= 0:
        return "low"
    # compare without dividing so 9/10 stays exactly on the 90 boundary
    points = score * 100
    if points > 90 * possible:
        return "excellent"
    elif points > 75 * possible:
        return "proficient"
    elif points > 40 * possible:
        return "developing"
    return "low"


def form_rosters(indexed):
    """
    Every response per form, grouped the way the class sheets list them.

    Rows are ordered by teacher, then period, then score descending (ties
    by email). Forms nobody answered get an empty roster.
    """
    by_form = {order: [] for order in indexed["forms"]}
    for records in indexed["student_history"].values():
        for r in records:
            by_form.setdefault(r["form_order"], []).append(r)

    rosters = []
    for order in sorted(by_form):
        records = sorted(
            by_form[order],
            key=lambda r: (r["teacher_name"], r["period"], -r["score"], r["email"]),
        )
        rows = [{
            "class_label": f"{r['period']}-{r['teacher_name']}",
            "teacher": r["teacher_name"],
            "period": r["period"],
            "student_name": r["student_name"],
            "email": r["email"],
            "display_email": display_email(r["email"]),
            "score": r["score"],
            "possible_score": r["possible_score"],
            "band": score_band(r["score"], r["possible_score"]),
        } for r in records]
        rosters.append({
            "form_order": order,
            "form_title": indexed["forms"].get(order, {}).get("form_title", ""),
            "rows": rows,
        })
    return rosters


# ═══════════════════════════════════════════════════════
# FULL REPORT
# ═══════════════════════════════════════════════════════

def build_cohort_report(indexed):
    """All cohort analytics in the shape the reports sheet consumes."""
    top10, bottom10 = decile_rankings(indexed)
    top_fliers, bottom_fliers = detect_fliers(indexed)
    return {
        "teacher_period_averages": teacher_period_averages(indexed),
        "top10_students": top10,
        "bottom10_students": bottom10,
        "top_fliers": top_fliers,
        "bottom_fliers": bottom_fliers,
        "top_bottom_teachers": best_worst_teachers(indexed),
        "form_averages": form_averages(indexed),
        "form_rosters": form_rosters(indexed),
    }
