"""
Response Normalizer
===================
Validates and canonicalizes raw exit ticket responses before indexing.
Malformed periods degrade to the unknown-period bucket instead of failing.
"""
import re
import math
import logging

logger = logging.getLogger(__name__)

_PERIOD_PATTERN = re.compile(r'[0-9]+')


def validate_period(period):
    """Return the period if it is all ASCII digits, otherwise ''."""
    if period is None:
        return ""
    p = str(period)
    return p if _PERIOD_PATTERN.fullmatch(p) else ""


def display_email(email):
    """Local part of an address, for compact display ('a@x.com' -> 'a')."""
    return (email or "").split("@")[0]


def score_gradable_items(items):
    """
    Derive (score, possible_score) from a response's gradable items.

    Every gradable item is worth one possible point; its earned score is
    added as-is.
    """
    score = 0
    possible_score = 0
    for item in items or []:
        if not isinstance(item, dict):
            raise TypeError(f"gradable item must be an object, got {type(item).__name__}")
        score += _points(item.get("score") or 0, "gradable item score")
        possible_score += 1
    return score, possible_score


def _points(value, field):
    """Non-negative finite number, or ValueError."""
    points = float(value)
    if not math.isfinite(points) or points < 0:
        raise ValueError(f"{field} must be a non-negative number, got {value!r}")
    return points


def _form_order(value):
    order = int(value)
    if order < 0:
        raise ValueError(f"form_order must be non-negative, got {value!r}")
    return order


def normalize_response(raw: dict, form_title: str, form_order: int, strand: str) -> dict:
    """
    Build a response record from one raw submission.

    Raises KeyError when the submission is missing a required field,
    TypeError when a field has the wrong shape and ValueError when a score
    is not a non-negative finite number or form_order is negative.
    """
    if "score" in raw:
        score = _points(raw["score"], "score")
        possible_score = _points(raw["possible_score"], "possible_score")
    else:
        score, possible_score = score_gradable_items(raw["gradable_items"])

    return {
        "email": raw["email"],
        "student_name": str(raw["student_name"]).strip(),
        "teacher_name": str(raw["teacher_name"]).strip(),
        "period": validate_period(raw.get("period")),
        "strand": strand,
        "form_title": form_title,
        "form_order": _form_order(form_order),
        "score": score,
        "possible_score": possible_score,
    }


def normalize_batches(batches):
    """
    Flatten assessment batches into response records.

    Each batch is {form_title, form_order, strand, responses: [...]}.

    Returns:
        (records, forms) where records keep batch order and forms maps
        form_order -> {form_title, form_strand} for every batch, including
        batches nobody answered.
    """
    records = []
    forms = {}
    invalid_periods = 0

    for batch in batches:
        form_order = _form_order(batch["form_order"])
        form_title = str(batch.get("form_title") or "")
        strand = str(batch.get("strand") or "")
        forms[form_order] = {"form_title": form_title, "form_strand": strand}

        for raw in batch.get("responses", []):
            record = normalize_response(raw, form_title, form_order, strand)
            if not record["period"] and raw.get("period") not in (None, ""):
                invalid_periods += 1
            records.append(record)

    if invalid_periods:
        logger.info("Moved %d responses with unrecognized periods to the unknown bucket", invalid_periods)
    logger.info("Normalized %d responses from %d forms", len(records), len(forms))
    return records, forms
