"""
Shared test fixtures for the exit ticket analytics engine.
Synthetic cohorts are built as raw batches so every test goes through the
real normalizer and indexer.
"""
import pytest

from exit_tickets.services.normalizer import normalize_batches
from exit_tickets.services.indexer import index_responses


def make_response(email, name, teacher, period, score, possible=10):
    """Raw submission as the forms collaborator hands it over."""
    return {
        "email": email,
        "student_name": name,
        "teacher_name": teacher,
        "period": period,
        "score": score,
        "possible_score": possible,
    }


def make_batch(order, strand, responses, title=None):
    return {
        "form_title": title or f"Exit Ticket {order + 1}",
        "form_order": order,
        "strand": strand,
        "responses": responses,
    }


def index_batches(batches):
    """Normalize and index raw batches; returns (records, indexed)."""
    records, forms = normalize_batches(batches)
    return records, index_responses(records, forms)


@pytest.fixture
def cohort_batches():
    """Four exit tickets, five students, two teachers.

    alice  Smith P1  9  9  9  9   steady, top decile
    bob    Smith P2  1  6  6  6   improving (top flier)
    cara   Jones P3 10  4  4  4   declining (bottom flier)
    dan    Jones P3  5  -  -  -   1/4 forms, never qualifies
    eve    Jones ?   3  3  -  -   invalid period, 2/4 forms, bottom decile
    """
    scores = {
        "alice@school.org": ("Alice Park", "Smith", "1", [9, 9, 9, 9]),
        "bob@school.org": ("Bob Reyes", "Smith", "2", [1, 6, 6, 6]),
        "cara@school.org": ("Cara Diaz", "Jones", "3", [10, 4, 4, 4]),
        "dan@school.org": ("Dan Wu", "Jones", "3", [5]),
        "eve@school.org": ("Eve Stone", "Jones", "3rd", [3, 3]),
    }
    strands = ["Algebra", "Geometry", "Algebra", "Geometry"]
    batches = []
    for order, strand in enumerate(strands):
        responses = [
            make_response(email, name, teacher, period, marks[order])
            for email, (name, teacher, period, marks) in scores.items()
            if order < len(marks)
        ]
        batches.append(make_batch(order, strand, responses))
    return batches


@pytest.fixture
def cohort(cohort_batches):
    """(records, indexed) for the sample cohort."""
    return index_batches(cohort_batches)


@pytest.fixture
def indexed(cohort):
    return cohort[1]
