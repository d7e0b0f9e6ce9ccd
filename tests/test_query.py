"""Projections feeding the table, card, and analytics views."""
import pytest

from student_dashboard.core.models import StudentRecord
from student_dashboard.review.query import (
    NO_POPULAR_SKILLS,
    ViewQuery,
    all_selected,
    apply_filters,
    branch_distribution,
    compute_stats,
    filter_options,
    gpa_class,
    gpa_distribution,
    highlight_text,
    popular_interests,
    toggle_select_all,
    toggle_selection,
    toggle_sort,
    year_distribution,
)


@pytest.fixture
def students() -> list[StudentRecord]:
    return [
        StudentRecord(id=1, name="Ann", branch="CS", year=1, email="ann@uni.edu", gpa=3.6, interests=["AI/ML", "Hiking"]),
        StudentRecord(id=2, name="Bob", branch="ECE", year=3, email="bob@uni.edu", gpa=2.9, status="Inactive"),
        StudentRecord(id=3, name="Cy", branch="CS", year=3, email="cy@mail.com", gpa=1.5),
        StudentRecord(id=4, name="Di", branch="ME", year=2, email="di@uni.edu", gpa=3.2),
    ]


def test_search_matches_any_field_case_insensitively(students):
    assert [r.id for r in apply_filters(students, ViewQuery(search="MAIL.COM"))] == [3]
    assert [r.id for r in apply_filters(students, ViewQuery(search="hiking"))] == [1]
    assert [r.id for r in apply_filters(students, ViewQuery(search="inactive"))] == [2]


def test_branch_and_year_filters_combine(students):
    query = ViewQuery(branch="CS", year="3")
    assert [r.id for r in apply_filters(students, query)] == [3]


def test_sort_toggles_direction_on_same_key(students):
    query = toggle_sort(ViewQuery(), "gpa")
    assert query.direction == "asc"
    assert [r.id for r in apply_filters(students, query)] == [3, 2, 4, 1]

    query = toggle_sort(query, "gpa")
    assert query.direction == "desc"
    assert [r.id for r in apply_filters(students, query)] == [1, 4, 2, 3]

    query = toggle_sort(query, "name")
    assert (query.sort_key, query.direction) == ("name", "asc")


def test_sort_rejects_unknown_key():
    with pytest.raises(ValueError):
        toggle_sort(ViewQuery(), "validation_errors")


def test_filter_options_are_sorted_and_distinct(students):
    assert filter_options(students) == {"branches": ["CS", "ECE", "ME"], "years": ["1", "2", "3"]}


def test_stats(students):
    stats = compute_stats(students)
    assert stats.total_students == 4
    assert stats.average_gpa == 2.8
    assert stats.total_branches == 3
    assert stats.active_students == 3
    assert compute_stats([]).average_gpa == 0.0


def test_distributions(students):
    assert branch_distribution(students) == {"CS": 2, "ECE": 1, "ME": 1}
    assert gpa_distribution(students) == {"0-2": 1, "2-3": 1, "3-3.5": 1, "3.5-4": 1}
    assert year_distribution(students) == {"Year 1": 1, "Year 3": 2, "Year 2": 1}


def test_gpa_class_thresholds():
    assert gpa_class(3.5) == "excellent"
    assert gpa_class(3.0) == "good"
    assert gpa_class(2.99) == "needs-improvement"


def test_popular_interests_for_cards(students):
    assert popular_interests(students[0]) == "AI/ML"
    assert popular_interests(students[1]) == NO_POPULAR_SKILLS


def test_selection_helpers(students):
    selected = toggle_selection(set(), 2)
    assert selected == {2}
    assert toggle_selection(selected, 2) == set()

    everything = toggle_select_all({2}, students)
    assert everything == {1, 2, 3, 4}
    assert all_selected(everything, students)
    assert toggle_select_all(everything, students) == set()
    assert not all_selected(set(), [])


def test_highlight_text_bolds_each_match_keeping_case():
    assert highlight_text("Anna Banana", "an") == "**An**na B**an****an**a"
    assert highlight_text("ann@uni.edu", " UNI.") == "ann@**uni.**edu"


def test_highlight_text_without_term_or_match_is_unchanged():
    assert highlight_text("Ann", "  ") == "Ann"
    assert highlight_text("Ann", "zz") == "Ann"
    assert highlight_text("a+b (c)", "+b (") == "a**+b (**c)"
