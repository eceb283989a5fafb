import re

import pytest

from jobboard.core.errors import BadRequestError
from jobboard.core.sql import (
    Comparison,
    FilterRule,
    SqlFragment,
    escape_like,
    quote_ident,
    sql_for_filters,
    sql_for_partial_update,
)
from jobboard.jobs.repository import JobRepository

JOB_RULES = JobRepository.filter_rules


def placeholders(text):
    return [int(n) for n in re.findall(r"\$(\d+)", text)]


# sql_for_partial_update


def test_partial_update_translates_column_names():
    fragment = sql_for_partial_update(
        {"firstName": "Aliya", "age": 32},
        {"firstName": "first_name"},
    )
    assert fragment == SqlFragment('"first_name"=$1, "age"=$2', ("Aliya", 32))


@pytest.mark.parametrize(
    "data",
    [
        {"salary": 1},
        {"salary": 1, "equity": 0.5},
        {"a": 1, "b": None, "c": "x", "d": True},
    ],
)
def test_partial_update_placeholders_match_values(data):
    fragment = sql_for_partial_update(data, {})
    assert placeholders(fragment.text) == list(range(1, len(data) + 1))
    assert fragment.placeholder_count == len(data)
    assert fragment.values == tuple(data.values())
    assert fragment.next_placeholder == len(data) + 1


@pytest.mark.parametrize("column_names", [{}, {"firstName": "first_name"}])
def test_partial_update_rejects_empty_payload(column_names):
    with pytest.raises(BadRequestError):
        sql_for_partial_update({}, column_names)


def test_partial_update_keeps_values_out_of_text():
    fragment = sql_for_partial_update({"name": "x'; DROP TABLE jobs; --"}, {})
    assert "DROP" not in fragment.text
    assert fragment.values == ("x'; DROP TABLE jobs; --",)


def test_quote_ident_escapes_quotes():
    assert quote_ident('a"b') == '"a""b"'
    assert sql_for_partial_update({'a"b': 1}, {}).text == '"a""b"=$1'


# sql_for_filters


def test_no_filters_gives_empty_fragment():
    fragment = sql_for_filters({}, JOB_RULES)
    assert fragment.text == ""
    assert fragment.values == ()


def test_unrecognized_filters_are_all_named():
    with pytest.raises(BadRequestError) as exc:
        sql_for_filters({"title": "c", "bogus": "x", "other": "y"}, JOB_RULES)
    assert "bogus" in exc.value.message
    assert "other" in exc.value.message
    assert "title" not in exc.value.message
    assert len(exc.value.errors) == 2


def test_substring_filter_wraps_bound_value():
    fragment = sql_for_filters({"title": "co"}, JOB_RULES)
    assert fragment.text == '"title" ILIKE $1 ESCAPE \'\\\'\''
    assert fragment.values == ("%co%",)


def test_escape_like_escapes_every_wildcard():
    assert escape_like("50%_a\\b") == "50\\%\\_a\\\\b"
    assert escape_like("plain") == "plain"


def test_substring_filter_binds_wildcards_literally():
    assert sql_for_filters({"title": "%"}, JOB_RULES).values == ("%\\%%",)
    assert sql_for_filters({"title": "_"}, JOB_RULES).values == ("%\\_%",)


@pytest.mark.parametrize("value, operator", [(True, ">"), ("true", ">"), (False, "="), ("false", "=")])
def test_nonzero_filter_always_binds_zero(value, operator):
    fragment = sql_for_filters({"hasEquity": value}, JOB_RULES)
    assert fragment.text == f'"equity" {operator} $1'
    assert fragment.values == (0,)


def test_filters_join_with_and_and_number_contiguously():
    fragment = sql_for_filters({"title": "c", "minSalary": "50000", "hasEquity": "true"}, JOB_RULES)
    assert fragment.text == '"title" ILIKE $1 ESCAPE \'\\\' AND "salary" >= $2 AND "equity" > $3'
    assert fragment.values == ("%c%", 50000, 0)
    assert placeholders(fragment.text) == [1, 2, 3]


def test_at_most_and_exact_comparisons():
    rules = {
        "maxSize": FilterRule("size", Comparison.AT_MOST, int),
        "kind": FilterRule("kind", Comparison.EXACT),
    }
    fragment = sql_for_filters({"maxSize": 3, "kind": "big"}, rules)
    assert fragment.text == '"size" <= $1 AND "kind" = $2'
    assert fragment.values == (3, "big")


def test_bad_filter_values_are_reported_together():
    with pytest.raises(BadRequestError) as exc:
        sql_for_filters({"minSalary": "lots", "hasEquity": "maybe"}, JOB_RULES)
    assert [e.split(":")[0] for e in exc.value.errors] == ["minSalary", "hasEquity"]
