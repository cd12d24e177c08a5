from decimal import Decimal

import pytest

from dynquery.filters.builder import build_text_predicate, text_expression
from dynquery.filters.introspection import Attribute, MemberPath, discover_text_attributes, text_attributes
from dynquery.filters.predicates import (
    Always,
    And,
    Compare,
    Contains,
    EndsWith,
    Not,
    Or,
    StartsWith,
    all_of,
    at_least,
    between,
    equals,
    format_member,
)
from dynquery.samples import Employee


class TestTextPredicates:
    def test_contains_is_case_sensitive(self, employee_records):
        alice = employee_records[0]
        assert Contains("firstname", "Ali")(alice)
        assert not Contains("firstname", "ali")(alice)

    def test_non_text_and_missing_values_never_match(self, employee_records):
        alice = employee_records[0]
        assert not Contains("salary", "6")(alice)
        assert not Contains("nickname", "A")(alice)
        assert not Contains("title", "x")({"title": None})

    def test_starts_and_ends_with(self):
        record = {"title": "Weekly Team Update"}
        assert StartsWith("title", "Weekly")(record)
        assert EndsWith("title", "Update")(record)
        assert not EndsWith("title", "Weekly")(record)

    def test_rejects_non_string_values(self):
        with pytest.raises(ValueError, match="expects a string"):
            Contains("title", 3)


class TestCompare:
    def test_comparisons(self, employee_records):
        alice = employee_records[0]
        assert Compare("salary", ">=", 55000)(alice)
        assert Compare("department", "==", "IT")(alice)
        assert Compare("department", "!=", "HR")(alice)
        assert not Compare("performance_rating", "<", 4)(alice)

    def test_ordering_against_none_is_false(self):
        record = {"rating": None}
        assert not Compare("rating", ">=", 1)(record)
        assert not Compare("rating", "<", 1)(record)
        assert Compare("rating", "==", None)(record)

    def test_unknown_operator(self):
        with pytest.raises(ValueError, match="Unknown comparison operator"):
            Compare("salary", "~=", 1)


class TestComposition:
    def test_operators_build_trees(self):
        a = Contains("title", "a")
        b = Contains("title", "b")
        assert (a | b) == Or([a, b])
        assert (a & b) == And([a, b])
        assert ~a == Not(a)

    def test_render_with_params(self):
        predicate = Or([Contains("firstname", "Al"), Contains("lastname", "Al"), Compare("rating", ">=", 4)])
        params: list = []
        assert predicate.render(params) == "firstname.Contains(@0) || lastname.Contains(@0) || rating >= @1"
        assert params == ["Al", 4]

    def test_render_literals_and_nesting(self):
        predicate = And([Or([Contains("a", 'say "hi"'), Compare("b", "==", None)]), Not(Always())])
        assert predicate.render() == '(a.Contains("say \\"hi\\"") || b == null) && !(true)'

    def test_empty_groups(self):
        assert not Or([])({"a": 1})
        assert And([])({"a": 1})

    def test_to_dict(self):
        assert Or([Contains("a", "x")]).to_dict() == {
            "op": "or",
            "predicates": [{"op": "contains", "attribute": "a", "value": "x"}],
        }


class TestHelpers:
    def test_between_is_inclusive(self, employee_records):
        predicate = between("salary", Decimal(55000), Decimal(75000))
        assert [e.firstname for e in employee_records if predicate(e)] == ["Alice", "Bob"]

    @pytest.mark.parametrize(
        "department, rating, expected",
        [
            ("IT", 4, ["Alice"]),
            ("IT", None, ["Alice"]),
            ("", 4, ["Alice", "Charlie"]),
            (None, None, ["Alice", "Bob", "Charlie"]),
        ],
    )
    def test_conditional_predicate(self, employee_records, department, rating, expected):
        predicate = all_of(equals("department", department), at_least("performance_rating", rating))
        assert [e.firstname for e in employee_records if predicate(e)] == expected

    def test_all_of_shapes(self):
        assert all_of() == Always()
        assert all_of(None, equals("a", 1)) == Compare("a", "==", 1)


class TestBuildTextPredicate:
    def test_or_in_discovery_order(self):
        predicate = build_text_predicate(discover_text_attributes(Employee), "HR")
        assert predicate == Or([
            Contains("firstname", "HR"),
            Contains("lastname", "HR"),
            Contains("department", "HR"),
        ])

    def test_single_attribute(self):
        assert build_text_predicate(text_attributes("title"), "x") == Contains("title", "x")

    def test_nothing_to_filter(self):
        assert build_text_predicate(text_attributes("title"), "") is None
        assert build_text_predicate(text_attributes("title"), None) is None
        assert build_text_predicate([], "x") is None

    def test_text_expression(self):
        assert text_expression(text_attributes("title", "description")) == (
            "title.Contains(@0) || description.Contains(@0)"
        )

    def test_text_expression_quotes_non_identifiers(self):
        attributes = text_attributes("first name", "not", "prénom", "e.mail")
        assert text_expression(attributes) == (
            'it["first name"].Contains(@0) || it["not"].Contains(@0) '
            '|| prénom.Contains(@0) || it["e.mail"].Contains(@0)'
        )


def test_format_member():
    assert format_member(Attribute("title")) == "title"
    assert format_member(Attribute(1)) == "it[1]"
    assert format_member(Attribute("null")) == 'it["null"]'
    assert format_member(MemberPath("author.full name", segments=("author", "full name"))) == (
        'author["full name"]'
    )
    assert format_member(MemberPath("author.name", segments=("author", "name"))) == "author.name"
