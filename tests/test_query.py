from decimal import Decimal

from dynquery.filters.predicates import Contains, all_of, at_least, between, equals
from dynquery.query import Query, as_query, from_collection
from dynquery.samples import Employee, full_name
from dynquery.transforms.data_ops import Select


class TestQuery:
    def test_salary_range(self, employee_records):
        query = from_collection(employee_records, Employee).where(
            between("salary", Decimal(55000), Decimal(75000))
        )
        assert [full_name(e) for e in query] == ["Alice Williams", "Bob Brown"]

    def test_conditional_order_by(self, employee_records):
        query = from_collection(employee_records, Employee)
        sort_by_rating = True
        if sort_by_rating:
            query = query.order_by("performance_rating")
        assert [full_name(e) for e in query] == ["Bob Brown", "Alice Williams", "Charlie Taylor"]

    def test_conditional_predicate(self, employee_records):
        predicate = all_of(equals("department", "IT"), at_least("performance_rating", 4))
        query = from_collection(employee_records, Employee).where(predicate)
        assert [full_name(e) for e in query] == ["Alice Williams"]

    def test_operators_return_new_queries(self, employee_records):
        base = from_collection(employee_records, Employee)
        filtered = base.where(Contains("department", "HR"))
        assert base.count() == 3
        assert filtered.count() == 1
        assert filtered.element_type is Employee

    def test_select_drops_element_type(self, employee_records):
        names = from_collection(employee_records, Employee).select(full_name)
        assert names.element_type is None
        assert names.first() == "Alice Williams"

    def test_order_by_none_first_and_descending(self):
        records = [{"r": 2}, {"r": None}, {"r": 1}]
        assert [r["r"] for r in from_collection(records).order_by("r")] == [None, 1, 2]
        assert [r["r"] for r in from_collection(records).order_by("r", descending=True)] == [2, 1, None]

    def test_order_by_is_stable(self):
        records = [{"k": 1, "n": "a"}, {"k": 0, "n": "b"}, {"k": 1, "n": "c"}]
        ordered = from_collection(records).order_by(lambda r: r["k"]).to_list()
        assert [r["n"] for r in ordered] == ["b", "a", "c"]

    def test_take_and_first(self, employee_records):
        query = from_collection(employee_records)
        assert len(query.take(2).to_list()) == 2
        assert from_collection([]).first("none") == "none"

    def test_nothing_runs_before_iteration(self):
        seen = []

        def source():
            for i in range(3):
                seen.append(i)
                yield i

        query = Query(source()).where(lambda i: i > 0).take(1)
        assert seen == []
        assert query.to_list() == [1]
        assert seen == [0, 1]

    def test_pipe_and_as_query(self):
        query = as_query([1, 2, 3])
        assert as_query(query) is query
        assert query.pipe(Select(lambda i: i * 10)).to_list() == [10, 20, 30]
