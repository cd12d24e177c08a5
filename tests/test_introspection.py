from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, NamedTuple, Optional

from pydantic import BaseModel

from dynquery.filters.introspection import (
    Attribute,
    MemberPath,
    RecordSchema,
    TextAttribute,
    discover_text_attributes,
    is_text_type,
    read_field,
    read_path,
    text_attributes,
    text_attributes_for,
)
from dynquery.samples import Employee, Task


@dataclass(frozen=True)
class Book:
    title: str
    pages: int
    subtitle: Optional[str]
    author: str


class Point(NamedTuple):
    label: str
    x: float
    y: float


class Measurement:
    unit: str
    value: Decimal
    kind: ClassVar[str] = "measurement"

    def __init__(self, unit: str, value: Decimal) -> None:
        self.unit = unit
        self.value = value


class Counter(BaseModel):
    count: int
    tags: list[str] = []


def names(attributes):
    return [a.name for a in attributes]


class TestDiscoverTextAttributes:
    """Text attributes come back in declaration order for every record shape."""

    def test_pydantic_model(self):
        assert names(discover_text_attributes(Employee)) == ["firstname", "lastname", "department"]
        assert names(discover_text_attributes(Task)) == ["title", "description"]

    def test_dataclass_includes_optional_str(self):
        assert names(discover_text_attributes(Book)) == ["title", "subtitle", "author"]

    def test_named_tuple(self):
        assert names(discover_text_attributes(Point)) == ["label"]

    def test_plain_class_skips_class_vars(self):
        assert names(discover_text_attributes(Measurement)) == ["unit"]

    def test_no_text_attributes(self):
        assert discover_text_attributes(Counter) == []
        assert discover_text_attributes(dict) == []

    def test_discovery_is_stable(self):
        assert discover_text_attributes(Employee) == discover_text_attributes(Employee)

    def test_record_schema(self):
        schema = RecordSchema.of(id=int, name=str, note=Optional[str], score=float)
        assert names(discover_text_attributes(schema)) == ["name", "note"]
        assert schema.names == ["id", "name", "note", "score"]


class TestTextAttributesFor:
    def test_dict_record_infers_from_values(self):
        record = {"id": 1, "title": "Report", "owner": None, "summary": "weekly"}
        assert names(text_attributes_for(record)) == ["title", "summary"]

    def test_object_record_uses_its_type(self, employee_records):
        assert names(text_attributes_for(employee_records[0])) == ["firstname", "lastname", "department"]


class TestAttributes:
    def test_read_path_on_objects_and_dicts(self):
        record = {"author": {"name": "Ada"}, "book": Book("T", 1, None, "A")}
        assert read_path(record, "author.name") == "Ada"
        assert read_path(record, "book.title") == "T"
        assert read_path(record, "book.missing.deeper") is None

    def test_attribute_reads_the_exact_key(self):
        record = {"e.mail": "ada@example.org", 1: "one", "e": {"mail": "nested"}}
        assert Attribute("e.mail").value(record) == "ada@example.org"
        assert Attribute(1).value(record) == "one"
        assert read_field(Book("T", 1, None, "A"), 1) is None

    def test_member_path_walks_segments(self):
        record = {"e": {"mail": "nested"}, "author": {"full name": "Ada"}}
        assert MemberPath("e.mail", segments=("e", "mail")).value(record) == "nested"
        assert MemberPath("author.full name", segments=("author", "full name")).value(record) == "Ada"

    def test_text_reads_only_strings(self):
        attribute = TextAttribute("pages")
        assert attribute.text(Book("T", 10, None, "A")) is None
        assert TextAttribute("title").text(Book("T", 10, None, "A")) == "T"

    def test_explicit_accessors(self):
        attributes = text_attributes("title", ("shout", lambda b: b.title.upper()))
        book = Book("quiet", 1, None, "A")
        assert names(attributes) == ["title", "shout"]
        assert attributes[1].text(book) == "QUIET"

    def test_attribute_equality_ignores_getter(self):
        assert Attribute("a") == Attribute("a", lambda r: 1)


def test_is_text_type():
    assert is_text_type(str)
    assert is_text_type(Optional[str])
    assert is_text_type(str | None)
    assert not is_text_type(int)
    assert not is_text_type(Optional[int])
    assert not is_text_type(str | int)
    assert not is_text_type(list[str])
