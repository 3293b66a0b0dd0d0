"""Constraint compiler tests."""

from __future__ import annotations

from typing import Any

from typed_rtdb.queries import ConstraintType, QueryConstraint, compile_constraints
from typed_rtdb.references import TypedDatabase
from typed_rtdb.schema_management import NUMBER, STRING, dynamic, fixed


class _RecordingFactory:
    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def build_constraint(self, constraint_type: str, *arguments: Any) -> str:
        self.calls.append((constraint_type, arguments))
        return f"native-{len(self.calls)}"


def test_compiles_constraints_in_declaration_order() -> None:
    constraints = [
        QueryConstraint(ConstraintType.ORDER_BY_CHILD, child_path="x"),
        QueryConstraint(ConstraintType.LIMIT_TO_FIRST, limit=5),
        QueryConstraint(ConstraintType.START_AT, value=1),
    ]
    factory = _RecordingFactory()

    compiled = compile_constraints(constraints, factory)

    assert compiled == ["native-1", "native-2", "native-3"]
    assert factory.calls == [
        ("orderByChild", ("x",)),
        ("limitToFirst", (5,)),
        ("startAt", (1,)),
    ]


def test_range_keys_are_passed_as_second_argument() -> None:
    factory = _RecordingFactory()

    compile_constraints(
        [
            QueryConstraint(ConstraintType.EQUAL_TO, value="a", key="k1"),
            QueryConstraint(ConstraintType.END_BEFORE, value=None),
            QueryConstraint(ConstraintType.ORDER_BY_KEY),
        ],
        factory,
    )

    assert factory.calls == [("equalTo", ("a", "k1")), ("endBefore", (None,)), ("orderByKey", ())]


def test_empty_constraint_list_compiles_to_nothing() -> None:
    assert compile_constraints([], _RecordingFactory()) == []


def test_query_compiles_with_the_attached_client(fake_client) -> None:
    schema = fixed(users=dynamic(fixed(name=STRING, score=NUMBER)))
    query = (
        TypedDatabase(schema=schema, client=fake_client)
        .ref("users")
        .order_by_child("score")
        .limit_to_last(2)
        .end_at(9)
    )

    assert query.compile() == [("orderByChild", "score"), ("limitToLast", 2), ("endAt", 9)]


def test_describe_renders_call_expressions() -> None:
    assert QueryConstraint(ConstraintType.START_AT, value="a", key="k").describe() == (
        "startAt('a', 'k')"
    )
    assert QueryConstraint(ConstraintType.LIMIT_TO_LAST, limit=3).describe() == "limitToLast(3)"
