"""Typed reference tests."""

from __future__ import annotations

import pytest
from typed_rtdb.database_client import ABORT_TRANSACTION
from typed_rtdb.errors import DetachedDatabaseError, InvalidPathError, SchemaMismatchError
from typed_rtdb.references import Reference, TypedDatabase, make_reference
from typed_rtdb.schema_management import BOOLEAN, NUMBER, STRING, array, dynamic, fixed

USER = fixed(name=STRING, score=NUMBER, nickname=STRING, optional={"nickname"})
USER_VALUE = {"name": "b", "score": 5}
SCHEMA = fixed(
    users=dynamic(USER),
    tags=array(STRING),
    settings=fixed(theme=STRING, additional=BOOLEAN),
    counter=NUMBER,
    a=fixed(b=NUMBER),
)


@pytest.fixture
def database(fake_client) -> TypedDatabase:
    return TypedDatabase(schema=SCHEMA, client=fake_client)


def test_references_carry_the_resolved_shape(database: TypedDatabase) -> None:
    reference = database.ref("/users/u1")

    assert reference.path == "users/u1"
    assert reference.key == "u1"
    assert reference.shape == USER


def test_invalid_paths_cannot_be_constructed(database: TypedDatabase) -> None:
    with pytest.raises(InvalidPathError, match="does not exist"):
        database.ref("/a/c")
    with pytest.raises(InvalidPathError, match="Malformed"):
        database.ref("/a/b/")
    with pytest.raises(InvalidPathError):
        make_reference(database, "tags/first")


def test_parent_and_root_navigation(database: TypedDatabase) -> None:
    reference = database.ref("users/u1/name")

    assert reference.parent == database.ref("users/u1")
    assert reference.root.path == ""
    assert reference.root.key is None
    assert reference.root.parent is None


def test_child_accepts_only_declared_children(database: TypedDatabase) -> None:
    users = database.ref("users")

    assert users.child("u1/score").shape == NUMBER
    assert database.ref("tags").child("3").shape == STRING
    assert database.ref("settings").child("dark").shape == BOOLEAN
    with pytest.raises(InvalidPathError):
        database.ref("tags").child("x")
    with pytest.raises(InvalidPathError):
        database.ref("counter").child("x")
    with pytest.raises(InvalidPathError):
        users.child("")
    with pytest.raises(InvalidPathError):
        users.child("u1/age")


def test_set_validates_before_writing(database: TypedDatabase, fake_client) -> None:
    database.ref("users/u1").set({"name": "a", "score": 1})

    with pytest.raises(SchemaMismatchError, match="/users/u2/score: missing required field"):
        database.ref("users/u2").set({"name": "b"})

    assert fake_client.calls == [("set", "users/u1", {"name": "a", "score": 1})]
    assert fake_client.data == {"users": {"u1": {"name": "a", "score": 1}}}


def test_set_with_priority_checks_the_priority(database: TypedDatabase, fake_client) -> None:
    database.ref("counter").set_with_priority(3, "high")

    with pytest.raises(SchemaMismatchError, match="Priority"):
        database.ref("counter").set_with_priority(3, True)

    assert fake_client.calls == [("set_with_priority", "counter", 3, "high")]


def test_update_checks_each_relative_path(database: TypedDatabase, fake_client) -> None:
    fake_client.data = {"users": {"u1": {"name": "a", "score": 1, "nickname": "x"}}}

    database.ref("users").update({"u1/score": 2, "/u1/nickname": None, "u2": USER_VALUE})

    assert fake_client.calls[-1] == (
        "update",
        "users",
        {"u1/score": 2, "u1/nickname": None, "u2": USER_VALUE},
    )
    assert fake_client.data["users"]["u1"] == {"name": "a", "score": 2}


def test_update_rejects_mismatches_and_required_deletes(database: TypedDatabase) -> None:
    users = database.ref("users")

    with pytest.raises(SchemaMismatchError, match="expected number"):
        users.update({"u1/score": "high"})
    with pytest.raises(SchemaMismatchError, match="cannot be deleted"):
        users.update({"u1/name": None})
    with pytest.raises(InvalidPathError):
        users.update({"u1/age": 3})
    with pytest.raises(InvalidPathError):
        users.update({"u1//name": "a"})
    with pytest.raises(SchemaMismatchError, match="has no children"):
        database.ref("counter").update({"x": 1})


def test_update_allows_deleting_dynamic_children(database: TypedDatabase) -> None:
    assert database.ref("users").check_update({"u1": None}) == {"u1": None}
    assert database.ref("settings").check_update({"dark": None}) == {"dark": None}


def test_push_stores_under_a_generated_key(database: TypedDatabase, fake_client) -> None:
    pushed = database.ref("users").push({"name": "a", "score": 1})

    assert pushed.key == "-k1"
    assert pushed.done()
    child = pushed.result(timeout=1)
    assert isinstance(child, Reference)
    assert child.path == "users/-k1"
    assert child.shape == USER
    assert fake_client.data["users"]["-k1"] == {"name": "a", "score": 1}


def test_push_callbacks_receive_the_thenable(database: TypedDatabase) -> None:
    received = []
    pushed = database.ref("users").push({"name": "a", "score": 1})

    pushed.add_done_callback(received.append)

    assert received == [pushed]


def test_push_requires_a_keyed_container(database: TypedDatabase) -> None:
    with pytest.raises(SchemaMismatchError, match="missing required field"):
        database.ref("users").push({"name": "a"})
    with pytest.raises(SchemaMismatchError, match="does not accept generated keys"):
        database.ref("a").push({"b": 1})
    with pytest.raises(SchemaMismatchError, match="does not accept generated keys"):
        database.ref("tags").push("x")


def test_remove_is_passed_through(database: TypedDatabase, fake_client) -> None:
    fake_client.data = {"counter": 3}

    database.ref("counter").remove()

    assert fake_client.calls == [("remove", "counter")]
    assert fake_client.data == {}


def test_transaction_commits_validated_values(database: TypedDatabase, fake_client) -> None:
    fake_client.data = {"counter": 3}

    result = database.ref("counter").transaction(lambda current: (current or 0) + 1)

    assert result.committed
    assert result.snapshot.exists()
    assert result.snapshot.val() == 4


def test_transaction_sees_none_for_missing_values(database: TypedDatabase) -> None:
    seen = []

    def update(current):
        seen.append(current)
        return 1

    database.ref("counter").transaction(update)

    assert seen == [None]


def test_transaction_can_abort(database: TypedDatabase, fake_client) -> None:
    fake_client.data = {"counter": 3}

    result = database.ref("counter").transaction(lambda current: ABORT_TRANSACTION)

    assert not result.committed
    assert result.snapshot.val() == 3


def test_transaction_can_delete(database: TypedDatabase, fake_client) -> None:
    fake_client.data = {"counter": 3}

    result = database.ref("counter").transaction(lambda current: None)

    assert result.committed
    assert not result.snapshot.exists()
    assert result.snapshot.val() is None


def test_transaction_rejects_mismatched_results(database: TypedDatabase, fake_client) -> None:
    fake_client.data = {"counter": 3}

    with pytest.raises(SchemaMismatchError):
        database.ref("counter").transaction(lambda current: "four")

    assert fake_client.data == {"counter": 3}


def test_every_transaction_attempt_is_checked(database: TypedDatabase, fake_client) -> None:
    fake_client.transaction_attempts = 3
    attempts = []

    def update(current):
        attempts.append(current)
        return 1 if len(attempts) < 3 else "late"

    with pytest.raises(SchemaMismatchError):
        database.ref("counter").transaction(update)

    assert len(attempts) == 3


def test_store_operations_need_a_client() -> None:
    detached = TypedDatabase(schema=SCHEMA)
    reference = detached.ref("counter")

    reference.check_set(3)
    with pytest.raises(DetachedDatabaseError):
        reference.set(3)
    with pytest.raises(DetachedDatabaseError):
        reference.get()


def test_client_failures_propagate_unchanged(database: TypedDatabase, fake_client) -> None:
    def failing_set(path, value):
        raise ConnectionError("offline")

    fake_client.set = failing_set

    with pytest.raises(ConnectionError, match="offline"):
        database.ref("counter").set(1)
