"""Tests for the hub interface IR and the type expression parser."""

import pytest

from hubgen.errors import TypeSyntaxError
from hubgen.ir.models import (
    VOID,
    Array,
    CancellationMarker,
    MethodSignature,
    Named,
    Parameter,
    Primitive,
    StreamKind,
    StreamMarker,
    TaskMarker,
    display_name,
    walk,
)
from hubgen.ir.type_parser import parse_type


# --- IR Model Tests ---


def test_named_name_and_namespace():
    named = Named("App.Dtos.UserDto")
    assert named.name == "UserDto"
    assert named.namespace == "App.Dtos"
    assert Named("Plain").namespace == ""


def test_named_type_arguments_become_tuple():
    named = Named("App.Page", [Primitive("int")])
    assert named.type_arguments == (Primitive("int"),)
    assert hash(named) == hash(Named("App.Page", (Primitive("int"),)))


def test_wrappers_rejected_inside_named_and_array():
    with pytest.raises(ValueError):
        Named("App.Box", (TaskMarker(Primitive("int")),))
    with pytest.raises(ValueError):
        Array(StreamMarker(Primitive("int")))
    with pytest.raises(ValueError):
        Array(CancellationMarker())
    with pytest.raises(ValueError):
        StreamMarker(TaskMarker(Primitive("int")))
    with pytest.raises(ValueError):
        TaskMarker(TaskMarker(Primitive("int")))
    with pytest.raises(ValueError):
        TaskMarker(CancellationMarker())
    with pytest.raises(ValueError):
        StreamMarker(StreamMarker(Primitive("int")))


def test_duplicate_parameter_names_rejected():
    with pytest.raises(ValueError):
        MethodSignature(
            name="Send",
            parameters=[
                Parameter("message", Primitive("string")),
                Parameter("message", Primitive("int")),
            ],
        )


def test_walk_visits_nested_descriptors():
    user = Named("App.Dtos.User", external=True)
    descriptor = TaskMarker(Named("System.Collections.Generic.List", (Array(user),)))
    visited = list(walk(descriptor))
    assert user in visited
    assert visited[0] == descriptor
    assert len(visited) == 4


def test_display_name():
    assert display_name(Primitive("string")) == "string"
    assert display_name(TaskMarker(VOID)) == "System.Threading.Tasks.Task"
    assert display_name(TaskMarker(Primitive("int"))) == "System.Threading.Tasks.Task<int>"
    assert (
        display_name(StreamMarker(Primitive("int")))
        == "System.Collections.Generic.IAsyncEnumerable<int>"
    )
    assert (
        display_name(StreamMarker(Primitive("int"), StreamKind.CHANNEL_READER))
        == "System.Threading.Channels.ChannelReader<int>"
    )
    assert display_name(Array(Named("App.User"))) == "App.User[]"
    assert display_name(CancellationMarker()) == "System.Threading.CancellationToken"


# --- Type Parser Tests ---


def test_parse_primitives():
    assert parse_type("int") == Primitive("int")
    assert parse_type("String") == Primitive("string")
    assert parse_type("System.Guid") == Primitive("Guid")


def test_parse_task_shapes():
    assert parse_type("Task") == TaskMarker(VOID)
    assert parse_type("ValueTask<int>") == TaskMarker(Primitive("int"))
    assert parse_type("System.Threading.Tasks.Task<string>") == TaskMarker(Primitive("string"))


def test_parse_streams():
    assert parse_type("Task<IAsyncEnumerable<int>>") == TaskMarker(
        StreamMarker(Primitive("int"), StreamKind.ASYNC_SEQUENCE)
    )
    assert parse_type("ChannelReader<string>") == StreamMarker(
        Primitive("string"), StreamKind.CHANNEL_READER
    )


def test_parse_cancellation_token():
    assert parse_type("CancellationToken") == CancellationMarker()
    assert parse_type("System.Threading.CancellationToken") == CancellationMarker()


def test_parse_arrays_and_nullable():
    assert parse_type("int[]") == Array(Primitive("int"))
    assert parse_type("string[][]") == Array(Array(Primitive("string")))
    assert parse_type("int?") == Named("System.Nullable", (Primitive("int"),))


def test_parse_generic_named():
    parsed = parse_type("Dictionary<string, List<int>>")
    assert parsed == Named(
        "Dictionary",
        (Primitive("string"), Named("List", (Primitive("int"),))),
    )


def test_parse_marks_external_types():
    external = {"App.Dtos": ["UserDto"]}
    assert parse_type("UserDto", external) == Named("App.Dtos.UserDto", external=True)
    assert parse_type("App.Dtos.Other", external) == Named("App.Dtos.Other", external=True)
    assert parse_type("App.Internal.Thing", external) == Named("App.Internal.Thing")


def test_parse_rejects_bad_syntax():
    for text in [
        "",
        "List<int",
        "int>",
        "Task<int, string>",
        "List<Task<int>>",
        "a b",
        "IAsyncEnumerable<Task<int>>",
        "Task<Task<int>>",
        "Task<CancellationToken>",
        "IAsyncEnumerable<CancellationToken>",
    ]:
        with pytest.raises(TypeSyntaxError):
            parse_type(text)
