"""Tests for loading interface definitions from YAML."""

import tempfile
from pathlib import Path

import pytest
import yaml

from hubgen.config import TranspileOptions
from hubgen.errors import DefinitionError
from hubgen.ir.loader import load_definitions, parse_definitions, select_interfaces
from hubgen.ir.models import CancellationMarker, InterfaceDeclaration, Named, Primitive, TaskMarker


SAMPLE = {
    "external_types": {"App.Dtos": ["UserDto"]},
    "interfaces": [
        {
            "name": "IChatHub",
            "module": "App.Hubs",
            "attributes": ["Hub"],
            "documentation": "<summary>Chat hub.</summary>",
            "methods": [
                {
                    "name": "SendAsync",
                    "parameters": {"message": "string", "ct": "CancellationToken"},
                    "returns": "Task",
                },
                {
                    "name": "GetUser",
                    "parameters": [{"id": "Guid"}],
                    "returns": "Task<UserDto>",
                },
            ],
        }
    ],
}


def test_load_definitions_from_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "hubs.yml"
        path.write_text(yaml.dump(SAMPLE, sort_keys=False))

        defs = load_definitions(path)

    assert defs.external_types == {"App.Dtos": ["UserDto"]}
    assert len(defs.interfaces) == 1
    hub = defs.interfaces[0]
    assert hub.name == "IChatHub"
    assert hub.module == "App.Hubs"
    assert hub.attributes == ["Hub"]

    send, get_user = hub.methods
    assert [p.name for p in send.parameters] == ["message", "ct"]
    assert send.parameters[1].type == CancellationMarker()
    assert get_user.parameters[0].type == Primitive("Guid")
    assert get_user.return_type == TaskMarker(Named("App.Dtos.UserDto", external=True))


def test_missing_return_defaults_to_void():
    defs = parse_definitions(
        {"interfaces": [{"name": "IHub", "module": "M", "methods": [{"name": "Ping"}]}]}
    )
    assert defs.interfaces[0].methods[0].return_type == Primitive("void")


def test_missing_module_is_an_error():
    with pytest.raises(DefinitionError, match="module"):
        parse_definitions({"interfaces": [{"name": "IHub"}]})


def test_bad_type_names_the_method():
    data = {
        "interfaces": [
            {
                "name": "IHub",
                "module": "M",
                "methods": [{"name": "Broken", "returns": "List<int"}],
            }
        ]
    }
    with pytest.raises(DefinitionError, match="Broken"):
        parse_definitions(data)


def test_invalid_yaml_is_a_definition_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "broken.yml"
        path.write_text("interfaces: [unclosed")
        with pytest.raises(DefinitionError):
            load_definitions(path)


# --- Selection ---


def _interfaces():
    return [
        InterfaceDeclaration(name="IChatHub", module="App", attributes=["Hub"]),
        InterfaceDeclaration(name="IPlain", module="App"),
        InterfaceDeclaration(name="IShared", module="Lib", attributes=["Hub"], referenced=True),
    ]


def test_select_applies_attribute_filter():
    selected = select_interfaces(_interfaces(), TranspileOptions())
    assert [i.name for i in selected] == ["IChatHub"]


def test_select_without_attribute_filter():
    options = TranspileOptions(attribute_filtering=False)
    selected = select_interfaces(_interfaces(), options)
    assert [i.name for i in selected] == ["IChatHub", "IPlain"]


def test_select_includes_referenced_modules_when_enabled():
    options = TranspileOptions(referenced_modules=True)
    selected = select_interfaces(_interfaces(), options)
    assert [i.name for i in selected] == ["IChatHub", "IShared"]
