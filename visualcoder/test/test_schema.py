import json

import pytest

from visualcoder.compiler.schema import SchemaError, unwrap, validate, validate_file


def _graph(**overrides):
    data = {
        "nodes": [
            {"id": "start", "type": "input", "data": {}},
            {"id": "p", "type": "print", "data": {"value": "1"}},
        ],
        "edges": [{"id": "e1", "source": "start", "target": "p", "sourceHandle": None}],
    }
    data.update(overrides)
    return data


def test_valid_graph_passes():
    validate(_graph())


def test_saved_project_wrapper_is_unwrapped(tmp_path):
    path = tmp_path / "project.json"
    path.write_text(json.dumps({"diagram": _graph(), "name": "demo"}), encoding="utf-8")

    data = validate_file(path)

    assert [n["id"] for n in data["nodes"]] == ["start", "p"]
    assert unwrap({"nodes": []}) == {"nodes": []}


@pytest.mark.parametrize("data, message", [
    ([], "JSON object"),
    ({"nodes": []}, "missing required field 'edges'"),
    ({"nodes": {}, "edges": []}, "nodes must be a list"),
    ({"nodes": [{"id": "a"}], "edges": []}, "missing required field 'type'"),
    ({"nodes": [{"id": 1, "type": "print"}], "edges": []}, "id must be a string"),
    ({"nodes": [{"id": "a", "type": "print", "data": []}], "edges": []}, "data must be an object"),
])
def test_structural_errors(data, message):
    with pytest.raises(SchemaError, match=message):
        validate(data)


def test_duplicate_node_ids():
    nodes = [{"id": "a", "type": "print"}, {"id": "a", "type": "print"}]
    with pytest.raises(SchemaError, match="duplicate node id 'a'"):
        validate({"nodes": nodes, "edges": []})


def test_edge_must_reference_known_nodes():
    with pytest.raises(SchemaError, match="target 'ghost' not found"):
        validate(_graph(edges=[{"source": "start", "target": "ghost"}]))


def test_edge_handle_must_be_string():
    with pytest.raises(SchemaError, match="sourceHandle must be a string or null"):
        validate(_graph(edges=[{"source": "start", "target": "p", "sourceHandle": 3}]))


def test_unknown_type_warns_by_default():
    data = _graph()
    data["nodes"].append({"id": "u", "type": "teleport"})

    with pytest.warns(UserWarning, match="unknown node type 'teleport'"):
        validate(data)


def test_unknown_type_is_an_error_when_strict():
    data = _graph()
    data["nodes"].append({"id": "u", "type": "teleport"})

    with pytest.raises(SchemaError, match="teleport"):
        validate(data, strict=True)


def test_array_nodes_are_known():
    data = _graph()
    data["nodes"].append({"id": "a", "type": "array", "data": {"declarationType": "size"}})
    validate(data, strict=True)
