import json

import pytest

from docdecl.core.emitter.table_builder import TableLayout, parse_width, plan_table
from docdecl.core.errors import MalformedStructure
from docdecl.core.nodes import NodeKind
from docdecl.core.tree_loader import load_tree, node_from_dict


def test_parameters_accept_flags_and_mappings():
    node = node_from_dict({
        "kind": "para",
        "label": "Title",
        "parameters": ["bold", {"align": "center"}, "i-"],
    })
    assert node.kind == NodeKind.PARA
    assert node.parameters == {"bold": True, "align": "center", "i-": True}


def test_unknown_kind_is_rejected():
    with pytest.raises(MalformedStructure, match="Unknown node kind"):
        node_from_dict({"kind": "heading"})


def test_bad_parameter_entry_is_rejected():
    with pytest.raises(MalformedStructure):
        node_from_dict({"kind": "text", "parameters": [42]})


def test_children_keep_declared_order():
    node = node_from_dict({
        "kind": "table",
        "children": [
            {"kind": "row", "children": [{"kind": "cell", "label": "a"}]},
            {"kind": "column"},
            {"kind": "row", "children": [{"kind": "cell", "label": "b"}]},
        ],
    })
    assert [c.kind for c in node.nodes()] == [NodeKind.ROW, NodeKind.COLUMN, NodeKind.ROW]
    assert [r.find(NodeKind.CELL).label for r in node.nodes("row")] == ["a", "b"]
    assert node.misplaced_children() == []


def test_load_tree_reads_json(tmp_path):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps({
        "kind": "document",
        "label": "out.docx",
        "children": [{"kind": "text", "body": "Hello"}],
    }), encoding="utf-8")

    tree = load_tree(path)
    assert tree.label == "out.docx"
    assert tree.find(NodeKind.TEXT).body == "Hello"


def test_plan_table_counts_first_row_cells_only():
    node = node_from_dict({
        "kind": "table",
        "children": [
            {"kind": "row", "children": [{"kind": "cell"}, {"kind": "cell"}]},
            {"kind": "row", "children": [{"kind": "cell"}] * 4},
        ],
    })
    assert plan_table(node) == TableLayout(rows=2, columns=2)
    assert plan_table(node_from_dict({"kind": "table"})).is_empty


@pytest.mark.parametrize("value, expected", [
    (72, 72.0),
    ("90", 90.0),
    ("90pt", 90.0),
    ("1.5in", 108.0),
    (" .5 IN ", 36.0),
    ("wide", None),
    ("10cm", None),
])
def test_parse_width(value, expected):
    assert parse_width(value) == expected
