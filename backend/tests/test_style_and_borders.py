import pytest

from docdecl.core.emitter.borders import (
    EDGES,
    EdgeBorder,
    apply_border,
    border_spec_from_parameters,
    expand_border,
)
from docdecl.core.emitter.constants import ConstantTable
from docdecl.core.emitter.style import StyleAxis, StyleDelta, resolve_style
from docdecl.core.errors import UnknownConstant

from fakes import FakeBackend, FakeRange


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def constants(backend):
    return ConstantTable(backend.load_constant)


# ── Style resolution ────────────────────────────────────────────────

def test_negative_form_beats_positive(constants):
    assert resolve_style({"bold": True, "not bold": True}, constants).bold is False
    assert resolve_style({"b": True, "b-": True}, constants).bold is False
    assert resolve_style({"italics": True, "i-": True}, constants).italic is False


def test_short_and_long_forms(constants):
    delta = resolve_style({"b": True, "i": True, "font": "Arial", "size": 14}, constants)
    assert delta == StyleDelta(bold=True, italic=True, font="Arial", size=14)
    assert resolve_style({"not italic": True}, constants).italic is False


def test_unspecified_axes_stay_none(constants):
    delta = resolve_style({"label": "x"}, constants)
    assert delta.is_empty()
    assert list(delta.items()) == []


def test_align_resolves_through_para_align_namespace(constants):
    delta = resolve_style({"align": "center"}, constants)
    assert delta.align == "wdAlignParagraphCenter"
    assert list(delta.items()) == [(StyleAxis.ALIGN, "wdAlignParagraphCenter")]


def test_unknown_align_raises(constants):
    with pytest.raises(UnknownConstant, match="No Word constant sideways defined"):
        resolve_style({"align": "sideways"}, constants)


# ── Constant table ──────────────────────────────────────────────────

def test_alias_and_canonical_name_resolve_identically(constants):
    assert constants.resolve("single", "linestyle") == constants.resolve("wdLineStyleSingle")
    assert constants.resolve("0.5", "linewidth") == constants.resolve("0.5pt", "linewidth")
    assert constants.resolve("grey", "color") == constants.resolve("gray", "color")


def test_alias_only_applies_in_its_namespace(constants):
    with pytest.raises(UnknownConstant):
        constants.resolve("single")
    with pytest.raises(UnknownConstant):
        constants.resolve("single", "color")


def test_unknown_constant_carries_name(constants):
    with pytest.raises(UnknownConstant) as exc:
        constants.resolve("wdNoSuchThing", "linestyle")
    assert exc.value.name == "wdNoSuchThing"
    assert exc.value.namespace == "linestyle"


# ── Border expansion ────────────────────────────────────────────────

def test_string_spec_means_every_edge():
    edges = expand_border("double")
    assert list(edges) == list(EDGES)
    assert all(b == EdgeBorder(style="double") for b in edges.values())


def test_explicit_edge_survives_all_expansion():
    edges = expand_border({"all": "single", "top": "none"})
    assert edges["top"].style == "none"
    assert edges["bottom"].style == "single"
    assert edges["horizontal"].style == "single"


def test_outside_fills_only_outer_edges():
    edges = expand_border({"outside": {"style": "double", "color": "red"}})
    assert set(edges) == {"left", "right", "top", "bottom"}
    assert edges["left"] == EdgeBorder(style="double", color="red", width="0.5pt")


def test_explicit_outside_beats_all():
    edges = expand_border({"all": "single", "outside": "double"})
    assert edges["left"].style == "double"
    assert edges["vertical"].style == "single"


def test_empty_spec_expands_to_nothing():
    assert expand_border(None) == {}
    assert expand_border({}) == {}


def test_border_edge_parameters_merge_over_border():
    spec = border_spec_from_parameters({"border": "single", "border-top": "double", "bold": True})
    edges = expand_border(spec)
    assert edges["top"].style == "double"
    assert edges["left"].style == "single"


def test_unknown_border_parameter_is_ignored(caplog):
    assert border_spec_from_parameters({"border-diagonal": "single"}) is None
    assert "border-diagonal" in caplog.text


# ── Border application ──────────────────────────────────────────────

def test_apply_border_sets_style_color_width(backend, constants):
    target = FakeRange(backend.log, "table")
    apply_border(target, {"top": {"style": "single", "color": "red", "width": "1.5pt"}}, constants)
    assert backend.log == [
        ("border", "table", "wdBorderTop", "wdLineStyleSingle", "wdColorRed", "wdLineWidth150pt"),
    ]


def test_none_edge_never_resolves_color_or_width(backend, constants):
    target = FakeRange(backend.log, "table")
    apply_border(target, {"all": {"style": "none", "color": "bogus", "width": "bogus"}}, constants)
    assert len(backend.log) == len(EDGES)
    assert all(entry[4:] == (None, None) for entry in backend.log)
    assert "bogus" not in backend.lookups


def test_unknown_style_fails_before_any_border_is_set(backend, constants):
    target = FakeRange(backend.log, "table")
    with pytest.raises(UnknownConstant):
        apply_border(target, "zigzag", constants)
    assert backend.log == []


def test_unknown_style_on_later_edge_leaves_earlier_edges_unset(backend, constants):
    target = FakeRange(backend.log, "table")
    with pytest.raises(UnknownConstant, match="zigzag"):
        apply_border(target, {"left": "single", "top": "zigzag"}, constants)
    assert backend.log == []


def test_unknown_width_on_later_edge_leaves_target_untouched(backend, constants):
    target = FakeRange(backend.log, "row1")
    with pytest.raises(UnknownConstant):
        apply_border(target, {"left": "double", "bottom": {"style": "single", "width": "7pt"}}, constants)
    assert backend.log == []
