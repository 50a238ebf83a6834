"""Unit tests for the inline edit surface."""

import pytest

from contrato.editor.models import Capsule
from contrato.editor.surface import InlineEditSurface, NodeState, UnknownNodeError

TEMPLATE = "Arrendador: {{ nombre }}. RUT: {{ rut }}. Firma: {{ nombre }}"
VARIABLES = ["nombre", "rut"]


@pytest.fixture
def changes():
    return []


@pytest.fixture
def surface(changes):
    surface = InlineEditSurface(on_form_change=changes.append)
    surface.sync(TEMPLATE, VARIABLES, {})
    return surface


# =============================================================================
# Tree Construction Tests
# =============================================================================


class TestSurfaceTree:
    """Test suite for building the node tree."""

    def test_nodes_in_document_order(self, surface):
        assert [node.node_id for node in surface.nodes] == ["node-0", "node-1", "node-2"]
        assert [node.variable for node in surface.nodes] == ["nombre", "rut", "nombre"]
        assert len(surface.nodes_for("nombre")) == 2

    def test_initial_empty_state(self, surface):
        node = surface.node("node-0")

        assert node.state is NodeState.IDLE_EMPTY
        assert node.text == "[Nombre]"
        assert node.classes == {"empty"}

    def test_initial_filled_state(self, changes):
        surface = InlineEditSurface(on_form_change=changes.append)
        surface.sync(TEMPLATE, VARIABLES, {"rut": "12345678-5"})

        node = surface.node("node-1")
        assert node.state is NodeState.IDLE_FILLED
        assert node.text == "12345678-5"

    def test_html_round_trip(self, surface):
        assert surface.to_html() == (
            "Arrendador: "
            '<span class="variable empty" data-variable="nombre" contenteditable="true">[Nombre]</span>'
            ". RUT: "
            '<span class="variable empty" data-variable="rut" contenteditable="true">[Rut]</span>'
            ". Firma: "
            '<span class="variable empty" data-variable="nombre" contenteditable="true">[Nombre]</span>'
        )

    def test_template_without_placeholders_is_read_only(self, changes):
        surface = InlineEditSurface(on_form_change=changes.append)
        surface.sync("Texto sin variables", [], {})

        assert surface.is_read_only is True
        assert surface.has_content is True
        assert surface.to_html() == "Texto sin variables"

    def test_empty_template_has_no_content(self, changes):
        surface = InlineEditSurface(on_form_change=changes.append)
        surface.sync("", VARIABLES, {})

        assert surface.has_content is False
        assert surface.nodes == []

    def test_unknown_node(self, surface):
        with pytest.raises(UnknownNodeError):
            surface.focus("node-99")

        with pytest.raises(KeyError):
            surface.blur("missing")


# =============================================================================
# Event Tests
# =============================================================================


class TestSurfaceEvents:
    """Test suite for focus, input and blur handling."""

    def test_focus_clears_placeholder_label(self, surface):
        node = surface.focus("node-0")

        assert node.text == ""
        assert node.state is NodeState.EDITING
        assert "active" in node.classes
        assert surface.active_field == "nombre"

    def test_focus_keeps_committed_value(self, changes):
        surface = InlineEditSurface(on_form_change=changes.append)
        surface.sync(TEMPLATE, VARIABLES, {"nombre": "Ana"})

        node = surface.focus("node-0")

        assert node.text == "Ana"

    def test_focus_keeps_value_equal_to_label(self, changes):
        surface = InlineEditSurface(on_form_change=changes.append)
        surface.sync(TEMPLATE, VARIABLES, {"nombre": "[Nombre]"})

        node = surface.focus("node-0")
        surface.blur("node-0")

        assert node.text == "[Nombre]"
        assert node.state is NodeState.IDLE_FILLED
        assert changes == [{"nombre": "[Nombre]"}]

    def test_input_does_not_commit(self, surface, changes):
        surface.focus("node-1")
        surface.input("node-1", "1")
        node = surface.input("node-1", "12345678-5")

        assert changes == []
        assert surface.form_data == {}
        assert node.classes == {"filled", "active"}

    def test_input_toggles_empty_look(self, surface):
        surface.focus("node-1")
        surface.input("node-1", "12")

        node = surface.input("node-1", "  ")

        assert node.classes == {"empty", "active"}
        assert node.state is NodeState.EDITING

    def test_blur_commits_trimmed_value_once(self, surface, changes):
        surface.focus("node-1")
        surface.input("node-1", "  12345678-5  ")

        node = surface.blur("node-1")

        assert changes == [{"rut": "12345678-5"}]
        assert node.state is NodeState.IDLE_FILLED
        assert node.classes == {"filled"}
        assert surface.active_field is None

    def test_blur_sends_whole_form_data(self, changes):
        surface = InlineEditSurface(on_form_change=changes.append)
        surface.sync(TEMPLATE, VARIABLES, {"nombre": "Ana", "extra": "x"})

        surface.focus("node-1")
        surface.input("node-1", "1-9")
        surface.blur("node-1")

        assert changes == [{"nombre": "Ana", "extra": "x", "rut": "1-9"}]

    def test_empty_commit_restores_placeholder(self, changes):
        surface = InlineEditSurface(on_form_change=changes.append)
        surface.sync(TEMPLATE, VARIABLES, {"nombre": "Ana"})

        surface.focus("node-0")
        surface.input("node-0", "")
        node = surface.blur("node-0")

        assert changes == [{"nombre": ""}]
        assert node.text == "[Nombre]"
        assert node.classes == {"empty"}
        assert node.state is NodeState.IDLE_EMPTY

    def test_blur_updates_other_occurrences(self, surface):
        surface.focus("node-0")
        surface.input("node-0", "Ana")
        surface.blur("node-0")

        other = surface.node("node-2")
        assert other.text == "Ana"
        assert other.state is NodeState.IDLE_FILLED

    def test_blur_without_focus_is_noop(self, surface, changes):
        node = surface.blur("node-0")

        assert changes == []
        assert node.state is NodeState.IDLE_EMPTY

    def test_focus_elsewhere_commits_previous_field(self, surface, changes):
        surface.focus("node-0")
        surface.input("node-0", "Ana")

        surface.focus("node-1")

        assert changes == [{"nombre": "Ana"}]
        assert surface.node("node-0").is_editing is False
        assert surface.active_field == "rut"

    def test_input_without_focus_enters_editing(self, surface, changes):
        node = surface.input("node-0", "Ana")

        assert node.state is NodeState.EDITING
        assert node.text == "Ana"
        assert changes == []

    def test_commit_active(self, surface, changes):
        assert surface.commit_active() is None

        surface.focus("node-0")
        surface.input("node-0", "Ana")
        node = surface.commit_active()

        assert node is surface.node("node-0")
        assert changes == [{"nombre": "Ana"}]

    def test_html_shows_uncommitted_text(self, surface):
        surface.focus("node-1")
        surface.input("node-1", "123")

        assert (
            '<span class="variable filled active" data-variable="rut" '
            'contenteditable="true">123</span>'
        ) in surface.to_html()


# =============================================================================
# Re-render Boundary Tests
# =============================================================================


class TestSurfaceRebuild:
    """Test suite for the rebuild boundary."""

    def test_form_data_change_keeps_nodes(self, surface):
        before = surface.nodes
        mutations = surface.mutation_count

        rebuilt = surface.sync(TEMPLATE, VARIABLES, {"nombre": "Ana"})

        assert rebuilt is False
        assert surface.render_count == 1
        assert all(a is b for a, b in zip(before, surface.nodes))
        assert before[0].text == "Ana"
        assert before[2].text == "Ana"
        assert surface.mutation_count == mutations + 2

    def test_same_state_sync_changes_nothing(self, surface):
        mutations = surface.mutation_count

        surface.sync(TEMPLATE, VARIABLES, {})

        assert surface.render_count == 1
        assert surface.mutation_count == mutations

    def test_editing_node_is_not_overwritten(self, surface):
        surface.focus("node-0")
        surface.input("node-0", "An")

        surface.sync(TEMPLATE, VARIABLES, {"rut": "1-9"})

        assert surface.node("node-0").text == "An"
        assert surface.node("node-0").is_editing is True
        assert surface.node("node-1").text == "1-9"

    def test_selection_change_rebuilds(self, surface):
        capsules = [Capsule(id=1, title="Mascotas", legal_text="Mascota: {{ nombre }}")]
        before = surface.nodes

        rebuilt = surface.sync(TEMPLATE, VARIABLES, {}, selected_capsule_ids=[1], capsules=capsules)

        assert rebuilt is True
        assert surface.render_count == 2
        assert len(surface.nodes) == 4
        assert all(node not in before for node in surface.nodes)

    def test_template_change_rebuilds(self, surface):
        assert surface.sync(TEMPLATE + " Fin", VARIABLES, {}) is True
        assert surface.render_count == 2

    def test_rebuild_discards_uncommitted_edit(self, surface, changes):
        surface.focus("node-0")
        surface.input("node-0", "Ana")

        surface.sync(TEMPLATE + " Fin", VARIABLES, {})

        assert surface.active_field is None
        assert changes == []
        assert all(not node.is_editing for node in surface.nodes)

    def test_value_with_token_syntax_stays_literal(self, changes):
        surface = InlineEditSurface(on_form_change=changes.append)
        surface.sync("A {{ x }} B {{ y }}", ["x", "y"], {"x": "{{ y }}", "y": "Ana"})

        assert [node.variable for node in surface.nodes] == ["x", "y"]
        assert surface.node("node-0").text == "{{ y }}"
        assert surface.node("node-1").text == "Ana"
        assert "&#123;&#123; y &#125;&#125;" in surface.to_html()

        surface.sync("A {{ x }} B {{ y }}.", ["x", "y"], {"x": "{{ y }}", "y": "Ana"})

        assert [node.text for node in surface.nodes] == ["{{ y }}", "Ana"]

    def test_typed_token_syntax_round_trips(self, surface, changes):
        surface.focus("node-1")
        surface.input("node-1", "{{ nombre }}")
        surface.blur("node-1")

        surface.sync(TEMPLATE + " Fin", VARIABLES, changes[-1])

        assert [node.variable for node in surface.nodes] == ["nombre", "rut", "nombre"]
        assert surface.node("node-1").text == "{{ nombre }}"
