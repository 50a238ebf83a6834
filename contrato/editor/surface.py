"""Inline edit surface.

Binds rendered contract HTML into a retained tree of static segments and
placeholder nodes, and keeps FormData eventually consistent with on-screen
edits.

The tree is rebuilt only when the template or the capsule selection changes.
Typing, focus and FormData updates mutate existing nodes in place, so a host
that keeps references to nodes (cursor, IME state, undo stack) never sees
them replaced mid-edit. Values are committed on blur, never on input.
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from html import unescape
from typing import Any

from contrato.editor.models import Capsule, ClauseNumbering, SignerConfig
from contrato.editor.placeholders import placeholder_label
from contrato.strategies.renderers.inline import (
    ACTIVE_CLASS,
    EMPTY_CLASS,
    FILLED_CLASS,
    PLACEHOLDER_RE,
    InlineRenderer,
    placeholder_span,
)

logger = logging.getLogger(__name__)

FormChangeCallback = Callable[[dict[str, str]], None]


class UnknownNodeError(KeyError):
    """Raised when an event targets a node that is not in the current tree."""


class NodeState(str, Enum):
    """Lifecycle of a placeholder node."""

    IDLE_EMPTY = "idle_empty"
    IDLE_FILLED = "idle_filled"
    EDITING = "editing"


@dataclass(eq=False)
class PlaceholderNode:
    """One editable placeholder element in the rendered document."""

    node_id: str
    variable: str
    text: str
    state: NodeState
    classes: set[str] = field(default_factory=set)

    @property
    def label(self) -> str:
        return placeholder_label(self.variable)

    @property
    def is_editing(self) -> bool:
        return self.state is NodeState.EDITING

    def show_value(self, value: str) -> None:
        """Put the node in its idle state for ``value``."""
        if value.strip():
            self.text = value
            self.state = NodeState.IDLE_FILLED
            self.classes = {FILLED_CLASS}
        else:
            self.text = self.label
            self.state = NodeState.IDLE_EMPTY
            self.classes = {EMPTY_CLASS}

    def to_html(self) -> str:
        visual = FILLED_CLASS if FILLED_CLASS in self.classes else EMPTY_CLASS
        return placeholder_span(self.variable, self.text, visual, ACTIVE_CLASS in self.classes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_id": self.node_id,
            "variable": self.variable,
            "text": self.text,
            "state": self.state.value,
            "classes": sorted(self.classes),
        }


@dataclass(frozen=True)
class _Structure:
    """Inputs whose change forces a rebuild of the node tree."""

    template: str
    selected_capsule_ids: tuple[int, ...]
    variables: tuple[str, ...]
    capsules: tuple[Capsule, ...]
    clause_numbering: tuple[ClauseNumbering, ...]
    signers: tuple[SignerConfig, ...]


class InlineEditSurface:
    """Editable view over the inline renderer's output.

    Args:
        on_form_change: Called with the whole next FormData map once per
            committed edit.
        renderer: Renderer producing the editable markup.
    """

    def __init__(
        self,
        on_form_change: FormChangeCallback,
        renderer: InlineRenderer | None = None,
    ) -> None:
        self._on_form_change = on_form_change
        self._renderer = renderer or InlineRenderer()
        self._structure: _Structure | None = None
        self._form_data: dict[str, str] = {}
        self._segments: list[str | PlaceholderNode] = []
        self._nodes: dict[str, PlaceholderNode] = {}
        self.has_content = False
        self.active_field: str | None = None
        self.render_count = 0
        self.mutation_count = 0

    # =========================================================================
    # Host synchronization
    # =========================================================================

    def sync(
        self,
        template: str,
        variables: Sequence[str],
        form_data: Mapping[str, str],
        selected_capsule_ids: Iterable[int] = (),
        capsules: Sequence[Capsule] = (),
        clause_numbering: Sequence[ClauseNumbering] = (),
        signers: Sequence[SignerConfig] = (),
    ) -> bool:
        """Bring the surface up to date with the host's state.

        Returns:
            True if the node tree was rebuilt.
        """
        self._form_data = dict(form_data)
        structure = _Structure(
            template=template or "",
            selected_capsule_ids=tuple(sorted(set(selected_capsule_ids))),
            variables=tuple(variables),
            capsules=tuple(capsules),
            clause_numbering=tuple(clause_numbering),
            signers=tuple(signers),
        )

        if structure == self._structure:
            self._overlay_values()
            return False

        if self.active_field is not None:
            logger.warning(
                f"Rebuilding while '{self.active_field}' is being edited; uncommitted text is discarded"
            )
            self.active_field = None

        self._structure = structure
        self._rebuild()
        return True

    def _rebuild(self) -> None:
        structure = self._structure
        result = self._renderer.render(
            structure.template,
            structure.variables,
            self._form_data,
            selected_capsule_ids=structure.selected_capsule_ids,
            capsules=structure.capsules,
            clause_numbering=structure.clause_numbering,
            signers=structure.signers,
        )

        segments: list[str | PlaceholderNode] = []
        nodes: dict[str, PlaceholderNode] = {}
        position = 0
        for match in PLACEHOLDER_RE.finditer(result.html):
            if match.start() > position:
                segments.append(result.html[position:match.start()])
            node = self._node_from_match(match, len(nodes))
            nodes[node.node_id] = node
            segments.append(node)
            position = match.end()
        if position < len(result.html):
            segments.append(result.html[position:])

        self._segments = segments
        self._nodes = nodes
        self.has_content = result.has_content
        self.render_count += 1
        logger.debug(f"Surface rebuilt: {len(nodes)} placeholder nodes")

    @staticmethod
    def _node_from_match(match: re.Match[str], index: int) -> PlaceholderNode:
        variable = unescape(match.group("variable"))
        node = PlaceholderNode(
            node_id=f"node-{index}",
            variable=variable,
            text=unescape(match.group("text")),
            state=NodeState.IDLE_FILLED if match.group("state") == FILLED_CLASS else NodeState.IDLE_EMPTY,
            classes={match.group("state")},
        )
        return node

    def _overlay_values(self, skip: PlaceholderNode | None = None) -> None:
        """Write FormData into idle nodes in place."""
        for node in self._nodes.values():
            if node is skip or node.is_editing:
                continue
            value = self._form_data.get(node.variable) or ""
            before = (node.text, node.state)
            node.show_value(value)
            if (node.text, node.state) != before:
                self.mutation_count += 1

    # =========================================================================
    # Events
    # =========================================================================

    def focus(self, node_id: str) -> PlaceholderNode:
        """Enter editing; the label of an empty placeholder is cleared."""
        node = self.node(node_id)
        for other in self._nodes.values():
            if other is not node and other.is_editing:
                self.blur(other.node_id)

        if node.is_editing:
            return node

        if node.state is NodeState.IDLE_EMPTY:
            node.text = ""
        node.state = NodeState.EDITING
        node.classes.add(ACTIVE_CLASS)
        self.active_field = node.variable
        self.mutation_count += 1
        return node

    def input(self, node_id: str, text: str) -> PlaceholderNode:
        """Record typed text. Only the filled/empty look changes; nothing is committed."""
        node = self.node(node_id)
        if not node.is_editing:
            self.focus(node_id)

        node.text = text
        if text.strip():
            node.classes.discard(EMPTY_CLASS)
            node.classes.add(FILLED_CLASS)
        else:
            node.classes.discard(FILLED_CLASS)
            node.classes.add(EMPTY_CLASS)
        self.mutation_count += 1
        return node

    def blur(self, node_id: str) -> PlaceholderNode:
        """Commit the node's trimmed text into FormData and leave editing."""
        node = self.node(node_id)
        if not node.is_editing:
            return node

        value = node.text.strip()
        next_form_data = {**self._form_data, node.variable: value}
        self._form_data = next_form_data

        if value:
            node.state = NodeState.IDLE_FILLED
            node.classes = {FILLED_CLASS}
        else:
            node.text = node.label
            node.state = NodeState.IDLE_EMPTY
            node.classes = {EMPTY_CLASS}
        self.active_field = None
        self.mutation_count += 1

        # Other occurrences of the same variable show the committed value.
        self._overlay_values(skip=node)

        logger.debug(f"Committed '{node.variable}' from {node.node_id}")
        self._on_form_change(dict(next_form_data))
        return node

    def commit_active(self) -> PlaceholderNode | None:
        """Blur the node being edited, if any."""
        for node in self._nodes.values():
            if node.is_editing:
                return self.blur(node.node_id)
        return None

    # =========================================================================
    # Inspection
    # =========================================================================

    def node(self, node_id: str) -> PlaceholderNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    @property
    def nodes(self) -> list[PlaceholderNode]:
        return list(self._nodes.values())

    def nodes_for(self, variable: str) -> list[PlaceholderNode]:
        return [node for node in self._nodes.values() if node.variable == variable]

    @property
    def is_read_only(self) -> bool:
        """True when the document has no placeholders to edit."""
        return not self._nodes

    @property
    def form_data(self) -> dict[str, str]:
        return dict(self._form_data)

    def to_html(self) -> str:
        """Serialize the current tree, including uncommitted edits."""
        return "".join(
            segment if isinstance(segment, str) else segment.to_html()
            for segment in self._segments
        )
