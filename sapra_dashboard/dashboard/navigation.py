"""
Navigation tree and view titles.

Streamlit-free helpers behind the sidebar: the All Systems -> System ->
Subsystem tree (with search), the selection each node produces, and the
header title for a selection.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from ..core.config import ALL_SYSTEMS_LABEL
from ..models.data_models import AllSystems, SubsystemScope, SystemScope

KIND_ALL = "all"
KIND_SYSTEM = "system"
KIND_SUBSYSTEM = "subsystem"


@dataclass(frozen=True)
class TreeNode:
    id: str
    kind: str
    display_name: str
    subtitle: str = ""
    parent_id: Optional[str] = None
    children: Tuple["TreeNode", ...] = ()
    expanded: bool = False

    def to_selection(self):
        """The selection a click on this node produces."""
        if self.kind == KIND_SYSTEM:
            return SystemScope(system_id=self.id, name=self.id)
        if self.kind == KIND_SUBSYSTEM:
            return SubsystemScope(subsystem_id=self.id, system_id=self.parent_id, name=self.id)
        return AllSystems()

    def matches(self, term) -> bool:
        return term in self.display_name.lower() or term in self.subtitle.lower()


def _filter_nodes(nodes, term):
    kept = []
    for node in nodes:
        children = _filter_nodes(node.children, term)
        if node.matches(term) or children:
            kept.append(replace(node, children=tuple(children), expanded=True))
    return kept


def build_tree(hierarchy, search="", selection=None):
    """Navigation tree for ``hierarchy``.

    Without a search term the result is a single root node holding every
    system in feed order, each with its subsystem references.  With a term
    (case-insensitive substring of a node's id or name) only matching nodes
    and their ancestors survive, expanded; a list with no root means nothing
    matched.
    """
    selection = selection or AllSystems()
    selected_system = None
    if isinstance(selection, SystemScope):
        selected_system = selection.system_id
    elif isinstance(selection, SubsystemScope):
        selected_system = selection.system_id

    systems = tuple(
        TreeNode(
            id=system.id,
            kind=KIND_SYSTEM,
            display_name=system.id,
            subtitle=system.name,
            children=tuple(
                TreeNode(
                    id=ref.id,
                    kind=KIND_SUBSYSTEM,
                    display_name=ref.id,
                    subtitle=ref.name,
                    parent_id=system.id,
                )
                for ref in system.subs
            ),
            expanded=system.id == selected_system,
        )
        for system in hierarchy.systems.values()
    )
    root = TreeNode(id=KIND_ALL, kind=KIND_ALL, display_name=ALL_SYSTEMS_LABEL,
                    children=systems, expanded=True)

    term = (search or "").strip().lower()
    if not term:
        return [root]

    children = _filter_nodes(systems, term)
    if root.matches(term) or children:
        return [replace(root, children=tuple(children))]
    return []


def view_title(selection, hierarchy) -> str:
    """Header text for the current selection."""
    if isinstance(selection, SystemScope):
        system = hierarchy.system(selection.system_id)
        name = system.name if system else selection.label
        return f"System: {selection.system_id} - {name}"
    if isinstance(selection, SubsystemScope):
        parent_id = selection.system_id
        system = hierarchy.system(parent_id)
        system_name = system.name if system else parent_id
        subsystem = hierarchy.subsystem(selection.subsystem_id)
        sub_name = subsystem.name if subsystem else selection.label
        return (f"System: {parent_id} - {system_name} / "
                f"Subsystem: {selection.subsystem_id} - {sub_name}")
    return "Dashboard"


def is_selected(node, selection) -> bool:
    if node.kind == KIND_ALL:
        return isinstance(selection, AllSystems)
    if node.kind == KIND_SYSTEM:
        return isinstance(selection, SystemScope) and selection.system_id == node.id
    return isinstance(selection, SubsystemScope) and selection.subsystem_id == node.id
