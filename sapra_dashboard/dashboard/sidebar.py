"""
SAPRA Dashboard - Navigation Sidebar
====================================

Renders the system tree in the Streamlit sidebar and is the only producer
of selection changes.

Layout
------
1. Title + search box ("Search system...").
2. "All Systems" button.
3. One expander per system: a button for the system itself followed by one
   button per subsystem.  The expander of the selected system (or of the
   parent of the selected subsystem) starts open, as does every expander
   while a search is active.
4. "Reload data" button that clears the feed cache.

A click calls ``set_selection`` and reruns the script so every section of the
page is recomputed from the new selection.
"""

import streamlit as st

from .navigation import build_tree, is_selected
from .state import get_selection, reload_state, set_selection


def _select(node):
    set_selection(node.to_selection())


def _node_label(node):
    return f"{node.display_name} · {node.subtitle}" if node.subtitle else node.display_name


def render_sidebar(state):
    """Draw the navigation tree for ``state``."""
    selection = get_selection()

    with st.sidebar:
        st.markdown("### SAPRA Dashboard")
        st.caption("Smart Access to Project Activities")

        search = st.text_input("Search system...", key='sidebar_search',
                               placeholder="System or subsystem id / name")
        tree = build_tree(state.hierarchy, search=search, selection=selection)

        if not tree:
            st.info("No matching items found.")
        for root in tree:
            st.button(
                root.display_name,
                key='nav_all',
                type='primary' if is_selected(root, selection) else 'secondary',
                on_click=_select, args=(root,),
                use_container_width=True,
            )
            for system in root.children:
                with st.expander(_node_label(system), expanded=system.expanded):
                    st.button(
                        f"Whole system {system.display_name}",
                        key=f"nav_sys_{system.id}",
                        type='primary' if is_selected(system, selection) else 'secondary',
                        on_click=_select, args=(system,),
                        use_container_width=True,
                    )
                    for sub in system.children:
                        st.button(
                            _node_label(sub),
                            key=f"nav_sub_{system.id}_{sub.id}",
                            type='primary' if is_selected(sub, selection) else 'secondary',
                            on_click=_select, args=(sub,),
                            use_container_width=True,
                        )

        st.markdown("---")
        if st.button("Reload data", key='nav_reload'):
            reload_state()
            st.rerun()
