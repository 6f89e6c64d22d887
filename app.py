"""Streamlit UI for editing a comparative and watching its ranking update."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

sys.path.insert(0, str(Path(__file__).resolve().parent))

from src.comparison import editing  # noqa: E402
from src.comparison.engine import (  # noqa: E402
    compute_scores,
    load_comparative_from_json,
    load_sample_comparative,
    recompute,
)
from src.comparison.models import (  # noqa: E402
    Comparative,
    CriterionType,
    ScoringMethod,
)
from src.comparison.templates import load_templates, save_as_template  # noqa: E402
from src.comparison.weights import weight_status  # noqa: E402

logging.basicConfig(level=logging.INFO)

st.set_page_config(page_title="Comparison Scoring Engine", layout="wide")
st.title("Comparison Scoring Engine")

TYPE_OPTIONS = [t.value for t in CriterionType]
METHOD_LABELS = {
    ScoringMethod.WEIGHTED_AVERAGE: "Weighted average",
    ScoringMethod.SIMPLE_AVERAGE: "Simple average",
    ScoringMethod.SUM: "Sum",
    ScoringMethod.NONE: "None (manual order)",
}

_UPLOAD_HELP = """\
Upload a JSON comparative.  **Minimal format**:

```json
{
  "criteria": [
    {"id": "price", "name": "Price", "type": "price", "weight": 60, "higher_is_better": false},
    {"id": "rating", "name": "Rating", "type": "rating", "weight": 40, "order": 1}
  ],
  "items": [
    {"name": "Item 1", "values": {"price": {"value": 50}, "rating": {"value": 5}}}
  ]
}
```
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _safe(text: str) -> str:
    """Escape dollar signs to prevent Streamlit LaTeX rendering."""
    return text.replace("$", r"\$")


def _current() -> Comparative:
    return st.session_state.comparative


def _apply(comparative: Comparative) -> None:
    st.session_state.comparative = comparative
    st.rerun()


def _table(comparative: Comparative) -> pd.DataFrame:
    visible = [c for c in comparative.sorted_criteria() if c.is_visible]
    rows = []
    for item in comparative.items:
        row = {"Rank": item.rank, "Item": item.name}
        if comparative.show_scores:
            row["Score"] = round(item.score, 1)
        for c in visible:
            entry = item.values.get(c.id)
            row[c.name or c.id] = entry.display_value if entry else "-"
        if item.is_winner and comparative.highlight_winner:
            row["Item"] = f"🏆 {item.name}"
        rows.append(row)
    return pd.DataFrame(rows)


def _render_results(comparative: Comparative) -> None:
    result = compute_scores(comparative)
    for warning in result.warnings:
        st.warning(warning.message)

    status = weight_status(comparative.criteria, comparative.scoring_method)
    if status.applies:
        label = f"Total weight: {status.total}%"
        if status.is_valid:
            st.success(label)
        else:
            st.error(f"{label} (must be {status.expected}%)")

    st.subheader("Ranking")
    st.dataframe(_table(comparative), use_container_width=True, hide_index=True)

    winner = next((i for i in comparative.items if i.id == comparative.winner_id), None)
    if winner:
        st.caption(_safe(f"Winner: **{winner.name}** ({winner.score:.1f})"))


def _render_criteria_editor(comparative: Comparative) -> None:
    st.subheader("Criteria")
    for index, c in enumerate(comparative.sorted_criteria()):
        with st.expander(f"{index + 1}. {c.name or 'New criterion'} — {c.type.value} ({c.weight}%)"):
            cols = st.columns(4)
            weight = cols[0].slider("Weight", 0, 100, c.weight, step=5, key=f"w_{c.id}")
            higher = cols[1].checkbox("Higher is better", c.higher_is_better, key=f"h_{c.id}")
            visible = cols[2].checkbox("Visible", c.is_visible, key=f"v_{c.id}")
            if cols[3].button("Save", key=f"save_{c.id}"):
                _apply(editing.update_criterion(
                    comparative, c.id,
                    weight=weight, higher_is_better=higher, is_visible=visible,
                ))
            move_cols = st.columns(3)
            if index > 0 and move_cols[0].button("Move up", key=f"up_{c.id}"):
                _apply(editing.move_criterion(comparative, index, index - 1))
            if (
                index < len(comparative.criteria) - 1
                and move_cols[1].button("Move down", key=f"down_{c.id}")
            ):
                _apply(editing.move_criterion(comparative, index, index + 1))
            if move_cols[2].button("Remove", key=f"rm_{c.id}"):
                _apply(editing.remove_criterion(comparative, c.id))

    with st.form("add_criterion", clear_on_submit=True):
        st.markdown("**Add a criterion**")
        name = st.text_input("Name *")
        ctype = st.selectbox("Type", TYPE_OPTIONS, index=TYPE_OPTIONS.index("rating"))
        if st.form_submit_button("Add Criterion"):
            if not name:
                st.error("Give the criterion a name.")
            else:
                _apply(editing.add_criterion(comparative, name=name, type=ctype))


def _render_value_editor(comparative: Comparative) -> None:
    st.subheader("Values")
    criteria = comparative.sorted_criteria()
    if not criteria or not comparative.items:
        st.info("Add criteria and items to fill in values.")
        return
    item_names = {i.name: i.id for i in comparative.items}
    criterion_names = {(c.name or c.id): c.id for c in criteria}
    cols = st.columns(3)
    item_name = cols[0].selectbox("Item", list(item_names))
    criterion_name = cols[1].selectbox("Criterion", list(criterion_names))
    raw = cols[2].text_input("Value (empty clears)")
    if st.button("Set value"):
        _apply(editing.set_item_value(
            comparative,
            item_names[item_name],
            criterion_names[criterion_name],
            raw or None,
        ))


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

if "comparative" not in st.session_state:
    st.session_state.comparative = recompute(load_sample_comparative())

if "templates" not in st.session_state:
    st.session_state.templates = load_templates()


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

with st.sidebar:
    st.header("Scoring")
    comparative = _current()
    methods = list(METHOD_LABELS)
    method = st.selectbox(
        "Scoring method",
        methods,
        index=methods.index(comparative.scoring_method),
        format_func=METHOD_LABELS.get,
    )
    if method is not comparative.scoring_method:
        _apply(editing.set_scoring_method(comparative, method))

    highlight = st.checkbox("Highlight winner", comparative.highlight_winner)
    if highlight != comparative.highlight_winner:
        _apply(editing.set_highlight_winner(comparative, highlight))

    if st.button("Distribute weights"):
        _apply(editing.distribute_weights(comparative))

    st.markdown("---")
    st.header("Templates")
    templates = st.session_state.templates
    chosen = st.selectbox("Template", ["—"] + list(templates))
    if chosen != "—" and st.button("Apply template"):
        _apply(editing.apply_template_to(comparative, templates[chosen]))

    template_name = st.text_input("Save criteria as")
    if st.button("Save template") and template_name.strip():
        saved = save_as_template(comparative.criteria, template_name)
        st.session_state.templates = {**templates, saved.name: saved}
        st.success(f"Saved template {saved.name}")


# ---------------------------------------------------------------------------
# Main tabs
# ---------------------------------------------------------------------------

tab_edit, tab_upload = st.tabs(["Editor", "Upload JSON"])

with tab_edit:
    comparative = _current()
    st.markdown(f"### {_safe(comparative.title or comparative.id)}")
    _render_results(comparative)
    col_criteria, col_values = st.columns(2)
    with col_criteria:
        _render_criteria_editor(comparative)
    with col_values:
        _render_value_editor(comparative)
        with st.form("add_item", clear_on_submit=True):
            item_name = st.text_input("New item name")
            if st.form_submit_button("Add Item") and item_name:
                _apply(editing.add_item(comparative, item_name))

with tab_upload:
    st.subheader("Load a comparative")
    st.markdown(_UPLOAD_HELP)
    uploaded = st.file_uploader("Upload JSON", type=["json"])
    loaded = None
    if uploaded:
        try:
            loaded = load_comparative_from_json(json.loads(uploaded.read()))
        except Exception as e:
            st.error(f"Error loading JSON: {e}")
    if loaded is not None:
        st.success(
            f"Loaded {len(loaded.criteria)} criteria and {len(loaded.items)} items"
        )
        if st.button("Open in editor", type="primary"):
            _apply(recompute(loaded))
