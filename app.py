import os
from datetime import datetime

import streamlit as st

# Must be first Streamlit call
st.set_page_config(page_title="Decision Matrix", layout="wide")

# ----------------------------
# Imports (engine)
# ----------------------------
from decision_matrix.charts import score_frame, weight_share_frame
from decision_matrix.config import load_settings
from decision_matrix.errors import (
    DuplicateCriterionError,
    LastCriterionError,
    LastOptionError,
    StorageError,
    ValidationError,
)
from decision_matrix.explain import explain_option
from decision_matrix.form_state import (
    add_criterion,
    add_option,
    default_criteria,
    default_options,
    input_step,
    remove_criterion,
    remove_option,
    rename_criterion,
    rename_option,
    set_option_value,
    update_criterion,
)
from decision_matrix.logging_utils import get_logger, setup_logging
from decision_matrix.models import BENEFIT, COST
from decision_matrix.report import render_html_report, write_pdf_report
from decision_matrix.scoring import compute_scores
from decision_matrix.snapshot import delete_decision, load_saved_decisions, save_decision
from decision_matrix.storage import JsonlDocumentStore

SETTINGS = load_settings()
setup_logging(SETTINGS.log_level)
logger = get_logger("app")

os.makedirs(SETTINGS.data_dir, exist_ok=True)
os.makedirs(SETTINGS.reports_dir, exist_ok=True)


@st.cache_resource
def get_store() -> JsonlDocumentStore:
    return JsonlDocumentStore(SETTINGS.data_dir)


# ----------------------------
# Session state
# ----------------------------
if "decision_name" not in st.session_state:
    st.session_state.decision_name = ""
if "criteria" not in st.session_state:
    st.session_state.criteria = default_criteria()
if "options" not in st.session_state:
    st.session_state.options = default_options()
if "results" not in st.session_state:
    st.session_state.results = None
if "notification" not in st.session_state:
    st.session_state.notification = None
if "pending_delete" not in st.session_state:
    st.session_state.pending_delete = None


# ----------------------------
# Helpers
# ----------------------------
def notify(kind: str, message: str):
    st.session_state.notification = (kind, message)


def show_notification():
    note = st.session_state.notification
    if not note:
        return
    kind, message = note
    if kind == "success":
        st.success(message)
    else:
        st.error(message)
    st.session_state.notification = None


def section_title(title: str, subtitle: str = ""):
    st.markdown(f"### {title}")
    if subtitle:
        st.caption(subtitle)


def invalidate_results():
    # results only describe the inputs that produced them
    st.session_state.results = None


def format_created(ts) -> str:
    return datetime.fromtimestamp(ts.seconds).strftime("%Y-%m-%d %H:%M")


# ----------------------------
# Editors
# ----------------------------
def render_criteria_editor():
    section_title("Decision Criteria", "What matters in this decision, and how much (percentage weight).")

    for crit in list(st.session_state.criteria):
        with st.container(border=True):
            c1, c2, c3, c4, c5, c6 = st.columns([3, 3, 2, 1.5, 1.5, 0.8])
            with c1:
                name = st.text_input(
                    "Criterion Name",
                    value=crit.name,
                    key=f"crit_name_{crit.id}",
                    placeholder="Enter criterion name",
                )
            with c2:
                weight = st.slider("Percentage", 0, 100, value=int(crit.weight), key=f"crit_w_{crit.id}")
            with c3:
                benefit = st.toggle(
                    "Higher is better",
                    value=crit.is_benefit,
                    key=f"crit_dir_{crit.id}",
                    help="Off means lower values are better (cost).",
                )
            with c4:
                min_value = st.number_input("Min", value=crit.min_value, key=f"crit_min_{crit.id}")
            with c5:
                max_value = st.number_input("Max", value=crit.max_value, key=f"crit_max_{crit.id}")
            with c6:
                st.write("")
                remove = st.button("✕", key=f"crit_rm_{crit.id}", help="Remove criterion")

        if name != crit.name:
            try:
                st.session_state.criteria, st.session_state.options = rename_criterion(
                    st.session_state.criteria, st.session_state.options, crit.id, name
                )
            except DuplicateCriterionError as e:
                notify("error", e.message)
                # put the old name back in the input on the next run
                st.session_state.pop(f"crit_name_{crit.id}", None)
                st.rerun()
            invalidate_results()

        changes = {}
        if weight != crit.weight:
            changes["weight"] = weight
        direction = BENEFIT if benefit else COST
        if direction != crit.direction:
            changes["direction"] = direction
        if min_value != crit.min_value:
            changes["min_value"] = min_value
        if max_value != crit.max_value:
            changes["max_value"] = max_value
        if changes:
            st.session_state.criteria = update_criterion(st.session_state.criteria, crit.id, **changes)
            invalidate_results()

        if remove:
            try:
                st.session_state.criteria = remove_criterion(st.session_state.criteria, crit.id)
            except LastCriterionError as e:
                notify("error", e.message)
            else:
                invalidate_results()
            st.rerun()

    if st.button("Add Criterion", key="btn_add_criterion"):
        st.session_state.criteria = add_criterion(st.session_state.criteria)
        invalidate_results()
        st.rerun()


def render_options_editor():
    section_title("Options to Compare", "Add the options you're considering and score them against each criterion.")
    criteria = st.session_state.criteria

    for opt in list(st.session_state.options):
        with st.container(border=True):
            cols = st.columns([3] + [2] * len(criteria) + [0.8])
            with cols[0]:
                name = st.text_input("Option Name", value=opt.name, key=f"opt_name_{opt.id}")
            for i, crit in enumerate(criteria, start=1):
                with cols[i]:
                    current = opt.values.get(crit.name)
                    value = st.number_input(
                        crit.name or f"Criterion {i}",
                        value=None if current is None else float(current),
                        step=input_step(crit),
                        key=f"opt_{opt.id}_crit_{crit.id}",
                    )
                if value != opt.values.get(crit.name):
                    st.session_state.options = set_option_value(st.session_state.options, opt.id, crit.name, value)
                    invalidate_results()
            with cols[-1]:
                st.write("")
                remove = st.button("✕", key=f"opt_rm_{opt.id}", help="Remove option")

        if name != opt.name:
            st.session_state.options = rename_option(st.session_state.options, opt.id, name)
            invalidate_results()

        if remove:
            try:
                st.session_state.options = remove_option(st.session_state.options, opt.id)
            except LastOptionError as e:
                notify("error", e.message)
            else:
                invalidate_results()
            st.rerun()

    if st.button("Add Option", key="btn_add_option"):
        st.session_state.options = add_option(st.session_state.options, st.session_state.criteria)
        invalidate_results()
        st.rerun()


# ----------------------------
# Results
# ----------------------------
def render_results():
    results = st.session_state.results
    if not results:
        return

    criteria = st.session_state.criteria
    options = st.session_state.options
    name = st.session_state.decision_name

    st.divider()
    section_title("Results")
    best = results[0]
    st.success(f"Best Option: **{best.name}** (Score: {best.score} points)")

    cols = st.columns(min(len(results), 4))
    for i, r in enumerate(results):
        with cols[i % len(cols)]:
            st.metric(f"#{i + 1}: {r.name}", f"{r.score} points")
            for crit in criteria:
                scale = f" ({crit.min_value:g}-{crit.max_value:g} scale)" if crit.has_range else ""
                raw = r.values.get(crit.name)
                st.caption(f"{crit.name}: {'N/A' if raw is None else raw}{scale}")

    cA, cB = st.columns(2)
    with cA:
        st.subheader("Decision Score")
        st.bar_chart(score_frame(results).set_index("Option"))
    with cB:
        st.subheader("Criteria Weights")
        shares = weight_share_frame(criteria)
        st.bar_chart(shares.set_index("Criterion")[["Weight"]])
        st.dataframe(shares, hide_index=True, use_container_width=True)

    with st.expander(f"Why {best.name} comes out on top"):
        explanation = explain_option(best, criteria)
        st.dataframe(explanation["contributions"], hide_index=True, use_container_width=True)

    st.markdown("#### Save & export")
    c1, c2, c3 = st.columns(3)
    with c1:
        if st.button("Save Decision", key="btn_save", type="primary"):
            try:
                save_decision(get_store(), name, criteria, options, results, collection=SETTINGS.collection)
            except ValidationError as e:
                notify("error", e.message)
            except StorageError:
                notify("error", "Failed to save decision")
            else:
                notify("success", "Decision saved successfully!")
            st.rerun()
    with c2:
        st.download_button(
            "Download HTML report",
            data=render_html_report(name, criteria, options, results),
            file_name=f"decision_report_{safe_file_name(name)}.html",
            mime="text/html",
            key="dl_html",
        )
    with c3:
        if st.button("Generate PDF report", key="btn_pdf"):
            path = os.path.join(SETTINGS.reports_dir, f"{safe_file_name(name)}.pdf")
            try:
                write_pdf_report(path, name, criteria, options, results)
            except OSError:
                logger.exception("Error writing PDF report to %s", path)
                st.error("Failed to generate PDF report")
            else:
                with open(path, "rb") as f:
                    st.download_button(
                        "Download PDF",
                        data=f.read(),
                        file_name=os.path.basename(path),
                        mime="application/pdf",
                        key="dl_pdf",
                    )


def safe_file_name(raw: str) -> str:
    cleaned = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in (raw or "").strip())
    return cleaned or "decision"


# ----------------------------
# Pages
# ----------------------------
def page_decision():
    st.title("Decision Matrix")
    show_notification()

    section_title("Name your decision")
    name = st.text_input("Decision Name", value=st.session_state.decision_name, key="decision_name_input")
    if name != st.session_state.decision_name:
        st.session_state.decision_name = name
        invalidate_results()

    render_criteria_editor()
    render_options_editor()

    st.divider()
    if st.button("Calculate", key="btn_calculate", type="primary"):
        try:
            st.session_state.results = compute_scores(
                st.session_state.decision_name,
                st.session_state.criteria,
                st.session_state.options,
            )
        except ValidationError as e:
            notify("error", e.message)
        else:
            notify("success", "Analysis completed!")
        st.rerun()

    render_results()


def page_saved():
    st.title("Saved Decisions")
    show_notification()

    try:
        decisions = load_saved_decisions(get_store(), collection=SETTINGS.collection)
    except StorageError:
        st.error("Failed to load saved decisions")
        return

    st.caption(f"Records found: {len(decisions)}")
    if not decisions:
        st.info("No saved decisions yet. Calculate a decision and save it first.")
        return

    for d in decisions:
        best = d.best
        header = f"{d.decision_name} • {format_created(d.created_at)}"
        with st.expander(header):
            if best:
                st.write(f"Best Option: **{best.name}** (Score: {best.score})")
            else:
                st.write("Best Option: N/A")
            st.dataframe(score_frame(d.results), hide_index=True, use_container_width=True)
            st.dataframe(weight_share_frame(d.criteria), hide_index=True, use_container_width=True)

            if d.results:
                st.download_button(
                    "Download HTML report",
                    data=render_html_report(d.decision_name, d.criteria, d.options, d.results),
                    file_name=f"decision_report_{safe_file_name(d.decision_name)}.html",
                    mime="text/html",
                    key=f"dl_html_{d.id}",
                )

            if st.session_state.pending_delete == d.id:
                st.warning("Are you sure you want to delete this decision? This action cannot be undone.")
                c1, c2 = st.columns(2)
                with c1:
                    if st.button("Delete", key=f"confirm_del_{d.id}", type="primary"):
                        try:
                            delete_decision(get_store(), d.id, collection=SETTINGS.collection)
                        except StorageError:
                            notify("error", "Failed to delete decision")
                        else:
                            notify("success", "Decision deleted successfully!")
                        st.session_state.pending_delete = None
                        st.rerun()
                with c2:
                    if st.button("Cancel", key=f"cancel_del_{d.id}"):
                        st.session_state.pending_delete = None
                        st.rerun()
            elif st.button("Delete decision", key=f"del_{d.id}"):
                st.session_state.pending_delete = d.id
                st.rerun()


def page_about():
    st.subheader("What this is")
    st.write(
        """
Decision Matrix ranks options with a weighted scoring model:
- Each criterion gets a percentage weight and a direction (higher or lower is better)
- Raw values are normalized against the criterion's min/max range, or a 0-100 scale when no range is set
- Weighted values are combined into a 0-100 score per option

Saved decisions are stored locally as JSON lines.
        """
    )
    st.caption(f"Data directory: {SETTINGS.data_dir} • Reports: {SETTINGS.reports_dir}")


# ----------------------------
# Main app shell
# ----------------------------
st.caption("Decision Matrix: weigh criteria, score options, get a recommendation.")

page = st.sidebar.radio("Navigate", ["Decision", "Saved Decisions", "About"], key="nav")

if page == "Saved Decisions":
    page_saved()
elif page == "About":
    page_about()
else:
    page_decision()
