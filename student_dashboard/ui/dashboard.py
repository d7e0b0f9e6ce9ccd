"""Streamlit dashboard to import, browse, fix, and export student records."""
from pathlib import Path
from typing import List

import streamlit as st

# Allow running via "streamlit run student_dashboard/ui/dashboard.py" without
# installing the package by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from student_dashboard.core.config import load_settings
from student_dashboard.core.errors import DashboardError, ImportRejectedError
from student_dashboard.core.logging import configure_logging
from student_dashboard.core.models import StudentRecord
from student_dashboard.core.utils import format_number
from student_dashboard.review.query import (
    SORTABLE_FIELDS,
    all_selected,
    branch_distribution,
    filter_options,
    gpa_class,
    gpa_distribution,
    highlight_text,
    popular_interests,
    year_distribution,
)
from student_dashboard.review.store import Reconciliation
from student_dashboard.review.workflow import DashboardSession

_GPA_BADGES = {
    "excellent": "🟢",
    "good": "🟡",
    "needs-improvement": "🔴",
}

_OUTCOME_MESSAGES = {
    Reconciliation.ADDED: ("success", "New student {name} added successfully!"),
    Reconciliation.QUARANTINED: ("warning", "{name} was saved to the incorrect entries list."),
    Reconciliation.UPDATED: ("success", "Entry for {name} successfully updated!"),
    Reconciliation.DEMOTED: ("warning", "Entry moved to the incorrect list due to validation errors."),
    Reconciliation.PROMOTED: ("success", "Entry for {name} successfully added to the main student list!"),
    Reconciliation.STILL_INVALID: ("error", "Entry is still incorrect. Please fix all errors before adding."),
}


def _session() -> DashboardSession:
    """Create the dashboard session once per browser session."""

    if "dashboard" not in st.session_state:
        st.session_state.dashboard = DashboardSession.from_settings(load_settings())
    return st.session_state.dashboard


def _rerun_app() -> None:
    """Trigger a Streamlit rerun, compatible with newer and older APIs."""

    rerun = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if not rerun:
        raise RuntimeError("Streamlit does not expose a rerun helper.")
    rerun()


def _flash(level: str, message: str) -> None:
    """Queue a message to show after the next rerun."""

    st.session_state.flash = (level, message)


def _show_flash() -> None:
    flash = st.session_state.pop("flash", None)
    if flash:
        level, message = flash
        getattr(st, level)(message)


def _report_outcome(outcome: Reconciliation, record: StudentRecord) -> None:
    level, template = _OUTCOME_MESSAGES[outcome]
    _flash(level, template.format(name=record.name))


def _upload_area(session: DashboardSession) -> None:
    uploaded = st.file_uploader("Upload a student spreadsheet", type=["xlsx", "xls"])
    if uploaded is None or st.session_state.get("last_upload") == uploaded.file_id:
        return

    st.session_state.last_upload = uploaded.file_id
    with st.spinner("Reading spreadsheet..."):
        try:
            summary = session.import_file(uploaded.getvalue(), uploaded.name)
        except ImportRejectedError as exc:
            st.error(str(exc))
            return
    _flash(
        "success",
        f"Imported {summary.total} students: {summary.valid_count} correct, "
        f"{summary.invalid_count} incorrect.",
    )
    _rerun_app()


def _stats_row(session: DashboardSession) -> None:
    stats = session.stats()
    columns = st.columns(4)
    columns[0].metric("Total students", stats.total_students)
    columns[1].metric("Average GPA", f"{stats.average_gpa:.2f}")
    columns[2].metric("Branches", stats.total_branches)
    columns[3].metric("Active", stats.active_students)

    st.caption(
        f"✅ {len(session.store.valid)} correct entries · "
        f"⚠️ {len(session.store.invalid)} incorrect entries"
    )


def _filters(session: DashboardSession) -> None:
    options = filter_options(session.store.valid)
    query = session.query

    columns = st.columns([2, 1, 1, 1, 1])
    search = columns[0].text_input("Search", value=query.search)
    branch = columns[1].selectbox(
        "Branch",
        ["", *options["branches"]],
        index=(["", *options["branches"]].index(query.branch) if query.branch in options["branches"] else 0),
        format_func=lambda value: value or "All Branches",
    )
    year = columns[2].selectbox(
        "Year",
        ["", *options["years"]],
        index=(["", *options["years"]].index(query.year) if query.year in options["years"] else 0),
        format_func=lambda value: f"Year {value}" if value else "All Years",
    )
    sort_choices = ["", *SORTABLE_FIELDS]
    sort_key = columns[3].selectbox(
        "Sort by",
        sort_choices,
        index=sort_choices.index(query.sort_key or ""),
        format_func=lambda value: value.title() if value else "None",
    )
    descending = columns[4].toggle("Descending", value=query.direction == "desc")
    session.set_query(
        search=search,
        branch=branch,
        year=year,
        sort_key=sort_key or None,
        direction="desc" if descending else "asc",
    )

    if st.button("Clear filters", type="secondary"):
        session.clear_filters()
        _rerun_app()


def _table_view(session: DashboardSession, records: List[StudentRecord]) -> None:
    rows = [
        {
            "Selected": record.id in session.selected,
            "ID": record.id,
            "Name": record.name,
            "Branch": record.branch,
            "Year": f"Year {format_number(record.year)}",
            "Email": record.email,
            "GPA": f"{_GPA_BADGES[gpa_class(record.gpa)]} {record.gpa:.2f}",
        }
        for record in records
    ]
    edited = st.data_editor(
        rows,
        hide_index=True,
        num_rows="fixed",
        use_container_width=True,
        disabled=["ID", "Name", "Branch", "Year", "Email", "GPA"],
    )
    changed = {row["ID"] for row in edited if row["Selected"] != (row["ID"] in session.selected)}
    if changed:
        for student_id in changed:
            session.toggle_selection(student_id)
        _rerun_app()


def _cards_view(session: DashboardSession, records: List[StudentRecord]) -> None:
    term = session.query.search
    columns = st.columns(3)
    for position, record in enumerate(records):
        with columns[position % 3].container(border=True):
            st.markdown(
                f":blue[{highlight_text(record.name, term)}]  \n{highlight_text(record.branch, term)}"
            )
            st.caption(
                f"📅 Year {format_number(record.year)} · 📧 {highlight_text(record.email, term)}  \n"
                f"📊 GPA {_GPA_BADGES[gpa_class(record.gpa)]} {record.gpa:.2f}  \n"
                f"🎯 Interests: {popular_interests(record)}"
            )
            is_selected = record.id in session.selected
            picked = st.checkbox(
                "Select", value=is_selected, key=f"card_select_{record.id}_{is_selected}"
            )
            if picked != is_selected:
                session.toggle_selection(record.id)
                _rerun_app()


def _analytics_view(records: List[StudentRecord]) -> None:
    if not records:
        st.info("No students match the current filters.")
        return
    columns = st.columns(3)
    with columns[0]:
        st.caption("Students by branch")
        st.bar_chart(branch_distribution(records))
    with columns[1]:
        st.caption("GPA distribution")
        st.bar_chart(gpa_distribution(records))
    with columns[2]:
        st.caption("Students by year")
        st.bar_chart(year_distribution(records))


def _selection_actions(session: DashboardSession, records: List[StudentRecord]) -> None:
    columns = st.columns([1, 1, 2])
    label = "❌ Deselect All" if all_selected(session.selected, records) else "👥 Select All"
    if columns[0].button(label):
        session.toggle_select_all()
        _rerun_app()

    try:
        filename, payload = session.export()
    except DashboardError:
        columns[1].button("📥 Export", disabled=True, help="No data to export")
    else:
        columns[1].download_button(
            "📥 Export",
            data=payload,
            file_name=filename,
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
    columns[2].caption(f"{len(session.selected)} selected")

    if not session.selected:
        return
    with st.expander(f"✉️ Email {len(session.selected)} selected students"):
        with st.form("email_form", clear_on_submit=True):
            subject = st.text_input("Subject")
            message = st.text_area("Message")
            submitted = st.form_submit_button("Compose email")
        if submitted:
            try:
                link = session.compose_email(subject, message)
            except (DashboardError, ValueError) as exc:
                st.warning(str(exc))
            else:
                st.link_button("Open in mail app", link)


def _student_fields(prefix: str, record: StudentRecord | None = None) -> dict:
    """Render the shared add/edit inputs and return the raw values."""

    errors = (record.validation_errors or {}) if record else {}

    def _text(label: str, field: str, value: str) -> str:
        entered = st.text_input(label, value=value, key=f"{prefix}_{field}")
        if field in errors:
            st.error(errors[field])
        return entered

    return {
        "name": _text("Name", "name", record.name if record else ""),
        "branch": _text("Branch", "branch", record.branch if record else ""),
        "year": _text("Year", "year", format_number(record.year) if record else ""),
        "email": _text("Email", "email", record.email if record else ""),
        "gpa": _text("GPA", "gpa", format_number(record.gpa) if record else ""),
        "interests": _text(
            "Interests (comma separated)", "interests", ", ".join(record.interests) if record else ""
        ),
    }


def _add_student(session: DashboardSession) -> None:
    with st.expander("➕ Add student"):
        with st.form("add_student_form"):
            fields = _student_fields("new")
            submitted = st.form_submit_button("Save student")
        if not submitted:
            return
        result = session.add_student(fields)
        if result.outcome is Reconciliation.REJECTED:
            for field, message in result.errors.items():
                st.error(f"{field.title()}: {message}")
            return
        _report_outcome(result.outcome, result.record)
        _rerun_app()


def _edit_profile(session: DashboardSession) -> None:
    records = session.store.all_records()
    if not records:
        return
    with st.expander("✏️ Edit profile"):
        student_id = st.selectbox(
            "Student",
            [record.id for record in records],
            format_func=lambda value: f"{value} · {session.store.get(value).name}",
            key="profile_student",
        )
        record = session.store.get(student_id)
        with st.form(f"profile_form_{student_id}"):
            fields = _student_fields(f"profile_{student_id}", record)
            submitted = st.form_submit_button("Save profile")
        if submitted:
            result = session.update_student(student_id, fields)
            _report_outcome(result.outcome, result.record)
            _rerun_app()


def _incorrect_entries(session: DashboardSession) -> None:
    invalid = session.store.invalid
    if not invalid:
        return
    with st.expander(f"⚠️ View incorrect entries ({len(invalid)})"):
        for record in invalid:
            with st.container(border=True):
                st.markdown(f"**:red[{record.name}]** (ID {record.id})")
                for field, message in (record.validation_errors or {}).items():
                    st.markdown(f"- **{field.title()}:** {message}")
                if st.button("Add to Display", key=f"promote_{record.id}"):
                    result = session.promote(record.id)
                    if result.outcome is not Reconciliation.PROMOTED:
                        st.error("Cannot add entry. It still contains validation errors.")
                        continue
                    _report_outcome(result.outcome, result.record)
                    _rerun_app()


def main() -> None:
    """Launch the student dashboard."""

    configure_logging()
    st.set_page_config(page_title="Student Dashboard", layout="wide")
    st.title("Student Dashboard")

    session = _session()
    _show_flash()
    _upload_area(session)

    if not session.store.all_records():
        st.info("Upload an Excel file (.xlsx or .xls) to get started.")
        _add_student(session)
        return

    _stats_row(session)
    _incorrect_entries(session)
    _filters(session)
    records = session.filtered()
    _selection_actions(session, records)

    table_tab, cards_tab, analytics_tab = st.tabs(["Table", "Cards", "Analytics"])
    with table_tab:
        _table_view(session, records)
    with cards_tab:
        _cards_view(session, records)
    with analytics_tab:
        _analytics_view(records)

    _add_student(session)
    _edit_profile(session)


if __name__ == "__main__":
    main()
