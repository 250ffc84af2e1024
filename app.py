"""
University Events Portal

Public page: upcoming university events with keyword / city / country / study
level filters and tracked registration links.
Admin console (sign-in required): events, university partners, bulk CSV
import and click analytics.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from functools import partial
from pathlib import Path

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from uni_events import analytics, auth
from uni_events.config import configure_logging, load_settings
from uni_events.csv_import import CSV_COLUMNS, CsvImportError, import_events_csv
from uni_events.db import (
    StoreError,
    delete_event,
    delete_university,
    event_counts_by_university,
    fetch_analytics,
    fetch_events,
    fetch_universities,
    init_db,
    insert_event,
    insert_university,
    update_event,
    update_university,
)
from uni_events.export import export_report_csv, export_report_excel, export_report_pdf
from uni_events.filters import (
    FilterCriteria,
    city_options,
    country_options,
    filter_events,
    study_level_options,
)
from uni_events.models import (
    EVENT_REQUIRED,
    STUDY_LEVELS,
    UNIVERSITY_REQUIRED,
    EventForm,
    missing_fields,
)
from uni_events.sample_data import SAMPLE_EVENTS_CSV, seed_sample_data


@st.cache_resource
def _bootstrap():
    settings = load_settings()
    configure_logging(settings)
    init_db(settings.db_path)
    auth.ensure_admin(settings.admin_email, settings.admin_password, db_path=settings.db_path)
    return settings


st.set_page_config(page_title="Global Study Events", layout="wide")

settings = _bootstrap()
DB = settings.db_path

for key, default in {
    "editing_event_id": None,
    "editing_uni_id": None,
    "confirm_delete_event": None,
    "confirm_delete_uni": None,
}.items():
    if key not in st.session_state:
        st.session_state[key] = default


def _open_in_new_tab(url: str) -> None:
    components.html(f"<script>window.open({json.dumps(url)}, '_blank');</script>", height=0)
    st.markdown(f"If the registration page did not open, [continue here]({url}).")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return date.today()


def _flash(message: str) -> None:
    st.session_state["flash"] = message
    st.rerun()


def _clear_filters() -> None:
    for key in ("f_keyword", "f_city", "f_country", "f_level"):
        st.session_state[key] = ""


def render_public_page() -> None:
    st.title("Global Study Events")
    st.caption("Find and register for upcoming university open days and education fairs.")

    today = date.today().isoformat()
    try:
        all_events = fetch_events(from_date=today, db_path=DB)
    except StoreError as exc:
        st.error(f"Could not load events: {exc}")
        all_events = []

    c1, c2, c3, c4 = st.columns([3, 2, 2, 2])
    with c1:
        keyword = st.text_input("Keyword Search", key="f_keyword", placeholder="Enter University or Event...")
    with c2:
        country = st.selectbox(
            "Country",
            options=[""] + country_options(all_events),
            format_func=lambda v: v or "All Countries",
            key="f_country",
        )
    with c3:
        city = st.selectbox(
            "City",
            options=[""] + city_options(all_events),
            format_func=lambda v: v or "All Cities",
            key="f_city",
        )
    with c4:
        level = st.selectbox(
            "Study Level",
            options=[""] + study_level_options(),
            format_func=lambda v: v or "All Levels",
            key="f_level",
        )

    criteria = FilterCriteria(keyword=keyword, city=city, country=country, study_level=level)
    results = filter_events(all_events, criteria)

    c_count, c_clear = st.columns([4, 1])
    with c_count:
        st.write(f"Showing **{len(results)}** of {len(all_events)} upcoming events")
    with c_clear:
        st.button("Clear filters", on_click=_clear_filters, disabled=criteria.is_empty())

    if not results:
        st.info("No events match your search.")
        return

    for ev in results:
        with st.container(border=True):
            c_logo, c_body, c_cta = st.columns([1, 6, 2])
            with c_logo:
                if ev.university_logo_url:
                    st.image(ev.university_logo_url, width=64)
            with c_body:
                st.caption(f"{ev.university_name or ''} · {ev.university_country or ''}")
                st.subheader(ev.event_name)
                st.write(f"{ev.event_date} · {ev.event_time or ''} · {ev.venue or ''}, {ev.city}")
                if ev.organizer:
                    st.caption(f"Organized by {ev.organizer}")
                if ev.study_levels:
                    st.caption(" | ".join(ev.study_levels))
            with c_cta:
                if st.button("Register", key=f"register_{ev.id}", disabled=not ev.cta_url):
                    analytics.track_and_redirect(
                        ev.id,
                        ev.cta_url,
                        navigate=_open_in_new_tab,
                        recorder=partial(analytics.record_click, db_path=DB),
                    )


def render_login() -> None:
    st.title("Admin Login")
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log In")
    if submitted:
        try:
            session = auth.sign_in(email, password, db_path=DB)
        except auth.AuthError as exc:
            st.error(str(exc))
        else:
            auth.store_session(st.session_state, session)
            st.rerun()


def _event_form(universities, events) -> None:
    editing_id = st.session_state.editing_event_id
    current = next((e for e in events if e.id == editing_id), None)
    if editing_id is not None and current is None:
        st.session_state.editing_event_id = None
        editing_id = None
    form = EventForm.from_event(current) if current else EventForm()

    st.subheader("Editing Mode" if editing_id else "Create New Event")
    if not universities:
        st.info("Add a university partner before creating events.")
        return

    uni_names = {u.id: u.name for u in universities}
    uni_ids = list(uni_names.keys())
    with st.form(f"event_form_{editing_id or 'new'}", clear_on_submit=editing_id is None):
        form.university_id = st.selectbox(
            "Select Partner",
            options=uni_ids,
            index=uni_ids.index(form.university_id) if form.university_id in uni_ids else None,
            format_func=lambda i: uni_names.get(i, str(i)),
            placeholder="Choose a University...",
        )
        c1, c2 = st.columns(2)
        with c1:
            form.event_name = st.text_input("Event Title", value=form.event_name, placeholder="e.g. Masters Open Day")
            form.venue = st.text_input("Venue", value=form.venue, placeholder="e.g. Address Marina")
            form.event_time = st.text_input("Timing", value=form.event_time, placeholder="e.g. 4:00 PM - 8:00 PM")
        with c2:
            form.city = st.text_input("City", value=form.city, placeholder="e.g. Dubai")
            picked = st.date_input(
                "Event Date",
                value=_parse_date(form.event_date),
            )
            form.event_date = picked.isoformat() if picked else ""
            form.organizer = st.text_input("Organizer", value=form.organizer, placeholder="e.g. IDP Education")
        form.cta_url = st.text_input("Registration Link (CTA)", value=form.cta_url, placeholder="https://...")
        form.study_levels = st.multiselect(
            "Qualified Study Levels",
            options=list(STUDY_LEVELS),
            default=[l for l in form.study_levels if l in STUDY_LEVELS],
        )
        submitted = st.form_submit_button("SAVE CHANGES" if editing_id else "PUBLISH LIVE")

    if editing_id and st.button("Cancel editing"):
        st.session_state.editing_event_id = None
        st.rerun()

    if submitted:
        payload = form.payload()
        missing = missing_fields(payload, EVENT_REQUIRED)
        if missing:
            st.error(f"Required: {', '.join(missing)}")
            return
        try:
            if editing_id:
                update_event(editing_id, payload, db_path=DB)
            else:
                insert_event(payload, db_path=DB)
        except StoreError as exc:
            st.error(str(exc))
            return
        st.session_state.editing_event_id = None
        st.rerun()


def _bulk_import() -> None:
    st.subheader("Bulk CSV Import")
    st.caption(f"Columns: {', '.join(CSV_COLUMNS)}. study_levels like ['Masters','PhD'].")
    st.download_button("Download CSV template", SAMPLE_EVENTS_CSV, file_name="events_template.csv", mime="text/csv")
    uploaded = st.file_uploader("Upload events CSV", type=["csv"])
    if uploaded is not None and st.button("Import events"):
        with st.spinner("Syncing with database..."):
            try:
                result = import_events_csv(uploaded, db_path=DB)
            except (CsvImportError, StoreError) as exc:
                st.error(f"CSV Error: {exc}")
            else:
                _flash(f"Successfully imported {result.count} events!")


def _event_feed(events) -> None:
    st.subheader(f"Live Feed ({len(events)})")
    for ev in events:
        with st.container(border=True):
            st.caption(ev.university_name or "")
            st.write(f"**{ev.event_name}**")
            st.caption(f"{ev.city} · {ev.event_date}")
            c_edit, c_del = st.columns(2)
            with c_edit:
                if st.button("Edit", key=f"edit_event_{ev.id}"):
                    st.session_state.editing_event_id = ev.id
                    st.rerun()
            with c_del:
                if st.button("Delete", key=f"delete_event_{ev.id}"):
                    st.session_state.confirm_delete_event = ev.id

            if st.session_state.confirm_delete_event == ev.id:
                st.warning("Delete this event permanently?")
                if st.button("Confirm delete", key=f"confirm_delete_event_{ev.id}"):
                    try:
                        delete_event(ev.id, db_path=DB)
                    except StoreError as exc:
                        st.error(str(exc))
                    else:
                        st.session_state.confirm_delete_event = None
                        if st.session_state.editing_event_id == ev.id:
                            st.session_state.editing_event_id = None
                        st.rerun()


def _university_tab(universities) -> None:
    c_form, c_list = st.columns(2)
    editing_id = st.session_state.editing_uni_id
    current = next((u for u in universities if u.id == editing_id), None)

    with c_form:
        st.subheader("Edit University" if current else "New University Partner")
        with st.form(f"uni_form_{editing_id or 'new'}", clear_on_submit=current is None):
            name = st.text_input("Official Name", value=current.name if current else "", placeholder="e.g. University of Manchester")
            country = st.text_input("Country", value=current.country if current else "", placeholder="e.g. United Kingdom")
            logo_url = st.text_input("Direct Logo URL", value=(current.logo_url or "") if current else "", placeholder="https://image-link.png")
            submitted = st.form_submit_button("UPDATE PARTNER" if current else "SAVE PARTNER")
        if current and st.button("Cancel", key="cancel_uni_edit"):
            st.session_state.editing_uni_id = None
            st.rerun()

        if submitted:
            payload = {"name": name.strip(), "country": country.strip(), "logo_url": logo_url.strip()}
            if missing_fields(payload, UNIVERSITY_REQUIRED):
                st.error("Name and Country are required.")
            else:
                try:
                    if current:
                        update_university(current.id, db_path=DB, **payload)
                    else:
                        insert_university(db_path=DB, **payload)
                except StoreError as exc:
                    st.error(str(exc))
                else:
                    st.session_state.editing_uni_id = None
                    st.rerun()

    with c_list:
        st.subheader("Partner Master List")
        try:
            event_counts = event_counts_by_university(db_path=DB)
        except StoreError as exc:
            st.error(f"Could not load partners: {exc}")
            return
        for u in universities:
            with st.container(border=True):
                c_logo, c_body, c_actions = st.columns([1, 4, 2])
                with c_logo:
                    if u.logo_url:
                        st.image(u.logo_url, width=48)
                with c_body:
                    st.write(f"**{u.name}**")
                    st.caption(f"{u.country} · {event_counts.get(u.id, 0)} events")
                with c_actions:
                    if st.button("Edit", key=f"edit_uni_{u.id}"):
                        st.session_state.editing_uni_id = u.id
                        st.rerun()
                    if st.button("Delete", key=f"delete_uni_{u.id}"):
                        st.session_state.confirm_delete_uni = u.id

                if st.session_state.confirm_delete_uni == u.id:
                    st.warning(
                        "Deleting a university will only work if it has NO active events. "
                        "Delete events first. Proceed?"
                    )
                    if st.button("Confirm delete", key=f"confirm_delete_uni_{u.id}"):
                        st.session_state.confirm_delete_uni = None
                        try:
                            delete_university(u.id, db_path=DB)
                        except StoreError:
                            st.error("Could not delete. Check if events are still linked to this university.")
                        else:
                            st.rerun()


def _analytics_tab(events) -> None:
    st.subheader("Event Performance")
    st.caption("Tracking registration clicks per university event.")
    try:
        records = fetch_analytics(db_path=DB)
    except StoreError as exc:
        st.error(str(exc))
        return

    summary = analytics.click_summary(events, records)
    c1, c2 = st.columns(2)
    c1.metric("Total Clicks Across Site", summary["total_clicks"])
    c2.metric("Active Live Listings", summary["active_listings"])

    stats = analytics.click_breakdown(events, records)
    st.markdown("#### Detailed Click Breakdown")
    for s in stats:
        c_name, c_bar, c_count = st.columns([4, 5, 1])
        with c_name:
            st.write(f"**{s.event.event_name}**")
            st.caption(s.event.university_name or "")
        with c_bar:
            st.progress(min(int(round(s.percentage)), 100))
        with c_count:
            st.write(f"### {s.count}")

    rows = analytics.click_report_rows(stats)
    if rows:
        with st.expander("Report table", expanded=False):
            st.dataframe(pd.DataFrame(rows), width='stretch')

        c1, c2, c3 = st.columns(3)
        ts = datetime.now().strftime('%Y%m%d_%H%M%S')
        with c1:
            if st.button("Export CSV"):
                out = export_report_csv(rows, Path("exports") / f"event_clicks_{ts}.csv")
                st.success(f"Exported: {out}")
        with c2:
            if st.button("Export Excel"):
                out = export_report_excel(rows, Path("exports") / f"event_clicks_{ts}.xlsx")
                st.success(f"Exported: {out}")
        with c3:
            if st.button("Export PDF"):
                try:
                    out = export_report_pdf(rows, Path("exports") / f"event_clicks_{ts}.pdf")
                except RuntimeError as exc:
                    st.error(str(exc))
                else:
                    st.success(f"Exported: {out}")


def render_admin_console(session: auth.Session) -> None:
    with st.sidebar:
        st.markdown(f"Signed in as **{session.email}**")
        if st.button("SIGN OUT"):
            auth.sign_out(st.session_state)
            st.rerun()
        st.markdown("### Demo data")
        if st.button("Load sample partners & events"):
            try:
                seeded = seed_sample_data(db_path=DB)
            except StoreError as exc:
                st.error(str(exc))
            else:
                st.success(f"Loaded {len(seeded['universities'])} partners and {len(seeded['events'])} events.")

    st.title("Admin Console")
    st.caption("Manage global university partnerships and event analytics.")
    if st.session_state.get("flash"):
        st.success(st.session_state.pop("flash"))

    try:
        universities = fetch_universities(db_path=DB)
        events = fetch_events(db_path=DB)
    except StoreError as exc:
        st.error(str(exc))
        return

    tab_events, tab_unis, tab_stats = st.tabs(["Events Dashboard", "University Partners", "View Analytics"])
    with tab_events:
        c_main, c_feed = st.columns([2, 1])
        with c_main:
            _bulk_import()
            _event_form(universities, events)
        with c_feed:
            _event_feed(events)
    with tab_unis:
        _university_tab(universities)
    with tab_stats:
        _analytics_tab(events)


page = st.sidebar.radio("Navigation", ["Events", "Admin"])

if page == "Events":
    render_public_page()
else:
    session = auth.current_session(st.session_state)
    if session is None:
        render_login()
    else:
        render_admin_console(session)
