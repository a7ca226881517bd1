"""
app.py
Streamlit Gym Membership desk (regular and premium members).
Run: streamlit run app.py
"""

from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

import db
import services
import utils
from logger import configure_logging
from models import PLAN_PRICES, MemberKind, MemberNotFoundError, MeteredPlanMember, PrepaidMember, Result
from settings import settings

st.set_page_config(page_title="Gym Membership System", layout="wide")

logger = logging.getLogger(__name__)


def init_once():
    configure_logging()
    # Load the directory from SQLite once per session
    if "directory" not in st.session_state:
        db.init_db()
        st.session_state.directory = db.load_directory()


def directory():
    return st.session_state.directory


def show_result(result: Result) -> None:
    if result.ok:
        st.success(result.message)
    else:
        st.error(result.message)


def show_errors(errors: list[str]) -> None:
    for e in errors:
        st.error(e)


def commit(result: Result, member_id: int) -> None:
    # Persist after every successful mutation
    if result.ok:
        db.save_member(directory().lookup(member_id))
    show_result(result)


# ---------- Pages ----------

def profile_inputs(prefix: str) -> tuple[str, ...]:
    col1, col2, col3 = st.columns(3)
    with col1:
        member_id = st.text_input("Member ID", value=str(utils.next_member_id(directory())), key=f"{prefix}_id")
        name = st.text_input("Name", key=f"{prefix}_name")
        location = st.text_input("Location", key=f"{prefix}_location")
    with col2:
        phone = st.text_input("Phone", key=f"{prefix}_phone")
        email = st.text_input("Email", key=f"{prefix}_email")
        gender = st.radio("Gender", utils.GENDERS, horizontal=True, key=f"{prefix}_gender")
    with col3:
        dob = st.text_input("Date of birth", placeholder=utils.DATE_PLACEHOLDER, key=f"{prefix}_dob")
        start_date = st.text_input(
            "Membership start date", placeholder=utils.DATE_PLACEHOLDER, key=f"{prefix}_start"
        )
    return member_id, name, location, phone, email, gender, dob, start_date


def enroll_member(member) -> None:
    # insert_member refuses an id another session already saved
    show_result(services.enroll(directory(), member, persist=db.insert_member))


def members_page():
    st.header("👥 Add Member")

    regular_tab, premium_tab = st.tabs(["Regular member", "Premium member"])

    with regular_tab:
        profile = profile_inputs("regular")
        referral_source = st.text_input("Referral source")
        if st.button("Add Regular Member", type="primary"):
            errors = utils.validate_regular_inputs(*profile, referral_source=referral_source)
            if errors:
                show_errors(errors)
            else:
                member_id, *rest = (v.strip() for v in profile)
                enroll_member(MeteredPlanMember(int(member_id), *rest, referral_source=referral_source.strip()))

    with premium_tab:
        profile = profile_inputs("premium")
        trainer = st.text_input("Trainer name")
        if st.button("Add Premium Member", type="primary"):
            errors = utils.validate_premium_inputs(*profile, personal_trainer=trainer)
            if errors:
                show_errors(errors)
            else:
                member_id, *rest = (v.strip() for v in profile)
                enroll_member(PrepaidMember(int(member_id), *rest, personal_trainer=trainer.strip()))


def actions_page():
    st.header("🏋️ Member Actions")

    if not len(directory()):
        st.info("No members yet. Add a member first.")
        return

    raw_id = st.text_input("Member ID")
    id_errors = utils.validate_member_id(raw_id)
    if raw_id and id_errors:
        show_errors(id_errors)
        return
    if not raw_id:
        st.caption("Enter a member ID to act on.")
        return
    member_id = int(raw_id)

    try:
        member = directory().lookup(member_id)
        st.write(
            f"**{member.name}** ({member.kind.value}) | Status: **{member.status_label}** | "
            f"Attendance: **{member.attendance}** | Points: **{member.loyalty_points}**"
        )
    except MemberNotFoundError:
        st.warning("Member not found")

    c1, c2, c3 = st.columns(3)
    with c1:
        if st.button("Activate Membership"):
            commit(services.activate(directory(), member_id), member_id)
        if st.button("Deactivate Membership"):
            commit(services.deactivate(directory(), member_id), member_id)
        if st.button("Mark Attendance"):
            commit(services.mark_attendance(directory(), member_id), member_id)

    with c2:
        new_plan = st.selectbox("Plan", list(PLAN_PRICES))
        if st.button("Upgrade Plan"):
            commit(services.upgrade_plan(directory(), member_id, new_plan), member_id)
        removal_reason = st.text_input("Removal reason")
        if st.button("Revert Regular Member"):
            commit(services.revert_regular_member(directory(), member_id, removal_reason), member_id)

    with c3:
        amount = st.text_input("Paid amount")
        if st.button("Pay Due Amount"):
            errors = utils.validate_amount(amount)
            if errors:
                show_errors(errors)
            else:
                commit(services.pay_due_amount(directory(), member_id, utils.parse_amount(amount)), member_id)
        if st.button("Calculate Discount"):
            commit(services.calculate_discount(directory(), member_id), member_id)
        if st.button("Revert Premium Member"):
            commit(services.revert_premium_member(directory(), member_id), member_id)


def display_page():
    st.header("📋 Members")

    regular = directory().of_kind(MemberKind.REGULAR)
    premium = directory().of_kind(MemberKind.PREMIUM)

    st.subheader("Regular Members")
    if regular:
        df = utils.members_frame(regular)[[
            "id", "name", "location", "phone", "email", "gender", "dob", "membership_start_date",
            "plan", "active", "attendance", "loyalty_points", "referral_source",
        ]]
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.caption("No regular members.")

    st.subheader("Premium Members")
    if premium:
        rows = [utils.member_report_row(m) for m in premium]
        df = pd.DataFrame(rows, columns=utils.REPORT_COLUMNS).drop(columns=["Type"])
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.caption("No premium members.")


def reports_page():
    st.header("🧾 Reports")

    st.subheader("Member details file")
    c1, c2 = st.columns(2)
    with c1:
        if st.button("Save to File", type="primary"):
            if not len(directory()):
                st.error("No members to save to file")
            else:
                try:
                    path = utils.write_member_report(
                        directory().all(), settings.report_file, settings.report_backup_file
                    )
                    st.success(f"Member details saved to file successfully.\nLocation: {path.resolve()}")
                except OSError as e:
                    logger.exception("Saving member report failed")
                    st.error(f"Error saving to file: {e}")
    with c2:
        if st.button("Read from File"):
            if not settings.report_file.exists():
                st.error("No member details file found")
            else:
                for title, df in utils.read_member_report(settings.report_file).items():
                    st.subheader(f"{title} Members")
                    st.dataframe(df, use_container_width=True, hide_index=True)

    st.divider()

    st.subheader("Export members to CSV")
    if len(directory()):
        st.download_button(
            "Download members.csv",
            data=utils.members_to_csv_bytes(directory().all()),
            file_name="members.csv",
            mime="text/csv",
        )
    else:
        st.caption("No members to export.")


def settings_page():
    st.header("⚙️ Settings")

    st.subheader("Sample data")
    st.caption("Insert 3 sample members for testing (adds new members each run).")
    if st.button("Insert sample data"):
        added = utils.insert_sample_data(directory(), persist=db.insert_member)
        st.success(f"Inserted {len(added)} sample members.")
        st.rerun()


def main_app():
    st.sidebar.title("🏋️ Gym System")
    st.sidebar.caption(f"{len(directory())} members")

    pages = ["Members", "Actions", "Display", "Reports", "Settings"]
    if "page" not in st.session_state:
        st.session_state.page = "Members"
    st.session_state.page = st.sidebar.radio("Navigate", pages, index=pages.index(st.session_state.page))

    if st.session_state.page == "Members":
        members_page()
    elif st.session_state.page == "Actions":
        actions_page()
    elif st.session_state.page == "Display":
        display_page()
    elif st.session_state.page == "Reports":
        reports_page()
    elif st.session_state.page == "Settings":
        settings_page()


# --------- App entry ---------

def run():
    init_once()
    main_app()


if __name__ == "__main__":
    run()
