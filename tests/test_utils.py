"""
Tests for input validation, the fixed-width member report and exports.
"""

import io
from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from conftest import attend
import utils
from models import MeteredPlanMember

PROFILE = ("5", "Sita", "Pokhara", "9812345678", "sita@example.com", "Female", "1990/05/20", "2024/01/10")


class TestValidation:
    @pytest.mark.parametrize("phone,ok", [("9812345678", True), ("981234567", False), ("98123456789", False), ("98123x5678", False)])
    def test_phone(self, phone, ok):
        assert utils.validate_phone(phone) is ok

    @pytest.mark.parametrize(
        "email,ok",
        [("a.b@example.com", True), ("user+tag@mail.co", True), ("no-at.example.com", False), ("a@b.c", False)],
    )
    def test_email(self, email, ok):
        assert utils.validate_email(email) is ok

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2024/02/29", date(2024, 2, 29)),
            ("2000/02/29", date(2000, 2, 29)),
            ("1900/02/29", None),
            ("2023/02/29", None),
            ("2023/04/31", None),
            ("2023/13/01", None),
            ("1899/12/31", None),
            ("2026/01/01", None),
            ("2023-01-01", None),
            ("YYYY/MM/DD", None),
            ("", None),
        ],
    )
    def test_parse_member_date(self, text, expected):
        assert utils.parse_member_date(text) == expected

    def test_age_at_counts_birthday(self):
        assert utils.age_at(date(2010, 6, 15), date(2020, 6, 14)) == 9
        assert utils.age_at(date(2010, 6, 15), date(2020, 6, 15)) == 10

    def test_valid_profile(self):
        assert utils.validate_member_inputs(*PROFILE) == []

    def test_missing_fields(self):
        profile = list(PROFILE)
        profile[1] = " "
        assert utils.validate_member_inputs(*profile) == ["Please fill all required fields"]

    def test_collects_every_error(self):
        errors = utils.validate_member_inputs("x1", "Sita", "Pokhara", "123", "bad", "Female", "1990/02/30", "2024/01/10")
        assert errors == [
            "Invalid ID format",
            "Invalid phone number format",
            "Invalid email format",
            "Invalid Date of Birth format (YYYY/MM/DD)",
        ]

    def test_minimum_age(self):
        profile = list(PROFILE)
        profile[6] = "2015/01/11"
        assert utils.validate_member_inputs(*profile) == [
            "Member must be at least 10 years old to start membership"
        ]

    def test_variant_specific_fields(self):
        assert utils.validate_regular_inputs(*PROFILE, referral_source="") == ["Please enter referral source"]
        assert utils.validate_premium_inputs(*PROFILE, personal_trainer="") == ["Please enter trainer name"]
        assert utils.validate_premium_inputs(*PROFILE, personal_trainer="Hari") == []

    def test_member_id(self):
        assert utils.validate_member_id("") == ["Please enter Member ID"]
        assert utils.validate_member_id("abc") == ["Please enter a valid Member ID"]
        assert utils.validate_member_id("12") == []

    def test_amount(self):
        assert utils.validate_amount("") == ["Please enter paid amount"]
        assert utils.validate_amount("ten") == ["Please enter a valid paid amount"]
        assert utils.validate_amount("-5") == ["Please enter a valid paid amount"]
        assert utils.validate_amount("1250.50") == []
        assert utils.parse_amount("1250.50") == Decimal("1250.50")


class TestMemberReport:
    def test_write_and_read_back(self, tmp_path, directory, regular_member, premium_member):
        regular_member.activate()
        attend(regular_member, 30)
        regular_member.upgrade_plan("deluxe")
        premium_member.record_payment(12000)

        path = utils.write_member_report(directory.all(), tmp_path / "MemberDetails.txt")
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("ID      Name")
        assert lines[1] == "-" * 250
        assert lines[-1] == "-" * 250
        assert len(lines) == 5

        tables = utils.read_member_report(path)
        regular = tables["Regular"]
        premium = tables["Premium"]

        assert list(regular.columns) == [
            "ID", "Name", "Location", "Phone", "Email", "Gender", "DOB", "Start Date", "Plan", "Price", "Status",
        ]
        assert regular.loc[0, "ID"] == "1"
        assert regular.loc[0, "Name"] == "Ram Thapa"
        assert regular.loc[0, "Plan"] == "deluxe"
        assert regular.loc[0, "Price"] == "Rs. 18500.00"
        assert regular.loc[0, "Status"] == "Active"

        assert premium.loc[0, "Trainer"] == "Hari KC"
        assert premium.loc[0, "Price"] == "Rs. 50000.00"
        assert premium.loc[0, "Status"] == "Inactive"
        assert premium.loc[0, "Full Pay"] == "False"
        assert premium.loc[0, "Paid"] == "Rs. 12000.00"
        assert premium.loc[0, "Remaining"] == "Rs. 38000.00"
        assert premium.loc[0, "Discount"] == "Rs. 0.00"

    def test_wide_values_read_back_whole(self, tmp_path):
        email = "alexandra.konstantinopoulou@example.com"
        name = "Alexandra Konstantinopoulou"
        member = MeteredPlanMember(1234567, name, "Kathmandu Valley North", "9812345678", email,
                                   "Female", "1990/05/20", "2024/01/10", referral_source="Friend")

        path = utils.write_member_report([member], tmp_path / "MemberDetails.txt")
        regular = utils.read_member_report(path)["Regular"]

        assert regular.loc[0, "ID"] == "1234567"
        assert regular.loc[0, "Name"] == name
        assert regular.loc[0, "Location"] == "Kathmandu Valley North"
        assert regular.loc[0, "Email"] == email
        assert regular.loc[0, "Phone"] == "9812345678"
        assert regular.loc[0, "Plan"] == "basic"

    def test_regular_rows_show_na_for_payment_columns(self, regular_member):
        row = utils.member_report_row(regular_member)
        assert row[8:] == ["Regular", "basic", "Rs. 6500.00", "Inactive", "N/A", "N/A", "N/A", "N/A"]

    def test_existing_report_moved_to_backup(self, tmp_path, directory):
        path = tmp_path / "MemberDetails.txt"
        backup = tmp_path / "MemberDetails_backup.txt"
        path.write_text("old report\n", encoding="utf-8")

        utils.write_member_report(directory.all(), path, backup)

        assert backup.read_text(encoding="utf-8") == "old report\n"
        assert path.read_text(encoding="utf-8").startswith("ID")


class TestExportsAndSamples:
    def test_members_to_csv(self, directory):
        df = pd.read_csv(io.BytesIO(utils.members_to_csv_bytes(directory.all())))
        assert list(df["id"]) == [1, 2]
        assert list(df["kind"]) == ["regular", "premium"]

    def test_insert_sample_data_uses_fresh_ids(self, directory):
        added = utils.insert_sample_data(directory)
        assert [m.id for m in added] == [3, 4, 5]
        assert len(directory) == 5
        utils.insert_sample_data(directory)
        assert len(directory) == 8

    def test_sample_profiles_pass_validation(self):
        for member in utils.sample_members(1):
            profile = (str(member.id), member.name, member.location, member.phone, member.email,
                       member.gender, member.dob, member.membership_start_date)
            assert utils.validate_member_inputs(*profile) == []
