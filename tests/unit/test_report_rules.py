"""Unit tests for theft-report coordinate validation and contact resolution."""

from types import SimpleNamespace

import pytest

from rideback.errors import ValidationError
from rideback.reports.service import resolve_contact, validate_coordinates


class TestValidateCoordinates:
    def test_both_absent(self):
        assert validate_coordinates(None, None) == (None, None)

    def test_blank_strings_treated_as_absent(self):
        assert validate_coordinates("", "  ") == (None, None)

    def test_numeric_strings_kept_as_text(self):
        assert validate_coordinates("32.0853", "34.7818") == ("32.0853", "34.7818")

    def test_floats_accepted(self):
        assert validate_coordinates(-33.5, 151.25) == ("-33.5", "151.25")

    def test_bounds_inclusive(self):
        assert validate_coordinates("90", "-180") == ("90", "-180")

    def test_latitude_out_of_range(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_coordinates("91", "34.0")
        assert [i.field for i in exc_info.value.issues] == ["latitude"]

    def test_longitude_out_of_range(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_coordinates("10", "180.5")
        assert [i.field for i in exc_info.value.issues] == ["longitude"]

    def test_non_numeric(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_coordinates("north", "east")
        assert {i.field for i in exc_info.value.issues} == {"latitude", "longitude"}

    def test_nan_rejected(self):
        with pytest.raises(ValidationError):
            validate_coordinates("nan", "10")

    def test_only_one_given(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_coordinates("32.1", None)
        assert exc_info.value.issues[0].field == "longitude"


def _report(**kwargs):
    reporter = SimpleNamespace(
        username="alice",
        first_name="Alice",
        last_name="Cohen",
        phone="050-1234567",
        email="alice@example.com",
    )
    defaults = {
        "use_profile_contact": True,
        "contact_name": None,
        "contact_phone": None,
        "contact_email": None,
        "reporter": reporter,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestResolveContact:
    def test_profile_contact(self):
        contact = resolve_contact(_report())
        assert contact.name == "Alice Cohen"
        assert contact.phone == "050-1234567"
        assert contact.email == "alice@example.com"

    def test_profile_without_names_falls_back_to_username(self):
        report = _report()
        report.reporter.first_name = None
        report.reporter.last_name = None
        assert resolve_contact(report).name == "alice"

    def test_explicit_contact(self):
        contact = resolve_contact(
            _report(
                use_profile_contact=False,
                contact_name="Dana",
                contact_phone="052-0000000",
                contact_email="dana@example.com",
            )
        )
        assert contact.name == "Dana"
        assert contact.phone == "052-0000000"
        assert contact.email == "dana@example.com"
