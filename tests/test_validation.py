from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from spendbook.models import Currency, ExpenseDraft, Filters, FiltersPatch
from spendbook.services.validation import (
    parse_draft,
    parse_instant,
    reconcile_filter_dates,
    validate_draft,
)


def _raw(**overrides):
    raw = {
        "amount": "12.50",
        "currency": "eur",
        "category": "  Food ",
        "date": " 2024-03-05 ",
        "note": " lunch ",
    }
    raw.update(overrides)
    return raw


def _draft(**overrides) -> ExpenseDraft:
    fields = dict(
        amount=10.0,
        currency=Currency.PLN,
        category="Food",
        date_iso="2024-01-01",
        note="",
    )
    fields.update(overrides)
    return ExpenseDraft(**fields)


class TestParseInstant:
    def test_date_only_is_midnight_utc(self):
        assert parse_instant("2024-02-29") == datetime(2024, 2, 29, tzinfo=timezone.utc)

    def test_datetime_with_z_suffix(self):
        assert parse_instant("2024-01-01T10:30:00Z") == datetime(
            2024, 1, 1, 10, 30, tzinfo=timezone.utc
        )

    @pytest.mark.parametrize("value", ["", "   ", "2024-02-30", "yesterday", None, 42])
    def test_invalid_values_yield_none(self, value):
        assert parse_instant(value) is None

    @pytest.mark.parametrize(
        "value", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:00:00-05:00"]
    )
    def test_offset_beyond_datetime_range_yields_none(self, value):
        assert parse_instant(value) is None


class TestParseDraft:
    def test_trims_and_normalises(self):
        result = parse_draft(_raw())
        assert result.ok
        draft = result.value
        assert draft.amount == 12.5
        assert draft.currency is Currency.EUR
        assert draft.category == "Food"
        assert draft.date_iso == "2024-03-05"
        assert draft.note == "lunch"

    def test_note_defaults_to_empty(self):
        raw = _raw()
        del raw["note"]
        assert parse_draft(raw).value.note == ""

    @pytest.mark.parametrize("amount", ["", "abc", "0", "-3", "nan", "inf", None])
    def test_bad_amounts_fail(self, amount):
        result = parse_draft(_raw(amount=amount))
        assert not result.ok
        assert result.error == "amount must be a positive number"

    def test_empty_and_invalid_currency_are_distinguishable(self):
        empty = parse_draft(_raw(currency="  "))
        invalid = parse_draft(_raw(currency="GBP"))
        assert not empty.ok and not invalid.ok
        assert empty.error == "currency is required"
        assert invalid.error == "unsupported currency"

    def test_category_required(self):
        result = parse_draft(_raw(category="   "))
        assert not result.ok
        assert result.error == "category is required"

    def test_date_presence_only(self):
        assert parse_draft(_raw(date="")).error == "date is required"
        # calendar validity is validate_draft's job
        assert parse_draft(_raw(date="not-a-date")).ok


class TestValidateDraft:
    def test_valid_draft_has_no_issues(self):
        assert validate_draft(_draft()) == []

    @pytest.mark.parametrize("amount", [0.0, -1.0, -0.01, math.nan])
    def test_non_positive_amount_reported(self, amount):
        fields = [i.field for i in validate_draft(_draft(amount=amount))]
        assert "amount" in fields

    def test_unknown_currency_reported(self):
        (issue,) = validate_draft(_draft(currency="GBP"))
        assert issue.field == "currency"
        assert issue.message == "unsupported currency"

    def test_out_of_range_offset_date_reported(self):
        (issue,) = validate_draft(_draft(date_iso="9999-12-31T23:00:00-05:00"))
        assert issue.field == "date"

    def test_accumulates_every_problem(self):
        issues = validate_draft(_draft(amount=-1, category=" ", date_iso="2024-13-01"))
        assert [i.field for i in issues] == ["amount", "category", "date"]

    def test_issue_renders_as_field_and_message(self):
        (issue,) = validate_draft(_draft(date_iso="bad"))
        assert str(issue) == "date: a valid date is required"


class TestReconcileFilterDates:
    def test_merges_patch(self):
        current = Filters(text="old")
        result = reconcile_filter_dates(current, FiltersPatch(category="Food"))
        assert result == Filters(category="Food", text="old")

    def test_valid_range_untouched(self):
        current = Filters(date_from="2024-01-01")
        result = reconcile_filter_dates(current, FiltersPatch(date_to="2024-02-01"))
        assert (result.date_from, result.date_to) == ("2024-01-01", "2024-02-01")

    def test_patched_from_pulls_to_down(self):
        current = Filters(date_from="2024-01-01", date_to="2024-01-31")
        result = reconcile_filter_dates(current, FiltersPatch(date_from="2024-02-15"))
        assert (result.date_from, result.date_to) == ("2024-02-15", "2024-02-15")

    def test_patched_to_pulls_from_up(self):
        current = Filters(date_from="2024-02-01", date_to="2024-02-28")
        result = reconcile_filter_dates(current, FiltersPatch(date_to="2024-01-10"))
        assert (result.date_from, result.date_to) == ("2024-01-10", "2024-01-10")

    def test_explicit_none_clears_bound(self):
        current = Filters(date_from="2024-01-01", date_to="2024-01-31")
        result = reconcile_filter_dates(current, FiltersPatch(date_to=None))
        assert result.date_to is None
        assert result.date_from == "2024-01-01"

    def test_input_not_mutated(self):
        current = Filters(date_from="2024-01-01", date_to="2024-01-31")
        reconcile_filter_dates(current, FiltersPatch(date_from="2024-03-01"))
        assert current.date_to == "2024-01-31"
