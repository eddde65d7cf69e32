"""
daterules Rule Set Query Tests

Matching, classification, per-year occurrences, range enumeration and
bounded next/previous search.
"""
from __future__ import annotations

import logging

import pytest

from daterules import (
    AnnualRule,
    CalendarDate,
    NoSuchOccurrenceError,
    NthWeekdayRule,
    OccurrenceNotFoundError,
    RuleSet,
    SpecificRule,
    UnknownRuleError,
    Weekday,
)

from tests.conftest import d, make_lieu


# =============================================================================
# Accessors
# =============================================================================

class TestAccessors:
    """Test the read-only collection surface."""

    def test_names_and_lookup(self, bank_holiday_rules: RuleSet) -> None:
        assert bank_holiday_rules.names == ("Workday", "Weekend", "Early May", "Spring")
        assert len(bank_holiday_rules) == 4
        assert "Spring" in bank_holiday_rules
        assert "Autumn" not in bank_holiday_rules
        assert bank_holiday_rules.get("Spring").n == -1
        assert [rule.name for rule in bank_holiday_rules] == list(bank_holiday_rules.names)

    def test_unknown_rule(self, bank_holiday_rules: RuleSet) -> None:
        with pytest.raises(UnknownRuleError) as exc_info:
            bank_holiday_rules.get("Autumn")
        assert exc_info.value.code == "DR_UNKNOWN_RULE"
        assert exc_info.value.details == {"rule_set": "bank-holidays"}

    def test_rules_mapping_is_read_only(self, bank_holiday_rules: RuleSet) -> None:
        with pytest.raises(TypeError):
            bank_holiday_rules.rules["Extra"] = AnnualRule("Extra", month=1, day=1)  # type: ignore[index]

    def test_repr(self, bank_holiday_rules: RuleSet) -> None:
        assert "bank-holidays" in repr(bank_holiday_rules)

    def test_search_years_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            RuleSet([], search_years=0)


# =============================================================================
# Matching and Classification
# =============================================================================

class TestMatching:
    """Test matches(), is_match() and classify()."""

    def test_matches_in_definition_order(self, bank_holiday_rules: RuleSet) -> None:
        assert bank_holiday_rules.matches("2024-05-06") == ["Workday", "Early May"]
        assert bank_holiday_rules.matches("2024-05-07") == ["Workday"]
        assert bank_holiday_rules.matches("2024-05-04") == ["Weekend"]

    def test_saturday_christmas(self, christmas_rules: RuleSet) -> None:
        assert christmas_rules.matches("2021-12-25") == ["Weekend", "Christmas"]
        assert christmas_rules.matches("2021-12-27") == ["Workday", "Christmas lieu"]
        assert christmas_rules.matches("2021-12-28") == ["Workday", "Boxing Day lieu"]

    def test_is_match(self, christmas_rules: RuleSet) -> None:
        assert christmas_rules.is_match("Christmas", "2023-12-25")
        assert not christmas_rules.is_match("Christmas", "2023-12-26")
        with pytest.raises(UnknownRuleError):
            christmas_rules.is_match("Easter", "2023-12-25")

    def test_matches_agrees_with_is_match(self, christmas_rules: RuleSet) -> None:
        start = CalendarDate(2020, 12, 20)
        for offset in range(800):
            day = start.add_days(offset)
            matched = christmas_rules.matches(day)
            for name in christmas_rules.names:
                assert (name in matched) == christmas_rules.is_match(name, day)

    def test_classify_later_rules_win(self, bank_holiday_rules: RuleSet) -> None:
        assert bank_holiday_rules.classify("2024-05-06") == "bank_holiday"
        assert bank_holiday_rules.classify("2024-05-07") == "workday"
        assert bank_holiday_rules.classify("2024-05-04") == "weekend"

    def test_classify_falls_back_to_name(self, christmas_rules: RuleSet) -> None:
        assert christmas_rules.classify("2021-12-25") == "Christmas"
        assert christmas_rules.classify("2021-12-28") == "Boxing Day lieu"

    def test_classify_no_match(self) -> None:
        rules = RuleSet([AnnualRule("Christmas", month=12, day=25)])
        assert rules.classify("2024-01-01") is None

    def test_accepts_datetime_dates(self, bank_holiday_rules: RuleSet) -> None:
        assert bank_holiday_rules.matches(d("2024-05-06").to_date()) == ["Workday", "Early May"]

    def test_year_restricted_rule(self) -> None:
        rules = RuleSet([AnnualRule("New rule", month=2, day=1, first_year=2020)])
        assert rules.matches("2019-02-01") == []
        assert rules.matches("2020-02-01") == ["New rule"]
        assert rules.occurrence_in_year("New rule", 2019) is None


# =============================================================================
# Occurrences
# =============================================================================

class TestOccurrences:
    """Test occurrence_in_year() and occurrences_in_year()."""

    def test_occurrences_in_year(self, bank_holiday_rules: RuleSet) -> None:
        assert bank_holiday_rules.occurrences_in_year(2024) == {
            "Workday": None,
            "Weekend": None,
            "Early May": CalendarDate(2024, 5, 6),
            "Spring": CalendarDate(2024, 5, 27),
        }

    def test_idempotent(self, christmas_rules: RuleSet) -> None:
        first = christmas_rules.occurrences_in_year(2021)
        second = christmas_rules.occurrences_in_year(2021)
        assert first == second
        assert christmas_rules.occurrence_in_year("Boxing Day lieu", 2021) == first["Boxing Day lieu"]

    def test_occurrence_is_a_match(self, christmas_rules: RuleSet) -> None:
        for year in range(2015, 2035):
            for name, day in christmas_rules.occurrences_in_year(year).items():
                if day is not None:
                    assert name in christmas_rules.matches(day)

    def test_leap_day_absent_in_common_year(self) -> None:
        rules = RuleSet([AnnualRule("Leap day", month=2, day=29)])
        assert rules.occurrences_in_year(2023) == {"Leap day": None}
        assert rules.occurrences_in_year(2024) == {"Leap day": CalendarDate(2024, 2, 29)}

    def test_missing_nth_weekday_maps_to_none(self, caplog: pytest.LogCaptureFixture) -> None:
        rules = RuleSet([
            NthWeekdayRule("Fifth Monday", month=6, weekday=Weekday.MONDAY, n=5),
        ])
        with pytest.raises(NoSuchOccurrenceError):
            rules.occurrence_in_year("Fifth Monday", 2024)
        with caplog.at_level(logging.WARNING, logger="daterules.engine.rule_set"):
            assert rules.occurrences_in_year(2024) == {"Fifth Monday": None}
        assert "Fifth Monday" in caplog.text

    def test_dates_in_year(self, bank_holiday_rules: RuleSet) -> None:
        weekend_days = bank_holiday_rules.dates_in_year("Weekend", 2024)
        assert len(weekend_days) == 104
        assert weekend_days[0] == CalendarDate(2024, 1, 6)
        assert bank_holiday_rules.dates_in_year("Spring", 2024) == [CalendarDate(2024, 5, 27)]


# =============================================================================
# Range Enumeration
# =============================================================================

class TestOccurrencesBetween:
    """Test occurrences_between()."""

    def test_sorted_by_date_then_definition_order(self, bank_holiday_rules: RuleSet) -> None:
        assert bank_holiday_rules.occurrences_between("2024-05-04", "2024-05-06") == [
            (CalendarDate(2024, 5, 4), "Weekend"),
            (CalendarDate(2024, 5, 5), "Weekend"),
            (CalendarDate(2024, 5, 6), "Workday"),
            (CalendarDate(2024, 5, 6), "Early May"),
        ]

    def test_restricted_names(self, christmas_rules: RuleSet) -> None:
        hits = christmas_rules.occurrences_between(
            "2021-12-01", "2022-01-31",
            names=["Christmas", "Boxing Day", "Christmas lieu", "Boxing Day lieu"],
        )
        assert hits == [
            (CalendarDate(2021, 12, 25), "Christmas"),
            (CalendarDate(2021, 12, 26), "Boxing Day"),
            (CalendarDate(2021, 12, 27), "Christmas lieu"),
            (CalendarDate(2021, 12, 28), "Boxing Day lieu"),
        ]

    def test_spans_years(self, bank_holiday_rules: RuleSet) -> None:
        hits = bank_holiday_rules.occurrences_between(
            "2023-01-01", "2025-12-31", names=["Early May"],
        )
        assert [day for day, _ in hits] == [
            CalendarDate(2023, 5, 1),
            CalendarDate(2024, 5, 6),
            CalendarDate(2025, 5, 5),
        ]

    def test_empty_when_start_after_end(self, bank_holiday_rules: RuleSet) -> None:
        assert bank_holiday_rules.occurrences_between("2024-06-01", "2024-05-01") == []

    def test_unknown_name(self, bank_holiday_rules: RuleSet) -> None:
        with pytest.raises(UnknownRuleError):
            bank_holiday_rules.occurrences_between("2024-01-01", "2024-12-31", names=["Autumn"])


# =============================================================================
# Bounded Search
# =============================================================================

class TestNextAndPrevious:
    """Test next_occurrence() and previous_occurrence()."""

    def test_next_is_strictly_after(self, bank_holiday_rules: RuleSet) -> None:
        assert bank_holiday_rules.next_occurrence("Early May", "2024-05-06") == d("2025-05-05")
        assert bank_holiday_rules.next_occurrence("Early May", "2024-05-05") == d("2024-05-06")

    def test_next_inclusive(self, bank_holiday_rules: RuleSet) -> None:
        found = bank_holiday_rules.next_occurrence("Early May", "2024-05-06", inclusive=True)
        assert found == d("2024-05-06")

    def test_previous(self, bank_holiday_rules: RuleSet) -> None:
        assert bank_holiday_rules.previous_occurrence("Early May", "2024-05-06") == d("2023-05-01")
        assert bank_holiday_rules.previous_occurrence(
            "Early May", "2024-05-06", inclusive=True,
        ) == d("2024-05-06")

    def test_next_daily_set(self, bank_holiday_rules: RuleSet) -> None:
        assert bank_holiday_rules.next_occurrence("Weekend", "2024-01-01") == d("2024-01-06")
        assert bank_holiday_rules.previous_occurrence("Weekend", "2024-01-01") == d("2023-12-31")

    def test_next_lieu_crosses_year(self) -> None:
        rules = RuleSet([
            AnnualRule("Hogmanay", month=12, day=31),
            make_lieu("Hogmanay lieu", "Hogmanay"),
        ])
        # 31-Dec-2022 is a Saturday and 31-Dec-2023 a Sunday
        assert rules.next_occurrence("Hogmanay lieu", "2022-12-31") == d("2023-01-02")
        assert rules.next_occurrence("Hogmanay lieu", "2023-01-02") == d("2024-01-01")
        assert rules.previous_occurrence("Hogmanay lieu", "2024-01-01") == d("2023-01-02")

    def test_past_specific_rule_not_found(self) -> None:
        rules = RuleSet([SpecificRule("Jubilee", on=d("2022-06-03"))], search_years=5)
        with pytest.raises(OccurrenceNotFoundError) as exc_info:
            rules.next_occurrence("Jubilee", "2023-01-01")
        assert exc_info.value.rule_name == "Jubilee"
        assert exc_info.value.details["max_years"] == 5
        assert rules.previous_occurrence("Jubilee", "2026-01-01") == d("2022-06-03")
        with pytest.raises(OccurrenceNotFoundError):
            rules.previous_occurrence("Jubilee", "2030-01-01")

    def test_cap_counts_years_after_the_start_year(self) -> None:
        """The start year is scanned, then max_years further years."""
        rules = RuleSet([SpecificRule("Offsite", on=d("2026-03-02"))])
        assert rules.next_occurrence("Offsite", "2024-01-01", max_years=2) == d("2026-03-02")
        with pytest.raises(OccurrenceNotFoundError):
            rules.next_occurrence("Offsite", "2024-01-01", max_years=1)
        assert rules.previous_occurrence("Offsite", "2028-12-31", max_years=2) == d("2026-03-02")
        with pytest.raises(OccurrenceNotFoundError):
            rules.previous_occurrence("Offsite", "2028-12-31", max_years=1)

    def test_max_years_override(self) -> None:
        rules = RuleSet([SpecificRule("Far off", on=d("2040-01-01"))])
        with pytest.raises(OccurrenceNotFoundError):
            rules.next_occurrence("Far off", "2024-01-01", max_years=10)
        assert rules.next_occurrence("Far off", "2024-01-01", max_years=20) == d("2040-01-01")

    def test_next_skips_years_without_occurrence(self) -> None:
        rules = RuleSet([AnnualRule("Leap day", month=2, day=29)])
        assert rules.next_occurrence("Leap day", "2024-03-01") == d("2028-02-29")
        assert rules.previous_occurrence("Leap day", "2024-02-28") == d("2020-02-29")

    def test_unknown_rule(self, bank_holiday_rules: RuleSet) -> None:
        with pytest.raises(UnknownRuleError):
            bank_holiday_rules.next_occurrence("Autumn", "2024-01-01")
