"""Tests for id and time helpers."""

from datetime import date

from finance_tracker.stores import fixtures
from finance_tracker.utils import end_of_month, generate_id, start_of_month, utc_now


class TestGenerateId:
    """Tests for generate_id."""

    def test_ids_are_base36(self):
        entity_id = generate_id()
        assert entity_id.isalnum()
        assert entity_id == entity_id.lower()

    def test_ids_do_not_repeat(self):
        ids = {generate_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_ids_never_collide_with_fixture_ids(self):
        fixture_ids = {account.id for account in fixtures.seed_accounts()}
        assert generate_id() not in fixture_ids


class TestMonthHelpers:
    """Tests for month boundaries."""

    def test_start_of_month(self):
        assert start_of_month(date(2025, 10, 15)) == date(2025, 10, 1)

    def test_end_of_month(self):
        assert end_of_month(date(2025, 10, 15)) == date(2025, 10, 31)
        assert end_of_month(date(2024, 2, 3)) == date(2024, 2, 29)

    def test_utc_now_is_aware(self):
        assert utc_now().utcoffset().total_seconds() == 0
