"""Tests for country block management."""

import string
from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_entry
from core.constants import ErrorKind
from modules.countries.service import CountryManagementService, is_valid_country_code


@pytest.fixture
def service(store):
    return CountryManagementService(store)


class TestCountryCodes:

    @pytest.mark.parametrize("code", ["US", "FR", "ZZ"])
    def test_valid(self, code):
        assert is_valid_country_code(code) is True

    @pytest.mark.parametrize("code", ["", "U", "USA", "U1", "us", "É1"])
    def test_invalid(self, code):
        assert is_valid_country_code(code) is False


class TestBlockCountry:

    def test_block_normalizes_code_and_names_country(self, service):
        result = service.block_country(" us ")
        assert result.is_success
        assert result.data.country_code == "US"
        assert result.data.country_name == "United States"
        assert result.data.is_temporal is False
        assert result.data.expires_at is None

    def test_unknown_code_uses_code_as_name(self, service):
        result = service.block_country("ZZ")
        assert result.data.country_name == "ZZ"

    def test_block_is_idempotent(self, service):
        first = service.block_country("US")
        second = service.block_country("us")
        assert second.is_success
        assert second.data.blocked_at == first.data.blocked_at
        assert len(service.store) == 1

    def test_empty_code(self, service):
        result = service.block_country("")
        assert not result.is_success
        assert result.error_kind == ErrorKind.VALIDATION
        assert result.status_code == 400
        assert result.error_message == "Country code is required"

    def test_bad_code(self, service):
        result = service.block_country("USA")
        assert result.error_kind == ErrorKind.VALIDATION
        assert result.error_message == "Invalid country code"


class TestUnblockCountry:

    def test_unblock(self, service):
        service.block_country("US")
        assert service.unblock_country("us").is_success
        assert service.is_country_blocked("US") is False

    def test_unblock_not_blocked(self, service):
        result = service.unblock_country("US")
        assert result.error_kind == ErrorKind.NOT_FOUND
        assert result.status_code == 404

    def test_unblock_invalid_code(self, service):
        result = service.unblock_country("123")
        assert result.status_code == 400

    def test_unblock_temporal(self, service):
        service.add_temporal_block("FR", 30)
        assert service.unblock_country("FR").is_success


class TestTemporalBlock:

    def test_temporal_block(self, service):
        before = datetime.now(timezone.utc)
        result = service.add_temporal_block("fr", 60)

        assert result.is_success
        entry = result.data
        assert entry.country_code == "FR"
        assert entry.country_name == "France"
        assert entry.is_temporal is True
        assert before + timedelta(minutes=60) <= entry.expires_at
        assert entry.expires_at <= datetime.now(timezone.utc) + timedelta(minutes=60)

    @pytest.mark.parametrize("minutes", [0, -5, 1441])
    def test_duration_out_of_range(self, service, minutes):
        result = service.add_temporal_block("FR", minutes)
        assert result.error_kind == ErrorKind.VALIDATION
        assert "between 1 and 1440" in result.error_message

    @pytest.mark.parametrize("minutes", [1, 1440])
    def test_duration_bounds_inclusive(self, service, minutes):
        assert service.add_temporal_block("FR", minutes).is_success

    def test_empty_code_checked_before_duration(self, service):
        result = service.add_temporal_block("", 0)
        assert result.error_message == "Country code is required"

    def test_duration_checked_before_format(self, service):
        result = service.add_temporal_block("USA", 0)
        assert "between 1 and 1440" in result.error_message

    def test_bad_code(self, service):
        result = service.add_temporal_block("U1", 10)
        assert result.error_message == "Invalid country code"

    def test_conflict_with_permanent_block(self, service):
        service.block_country("US")
        result = service.add_temporal_block("US", 10)
        assert result.error_kind == ErrorKind.CONFLICT
        assert result.status_code == 409

    def test_conflict_with_temporal_block(self, service):
        service.add_temporal_block("US", 10)
        assert service.add_temporal_block("US", 20).status_code == 409

    def test_expired_block_can_be_renewed(self, service, store):
        store.add_temporal(make_entry("FR", "France", minutes=-1))
        assert service.add_temporal_block("FR", 10).is_success


class TestListBlockedCountries:

    def _fill(self, store, count):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        codes = ["A" + letter for letter in string.ascii_uppercase[:count]]
        for i, code in enumerate(codes):
            store.add(make_entry(code, blocked_at=base + timedelta(seconds=i)))
        return codes

    def test_pagination(self, service, store):
        codes = self._fill(store, 25)

        page = service.list_blocked_countries(page=3, page_size=10).data
        assert page.total_count == 25
        assert page.page == 3
        assert page.page_size == 10
        assert [e.country_code for e in page.items] == codes[20:]

    def test_page_past_end_is_empty(self, service, store):
        self._fill(store, 5)
        page = service.list_blocked_countries(page=4, page_size=10).data
        assert page.items == []
        assert page.total_count == 5

    @pytest.mark.parametrize("page,page_size,expected", [
        (0, 10, (1, 10)),
        (-3, 5, (1, 5)),
        (1, 0, (1, 10)),
        (1, 101, (1, 10)),
        (2, 100, (2, 100)),
    ])
    def test_paging_is_clamped(self, service, page, page_size, expected):
        data = service.list_blocked_countries(page=page, page_size=page_size).data
        assert (data.page, data.page_size) == expected

    def test_expired_entries_are_hidden(self, service, store):
        service.block_country("US")
        store.add_temporal(make_entry("FR", "France", minutes=-1))

        data = service.list_blocked_countries().data
        assert [e.country_code for e in data.items] == ["US"]
        assert data.total_count == 1

    def test_search_by_code_and_name(self, service):
        service.block_country("US")
        service.add_temporal_block("FR", 60)
        service.block_country("DE")

        by_name = service.list_blocked_countries(search_term="fran").data
        assert [e.country_code for e in by_name.items] == ["FR"]

        by_code = service.list_blocked_countries(search_term="us").data
        assert [e.country_code for e in by_code.items] == ["US"]

        everything = service.list_blocked_countries(search_term="   ").data
        assert everything.total_count == 3

    def test_search_applies_before_pagination(self, service, store):
        self._fill(store, 25)
        data = service.list_blocked_countries(page=1, page_size=10, search_term="AZ").data
        assert data.total_count == 0

        data = service.list_blocked_countries(page=1, page_size=10, search_term="AY").data
        assert data.total_count == 1
        assert data.items[0].country_code == "AY"


class TestIsCountryBlocked:

    def test_blocked_and_unblocked(self, service):
        service.block_country("US")
        assert service.is_country_blocked("us") is True
        assert service.is_country_blocked("FR") is False

    def test_invalid_code_is_never_blocked(self, service):
        assert service.is_country_blocked("Unknown") is False
        assert service.is_country_blocked(None) is False

    def test_expired_temporal_block(self, service, store):
        store.add_temporal(make_entry("FR", minutes=-1))
        assert service.is_country_blocked("FR") is False
