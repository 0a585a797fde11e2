"""Unit tests for search predicate construction."""

from datetime import date

import pytest
from sqlalchemy.orm import aliased

from rideback.db.models import TheftReport
from rideback.errors import ValidationError
from rideback.search.service import SearchFilters, build_predicate, search_bikes


def _clauses(filters: SearchFilters) -> list[str]:
    latest = aliased(TheftReport, name="latest_report")
    return [str(c) for c in build_predicate(filters, latest, today=date(2024, 6, 1))]


class TestBuildPredicate:
    def test_defaults_exclude_private_and_registered(self):
        clauses = _clauses(SearchFilters())
        assert len(clauses) == 2
        assert "visibility" in clauses[0]
        assert "IN" in clauses[1]

    def test_status_all_same_as_default(self):
        assert _clauses(SearchFilters(status="all")) == _clauses(SearchFilters())

    def test_explicit_status(self):
        clauses = _clauses(SearchFilters(status="registered"))
        assert "bikes.status =" in clauses[-1]

    def test_every_filter_adds_a_clause(self):
        filters = SearchFilters(
            query="trek",
            type="road",
            brand="Trek",
            color="red",
            city="Haifa",
            date_range="month",
            status="stolen",
        )
        assert len(_clauses(filters)) == 8

    def test_unknown_date_range(self):
        with pytest.raises(ValidationError):
            _clauses(SearchFilters(date_range="decade"))


@pytest.mark.asyncio
async def test_page_must_be_positive():
    with pytest.raises(ValidationError):
        await search_bikes(None, SearchFilters(), page=0, page_size=10)  # type: ignore[arg-type]
