"""In-memory event filtering for the public listing page.

The full event list is loaded once per page run; every filter change rescans
it. Criteria compose with AND and an empty criterion matches everything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .models import STUDY_LEVELS, Event


@dataclass(frozen=True)
class FilterCriteria:
    keyword: str = ""
    city: str = ""
    country: str = ""
    study_level: str = ""

    def is_empty(self) -> bool:
        return not (self.keyword.strip() or self.city or self.country or self.study_level)


def matches_keyword(event: Event, keyword: str) -> bool:
    needle = (keyword or "").strip().lower()
    if not needle:
        return True
    return needle in event.event_name.lower() or needle in (event.university_name or "").lower()


def matches_city(event: Event, city: str) -> bool:
    return not city or event.city == city


def matches_country(event: Event, country: str) -> bool:
    return not country or event.university_country == country


def matches_study_level(event: Event, level: str) -> bool:
    return not level or level in event.study_levels


def matches(event: Event, criteria: FilterCriteria) -> bool:
    return (
        matches_keyword(event, criteria.keyword)
        and matches_city(event, criteria.city)
        and matches_country(event, criteria.country)
        and matches_study_level(event, criteria.study_level)
    )


def filter_events(events: Iterable[Event], criteria: FilterCriteria) -> List[Event]:
    """Events satisfying every active criterion, in their original order."""
    return [e for e in events if matches(e, criteria)]


def _distinct_sorted(values: Iterable[Optional[str]]) -> List[str]:
    return sorted({v for v in values if v})


def city_options(events: Iterable[Event]) -> List[str]:
    return _distinct_sorted(e.city for e in events)


def country_options(events: Iterable[Event]) -> List[str]:
    return _distinct_sorted(e.university_country for e in events)


def study_level_options() -> List[str]:
    return list(STUDY_LEVELS)
