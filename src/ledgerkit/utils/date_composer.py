"""Compose a calendar date from template match groups and static values."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import TYPE_CHECKING, Optional

from ledgerkit.utils.match_groups import extract_group

if TYPE_CHECKING:
    from ledgerkit.domain.entities import Template

logger = logging.getLogger(__name__)


def compose_date(
    match: re.Match, template: Template, today: Optional[date] = None
) -> Optional[date]:
    """Assemble a date from a template's year, month and day sources.

    Year comes from its match group, else from the template's static year;
    without either the date cannot be determined. Month and day fall back to
    today's month and day when neither a group nor a static value is set.

    Args:
        match: Completed regex match
        template: Template carrying the date sources
        today: Reference date for month/day defaults (defaults to date.today())

    Returns:
        Composed date, or None if the year is missing or the date is invalid
    """
    if today is None:
        today = date.today()

    year = _component(match, template.date_year_group, template.date_year)
    if year is None:
        return None

    month = _component(match, template.date_month_group, template.date_month)
    if month is None:
        month = today.month

    day = _component(match, template.date_day_group, template.date_day)
    if day is None:
        day = today.day

    try:
        return date(year, month, day)
    except (ValueError, OverflowError):
        logger.debug("Cannot construct date %s-%s-%s", year, month, day)
        return None


def _component(
    match: re.Match, group: Optional[int], static: Optional[int]
) -> Optional[int]:
    fallback = str(static) if static is not None else None
    text = extract_group(match, group, fallback)
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None
