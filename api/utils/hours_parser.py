"""
Hours Parser Module.

Converts between the free-text weekly hours string stored on a location and
the day-by-day StructuredHours form used while editing.

The canonical text form is a comma-separated list of runs, Monday first:
"Mon-Fri 09:00-17:00, Sat 10:00-14:00". Closed days are omitted.
"""

import re
from typing import Dict, List, Optional

from models.structured_hours import WEEKDAYS, DayHours, StructuredHours


DAY_ABBREVIATIONS = [day[:3].capitalize() for day in WEEKDAYS]

# One run: "Mon", "Mon 09:00-17:00", "Mon-Fri", "Mon-Fri 09:00-17:00"
RUN_PATTERN = re.compile(
    r'^(?P<start>[A-Z][a-z]{2})(?:-(?P<end>[A-Z][a-z]{2}))?'
    r'(?: (?P<open>\d{1,2}:\d{2})-(?P<close>\d{1,2}:\d{2}))?$'
)


def _day_hours_key(day: DayHours) -> str:
    return f"{day.open}-{day.close}" if day.open and day.close else ''


def format_hours_string(hours: StructuredHours) -> str:
    """
    Collapse structured hours into the canonical text form.

    Consecutive days with identical open/close times share a run. A closed
    day ends the current run and is left out. When special hours text is set
    it is returned verbatim instead.

    Args:
        hours: Structured per-day hours

    Returns:
        Hours string such as "Mon-Fri 09:00-17:00, Sat 10:00-14:00"
    """
    if hours.special_hours:
        return hours.special_hours

    runs: List[Dict] = []
    current: Optional[Dict] = None

    for i, day in enumerate(WEEKDAYS):
        day_data = hours.days[day]

        if day_data.closed:
            if current:
                runs.append(current)
                current = None
            continue

        key = _day_hours_key(day_data)

        if current is None:
            current = {'start': i, 'end': i, 'hours': key}
        elif current['hours'] == key:
            current['end'] = i
        else:
            runs.append(current)
            current = {'start': i, 'end': i, 'hours': key}

    if current:
        runs.append(current)

    parts = []
    for run in runs:
        label = DAY_ABBREVIATIONS[run['start']]
        if run['end'] != run['start']:
            label = f"{label}-{DAY_ABBREVIATIONS[run['end']]}"
        parts.append(f"{label} {run['hours']}" if run['hours'] else label)

    return ', '.join(parts)


def parse_hours_string(hours_string: Optional[str]) -> StructuredHours:
    """
    Expand an hours string into structured per-day hours.

    Strings written in the canonical form produced by format_hours_string are
    parsed day by day, with unmentioned days marked closed. Anything else is
    kept as special hours text so no information is lost.

    Args:
        hours_string: Free-text hours

    Returns:
        StructuredHours for the editing form
    """
    if not hours_string:
        return StructuredHours()

    days = {day: DayHours(closed=True) for day in WEEKDAYS}
    last_index = -1

    for part in hours_string.split(', '):
        match = RUN_PATTERN.match(part)
        if not match:
            return StructuredHours(special_hours=hours_string)

        start = match.group('start')
        end = match.group('end') or start
        if start not in DAY_ABBREVIATIONS or end not in DAY_ABBREVIATIONS:
            return StructuredHours(special_hours=hours_string)

        start_index = DAY_ABBREVIATIONS.index(start)
        end_index = DAY_ABBREVIATIONS.index(end)

        # Runs are written in weekday order and never overlap
        if start_index <= last_index or end_index < start_index:
            return StructuredHours(special_hours=hours_string)
        last_index = end_index

        for i in range(start_index, end_index + 1):
            days[WEEKDAYS[i]] = DayHours(
                open=match.group('open') or '',
                close=match.group('close') or '',
                closed=False,
            )

    return StructuredHours(days=days)
