"""CSV export of a stored timetable."""

import csv
import io
from typing import Any, Dict

from .time_utils import to_minutes


def timetable_to_csv(timetable: Dict[str, Any]) -> str:
    """
    Flatten a timetable dict into a Time x Day grid.

    Args:
        timetable: ``TimetableResult.to_dict()`` output (or the stored JSON)

    Returns:
        CSV text: a header row ``Time,<day>,...`` then one row per distinct
        ``start-end`` pair in start-time order; a cell holds the subject name
        of the entry with exactly that time on that day, or is empty.
    """
    days = timetable.get('days', [])

    time_keys = {
        (entry['time']['start'], entry['time']['end'])
        for day in days for entry in day.get('entries', [])
    }
    ordered = sorted(time_keys, key=lambda t: (to_minutes(t[0]), to_minutes(t[1])))

    output = io.StringIO()
    writer = csv.writer(output, lineterminator='\n')
    writer.writerow(['Time'] + [day['day'] for day in days])

    for start, end in ordered:
        row = [f'{start}-{end}']
        for day in days:
            entry = next((e for e in day.get('entries', [])
                          if e['time']['start'] == start and e['time']['end'] == end), None)
            row.append(entry['subject']['name'] if entry else '')
        writer.writerow(row)

    return output.getvalue()
