"""
Spreadsheet export of poll results
"""

import io
from typing import Dict, List

import pandas as pd

from app.schemas.event import EventTree
from app.schemas.tally import EventTally

class ExportService:
    """Service for exporting vote tallies"""

    COLUMNS = ['Date', 'Start', 'End', 'Votes', 'Participants']

    @staticmethod
    def results_rows(tally: EventTally) -> List[Dict]:
        rows = []
        for date_tally in tally.dates:
            for slot in date_tally.time_slots:
                rows.append({
                    'Date': date_tally.date.isoformat(),
                    'Start': slot.start_time.strftime('%H:%M'),
                    'End': slot.end_time.strftime('%H:%M'),
                    'Votes': slot.vote_count,
                    'Participants': ', '.join(p.name for p in slot.participants),
                })
        return rows

    @staticmethod
    def export_results(event: EventTree, tally: EventTally) -> bytes:
        """One row per time slot; a second sheet lists who responded"""
        df = pd.DataFrame(ExportService.results_rows(tally), columns=ExportService.COLUMNS)

        responders = pd.DataFrame(
            [
                {
                    'Name': 'Anonymous' if p.is_anonymous else p.participant_name,
                    'Email': '' if p.is_anonymous else (p.participant_email or ''),
                    'Slots Selected': sum(1 for a in p.availability if a.vote),
                }
                for p in event.participants
            ],
            columns=['Name', 'Email', 'Slots Selected'],
        )

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Results')
            responders.to_excel(writer, index=False, sheet_name='Participants')

        return buffer.getvalue()
