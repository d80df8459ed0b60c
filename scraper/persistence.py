"""JSON-file store for register entries, keyed by fetch date."""
import json
import logging
import os
import tempfile
from pathlib import Path

import pandas as pd

from .config import REGISTER_STORE_PATH
from .register import RegisterEntry

logger = logging.getLogger(__name__)

ENTRY_FIELDS = ('number', 'title', 'decided', 'category')


def normalize_date(date_str):
    """Any parseable date string -> YYYY-MM-DD; unparseable values come back unchanged."""
    try:
        return pd.to_datetime(date_str).strftime("%Y-%m-%d")
    except Exception:
        return date_str


class RegisterStore:
    def __init__(self, path=REGISTER_STORE_PATH):
        self.path = Path(path)

    def _load(self):
        if not self.path.exists():
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, rows):
        # Atomic write: a reader never sees a half-written file
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile('w', delete=False, dir=directory, encoding='utf-8') as tf:
            json.dump(rows, tf, indent=2)
            temp_json = tf.name
        os.replace(temp_json, self.path)

    def save(self, entries, fetch_date):
        """Replace the entries stored for ``fetch_date``. Returns {'success': bool}."""
        fetch_date = normalize_date(fetch_date)
        try:
            rows = [r for r in self._load() if r.get('date_fetched') != fetch_date]
            for entry in entries:
                data = entry.to_dict() if isinstance(entry, RegisterEntry) else entry
                row = {field: data.get(field, '') for field in ENTRY_FIELDS}
                row['date_fetched'] = fetch_date
                rows.append(row)
            self._write(rows)
        except (OSError, ValueError) as e:
            logger.error(f"[STORE] Could not save {len(entries)} entries for {fetch_date}: {e}")
            return {'success': False}
        logger.info(f"[STORE] Saved {len(entries)} entries for {fetch_date} to {self.path}")
        return {'success': True}

    def fetch(self, date_from=None, date_to=None):
        """Stored entries whose fetch date lies in [date_from, date_to]; open ends are unbounded."""
        date_from = normalize_date(date_from) if date_from else None
        date_to = normalize_date(date_to) if date_to else None
        results = []
        for row in self._load():
            fetched = row.get('date_fetched', '')
            if date_from and fetched < date_from:
                continue
            if date_to and fetched > date_to:
                continue
            results.append(row)
        return results
