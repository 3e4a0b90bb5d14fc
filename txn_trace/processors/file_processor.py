"""
JSON entry file processing using streaming parser.
"""

import ijson
from typing import List

from ..core.types import LogEntry


class EntryFileProcessor:
    """Loads log entries from JSON exports using a streaming parser."""

    @staticmethod
    def _detect_prefix(f) -> str:
        """Return the ijson prefix of the entry array in the document."""
        while True:
            char = f.read(1)
            if not char:
                return 'item'
            if not char.isspace():
                break
        return 'item' if char == b'[' else 'entries.item'

    @staticmethod
    def process_file(file_path: str) -> List[LogEntry]:
        """
        Read entries from a JSON file.

        Accepts either a top-level array of entry objects or an export
        document with an "entries" array. Records that cannot be turned
        into entries are skipped.

        Args:
            file_path: Path to the JSON file

        Returns:
            List of LogEntry in file order
        """
        entries = []
        skipped = 0

        print(f"Processing {file_path}...")

        with open(file_path, 'rb') as f:
            prefix = EntryFileProcessor._detect_prefix(f)
            f.seek(0)

            for record in ijson.items(f, prefix, use_float=True):
                try:
                    entries.append(LogEntry.from_dict(record))
                except (ValueError, TypeError) as e:
                    skipped += 1
                    print(f"  Skipping record: {e}")

                if (len(entries) + skipped) % 1000 == 0:
                    print(f"  Read {len(entries) + skipped} records...")

        print(f"Completed reading file: {len(entries)} entries loaded, {skipped} skipped.")

        return entries
