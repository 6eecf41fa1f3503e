"""Full disk audit CSV export"""

import csv
from typing import List

from ..core.models import DiskRecord, DISK_RECORD_COLUMNS
from ..utils.logger import setup_logger

logger = setup_logger(__name__)


def write_csv(records: List[DiskRecord], filename: str) -> str:
    """Write one row per disk; an empty record list yields a header-only file"""

    with open(filename, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=DISK_RECORD_COLUMNS)
        writer.writeheader()
        for record in records:
            writer.writerow(record.to_row())

    logger.info(f"Wrote {len(records)} disk records to {filename}")
    return filename
