"""
Excel Summaries Module

Aggregates disk records into the three summary sheets.
"""

from collections import OrderedDict
from typing import Dict, List, Tuple

from openpyxl import Workbook

from ..core.models import DiskRecord, MigrationPriority
from .styles import ExcelStyleManager
from .worksheets import WorksheetGenerator

COMPUTE_DISK_SHEET = "ComputeType-DiskType"
DISK_TIER_SHEET = "DiskTier"
MIGRATION_PRIORITY_SHEET = "MigrationPriority"

PRIORITY_ORDER = [p.value for p in (MigrationPriority.HIGH, MigrationPriority.MEDIUM, MigrationPriority.NONE)]


def aggregate(records: List[DiskRecord], key_func) -> Dict[Tuple, Dict[str, int]]:
    """Disk count and total size per group key"""
    groups: Dict[Tuple, Dict[str, int]] = {}
    for record in records:
        key = key_func(record)
        group = groups.setdefault(key, {'count': 0, 'size_gb': 0})
        group['count'] += 1
        group['size_gb'] += record.size_gb or 0
    return groups


class SummaryGenerator:
    """Generates the pivoted summary sheets"""

    def __init__(self, style_manager: ExcelStyleManager):
        self.style_manager = style_manager
        self.worksheet_generator = WorksheetGenerator(style_manager)

    def generate_compute_disk_summary(self, wb: Workbook, records: List[DiskRecord]) -> None:
        groups = aggregate(records, lambda r: (r.compute_type.value, r.disk_role.value))

        headers = ["ComputeType", "DiskType", "Disk Count", "Total Size (GB)"]
        data = [
            [compute_type, disk_type, totals['count'], totals['size_gb']]
            for (compute_type, disk_type), totals in sorted(groups.items())
        ]

        self.worksheet_generator.create_worksheet_with_table(wb, COMPUTE_DISK_SHEET, headers, data)

    def generate_disk_tier_summary(self, wb: Workbook, records: List[DiskRecord]) -> None:
        groups = aggregate(records, lambda r: (r.tier,))

        headers = ["DiskTier", "Disk Count", "Total Size (GB)"]
        data = [
            [tier, totals['count'], totals['size_gb']]
            for (tier,), totals in sorted(groups.items(), key=lambda item: -item[1]['count'])
        ]

        self.worksheet_generator.create_worksheet_with_table(wb, DISK_TIER_SHEET, headers, data)

    def generate_migration_priority_summary(self, wb: Workbook, records: List[DiskRecord]) -> None:
        groups = aggregate(records, lambda r: (r.migration_priority.value,))

        ordered = OrderedDict()
        for priority in PRIORITY_ORDER:
            if (priority,) in groups:
                ordered[priority] = groups[(priority,)]

        headers = ["MigrationPriority", "Disk Count", "Total Size (GB)"]
        data = [[priority, totals['count'], totals['size_gb']] for priority, totals in ordered.items()]

        self.worksheet_generator.create_worksheet_with_table(
            wb, MIGRATION_PRIORITY_SHEET, headers, data, priority_column=1
        )
