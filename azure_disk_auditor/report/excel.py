"""
Excel Generator - Core Module

Builds and saves the disk summary workbook.
"""

from typing import List

from openpyxl import Workbook

from ..core.models import DiskRecord
from ..utils.logger import setup_logger
from .styles import ExcelStyleManager
from .summaries import SummaryGenerator, MIGRATION_PRIORITY_SHEET


class ExcelSummaryReport:
    """Workbook with the compute/disk-type, tier and priority summaries"""

    def __init__(self):
        self.logger = setup_logger(self.__class__.__name__)
        self.wb = Workbook()
        self.style_manager = ExcelStyleManager()
        self.summary_generator = SummaryGenerator(self.style_manager)

    def generate_report(self, records: List[DiskRecord]) -> None:
        if 'Sheet' in self.wb.sheetnames:
            self.wb.remove(self.wb['Sheet'])

        self.summary_generator.generate_compute_disk_summary(self.wb, records)
        self.summary_generator.generate_disk_tier_summary(self.wb, records)
        self.summary_generator.generate_migration_priority_summary(self.wb, records)

    def save(self, filename: str) -> None:
        self.wb.active = self.wb.sheetnames.index(MIGRATION_PRIORITY_SHEET)
        self.wb.save(filename)
        self.logger.info(f"Disk summary workbook saved to {filename}")


def write_excel_summary(records: List[DiskRecord], filename: str) -> str:
    report = ExcelSummaryReport()
    report.generate_report(records)
    report.save(filename)
    return filename
