"""
Excel Worksheets Module

Writes styled tables into workbook sheets.
"""

import re
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from .styles import ExcelStyleManager


def sanitize_for_excel(value: str) -> str:
    """Strip characters openpyxl refuses to write and cap the cell length"""
    if not isinstance(value, str):
        return str(value)

    sanitized = re.sub(r'[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F-\x9F]', '', value)

    # Excel allows 32,767 characters per cell
    if len(sanitized) > 32000:
        sanitized = sanitized[:32000] + "..."

    return sanitized


class WorksheetGenerator:
    """Creates worksheets holding a single styled table"""

    def __init__(self, style_manager: ExcelStyleManager):
        self.style_manager = style_manager

    def _calculate_column_width(self, values: List[str], header: str) -> int:
        max_length = len(header)
        for value in values:
            if value is not None:
                max_length = max(max_length, len(str(value)))
        return min(max(max_length + 2, 10), 80)

    def _write_headers(self, ws, headers: List[str]) -> None:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=sanitize_for_excel(header))
            cell.font = self.style_manager.header_font
            cell.fill = self.style_manager.header_fill
            cell.alignment = self.style_manager.center_alignment
            cell.border = self.style_manager.border

    def create_worksheet_with_table(
        self,
        wb: Workbook,
        title: str,
        headers: List[str],
        data: List[List],
        priority_column: Optional[int] = None
    ):
        """Create a worksheet with Excel table formatting.

        When ``priority_column`` (1-based) is given, every cell of a row is
        shaded by the migration priority found in that column.
        """
        ws = wb.create_sheet(title=title)
        self._write_headers(ws, headers)

        if not data:
            return ws

        for row_idx, row_data in enumerate(data, 2):
            priority = row_data[priority_column - 1] if priority_column else None

            for col_idx, value in enumerate(row_data, 1):
                if isinstance(value, str):
                    value = sanitize_for_excel(value)
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.font = self.style_manager.data_font
                cell.border = self.style_manager.border

                if isinstance(value, (int, float)):
                    cell.alignment = self.style_manager.right_alignment
                else:
                    cell.alignment = self.style_manager.left_alignment

                if priority is not None:
                    cell.fill = self.style_manager.get_priority_fill(priority)
                    if col_idx == priority_column:
                        cell.font = self.style_manager.get_priority_font(priority)

        for col_idx, header in enumerate(headers, 1):
            column_values = [row[col_idx - 1] for row in data if col_idx - 1 < len(row)]
            width = self._calculate_column_width(column_values, header)
            ws.column_dimensions[get_column_letter(col_idx)].width = width

        table_range = f"A1:{get_column_letter(len(headers))}{len(data) + 1}"
        clean_title = re.sub(r'[^\w]', '', title)
        table = Table(displayName=f"Table_{clean_title}", ref=table_range)
        table.tableStyleInfo = TableStyleInfo(
            name="TableStyleMedium2",
            showFirstColumn=False,
            showLastColumn=False,
            showRowStripes=True,
            showColumnStripes=False
        )
        ws.add_table(table)
        ws.freeze_panes = ws['A2']

        return ws
