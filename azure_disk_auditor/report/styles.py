"""
Excel Styles Module

Fonts, fills and borders for the disk summary workbook.
"""

from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

from ..core.models import MigrationPriority


class ExcelStyleManager:
    """Manages all Excel styles and formatting"""

    def __init__(self):
        self._setup_styles()

    def _setup_styles(self):
        # Fonts
        self.header_font = Font(name='Arial', bold=True, color='FFFFFF', size=12)
        self.data_font = Font(name='Arial', color='2C3E50', size=10)
        self.bold_font = Font(name='Arial', bold=True, color='2C3E50', size=10)

        # Severity fills
        self.high_fill = PatternFill(start_color='FFC7CE', end_color='FFC7CE', fill_type='solid')
        self.medium_fill = PatternFill(start_color='FFEB9C', end_color='FFEB9C', fill_type='solid')
        self.low_fill = PatternFill(start_color='C6EFCE', end_color='C6EFCE', fill_type='solid')
        self.header_fill = PatternFill(start_color='5D87A1', end_color='5D87A1', fill_type='solid')

        # Alignments
        self.center_alignment = Alignment(horizontal='center', vertical='center')
        self.right_alignment = Alignment(horizontal='right', vertical='center')
        self.left_alignment = Alignment(horizontal='left', vertical='center')

        # Borders
        thin_border = Side(border_style="thin", color="CCCCCC")
        self.border = Border(top=thin_border, left=thin_border, right=thin_border, bottom=thin_border)

    def get_priority_fill(self, priority: str) -> PatternFill:
        """Fill keyed to migration priority severity"""
        if priority == MigrationPriority.HIGH.value:
            return self.high_fill
        elif priority == MigrationPriority.MEDIUM.value:
            return self.medium_fill
        else:
            return self.low_fill

    def get_priority_font(self, priority: str) -> Font:
        if priority == MigrationPriority.HIGH.value:
            return Font(name='Arial', bold=True, color='9C0006', size=10)
        elif priority == MigrationPriority.MEDIUM.value:
            return Font(name='Arial', bold=True, color='9C5700', size=10)
        else:
            return Font(name='Arial', bold=True, color='006100', size=10)
