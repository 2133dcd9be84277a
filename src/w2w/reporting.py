"""
Reporting and Export Module for w2w

Turns a generated week into a translated table and writes it as an Excel
workbook, a CSV file or a PDF document.
"""

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence
import logging

from .config import EXPORT_EXTENSIONS, EXPORT_FILENAME_TEMPLATE, EXPORT_SHEET_NAME
from .data_manager import DataManager, ScheduleEntry
from .scheduler_logic import calculate_coverage
from .translations import Translator

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of an export request"""
    success: bool
    message: str
    path: Optional[Path] = None


def schedule_dates(schedule: Sequence[ScheduleEntry]) -> List[str]:
    """Sorted date keys of the first entry; all entries share the same week"""
    if not schedule:
        return []
    return sorted(schedule[0].shifts.keys())


def format_assignment(entry: ScheduleEntry, date_key: str, translator: Translator) -> str:
    assignment = entry.shifts.get(date_key)
    if assignment is None:
        return ""
    value = translator.shift_label(assignment.shift)
    if assignment.note:
        value += f" ({assignment.note})"
    return value


def build_schedule_table(schedule: Sequence[ScheduleEntry], translator: Translator) -> List[List[str]]:
    """Header row followed by one row per agent"""
    dates = schedule_dates(schedule)
    table = [[translator.t("agents.name"), translator.t("agents.team")] + dates]
    for entry in schedule:
        row = [entry.agent_name, entry.team]
        row.extend(format_assignment(entry, date_key, translator) for date_key in dates)
        table.append(row)
    return table


class ReportGenerator:
    """Writes schedule tables to files"""

    def __init__(self, data_manager: DataManager):
        self.data_manager = data_manager
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom report styles"""
        self.styles.add(ParagraphStyle(
            name='CustomTitle',
            parent=self.styles['Heading1'],
            fontSize=18,
            spaceAfter=20,
            alignment=1  # Center alignment
        ))

        self.styles.add(ParagraphStyle(
            name='CustomHeading',
            parent=self.styles['Heading2'],
            fontSize=14,
            spaceAfter=12
        ))

    def _create_schedule_dataframe(self, schedule: Sequence[ScheduleEntry]) -> pd.DataFrame:
        table = build_schedule_table(schedule, self.data_manager.translator)
        return pd.DataFrame(table[1:], columns=table[0])

    def export_schedule_excel(self, schedule: Sequence[ScheduleEntry], output_path) -> bool:
        """Export schedule to a single-sheet Excel workbook"""
        try:
            schedule_df = self._create_schedule_dataframe(schedule)
            with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
                schedule_df.to_excel(writer, sheet_name=EXPORT_SHEET_NAME, index=False)
                self._format_excel_worksheet(writer.sheets[EXPORT_SHEET_NAME])
            return True

        except Exception as e:
            logger.error(f"Error exporting to Excel: {e}", exc_info=True)
            return False

    def _format_excel_worksheet(self, worksheet):
        """Header styling and column widths"""
        from openpyxl.styles import PatternFill, Font

        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        header_font = Font(color="FFFFFF", bold=True)

        for cell in worksheet[1]:
            cell.fill = header_fill
            cell.font = header_font

        for column in worksheet.columns:
            max_length = max(len(str(cell.value)) for cell in column if cell.value is not None)
            worksheet.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

    def export_schedule_csv(self, schedule: Sequence[ScheduleEntry], output_path) -> bool:
        """Export schedule to CSV format"""
        try:
            self._create_schedule_dataframe(schedule).to_csv(output_path, index=False)
            return True

        except Exception as e:
            logger.error(f"Error exporting to CSV: {e}", exc_info=True)
            return False

    def export_schedule_pdf(self, schedule: Sequence[ScheduleEntry], output_path) -> bool:
        """Export schedule and team coverage to PDF"""
        try:
            translator = self.data_manager.translator
            doc = SimpleDocTemplate(
                str(output_path),
                pagesize=landscape(A4),
                rightMargin=0.5*inch,
                leftMargin=0.5*inch,
                topMargin=0.5*inch,
                bottomMargin=0.5*inch
            )

            dates = schedule_dates(schedule)
            story = [
                Paragraph(translator.t("app.name"), self.styles['CustomTitle']),
                Paragraph(f"{translator.t('schedule.weekStarting')} {dates[0]}", self.styles['CustomHeading']),
                Spacer(1, 10),
                self._create_schedule_table(schedule, translator),
                Spacer(1, 20),
            ]
            story.extend(self._create_coverage_content(schedule, translator))

            doc.build(story)
            return True

        except Exception as e:
            logger.error(f"Error creating PDF: {e}", exc_info=True)
            return False

    def _create_schedule_table(self, schedule: Sequence[ScheduleEntry], translator: Translator) -> Table:
        table = Table(build_schedule_table(schedule, translator), repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (2, 0), (-1, -1), 'CENTER'),
            ('FONTSIZE', (0, 0), (-1, -1), 8),
            ('GRID', (0, 0), (-1, -1), 1, colors.black),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        return table

    def _create_coverage_content(self, schedule: Sequence[ScheduleEntry], translator: Translator) -> List:
        """Understaffed team/date/shift rows, if any team has requirements"""
        coverage = calculate_coverage(schedule, self.data_manager.get_teams())
        content = [Paragraph(translator.t("schedule.coverage"), self.styles['CustomHeading'])]

        data = [[
            translator.t("agents.team"),
            translator.t("agents.noteDate"),
            translator.t("schedule.shift"),
            translator.t("schedule.shortfall"),
        ]]
        for row in coverage["understaffed"]:
            data.append([
                row["team"],
                row["date"],
                translator.shift_label(row["shift"]),
                f"{row['assigned']}/{row['required']}",
            ])

        coverage_table = Table(data, colWidths=[2.5*inch, 1.5*inch, 1.5*inch, 1.2*inch])
        coverage_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('GRID', (0, 0), (-1, -1), 1, colors.black),
        ]))
        for i in range(1, len(data)):
            coverage_table.setStyle(TableStyle([('BACKGROUND', (0, i), (-1, i), colors.lightcoral)]))

        content.append(coverage_table)
        return content


class ExportManager:
    """Manager class for handling all export operations"""

    def __init__(self, data_manager: DataManager):
        self.data_manager = data_manager
        self.report_generator = ReportGenerator(data_manager)

    def get_default_filename(self, schedule: Sequence[ScheduleEntry], format_type: str = "excel") -> str:
        """w2w_schedule_<first-date>.<ext>"""
        extension = EXPORT_EXTENSIONS.get(format_type.lower())
        if extension is None:
            raise ValueError(f"Unsupported format: {format_type}")
        return EXPORT_FILENAME_TEMPLATE.format(first_date=schedule_dates(schedule)[0], extension=extension)

    def download_schedule(self, output_dir=".") -> ExportResult:
        """Write the stored schedule as w2w_schedule_<first-date>.xlsx into output_dir"""
        schedule = self.data_manager.get_schedule()
        if not schedule:
            return self._nothing_to_export()

        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        return self.export_schedule("excel", output_path / self.get_default_filename(schedule, "excel"))

    def export_schedule(self, format_type: str, output_path) -> ExportResult:
        """Export the stored schedule in the given format to an explicit path"""
        format_type = format_type.lower()
        if format_type == 'excel':
            writer = self.report_generator.export_schedule_excel
        elif format_type == 'csv':
            writer = self.report_generator.export_schedule_csv
        elif format_type == 'pdf':
            writer = self.report_generator.export_schedule_pdf
        else:
            raise ValueError(f"Unsupported format: {format_type}")

        schedule = self.data_manager.get_schedule()
        if not schedule:
            return self._nothing_to_export()

        output_path = Path(output_path)
        if not writer(schedule, output_path):
            return ExportResult(success=False, message=f"Failed to export schedule to {output_path}")

        logger.info(f"Exported schedule ({format_type}) to {output_path}")
        return ExportResult(success=True, message=output_path.name, path=output_path)

    def _nothing_to_export(self) -> ExportResult:
        logger.info("Export skipped: no schedule generated")
        return ExportResult(success=False, message=self.data_manager.translator.t("schedule.noSchedule"))
