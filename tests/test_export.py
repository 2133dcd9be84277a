import pytest
import sys
from pathlib import Path
from datetime import date
import tempfile

import pandas as pd
from openpyxl import load_workbook

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from w2w.data_manager import DataManager, ShiftAvailability, ShiftRequirement
from w2w.reporting import ExportManager, build_schedule_table
from w2w.scheduler_logic import ShiftScheduler
from w2w.storage import FileStorage
from w2w.translations import Translator


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as directory:
        yield Path(directory)


@pytest.fixture
def data_manager(temp_dir):
    """DataManager seeded with a team, two agents and a generated week."""
    dm = DataManager(FileStorage(temp_dir / "data"))
    dm.add_team("Support", {day: ShiftRequirement(morning=2) for day in range(7)})
    ana = dm.add_agent(
        "Ana", "Support", days_off=(0,),
        availability=ShiftAvailability(morning=True, afternoon=False, night=False)
    )
    dm.add_agent("Luis", "Support", availability=ShiftAvailability(False, False, True))
    dm.add_agent_note(ana.id, "2024-01-10", "Doctor")
    ShiftScheduler(dm).generate_schedule(date(2024, 1, 7))
    return dm


@pytest.fixture
def export_manager(data_manager):
    return ExportManager(data_manager)


def test_build_schedule_table(data_manager):
    table = build_schedule_table(data_manager.get_schedule(), Translator("en"))

    assert table[0] == ["Name", "Team"] + [f"2024-01-{day:02d}" for day in range(7, 14)]
    assert table[1][:4] == ["Ana", "Support", "Off", "Morning"]
    assert table[1][5] == "Off (Doctor)"
    assert table[2][2:] == ["Night"] * 7


def test_build_schedule_table_in_spanish(data_manager):
    table = build_schedule_table(data_manager.get_schedule(), Translator("es"))
    assert table[0][:2] == ["Nombre", "Equipo"]
    assert table[1][2:4] == ["Libre", "Mañana"]


def test_download_schedule_writes_xlsx(export_manager, temp_dir):
    result = export_manager.download_schedule(temp_dir / "out")

    assert result.success
    assert result.path == temp_dir / "out" / "w2w_schedule_2024-01-07.xlsx"
    assert result.path.exists()

    workbook = load_workbook(result.path)
    assert workbook.sheetnames == ["Schedule"]
    sheet = workbook["Schedule"]
    assert sheet.cell(row=1, column=1).value == "Name"
    assert sheet.cell(row=1, column=3).value == "2024-01-07"
    assert sheet.cell(row=2, column=1).value == "Ana"
    assert sheet.cell(row=2, column=6).value == "Off (Doctor)"
    assert sheet.max_row == 3


def test_csv_export(export_manager, temp_dir):
    output_path = temp_dir / "schedule.csv"
    result = export_manager.export_schedule("csv", output_path)

    assert result.success
    df = pd.read_csv(output_path)
    assert list(df.columns[:2]) == ["Name", "Team"]
    assert list(df["Name"]) == ["Ana", "Luis"]


def test_pdf_export(export_manager, temp_dir):
    output_path = temp_dir / "schedule.pdf"
    result = export_manager.export_schedule("pdf", output_path)

    assert result.success
    assert output_path.exists()
    assert output_path.stat().st_size > 200


def test_default_filename_uses_first_date(export_manager, data_manager):
    schedule = data_manager.get_schedule()
    assert export_manager.get_default_filename(schedule) == "w2w_schedule_2024-01-07.xlsx"
    assert export_manager.get_default_filename(schedule, "pdf") == "w2w_schedule_2024-01-07.pdf"


def test_empty_schedule_exports_nothing(temp_dir):
    dm = DataManager(FileStorage(temp_dir / "data"))
    export_manager = ExportManager(dm)

    result = export_manager.download_schedule(temp_dir / "out")

    assert result.success is False
    assert result.message == "No schedule generated yet"
    assert not (temp_dir / "out").exists()


def test_unsupported_format_raises(export_manager, temp_dir):
    with pytest.raises(ValueError):
        export_manager.export_schedule("docx", temp_dir / "schedule.docx")


def test_export_failure_is_reported(export_manager, temp_dir):
    # A directory where the file should go cannot be written
    target = temp_dir / "occupied.xlsx"
    target.mkdir()

    result = export_manager.export_schedule("excel", target)

    assert result.success is False
