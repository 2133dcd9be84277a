"""
User Interface for w2w

CustomTkinter-based GUI with four views: agent roster, team roster,
weekly schedule and language settings. Every view reads the latest
snapshot from the DataManager and is rebuilt when the language changes.
"""

import customtkinter as ctk
from tkinter import messagebox, filedialog
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional
import logging

from .config import DATE_FORMAT, DAYS_IN_WEEK, WORKING_SHIFTS
from .data_manager import (
    Agent,
    DataManager,
    DataManagerError,
    ShiftAvailability,
    ShiftRequirement,
    Team,
)
from .reporting import ExportManager, format_assignment, schedule_dates
from .scheduler_logic import ScheduleResult, ShiftScheduler, calculate_coverage, sunday_based_weekday, week_start
from .translations import weekday_key

logger = logging.getLogger(__name__)


# Configure CustomTkinter
ctk.set_appearance_mode("light")
ctk.set_default_color_theme("blue")

SHIFT_COLORS = {
    "morning": "#3b82f6",
    "afternoon": "#a855f7",
    "night": "#334155",
    "off": "#dc2626",
}


def _center_on_parent(window, parent):
    window.update_idletasks()
    x = parent.winfo_x() + (parent.winfo_width() // 2) - (window.winfo_width() // 2)
    y = parent.winfo_y() + (parent.winfo_height() // 2) - (window.winfo_height() // 2)
    window.geometry(f"+{x}+{y}")


class AgentDialog(ctk.CTkToplevel):
    """Dialog for adding/editing agents"""

    def __init__(self, parent, data_manager: DataManager, agent: Optional[Agent] = None,
                 callback: Callable = None):
        super().__init__(parent)
        self.data_manager = data_manager
        self.agent = agent
        self.callback = callback
        self.t = data_manager.translator.t

        self.title(self.t("agents.add") if agent is None else self.t("app.edit"))
        self.geometry("420x560")
        self.transient(parent)
        self.grab_set()

        self._create_widgets()
        self._populate_fields()
        _center_on_parent(self, parent)

    def _create_widgets(self):
        main_frame = ctk.CTkFrame(self)
        main_frame.pack(fill="both", expand=True, padx=20, pady=20)

        ctk.CTkLabel(main_frame, text=f"{self.t('agents.name')}:").pack(anchor="w", pady=(0, 5))
        self.name_entry = ctk.CTkEntry(main_frame, width=340)
        self.name_entry.pack(pady=(0, 15))

        # Team picker; the agent's current team stays selectable even if it was renamed or deleted
        team_names = [team.name for team in self.data_manager.get_teams()]
        if self.agent and self.agent.team and self.agent.team not in team_names:
            team_names.append(self.agent.team)

        ctk.CTkLabel(main_frame, text=f"{self.t('agents.team')}:").pack(anchor="w", pady=(0, 5))
        self.team_var = ctk.StringVar(value=team_names[0] if team_names else "")
        ctk.CTkOptionMenu(
            main_frame,
            values=team_names or [""],
            variable=self.team_var,
            width=340
        ).pack(pady=(0, 15))

        ctk.CTkLabel(main_frame, text=f"{self.t('agents.daysOff')}:").pack(anchor="w", pady=(0, 5))
        days_frame = ctk.CTkFrame(main_frame)
        days_frame.pack(fill="x", pady=(0, 15))
        self.day_off_vars = []
        for day in range(DAYS_IN_WEEK):
            var = ctk.BooleanVar(value=False)
            ctk.CTkCheckBox(days_frame, text=self.t(weekday_key(day)), variable=var).grid(
                row=day // 2, column=day % 2, sticky="w", padx=10, pady=2
            )
            self.day_off_vars.append(var)

        ctk.CTkLabel(main_frame, text=f"{self.t('agents.availability')}:").pack(anchor="w", pady=(0, 5))
        availability_frame = ctk.CTkFrame(main_frame)
        availability_frame.pack(fill="x", pady=(0, 15))
        self.availability_vars = {}
        for shift in WORKING_SHIFTS:
            var = ctk.BooleanVar(value=True)
            ctk.CTkCheckBox(availability_frame, text=self.t(f"agents.{shift}"), variable=var).pack(
                side="left", padx=10, pady=5
            )
            self.availability_vars[shift] = var

        button_frame = ctk.CTkFrame(main_frame)
        button_frame.pack(fill="x", pady=(10, 0))

        ctk.CTkButton(
            button_frame,
            text=self.t("app.cancel"),
            command=self.destroy,
            width=100
        ).pack(side="right", padx=(10, 0))

        ctk.CTkButton(
            button_frame,
            text=self.t("app.save"),
            command=self._save,
            width=100
        ).pack(side="right")

    def _populate_fields(self):
        if self.agent:
            self.name_entry.insert(0, self.agent.name)
            self.team_var.set(self.agent.team)
            for day in self.agent.days_off:
                self.day_off_vars[day].set(True)
            for shift, var in self.availability_vars.items():
                var.set(getattr(self.agent.availability, shift))

    def _save(self):
        name = self.name_entry.get().strip()
        if not name:
            messagebox.showerror(self.t("app.save"), self.t("error.required"))
            return

        result = {
            "name": name,
            "team": self.team_var.get(),
            "days_off": tuple(day for day, var in enumerate(self.day_off_vars) if var.get()),
            "availability": ShiftAvailability(
                **{shift: var.get() for shift, var in self.availability_vars.items()}
            )
        }

        if self.callback:
            self.callback(result)

        self.destroy()


class NotesDialog(ctk.CTkToplevel):
    """Dialog for adding and removing an agent's dated notes"""

    def __init__(self, parent, data_manager: DataManager, agent_id: str, on_change: Callable = None):
        super().__init__(parent)
        self.data_manager = data_manager
        self.agent_id = agent_id
        self.on_change = on_change
        self.t = data_manager.translator.t

        self.title(self.t("agents.notes"))
        self.geometry("460x460")
        self.transient(parent)
        self.grab_set()

        self._create_widgets()
        self._load_notes()
        _center_on_parent(self, parent)

    def _create_widgets(self):
        main_frame = ctk.CTkFrame(self)
        main_frame.pack(fill="both", expand=True, padx=20, pady=20)

        form_frame = ctk.CTkFrame(main_frame)
        form_frame.pack(fill="x", pady=(0, 10))

        ctk.CTkLabel(form_frame, text=f"{self.t('agents.noteDate')}:").grid(row=0, column=0, sticky="w", padx=5, pady=5)
        self.date_entry = ctk.CTkEntry(form_frame, width=140, placeholder_text="YYYY-MM-DD")
        self.date_entry.insert(0, date.today().strftime(DATE_FORMAT))
        self.date_entry.grid(row=0, column=1, sticky="w", padx=5, pady=5)

        ctk.CTkLabel(form_frame, text=f"{self.t('agents.noteText')}:").grid(row=1, column=0, sticky="w", padx=5, pady=5)
        self.note_entry = ctk.CTkEntry(form_frame, width=260)
        self.note_entry.grid(row=1, column=1, sticky="w", padx=5, pady=5)

        ctk.CTkButton(
            form_frame,
            text=self.t("agents.addNote"),
            command=self._add_note,
            width=120
        ).grid(row=2, column=1, sticky="e", padx=5, pady=5)

        self.notes_frame = ctk.CTkScrollableFrame(main_frame, height=220)
        self.notes_frame.pack(fill="both", expand=True)

    def _load_notes(self):
        for widget in self.notes_frame.winfo_children():
            widget.destroy()

        agent = self.data_manager.get_agent(self.agent_id)
        if agent is None:
            return

        for note_date, note in sorted(agent.notes.items()):
            row = ctk.CTkFrame(self.notes_frame)
            row.pack(fill="x", pady=2)
            ctk.CTkLabel(row, text=f"{note_date}: {note}").pack(side="left", padx=10)
            ctk.CTkButton(
                row,
                text="✕",
                width=30,
                fg_color="red",
                command=lambda d=note_date: self._remove_note(d)
            ).pack(side="right", padx=5, pady=2)

    def _add_note(self):
        note = self.note_entry.get().strip()
        if not note:
            messagebox.showerror(self.t("agents.addNote"), self.t("error.required"))
            return
        try:
            self.data_manager.add_agent_note(self.agent_id, self.date_entry.get(), note)
        except DataManagerError as e:
            logger.error(f"Could not add note: {e}")
            messagebox.showerror(self.t("agents.addNote"), self.t("error.invalidFormat"))
            return

        self.note_entry.delete(0, "end")
        self._load_notes()
        if self.on_change:
            self.on_change()

    def _remove_note(self, note_date: str):
        self.data_manager.remove_agent_note(self.agent_id, note_date)
        self._load_notes()
        if self.on_change:
            self.on_change()


class TeamDialog(ctk.CTkToplevel):
    """Dialog for adding/editing teams and their required headcount"""

    def __init__(self, parent, data_manager: DataManager, team: Optional[Team] = None,
                 callback: Callable = None):
        super().__init__(parent)
        self.team = team
        self.callback = callback
        self.t = data_manager.translator.t

        self.title(self.t("teams.add") if team is None else self.t("app.edit"))
        self.geometry("480x520")
        self.transient(parent)
        self.grab_set()

        self._create_widgets()
        self._populate_fields()
        _center_on_parent(self, parent)

    def _create_widgets(self):
        main_frame = ctk.CTkFrame(self)
        main_frame.pack(fill="both", expand=True, padx=20, pady=20)

        ctk.CTkLabel(main_frame, text=f"{self.t('teams.name')}:").pack(anchor="w", pady=(0, 5))
        self.name_entry = ctk.CTkEntry(main_frame, width=380)
        self.name_entry.pack(pady=(0, 15))

        ctk.CTkLabel(main_frame, text=self.t("teams.requiredAgents"), font=ctk.CTkFont(weight="bold")).pack(anchor="w")

        grid = ctk.CTkFrame(main_frame)
        grid.pack(fill="x", pady=10)

        ctk.CTkLabel(grid, text=self.t("teams.day")).grid(row=0, column=0, padx=5, pady=2)
        for column, shift in enumerate(WORKING_SHIFTS, 1):
            ctk.CTkLabel(grid, text=self.t(f"teams.{shift}")).grid(row=0, column=column, padx=5, pady=2)

        # {weekday: {shift: entry}}
        self.count_entries: Dict[int, Dict[str, ctk.CTkEntry]] = {}
        for day in range(DAYS_IN_WEEK):
            ctk.CTkLabel(grid, text=self.t(weekday_key(day))).grid(row=day + 1, column=0, sticky="w", padx=5, pady=2)
            self.count_entries[day] = {}
            for column, shift in enumerate(WORKING_SHIFTS, 1):
                entry = ctk.CTkEntry(grid, width=70)
                entry.insert(0, "0")
                entry.grid(row=day + 1, column=column, padx=5, pady=2)
                self.count_entries[day][shift] = entry

        button_frame = ctk.CTkFrame(main_frame)
        button_frame.pack(fill="x", pady=(10, 0))

        ctk.CTkButton(
            button_frame,
            text=self.t("app.cancel"),
            command=self.destroy,
            width=100
        ).pack(side="right", padx=(10, 0))

        ctk.CTkButton(
            button_frame,
            text=self.t("app.save"),
            command=self._save,
            width=100
        ).pack(side="right")

    def _populate_fields(self):
        if self.team:
            self.name_entry.insert(0, self.team.name)
            for day, entries in self.count_entries.items():
                requirement = self.team.requirement_for(day)
                for shift, entry in entries.items():
                    entry.delete(0, "end")
                    entry.insert(0, str(getattr(requirement, shift)))

    def _save(self):
        name = self.name_entry.get().strip()
        if not name:
            messagebox.showerror(self.t("app.save"), self.t("error.required"))
            return

        required_agents = {}
        try:
            for day, entries in self.count_entries.items():
                required_agents[day] = ShiftRequirement(
                    **{shift: int(entry.get().strip() or 0) for shift, entry in entries.items()}
                )
        except (ValueError, DataManagerError):
            messagebox.showerror(self.t("app.save"), self.t("error.invalidFormat"))
            return

        if self.callback:
            self.callback({"name": name, "required_agents": required_agents})

        self.destroy()


class AgentsView(ctk.CTkFrame):
    """Searchable agent roster"""

    def __init__(self, parent, data_manager: DataManager, main_window):
        super().__init__(parent)
        self.data_manager = data_manager
        self.main_window = main_window
        self.t = data_manager.translator.t

        self._create_widgets()
        self.refresh()

    def _create_widgets(self):
        header_frame = ctk.CTkFrame(self)
        header_frame.pack(fill="x", padx=10, pady=10)

        ctk.CTkLabel(
            header_frame,
            text=self.t("agents.title"),
            font=ctk.CTkFont(size=16, weight="bold")
        ).pack(side="left", padx=10, pady=10)

        ctk.CTkButton(
            header_frame,
            text=f"+ {self.t('agents.add')}",
            command=self._add_agent,
            width=140
        ).pack(side="right", padx=10, pady=10)

        self.search_entry = ctk.CTkEntry(self, placeholder_text=self.t("app.search"), width=300)
        self.search_entry.pack(anchor="w", padx=20, pady=(0, 10))
        self.search_entry.bind("<KeyRelease>", lambda event: self.refresh())

        self.list_frame = ctk.CTkScrollableFrame(self)
        self.list_frame.pack(fill="both", expand=True, padx=10, pady=10)

    def refresh(self):
        """Reload the agent list from the latest snapshot"""
        for widget in self.list_frame.winfo_children():
            widget.destroy()

        agents = self.data_manager.search_agents(self.search_entry.get())
        if not agents:
            ctk.CTkLabel(self.list_frame, text=self.t("agents.noAgents")).pack(pady=20)
            return

        for agent in agents:
            self._create_agent_item(agent)

    def _create_agent_item(self, agent: Agent):
        item_frame = ctk.CTkFrame(self.list_frame)
        item_frame.pack(fill="x", padx=5, pady=2)

        ctk.CTkLabel(
            item_frame,
            text=f"{agent.name} ({agent.team})" if agent.team else agent.name,
            font=ctk.CTkFont(weight="bold")
        ).pack(side="left", padx=10, pady=5)

        days_off = ", ".join(self.t(weekday_key(day)) for day in agent.days_off)
        shifts = ", ".join(self.t(f"agents.{shift}") for shift in WORKING_SHIFTS
                           if getattr(agent.availability, shift))
        details = f"{self.t('agents.daysOff')}: {days_off or '-'} | {self.t('agents.availability')}: {shifts or '-'}"
        if agent.notes:
            details += f" | {self.t('agents.notes')}: {len(agent.notes)}"
        ctk.CTkLabel(item_frame, text=details, font=ctk.CTkFont(size=11)).pack(side="left", padx=10)

        ctk.CTkButton(
            item_frame, text=self.t("app.delete"), width=80, fg_color="red",
            command=lambda: self._delete_agent(agent)
        ).pack(side="right", padx=5, pady=5)
        ctk.CTkButton(
            item_frame, text=self.t("agents.notes"), width=80,
            command=lambda: NotesDialog(self, self.data_manager, agent.id, on_change=self.refresh)
        ).pack(side="right", padx=5, pady=5)
        ctk.CTkButton(
            item_frame, text=self.t("app.edit"), width=80,
            command=lambda: self._edit_agent(agent)
        ).pack(side="right", padx=5, pady=5)

    def _add_agent(self):
        def on_save(data: Dict):
            agent = self.data_manager.add_agent(**data)
            self.main_window.notify(f"{agent.name} {self.t('agents.add').lower()}")
            self.refresh()

        AgentDialog(self, self.data_manager, callback=on_save)

    def _edit_agent(self, agent: Agent):
        def on_save(data: Dict):
            # Notes are edited separately; keep the latest ones
            current = self.data_manager.get_agent(agent.id) or agent
            updated = Agent(id=agent.id, notes=current.notes, **data)
            if self.data_manager.update_agent(updated):
                self.main_window.notify(f"{updated.name} {self.t('app.edit').lower()}")
            self.refresh()

        AgentDialog(self, self.data_manager, agent=agent, callback=on_save)

    def _delete_agent(self, agent: Agent):
        if messagebox.askyesno(self.t("app.delete"), f"{self.t('app.confirm')}: {agent.name}?"):
            self.data_manager.delete_agent(agent.id)
            self.main_window.notify(f"{self.t('agents.name')} {self.t('app.delete').lower()}")
            self.refresh()


class TeamsView(ctk.CTkFrame):
    """Team roster with required headcount summary"""

    def __init__(self, parent, data_manager: DataManager, main_window):
        super().__init__(parent)
        self.data_manager = data_manager
        self.main_window = main_window
        self.t = data_manager.translator.t

        self._create_widgets()
        self.refresh()

    def _create_widgets(self):
        header_frame = ctk.CTkFrame(self)
        header_frame.pack(fill="x", padx=10, pady=10)

        ctk.CTkLabel(
            header_frame,
            text=self.t("teams.title"),
            font=ctk.CTkFont(size=16, weight="bold")
        ).pack(side="left", padx=10, pady=10)

        ctk.CTkButton(
            header_frame,
            text=f"+ {self.t('teams.add')}",
            command=self._add_team,
            width=140
        ).pack(side="right", padx=10, pady=10)

        self.list_frame = ctk.CTkScrollableFrame(self)
        self.list_frame.pack(fill="both", expand=True, padx=10, pady=10)

    def refresh(self):
        for widget in self.list_frame.winfo_children():
            widget.destroy()

        teams = self.data_manager.get_teams()
        if not teams:
            ctk.CTkLabel(self.list_frame, text=self.t("teams.noTeams")).pack(pady=20)
            return

        for team in teams:
            self._create_team_item(team)

    def _create_team_item(self, team: Team):
        item_frame = ctk.CTkFrame(self.list_frame)
        item_frame.pack(fill="x", padx=5, pady=4)

        header = ctk.CTkFrame(item_frame)
        header.pack(fill="x")
        ctk.CTkLabel(header, text=team.name, font=ctk.CTkFont(weight="bold")).pack(side="left", padx=10, pady=5)
        ctk.CTkButton(
            header, text=self.t("app.delete"), width=80, fg_color="red",
            command=lambda: self._delete_team(team)
        ).pack(side="right", padx=5, pady=5)
        ctk.CTkButton(
            header, text=self.t("app.edit"), width=80,
            command=lambda: self._edit_team(team)
        ).pack(side="right", padx=5, pady=5)

        grid = ctk.CTkFrame(item_frame)
        grid.pack(fill="x", padx=10, pady=(0, 5))
        for day in range(DAYS_IN_WEEK):
            requirement = team.requirement_for(day)
            counts = " / ".join(str(getattr(requirement, shift)) for shift in WORKING_SHIFTS)
            ctk.CTkLabel(grid, text=f"{self.t(weekday_key(day))}\n{counts}", font=ctk.CTkFont(size=11)).grid(
                row=0, column=day, padx=8
            )

    def _add_team(self):
        def on_save(data: Dict):
            team = self.data_manager.add_team(**data)
            self.main_window.notify(f"{team.name} {self.t('teams.add').lower()}")
            self.refresh()

        TeamDialog(self, self.data_manager, callback=on_save)

    def _edit_team(self, team: Team):
        def on_save(data: Dict):
            updated = Team(id=team.id, **data)
            if self.data_manager.update_team(updated):
                self.main_window.notify(f"{updated.name} {self.t('app.edit').lower()}")
            self.refresh()

        TeamDialog(self, self.data_manager, team=team, callback=on_save)

    def _delete_team(self, team: Team):
        if messagebox.askyesno(self.t("app.delete"), f"{self.t('app.confirm')}: {team.name}?"):
            self.data_manager.delete_team(team.id)
            self.main_window.notify(f"{self.t('teams.name')} {self.t('app.delete').lower()}")
            self.refresh()


class ScheduleView(ctk.CTkFrame):
    """Weekly schedule table with generation, team filter and export"""

    def __init__(self, parent, data_manager: DataManager, scheduler: ShiftScheduler,
                 export_manager: ExportManager, main_window):
        super().__init__(parent)
        self.data_manager = data_manager
        self.scheduler = scheduler
        self.export_manager = export_manager
        self.main_window = main_window
        self.t = data_manager.translator.t
        self.start_date = week_start(date.today())

        self._create_widgets()
        self.refresh()

    def _create_widgets(self):
        control_frame = ctk.CTkFrame(self)
        control_frame.pack(fill="x", padx=10, pady=10)

        ctk.CTkLabel(
            control_frame,
            text=self.t("schedule.title"),
            font=ctk.CTkFont(size=16, weight="bold")
        ).pack(side="left", padx=10)

        ctk.CTkButton(control_frame, text="◀", width=30, command=lambda: self._shift_week(-1)).pack(side="left", padx=(20, 2))
        self.week_label = ctk.CTkLabel(control_frame, text="")
        self.week_label.pack(side="left", padx=5)
        ctk.CTkButton(control_frame, text="▶", width=30, command=lambda: self._shift_week(1)).pack(side="left", padx=2)

        ctk.CTkButton(
            control_frame,
            text=self.t("schedule.generate"),
            command=self._generate_schedule,
            width=150
        ).pack(side="left", padx=20)

        ctk.CTkButton(
            control_frame,
            text=self.t("schedule.download"),
            command=self._download_schedule,
            width=150
        ).pack(side="left", padx=10)

        ctk.CTkButton(
            control_frame,
            text="PDF",
            command=lambda: self._export_as("pdf"),
            width=60
        ).pack(side="left", padx=5)

        filter_frame = ctk.CTkFrame(self)
        filter_frame.pack(fill="x", padx=10, pady=(0, 10))
        ctk.CTkLabel(filter_frame, text=f"{self.t('agents.team')}:").pack(side="left", padx=10, pady=5)
        self.team_filter = ctk.StringVar(value=self.t("app.all"))
        self.filter_menu = ctk.CTkOptionMenu(
            filter_frame,
            values=[self.t("app.all")],
            variable=self.team_filter,
            command=lambda value: self.refresh(),
            width=180
        )
        self.filter_menu.pack(side="left", padx=10, pady=5)

        self.table_frame = ctk.CTkScrollableFrame(self, height=380)
        self.table_frame.pack(fill="both", expand=True, padx=10, pady=10)

        self.coverage_label = ctk.CTkLabel(self, text="", justify="left", anchor="w")
        self.coverage_label.pack(fill="x", padx=20, pady=(0, 10))

    def _shift_week(self, weeks: int):
        self.start_date = self.start_date + timedelta(days=7 * weeks)
        self.refresh()

    def refresh(self, coverage: Optional[Dict] = None):
        """Redraw the week header, filter choices, table and coverage summary"""
        self.week_label.configure(text=f"{self.t('schedule.weekStarting')} {self.start_date.strftime(DATE_FORMAT)}")

        all_label = self.t("app.all")
        self.filter_menu.configure(values=[all_label] + self.data_manager.get_team_names())
        selected = self.team_filter.get()
        schedule = self.data_manager.filter_schedule(None if selected == all_label else selected)

        for widget in self.table_frame.winfo_children():
            widget.destroy()

        if not schedule:
            ctk.CTkLabel(self.table_frame, text=self.t("schedule.noSchedule")).pack(pady=20)
            self.coverage_label.configure(text="")
            return

        self._draw_table(schedule)
        self._draw_coverage(coverage)

    def _draw_table(self, schedule):
        translator = self.data_manager.translator
        dates = schedule_dates(schedule)

        ctk.CTkLabel(self.table_frame, text=self.t("agents.name"), font=ctk.CTkFont(weight="bold")).grid(row=0, column=0, padx=6, pady=4, sticky="w")
        ctk.CTkLabel(self.table_frame, text=self.t("agents.team"), font=ctk.CTkFont(weight="bold")).grid(row=0, column=1, padx=6, pady=4, sticky="w")
        for column, date_key in enumerate(dates, 2):
            day = datetime.strptime(date_key, DATE_FORMAT).date()
            ctk.CTkLabel(
                self.table_frame,
                text=f"{self.t(weekday_key(sunday_based_weekday(day)))}\n{day.strftime('%m/%d')}",
                font=ctk.CTkFont(weight="bold")
            ).grid(row=0, column=column, padx=6, pady=4)

        for row, entry in enumerate(schedule, 1):
            ctk.CTkLabel(self.table_frame, text=entry.agent_name).grid(row=row, column=0, padx=6, pady=2, sticky="w")
            ctk.CTkLabel(self.table_frame, text=entry.team).grid(row=row, column=1, padx=6, pady=2, sticky="w")
            for column, date_key in enumerate(dates, 2):
                assignment = entry.shifts.get(date_key)
                ctk.CTkLabel(
                    self.table_frame,
                    text=format_assignment(entry, date_key, translator),
                    text_color="white",
                    fg_color=SHIFT_COLORS.get(assignment.shift, "gray") if assignment else "gray",
                    corner_radius=6
                ).grid(row=row, column=column, padx=4, pady=2, sticky="ew")

    def _draw_coverage(self, coverage: Optional[Dict] = None):
        if coverage is None:
            coverage = calculate_coverage(self.data_manager.get_schedule(), self.data_manager.get_teams())
        lines = [f"{self.t('schedule.coverage')} - {self.t('schedule.shortfall')}: {coverage['total_shortfall']}"]
        for row in coverage["understaffed"][:8]:
            shift_label = self.data_manager.translator.shift_label(row["shift"])
            lines.append(f"• {row['team']} {row['date']} {shift_label}: {row['assigned']}/{row['required']}")
        if len(coverage["understaffed"]) > 8:
            lines.append(f"  ... +{len(coverage['understaffed']) - 8}")
        self.coverage_label.configure(text="\n".join(lines))

    def _generate_schedule(self):
        result = self.scheduler.generate_schedule(self.start_date)
        self._update_after_generation(result)

    def _update_after_generation(self, result: ScheduleResult):
        if result.success:
            self.main_window.notify(result.message)
            self.refresh(coverage=result.statistics)
        else:
            messagebox.showwarning(self.t("schedule.generate"), result.message)
            self.refresh()

    def _download_schedule(self):
        if not self.data_manager.get_schedule():
            messagebox.showwarning(self.t("schedule.download"), self.t("schedule.noSchedule"))
            return

        output_dir = filedialog.askdirectory(title=self.t("schedule.download"))
        if not output_dir:
            return  # User cancelled

        self._show_export_result(self.export_manager.download_schedule(output_dir))

    def _export_as(self, format_type: str):
        schedule = self.data_manager.get_schedule()
        if not schedule:
            messagebox.showwarning(self.t("schedule.download"), self.t("schedule.noSchedule"))
            return

        initial_filename = self.export_manager.get_default_filename(schedule, format_type)
        output_path = filedialog.asksaveasfilename(
            initialfile=initial_filename,
            defaultextension=f".{initial_filename.rsplit('.', 1)[-1]}",
            title=self.t("schedule.download")
        )
        if not output_path:
            return  # User cancelled

        self._show_export_result(self.export_manager.export_schedule(format_type, output_path))

    def _show_export_result(self, result):
        if result.success:
            self.main_window.notify(result.message)
        else:
            messagebox.showerror(self.t("schedule.download"), result.message)


class SettingsView(ctk.CTkFrame):
    """Language selection"""

    def __init__(self, parent, data_manager: DataManager, main_window):
        super().__init__(parent)
        self.data_manager = data_manager
        self.main_window = main_window
        t = data_manager.translator.t

        ctk.CTkLabel(
            self,
            text=t("settings.title"),
            font=ctk.CTkFont(size=16, weight="bold")
        ).pack(anchor="w", padx=20, pady=(20, 10))

        ctk.CTkLabel(self, text=t("settings.language")).pack(anchor="w", padx=20, pady=(0, 5))

        self.language_var = ctk.StringVar(value=data_manager.get_language())
        for value, label in (("en", "settings.english"), ("es", "settings.spanish")):
            ctk.CTkRadioButton(
                self,
                text=t(label),
                value=value,
                variable=self.language_var,
                command=self._on_language_change
            ).pack(anchor="w", padx=30, pady=5)

    def _on_language_change(self):
        self.data_manager.set_language(self.language_var.get())
        # Stay on the settings tab after the views are rebuilt
        self.main_window.rebuild("nav.settings")


class MainWindow(ctk.CTk):
    """Main application window"""

    def __init__(self, data_manager: DataManager, scheduler: ShiftScheduler,
                 export_manager: ExportManager):
        super().__init__()

        self.data_manager = data_manager
        self.scheduler = scheduler
        self.export_manager = export_manager

        self.geometry("1300x800")
        self.tabview = None

        # Status bar
        self.status_var = ctk.StringVar(value="")
        status_bar = ctk.CTkLabel(self, textvariable=self.status_var, anchor="w")
        status_bar.pack(side="bottom", fill="x", padx=10, pady=5)

        self.rebuild()

    def rebuild(self, selected_tab: str = "nav.agents"):
        """Recreate all views, e.g. after the language changed"""
        t = self.data_manager.translator.t
        self.title(t("app.name"))

        if self.tabview is not None:
            self.tabview.destroy()

        self.tabview = ctk.CTkTabview(self, command=self._on_tab_change)
        self.tabview.pack(fill="both", expand=True, padx=10, pady=(10, 0))

        views = [
            ("nav.agents", lambda tab: AgentsView(tab, self.data_manager, self)),
            ("nav.teams", lambda tab: TeamsView(tab, self.data_manager, self)),
            ("nav.schedule", lambda tab: ScheduleView(tab, self.data_manager, self.scheduler, self.export_manager, self)),
            ("nav.settings", lambda tab: SettingsView(tab, self.data_manager, self)),
        ]
        # {tab label: view}
        self.views = {}
        for key, build in views:
            tab = self.tabview.add(t(key))
            view = build(tab)
            view.pack(fill="both", expand=True)
            self.views[t(key)] = view

        self.tabview.set(t(selected_tab))

    def _on_tab_change(self):
        # Other tabs may have changed agents, teams or the schedule
        view = self.views.get(self.tabview.get())
        if hasattr(view, "refresh"):
            view.refresh()

    def notify(self, message: str):
        """Non-blocking user notification"""
        logger.info(message)
        self.status_var.set(message)
