"""
Scheduler Logic for w2w

Generates a one-week shift table from each agent's dated notes, weekly days
off and shift availability. Agents are scheduled independently of each other;
team headcount requirements are only reported as coverage, never enforced.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence
import logging

from .config import DATE_FORMAT, DAYS_IN_WEEK, SHIFT_OFF, WORKING_SHIFTS
from .data_manager import Agent, DataManager, ScheduleEntry, ShiftAssignment, Team

logger = logging.getLogger(__name__)


@dataclass
class ScheduleResult:
    """Result of schedule generation"""
    success: bool
    schedule: List[ScheduleEntry]
    message: str
    week_start: Optional[date] = None
    missing_prerequisite: bool = False
    statistics: Dict[str, Any] = field(default_factory=dict)


def week_start(day) -> date:
    """Sunday on or before the given day"""
    if isinstance(day, datetime):
        day = day.date()
    # date.weekday() is Monday=0; shift so Sunday=0
    return day - timedelta(days=(day.weekday() + 1) % DAYS_IN_WEEK)


def week_dates(day) -> List[date]:
    start = week_start(day)
    return [start + timedelta(days=offset) for offset in range(DAYS_IN_WEEK)]


def sunday_based_weekday(day: date) -> int:
    return (day.weekday() + 1) % DAYS_IN_WEEK


def assign_day(agent: Agent, day: date) -> ShiftAssignment:
    """Decide one agent's shift on one date: note, then day off, then availability"""
    date_key = day.strftime(DATE_FORMAT)
    note = agent.notes.get(date_key)
    if note:
        return ShiftAssignment(shift=SHIFT_OFF, note=note)

    if sunday_based_weekday(day) in agent.days_off:
        return ShiftAssignment(shift=SHIFT_OFF)

    shift = agent.availability.first_available()
    return ShiftAssignment(shift=shift or SHIFT_OFF)


def build_schedule(agents: Sequence[Agent], start_date) -> List[ScheduleEntry]:
    """Build one ScheduleEntry per agent, in input order, for the week containing start_date"""
    dates = week_dates(start_date)
    schedule = []
    for agent in agents:
        schedule.append(ScheduleEntry(
            agent_id=agent.id,
            agent_name=agent.name,
            team=agent.team,
            shifts={day.strftime(DATE_FORMAT): assign_day(agent, day) for day in dates}
        ))
    return schedule


def calculate_coverage(schedule: Sequence[ScheduleEntry], teams: Sequence[Team]) -> Dict[str, Any]:
    """
    Compare assigned headcount with each team's required headcount.

    Agents belong to a team by name. Returns one row per team, date and
    working shift, plus the total shortfall across all rows.
    """
    dates = sorted({day for entry in schedule for day in entry.shifts})
    rows = []
    total_shortfall = 0

    for team in teams:
        members = [entry for entry in schedule if entry.team == team.name]
        for date_key in dates:
            weekday = sunday_based_weekday(datetime.strptime(date_key, DATE_FORMAT).date())
            requirement = team.requirement_for(weekday)
            for shift in WORKING_SHIFTS:
                required = getattr(requirement, shift)
                assigned = sum(
                    1 for entry in members
                    if date_key in entry.shifts and entry.shifts[date_key].shift == shift
                )
                shortfall = max(0, required - assigned)
                total_shortfall += shortfall
                rows.append({
                    "team": team.name,
                    "date": date_key,
                    "weekday": weekday,
                    "shift": shift,
                    "required": required,
                    "assigned": assigned,
                    "shortfall": shortfall
                })

    return {
        "rows": rows,
        "total_shortfall": total_shortfall,
        "understaffed": [row for row in rows if row["shortfall"] > 0]
    }


class ShiftScheduler:
    """Runs weekly generation against the data manager's agents and teams"""

    def __init__(self, data_manager: DataManager):
        self.data_manager = data_manager

    def generate_schedule(self, start_date) -> ScheduleResult:
        """
        Generate the week containing start_date and replace the stored schedule.

        With no agents or no teams nothing is generated and the stored
        schedule is left untouched; the result reports the missing data.
        """
        agents = self.data_manager.get_agents()
        teams = self.data_manager.get_teams()
        t = self.data_manager.translator.t

        if not agents or not teams:
            logger.info(
                f"Schedule generation skipped: {len(agents)} agents, {len(teams)} teams"
            )
            return ScheduleResult(
                success=False,
                schedule=self.data_manager.get_schedule(),
                message=t("error.required"),
                missing_prerequisite=True
            )

        start = week_start(start_date)
        schedule = build_schedule(agents, start)
        self.data_manager.replace_schedule(schedule)

        statistics = calculate_coverage(schedule, teams)
        start_key = start.strftime(DATE_FORMAT)
        logger.info(
            f"Generated schedule for week of {start_key}: {len(schedule)} agents, "
            f"coverage shortfall {statistics['total_shortfall']}"
        )

        return ScheduleResult(
            success=True,
            schedule=schedule,
            message=f"{t('schedule.weekStarting')} {start_key}",
            week_start=start,
            statistics=statistics
        )
