"""
Data Manager for w2w

Holds the application state snapshot (agents, teams, schedule and language),
persists it to durable storage after every mutation, and implements the
create/update/delete operations for agents, teams and agent notes.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .config import (
    DATE_FORMAT,
    DAYS_IN_WEEK,
    DEFAULT_LANGUAGE,
    LANGUAGE_SLOT,
    SHIFT_KINDS,
    STATE_SLOT,
    SUPPORTED_LANGUAGES,
    WORKING_SHIFTS,
)
from .storage import FileStorage
from .translations import TRANSLATIONS, Translator

logger = logging.getLogger(__name__)


class DataManagerError(Exception):
    """Base exception for DataManager operations"""
    pass


class DataFileCorruptedError(DataManagerError):
    """Raised when the persisted state cannot be parsed"""
    pass


class DataSaveError(DataManagerError):
    """Raised when saving data fails"""
    pass


class DataValidationError(DataManagerError):
    """Raised when data validation fails"""
    pass


DateLike = Union[date, str]


def normalize_date_key(value: DateLike) -> str:
    """Validate a calendar date and return it as a YYYY-MM-DD key"""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), DATE_FORMAT).strftime(DATE_FORMAT)
        except ValueError:
            pass
    raise DataValidationError(f"Invalid date: {value!r}")


def validate_weekday(value: Any) -> int:
    """Validate a weekday index (Sunday=0)"""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < DAYS_IN_WEEK:
        raise DataValidationError(f"Invalid weekday: {value!r}")
    return value


def _parse_weekday_key(key: Any) -> int:
    # JSON object keys arrive as strings
    try:
        return validate_weekday(int(key))
    except (TypeError, ValueError):
        raise DataValidationError(f"Invalid weekday: {key!r}")


@dataclass(frozen=True)
class ShiftAvailability:
    """Which shifts an agent can work"""
    morning: bool = True
    afternoon: bool = True
    night: bool = True

    def first_available(self) -> Optional[str]:
        """First available shift in priority order, or None"""
        for shift in WORKING_SHIFTS:
            if getattr(self, shift):
                return shift
        return None

    def to_dict(self) -> Dict[str, bool]:
        return {shift: getattr(self, shift) for shift in WORKING_SHIFTS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ShiftAvailability':
        return cls(**{shift: bool(data.get(shift, False)) for shift in WORKING_SHIFTS})


@dataclass(frozen=True)
class Agent:
    """Agent with team membership, weekly days off, dated notes and availability"""
    id: str
    name: str
    team: str = ""
    days_off: Tuple[int, ...] = ()  # Weekday indexes, Sunday=0
    notes: Mapping[str, str] = field(default_factory=dict)  # {YYYY-MM-DD: note}
    availability: ShiftAvailability = field(default_factory=ShiftAvailability)

    def __post_init__(self):
        days_off = []
        for day in self.days_off:
            day = validate_weekday(day)
            if day not in days_off:
                days_off.append(day)
        # A null note is no note
        notes = {
            normalize_date_key(key): str(text)
            for key, text in dict(self.notes).items() if text is not None
        }
        object.__setattr__(self, "days_off", tuple(days_off))
        object.__setattr__(self, "notes", notes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "team": self.team,
            "daysOff": list(self.days_off),
            "notes": dict(self.notes),
            "availability": self.availability.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Agent':
        return cls(
            id=data["id"],
            name=data["name"],
            team=data.get("team", ""),
            days_off=tuple(data.get("daysOff", [])),
            notes=data.get("notes") or {},
            availability=ShiftAvailability.from_dict(data.get("availability", {}))
        )


@dataclass(frozen=True)
class ShiftRequirement:
    """Required headcount per shift for one weekday"""
    morning: int = 0
    afternoon: int = 0
    night: int = 0

    def __post_init__(self):
        for shift in WORKING_SHIFTS:
            count = getattr(self, shift)
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise DataValidationError(f"Invalid required headcount for {shift}: {count!r}")

    def to_dict(self) -> Dict[str, int]:
        return {shift: getattr(self, shift) for shift in WORKING_SHIFTS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ShiftRequirement':
        return cls(**{shift: data.get(shift, 0) for shift in WORKING_SHIFTS})


def default_requirements() -> Dict[int, ShiftRequirement]:
    return {day: ShiftRequirement() for day in range(DAYS_IN_WEEK)}


@dataclass(frozen=True)
class Team:
    """Team with required headcount per weekday and shift"""
    id: str
    name: str
    required_agents: Mapping[int, ShiftRequirement] = field(default_factory=default_requirements)

    def __post_init__(self):
        required = {}
        for day, requirement in dict(self.required_agents).items():
            if not isinstance(requirement, ShiftRequirement):
                raise DataValidationError(f"Invalid requirement for weekday {day!r}: {requirement!r}")
            required[validate_weekday(day)] = requirement
        object.__setattr__(self, "required_agents", required)

    def requirement_for(self, weekday: int) -> ShiftRequirement:
        return self.required_agents.get(weekday, ShiftRequirement())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "requiredAgents": {
                str(day): requirement.to_dict()
                for day, requirement in sorted(self.required_agents.items())
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Team':
        return cls(
            id=data["id"],
            name=data["name"],
            required_agents={
                _parse_weekday_key(day): ShiftRequirement.from_dict(requirement)
                for day, requirement in (data.get("requiredAgents") or {}).items()
            }
        )


@dataclass(frozen=True)
class ShiftAssignment:
    """Shift kind assigned to an agent on one date"""
    shift: str
    note: Optional[str] = None

    def __post_init__(self):
        if self.shift not in SHIFT_KINDS:
            raise DataValidationError(f"Invalid shift kind: {self.shift!r}")

    def to_dict(self) -> Dict[str, str]:
        data = {"shift": self.shift}
        if self.note:
            data["note"] = self.note
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ShiftAssignment':
        return cls(shift=data["shift"], note=data.get("note"))


@dataclass(frozen=True)
class ScheduleEntry:
    """One agent's generated week; name and team are snapshots taken at generation time"""
    agent_id: str
    agent_name: str
    team: str
    shifts: Mapping[str, ShiftAssignment] = field(default_factory=dict)  # {YYYY-MM-DD: assignment}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agentId": self.agent_id,
            "agentName": self.agent_name,
            "team": self.team,
            "shifts": {day: assignment.to_dict() for day, assignment in self.shifts.items()}
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScheduleEntry':
        return cls(
            agent_id=data["agentId"],
            agent_name=data["agentName"],
            team=data.get("team", ""),
            shifts={
                normalize_date_key(day): ShiftAssignment.from_dict(assignment)
                for day, assignment in data.get("shifts", {}).items()
            }
        )


@dataclass(frozen=True)
class LanguageState:
    """Active language tag; the translation tables themselves are static"""
    current: str = DEFAULT_LANGUAGE

    def to_dict(self) -> Dict[str, Any]:
        return {"current": self.current, "translations": TRANSLATIONS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LanguageState':
        current = data.get("current", DEFAULT_LANGUAGE)
        if current not in SUPPORTED_LANGUAGES:
            current = DEFAULT_LANGUAGE
        return cls(current=current)


@dataclass(frozen=True)
class AppState:
    """Complete application snapshot"""
    agents: Tuple[Agent, ...] = ()
    teams: Tuple[Team, ...] = ()
    schedule: Tuple[ScheduleEntry, ...] = ()
    language: LanguageState = field(default_factory=LanguageState)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agents": [agent.to_dict() for agent in self.agents],
            "teams": [team.to_dict() for team in self.teams],
            "schedule": [entry.to_dict() for entry in self.schedule],
            "language": self.language.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppState':
        return cls(
            agents=tuple(Agent.from_dict(item) for item in data.get("agents", [])),
            teams=tuple(Team.from_dict(item) for item in data.get("teams", [])),
            schedule=tuple(ScheduleEntry.from_dict(item) for item in data.get("schedule", [])),
            language=LanguageState.from_dict(data.get("language") or {})
        )


class DataManager:
    """Application state store: snapshot ownership, persistence and CRUD operations"""

    def __init__(self, storage: FileStorage):
        self.storage = storage
        self.state = self._load_or_create_state()
        self._apply_saved_language()

    def _load_or_create_state(self) -> AppState:
        """Load the persisted snapshot, falling back to the backup and then to empty collections"""
        try:
            raw = self.storage.get_item(STATE_SLOT)
        except (IOError, OSError) as e:
            logger.error(f"Error reading saved state: {e}")
            raw = ""

        if raw is not None:
            try:
                return self._parse_state(raw)
            except DataFileCorruptedError as e:
                logger.error(f"Error loading saved state: {e}")
        else:
            logger.info("No saved state found, checking for backup")

        try:
            backup = self.storage.get_backup(STATE_SLOT)
        except (IOError, OSError) as e:
            logger.error(f"Error reading backup state: {e}")
            backup = None

        if backup is not None:
            try:
                state = self._parse_state(backup)
                logger.info("Successfully recovered state from backup")
                return state
            except DataFileCorruptedError as backup_e:
                logger.error(f"Backup state also corrupted: {backup_e}")

        logger.info("Starting with empty collections")
        return AppState()

    @staticmethod
    def _parse_state(raw: str) -> AppState:
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise DataValidationError("Saved state is not a JSON object")
            return AppState.from_dict(data)
        except (ValueError, KeyError, TypeError, AttributeError, DataValidationError) as e:
            raise DataFileCorruptedError(str(e))

    def _apply_saved_language(self):
        try:
            saved = self.storage.get_item(LANGUAGE_SLOT)
        except (IOError, OSError) as e:
            logger.error(f"Error reading saved language: {e}")
            return
        if saved is not None and saved.strip() in SUPPORTED_LANGUAGES:
            self.state = replace(self.state, language=LanguageState(saved.strip()))

    def save_data(self):
        """Serialize the whole snapshot to the state slot"""
        try:
            payload = json.dumps(self.state.to_dict(), indent=2, ensure_ascii=False)
            self.storage.set_item(STATE_SLOT, payload)
        except (IOError, OSError) as e:
            logger.error(f"I/O error during save operation: {e}", exc_info=True)
            raise DataSaveError(f"Failed to save data due to I/O error: {e}")

    def _commit(self, new_state: AppState):
        self.state = new_state
        self.save_data()

    def _replace_in(self, collection: str, item) -> bool:
        items = getattr(self.state, collection)
        if not any(existing.id == item.id for existing in items):
            return False
        updated = tuple(item if existing.id == item.id else existing for existing in items)
        self._commit(replace(self.state, **{collection: updated}))
        return True

    def _remove_from(self, collection: str, item_id: str) -> bool:
        items = getattr(self.state, collection)
        remaining = tuple(existing for existing in items if existing.id != item_id)
        if len(remaining) == len(items):
            return False
        self._commit(replace(self.state, **{collection: remaining}))
        return True

    # Snapshot access
    def get_state(self) -> AppState:
        return self.state

    @property
    def translator(self) -> Translator:
        return Translator(self.state.language.current)

    def get_language(self) -> str:
        return self.state.language.current

    # Agent Management
    def get_agents(self) -> List[Agent]:
        return list(self.state.agents)

    def get_agent(self, agent_id: str) -> Optional[Agent]:
        for agent in self.state.agents:
            if agent.id == agent_id:
                return agent
        return None

    def search_agents(self, term: str = "") -> List[Agent]:
        """Agents whose name or team contains the term, case-insensitive"""
        term = (term or "").strip().lower()
        if not term:
            return self.get_agents()
        return [
            agent for agent in self.state.agents
            if term in agent.name.lower() or term in agent.team.lower()
        ]

    def add_agent(self, name: str, team: str = "", days_off=(),
                  availability: Optional[ShiftAvailability] = None,
                  notes: Optional[Mapping[str, str]] = None) -> Agent:
        """Add new agent with a fresh id"""
        agent = Agent(
            id=str(uuid.uuid4()),
            name=name,
            team=team,
            days_off=tuple(days_off),
            notes=notes or {},
            availability=availability or ShiftAvailability()
        )
        self._commit(replace(self.state, agents=self.state.agents + (agent,)))
        logger.info(f"Added agent '{agent.name}' ({agent.id})")
        return agent

    def update_agent(self, agent: Agent) -> bool:
        """Replace the agent with the same id; False if it does not exist"""
        if not self._replace_in("agents", agent):
            logger.warning(f"Agent {agent.id} not found, nothing updated")
            return False
        logger.info(f"Updated agent '{agent.name}' ({agent.id})")
        return True

    def delete_agent(self, agent_id: str) -> bool:
        if not self._remove_from("agents", agent_id):
            logger.warning(f"Agent {agent_id} not found, nothing deleted")
            return False
        logger.info(f"Deleted agent {agent_id}")
        return True

    # Note Management
    def add_agent_note(self, agent_id: str, note_date: DateLike, note: str) -> bool:
        """Set the note for a date, overwriting any existing one"""
        key = normalize_date_key(note_date)
        agent = self.get_agent(agent_id)
        if agent is None:
            logger.warning(f"Agent {agent_id} not found, note for {key} not added")
            return False
        self._replace_in("agents", replace(agent, notes={**agent.notes, key: note}))
        logger.info(f"Added note for '{agent.name}' on {key}")
        return True

    def remove_agent_note(self, agent_id: str, note_date: DateLike) -> bool:
        """Drop the note for a date; False if there is none"""
        try:
            key = normalize_date_key(note_date)
        except DataValidationError:
            logger.warning(f"No note on {note_date!r} for agent {agent_id}, nothing removed")
            return False
        agent = self.get_agent(agent_id)
        if agent is None or key not in agent.notes:
            logger.warning(f"No note on {key} for agent {agent_id}, nothing removed")
            return False
        notes = {day: text for day, text in agent.notes.items() if day != key}
        self._replace_in("agents", replace(agent, notes=notes))
        logger.info(f"Removed note for '{agent.name}' on {key}")
        return True

    # Team Management
    def get_teams(self) -> List[Team]:
        return list(self.state.teams)

    def get_team(self, team_id: str) -> Optional[Team]:
        for team in self.state.teams:
            if team.id == team_id:
                return team
        return None

    def add_team(self, name: str, required_agents: Optional[Mapping[int, ShiftRequirement]] = None) -> Team:
        """Add new team with a fresh id"""
        team = Team(
            id=str(uuid.uuid4()),
            name=name,
            required_agents=default_requirements() if required_agents is None else required_agents
        )
        self._commit(replace(self.state, teams=self.state.teams + (team,)))
        logger.info(f"Added team '{team.name}' ({team.id})")
        return team

    def update_team(self, team: Team) -> bool:
        if not self._replace_in("teams", team):
            logger.warning(f"Team {team.id} not found, nothing updated")
            return False
        logger.info(f"Updated team '{team.name}' ({team.id})")
        return True

    def delete_team(self, team_id: str) -> bool:
        if not self._remove_from("teams", team_id):
            logger.warning(f"Team {team_id} not found, nothing deleted")
            return False
        logger.info(f"Deleted team {team_id}")
        return True

    # Schedule Management
    def get_schedule(self) -> List[ScheduleEntry]:
        return list(self.state.schedule)

    def filter_schedule(self, team: Optional[str] = None) -> List[ScheduleEntry]:
        """Schedule entries for one team; None or "all" returns every entry"""
        if team is None or team == "all":
            return self.get_schedule()
        return [entry for entry in self.state.schedule if entry.team == team]

    def get_team_names(self) -> List[str]:
        """Distinct team names referenced by agents, in first-seen order"""
        names = []
        for agent in self.state.agents:
            if agent.team and agent.team not in names:
                names.append(agent.team)
        return names

    def replace_schedule(self, entries: List[ScheduleEntry]):
        """Replace the whole schedule collection"""
        self._commit(replace(self.state, schedule=tuple(entries)))
        logger.info(f"Schedule replaced with {len(entries)} entries")

    # Settings Management
    def set_language(self, language: str):
        """Switch the active language and persist it to its own slot"""
        if language not in SUPPORTED_LANGUAGES:
            raise DataValidationError(f"Unsupported language: {language!r}")
        try:
            self.storage.set_item(LANGUAGE_SLOT, language)
        except (IOError, OSError) as e:
            logger.error(f"I/O error saving language: {e}", exc_info=True)
            raise DataSaveError(f"Failed to save language: {e}")
        self._commit(replace(self.state, language=LanguageState(language)))
        logger.info(f"Language set to '{language}'")
