"""
Translation Tables for w2w

Static English and Spanish display strings keyed by dotted identifiers,
and the Translator used by the UI and the exporters.
"""

from typing import Dict

from .config import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, WEEKDAY_NAMES


EN_TRANSLATIONS = {
    # Common
    "app.name": "w2w - Work Shift Scheduler",
    "app.save": "Save",
    "app.cancel": "Cancel",
    "app.delete": "Delete",
    "app.edit": "Edit",
    "app.add": "Add",
    "app.search": "Search",
    "app.yes": "Yes",
    "app.no": "No",
    "app.confirm": "Confirm",
    "app.all": "All",

    # Navigation
    "nav.agents": "Agents",
    "nav.teams": "Teams",
    "nav.schedule": "Schedule",
    "nav.settings": "Settings",

    # Agents
    "agents.title": "Agents Management",
    "agents.add": "Add Agent",
    "agents.name": "Name",
    "agents.team": "Team",
    "agents.daysOff": "Days Off",
    "agents.availability": "Shift Availability",
    "agents.notes": "Notes",
    "agents.noAgents": "No agents found",
    "agents.morning": "Morning",
    "agents.afternoon": "Afternoon",
    "agents.night": "Night",
    "agents.off": "Off",
    "agents.addNote": "Add Note",
    "agents.noteDate": "Date",
    "agents.noteText": "Note",

    # Teams
    "teams.title": "Teams Management",
    "teams.add": "Add Team",
    "teams.name": "Team Name",
    "teams.requiredAgents": "Required Agents per Day",
    "teams.noTeams": "No teams found",
    "teams.day": "Day",
    "teams.morning": "Morning",
    "teams.afternoon": "Afternoon",
    "teams.night": "Night",

    # Schedule
    "schedule.title": "Schedule",
    "schedule.generate": "Generate Schedule",
    "schedule.download": "Download as Excel",
    "schedule.noSchedule": "No schedule generated yet",
    "schedule.weekStarting": "Week starting",
    "schedule.shift": "Shift",
    "schedule.coverage": "Team Coverage",
    "schedule.shortfall": "Shortfall",

    # Days
    "days.sunday": "Sunday",
    "days.monday": "Monday",
    "days.tuesday": "Tuesday",
    "days.wednesday": "Wednesday",
    "days.thursday": "Thursday",
    "days.friday": "Friday",
    "days.saturday": "Saturday",

    # Settings
    "settings.title": "Settings",
    "settings.language": "Language",
    "settings.english": "English",
    "settings.spanish": "Spanish",

    # Errors
    "error.required": "This field is required",
    "error.invalidFormat": "Invalid format",
}

ES_TRANSLATIONS = {
    # Common
    "app.name": "w2w - Programador de Turnos de Trabajo",
    "app.save": "Guardar",
    "app.cancel": "Cancelar",
    "app.delete": "Eliminar",
    "app.edit": "Editar",
    "app.add": "Añadir",
    "app.search": "Buscar",
    "app.yes": "Sí",
    "app.no": "No",
    "app.confirm": "Confirmar",
    "app.all": "Todos",

    # Navigation
    "nav.agents": "Agentes",
    "nav.teams": "Equipos",
    "nav.schedule": "Horario",
    "nav.settings": "Configuración",

    # Agents
    "agents.title": "Gestión de Agentes",
    "agents.add": "Añadir Agente",
    "agents.name": "Nombre",
    "agents.team": "Equipo",
    "agents.daysOff": "Días Libres",
    "agents.availability": "Disponibilidad de Turnos",
    "agents.notes": "Notas",
    "agents.noAgents": "No se encontraron agentes",
    "agents.morning": "Mañana",
    "agents.afternoon": "Tarde",
    "agents.night": "Noche",
    "agents.off": "Libre",
    "agents.addNote": "Añadir Nota",
    "agents.noteDate": "Fecha",
    "agents.noteText": "Nota",

    # Teams
    "teams.title": "Gestión de Equipos",
    "teams.add": "Añadir Equipo",
    "teams.name": "Nombre del Equipo",
    "teams.requiredAgents": "Agentes Requeridos por Día",
    "teams.noTeams": "No se encontraron equipos",
    "teams.day": "Día",
    "teams.morning": "Mañana",
    "teams.afternoon": "Tarde",
    "teams.night": "Noche",

    # Schedule
    "schedule.title": "Horario",
    "schedule.generate": "Generar Horario",
    "schedule.download": "Descargar como Excel",
    "schedule.noSchedule": "Aún no se ha generado ningún horario",
    "schedule.weekStarting": "Semana que comienza",
    "schedule.shift": "Turno",
    "schedule.coverage": "Cobertura por Equipo",
    "schedule.shortfall": "Faltante",

    # Days
    "days.sunday": "Domingo",
    "days.monday": "Lunes",
    "days.tuesday": "Martes",
    "days.wednesday": "Miércoles",
    "days.thursday": "Jueves",
    "days.friday": "Viernes",
    "days.saturday": "Sábado",

    # Settings
    "settings.title": "Configuración",
    "settings.language": "Idioma",
    "settings.english": "Inglés",
    "settings.spanish": "Español",

    # Errors
    "error.required": "Este campo es obligatorio",
    "error.invalidFormat": "Formato inválido",
}

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": EN_TRANSLATIONS,
    "es": ES_TRANSLATIONS,
}


def weekday_key(weekday: int) -> str:
    """Translation key for a weekday index (Sunday=0)"""
    return f"days.{WEEKDAY_NAMES[weekday]}"


class Translator:
    """Looks up display strings for the active language"""

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self.language = language

    def t(self, key: str) -> str:
        # Missing keys render as the key itself
        return TRANSLATIONS[self.language].get(key, key)

    def shift_label(self, shift: str) -> str:
        return self.t(f"agents.{shift}")
