"""
Section Dispatcher - Renderizado de secciones de lista

Despacha según ``section.type``:

- ``activities``: actividades ordenadas por fecha descendente
- ``notes``: notas ordenadas por fecha descendente
- cualquier otro tipo: no produce salida (sin error)

En ambos listados los empates de fecha conservan el orden original del
documento. Las fechas que no se pueden interpretar se colocan al final.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from core.render_tree import RenderNode, node
from core.schema_models import Activity, ContactData, Note, Section
from core.utils import format_medium_date, parse_iso_datetime, setup_logger

logger = setup_logger(__name__)

T = TypeVar("T", Activity, Note)

DEFAULT_ACTIVITY_ICON = "📄"
ADD_ACTION_LABEL = "+ Add New"
EMPTY_ACTIVITIES_MESSAGE = "No activities found"
EMPTY_NOTES_MESSAGE = "No notes found"


class SectionType(str, Enum):
    ACTIVITIES = "activities"
    NOTES = "notes"


class ActivityType(str, Enum):
    EMAIL = "email"
    CALL = "call"
    MEETING = "meeting"
    TASK = "task"


ACTIVITY_ICONS: Dict[ActivityType, str] = {
    ActivityType.EMAIL: "📧",
    ActivityType.CALL: "📞",
    ActivityType.MEETING: "🤝",
    ActivityType.TASK: "📋",
}


def get_activity_icon(activity_type: Optional[str]) -> str:
    try:
        return ACTIVITY_ICONS[ActivityType(activity_type)]
    except ValueError:
        return DEFAULT_ACTIVITY_ICON


def status_class(status: Optional[str]) -> str:
    # Sin validación: cualquier string produce su clase
    return f"status-{status}" if status is not None else "status-"


def priority_class(priority: Optional[str]) -> str:
    return f"priority-{priority}" if priority is not None else "priority-"


def format_when(date_value: Optional[str], time_value: Optional[str]) -> str:
    """Texto ``<fecha> at <hora>`` del pie de actividades y notas."""
    return f"{format_medium_date(date_value)} at {time_value or ''}".strip()


def sort_by_date_desc(items: Sequence[T]) -> List[T]:
    """
    Ordena por fecha descendente sin modificar la secuencia original.

    ``sorted`` es estable también con ``reverse=True``, por lo que los empates
    mantienen el orden de entrada. Las fechas no interpretables van al final.
    """
    dated = []
    undated = []
    for item in items:
        parsed = parse_iso_datetime(item.date)
        if parsed is None:
            undated.append(item)
        else:
            dated.append((parsed, item))

    ordered = sorted(dated, key=lambda pair: pair[0], reverse=True)
    return [item for _, item in ordered] + undated


# ==============================================================================
# RENDERIZADORES POR TIPO
# ==============================================================================

def _empty_state(message: str) -> RenderNode:
    return node("div", "empty-state", children=[node("p", text=message)])


def render_activity(activity: Activity) -> RenderNode:
    status = status_class(activity.status)
    priority = priority_class(activity.priority)
    return node(
        "div", "activity-item", status, priority,
        key=activity.id,
        children=[
            node("div", "activity-header", children=[
                node("div", "activity-icon", text=get_activity_icon(activity.type)),
                node("div", "activity-info", children=[
                    node("h4", "activity-title", text=activity.title),
                    node("p", "activity-description", text=activity.description),
                ]),
                node("div", "activity-meta", children=[
                    node("span", "activity-status", status, text=activity.status),
                    node("span", "activity-priority", priority, text=activity.priority),
                ]),
            ]),
            node("div", "activity-footer", children=[
                node("span", "activity-date", text=format_when(activity.date, activity.time)),
            ]),
        ],
    )


def render_activities(data: ContactData) -> RenderNode:
    activities = data.activities or []
    items = [render_activity(activity) for activity in sort_by_date_desc(activities)]
    if not activities:
        items.append(_empty_state(EMPTY_ACTIVITIES_MESSAGE))
    return node("div", "activities-list", children=items)


def render_note(note: Note) -> RenderNode:
    return node(
        "div", "note-item",
        key=note.id,
        children=[
            node("div", "note-header", children=[
                node("h4", "note-title", text=note.title),
                node("span", "note-type", note.type, text=note.type.replace("-", " ", 1)),
            ]),
            node("p", "note-content", text=note.content),
            node("div", "note-footer", children=[
                node("span", "note-author", text=f"by {note.author}"),
                node("span", "note-date", text=format_when(note.date, note.time)),
            ]),
        ],
    )


def render_notes(data: ContactData) -> RenderNode:
    notes = data.notes or []
    items = [render_note(note) for note in sort_by_date_desc(notes)]
    if not notes:
        items.append(_empty_state(EMPTY_NOTES_MESSAGE))
    return node("div", "notes-list", children=items)


SECTION_RENDERERS: Dict[SectionType, Callable[[ContactData], RenderNode]] = {
    SectionType.ACTIVITIES: render_activities,
    SectionType.NOTES: render_notes,
}


# ==============================================================================
# DESPACHO
# ==============================================================================

def render_section(section: Section, data: ContactData) -> Optional[RenderNode]:
    """
    Renderiza una sección de lista.

    Args:
        section: Definición de la sección
        data: Documento de datos del contacto

    Returns:
        Nodo contenedor de la sección o None si el tipo no tiene renderizador
    """
    try:
        renderer = SECTION_RENDERERS[SectionType(section.type)]
    except ValueError:
        logger.debug("Sección %s de tipo %r sin renderizador", section.id, section.type)
        return None

    return node(
        "div", "section-container",
        key=section.id,
        data_section_type=section.type,
        children=[
            node("div", "section-header", children=[
                node("h3", "section-title", text=section.title),
                node("button", "section-action", text=ADD_ACTION_LABEL, type="button"),
            ]),
            node("div", "section-content", children=[renderer(data)]),
        ],
    )
