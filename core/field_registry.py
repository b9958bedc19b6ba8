"""
Field Registry - Renderizado y formato de campos por tipo

Cada tipo de campo cerrado (``FieldType``) tiene un handler con tres
responsabilidades:

- ``control``: nodo del control editable
- ``format``: texto para el modo lectura
- ``parse``: conversión de la entrada del usuario al valor almacenado

Los tipos desconocidos usan ``DisplayHandler`` (solo lectura, sin ruta de
edición). Un valor ``None`` se formatea siempre como cadena vacía.

El flag ``required`` de un campo solo marca la etiqueta con ``*``; no se
valida en ningún punto de esta cadena.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from core.render_tree import RenderNode, node
from core.schema_models import FieldDef
from core.utils import format_short_date, parse_iso_datetime, setup_logger

logger = setup_logger(__name__)

DEFAULT_TEXTAREA_ROWS = 3
TAGS_SEPARATOR = ","
TAGS_JOINER = ", "
TAGS_HINT = "Separate tags with commas"
SELECT_PLACEHOLDER = "Select..."


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    DATE = "date"
    SELECT = "select"
    TEXTAREA = "textarea"
    TAGS = "tags"


def resolve_field_type(type_tag: Any) -> Optional[FieldType]:
    """Devuelve el ``FieldType`` del tag o None si no pertenece al conjunto cerrado."""
    try:
        return FieldType(type_tag)
    except ValueError:
        return None


def to_display_string(value: Any) -> str:
    """Conversión a texto equivalente al ``toString`` de la vista original."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_display_string(item) for item in value)
    return str(value)


def parse_tags(raw: str) -> List[str]:
    """
    Convierte la entrada del usuario en una lista de tags.

    Ejemplo:
        >>> parse_tags(" VIP , , Decision Maker")
        ['VIP', 'Decision Maker']
    """
    return [piece.strip() for piece in (raw or "").split(TAGS_SEPARATOR) if piece.strip()]


def format_tags(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return TAGS_JOINER.join(str(tag) for tag in value)
    return ""


# ==============================================================================
# HANDLERS POR TIPO
# ==============================================================================

class FieldHandler:
    """Handler base: texto de una línea."""

    editable = True

    def format(self, field: FieldDef, value: Any) -> str:
        return to_display_string(value)

    def parse(self, field: FieldDef, raw: Any) -> Any:
        return raw

    def input_value(self, field: FieldDef, value: Any) -> str:
        """Valor que muestra el control editable."""
        return to_display_string(value) if value else ""

    def control(self, field: FieldDef, value: Any) -> RenderNode:
        return node(
            "input", "field-input",
            type=field.type, id=field.id,
            value=self.input_value(field, value),
            placeholder=field.placeholder,
            required=True if field.required else None,
        )


class TextHandler(FieldHandler):
    """text / email / phone."""


class DateHandler(FieldHandler):
    """Fecha: se guarda el string ISO tal cual; se muestra en formato corto."""

    def format(self, field: FieldDef, value: Any) -> str:
        if not value:
            return ""
        if parse_iso_datetime(value) is None:
            logger.debug("Fecha no interpretable en campo %s: %r", field.id, value)
        return format_short_date(value)

    def control(self, field: FieldDef, value: Any) -> RenderNode:
        return node(
            "input", "field-input",
            type="date", id=field.id,
            value=self.input_value(field, value),
            required=True if field.required else None,
        )


class SelectHandler(FieldHandler):
    """Selector: el formato busca la etiqueta sin tocar el valor almacenado."""

    def format(self, field: FieldDef, value: Any) -> str:
        for option in field.options or []:
            if option.value == value:
                return option.label
        return to_display_string(value)

    def control(self, field: FieldDef, value: Any) -> RenderNode:
        current = value if value else ""
        options = [node("option", text=SELECT_PLACEHOLDER, value="")]
        for option in field.options or []:
            options.append(node(
                "option",
                text=option.label,
                value=to_display_string(option.value),
                selected=True if option.value == current else None,
                key=option.value,
            ))
        return node(
            "select", "field-select",
            id=field.id,
            value=to_display_string(current),
            required=True if field.required else None,
            children=options,
        )


class TextareaHandler(FieldHandler):
    def control(self, field: FieldDef, value: Any) -> RenderNode:
        return node(
            "textarea", "field-textarea",
            id=field.id,
            text=self.input_value(field, value),
            placeholder=field.placeholder,
            rows=field.rows or DEFAULT_TEXTAREA_ROWS,
            required=True if field.required else None,
        )


class TagsHandler(FieldHandler):
    """Lista de tags editada como texto separado por comas."""

    def format(self, field: FieldDef, value: Any) -> str:
        return format_tags(value)

    def parse(self, field: FieldDef, raw: Any) -> List[str]:
        return parse_tags(raw)

    def input_value(self, field: FieldDef, value: Any) -> str:
        if isinstance(value, (list, tuple)):
            return format_tags(value)
        return to_display_string(value) if value else ""

    def control(self, field: FieldDef, value: Any) -> RenderNode:
        return node(
            "input", "field-input", "field-tags",
            type="text", id=field.id,
            value=self.input_value(field, value),
            placeholder=field.placeholder,
        )


class DisplayHandler(FieldHandler):
    """Tipos desconocidos: solo lectura."""

    editable = False

    def control(self, field: FieldDef, value: Any) -> RenderNode:
        return node("div", "field-display", text=format_value(field, value))


FIELD_HANDLERS: Dict[FieldType, FieldHandler] = {
    FieldType.TEXT: TextHandler(),
    FieldType.EMAIL: TextHandler(),
    FieldType.PHONE: TextHandler(),
    FieldType.DATE: DateHandler(),
    FieldType.SELECT: SelectHandler(),
    FieldType.TEXTAREA: TextareaHandler(),
    FieldType.TAGS: TagsHandler(),
}

DEFAULT_HANDLER = DisplayHandler()


def get_handler(type_tag: Any) -> FieldHandler:
    field_type = resolve_field_type(type_tag)
    if field_type is None:
        return DEFAULT_HANDLER
    return FIELD_HANDLERS[field_type]


# ==============================================================================
# API PÚBLICA
# ==============================================================================

class FieldRendering(BaseModel):
    """Resultado de renderizar un campo."""
    element: RenderNode
    display: str
    change: Optional[Callable[[Any], None]] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def editable(self) -> bool:
        return self.change is not None


def format_value(field: FieldDef, value: Any) -> str:
    """Texto de lectura de ``value`` para el campo; ``""`` si no hay valor."""
    if value is None:
        return ""
    return get_handler(field.type).format(field, value)


def parse_input(field: FieldDef, raw: Any) -> Any:
    """Convierte la entrada del control al valor almacenado (sin validación)."""
    return get_handler(field.type).parse(field, raw)


def render_field(field: FieldDef, value: Any,
                 on_change: Optional[Callable[[Any], None]] = None) -> FieldRendering:
    """
    Renderiza un campo completo: etiqueta, control y pista.

    Args:
        field: Definición del campo
        value: Valor actual
        on_change: Recibe el valor ya parseado cada vez que cambia la entrada

    Returns:
        FieldRendering con el elemento, el texto de lectura y el callback de
        cambio (None para tipos de solo lectura)
    """
    handler = get_handler(field.type)

    label = node(
        "label", "field-label",
        text=field.label, for_=field.id,
        children=[node("span", "required-indicator", text="*") if field.required else None],
    )
    hint = None
    if resolve_field_type(field.type) is FieldType.TAGS:
        hint = node("small", "field-hint", text=TAGS_HINT)

    change = None
    if handler.editable and on_change is not None:
        def change(raw: Any) -> None:
            on_change(handler.parse(field, raw))

    wrapper = node(
        "div", "field-wrapper",
        key=field.id,
        data_field_type=field.type,
        children=[label, handler.control(field, value), hint],
    )
    return FieldRendering(element=wrapper, display=format_value(field, value), change=change)
