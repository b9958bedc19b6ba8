"""Input widgets helpers for Streamlit forms.

Traduce cada ``FieldType`` del registro de campos a un control Streamlit. Los
widgets no calculan el valor en cada rerun: la clave de sesión se inicializa
una sola vez y los cambios se reenvían con ``on_change`` a
``ContactDetails.change_field``, que aplica el parseo del tipo y el debounce.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

import streamlit as st

from core.contact_details import ContactDetails
from core.field_registry import (
    DEFAULT_TEXTAREA_ROWS,
    SELECT_PLACEHOLDER,
    TAGS_HINT,
    FieldType,
    format_tags,
    format_value,
    resolve_field_type,
)
from core.schema_models import FieldDef
from core.utils import parse_iso_datetime, setup_logger

logger = setup_logger(__name__)

TEXTAREA_ROW_HEIGHT = 28


def _field_key(field: FieldDef, key_prefix: Optional[str] = None) -> str:
    """Stable session key for a field."""
    base = f"field_{field.id}"
    return f"{key_prefix}__{base}" if key_prefix else base


def _label(field: FieldDef) -> str:
    return f"{field.label} *" if field.required else field.label


def _forward_change(details: ContactDetails, field: FieldDef, key: str) -> None:
    """Callback ``on_change``: envía la entrada cruda a la ficha."""
    raw = st.session_state.get(key)
    if isinstance(raw, date):
        raw = raw.isoformat()
    elif raw is None:
        raw = ""
    details.change_field(field.id, raw)


def render_text_input(field: FieldDef, details: ContactDetails, key_prefix: Optional[str] = None) -> Any:
    """Renderiza un campo de texto corto (text, email, phone)."""
    key = _field_key(field, key_prefix)
    current_value = details.values.get(field.id)

    # One-time initialization only
    if key not in st.session_state:
        st.session_state[key] = str(current_value) if current_value else ""

    return st.text_input(
        label=_label(field),
        placeholder=field.placeholder or "",
        key=key,
        on_change=_forward_change,
        args=(details, field, key),
    )


def render_long_text_input(field: FieldDef, details: ContactDetails, key_prefix: Optional[str] = None) -> Any:
    """Renderiza un área de texto; la altura sigue a ``rows``."""
    key = _field_key(field, key_prefix)
    current_value = details.values.get(field.id)

    if key not in st.session_state:
        st.session_state[key] = str(current_value) if current_value else ""

    return st.text_area(
        label=_label(field),
        placeholder=field.placeholder or "",
        key=key,
        height=(field.rows or DEFAULT_TEXTAREA_ROWS) * TEXTAREA_ROW_HEIGHT,
        on_change=_forward_change,
        args=(details, field, key),
    )


def render_date_input(field: FieldDef, details: ContactDetails, key_prefix: Optional[str] = None) -> Optional[date]:
    """Renderiza un selector de fecha; el valor almacenado es el string ISO."""
    key = _field_key(field, key_prefix)

    if key not in st.session_state:
        parsed = parse_iso_datetime(details.values.get(field.id))
        st.session_state[key] = parsed.date() if parsed else None

    return st.date_input(
        label=_label(field),
        key=key,
        format="YYYY-MM-DD",
        on_change=_forward_change,
        args=(details, field, key),
    )


def render_select_input(field: FieldDef, details: ContactDetails, key_prefix: Optional[str] = None) -> Any:
    """Renderiza un selector con opción vacía inicial."""
    key = _field_key(field, key_prefix)
    labels = {option.value: option.label for option in field.options or []}
    options = [""] + list(labels)

    if key not in st.session_state:
        current_value = details.values.get(field.id)
        # Un valor fuera de las opciones se conserva tal cual
        if current_value and current_value not in labels:
            options.append(current_value)
        st.session_state[key] = current_value or ""
    elif st.session_state[key] not in options:
        options.append(st.session_state[key])

    return st.selectbox(
        label=_label(field),
        options=options,
        format_func=lambda value: SELECT_PLACEHOLDER if value == "" else labels.get(value, str(value)),
        key=key,
        on_change=_forward_change,
        args=(details, field, key),
    )


def render_tags_input(field: FieldDef, details: ContactDetails, key_prefix: Optional[str] = None) -> Any:
    """Renderiza los tags como texto separado por comas."""
    key = _field_key(field, key_prefix)

    if key not in st.session_state:
        current_value = details.values.get(field.id)
        if isinstance(current_value, (list, tuple)):
            st.session_state[key] = format_tags(current_value)
        else:
            st.session_state[key] = str(current_value) if current_value else ""

    return st.text_input(
        label=_label(field),
        placeholder=field.placeholder or "",
        help=TAGS_HINT,
        key=key,
        on_change=_forward_change,
        args=(details, field, key),
    )


def render_display_only(field: FieldDef, details: ContactDetails, key_prefix: Optional[str] = None) -> str:
    """Tipos desconocidos: texto de solo lectura."""
    text = format_value(field, details.values.get(field.id))
    st.markdown(f"**{field.label}**")
    st.caption(text or "—")
    return text


WIDGET_RENDERERS = {
    FieldType.TEXT: render_text_input,
    FieldType.EMAIL: render_text_input,
    FieldType.PHONE: render_text_input,
    FieldType.DATE: render_date_input,
    FieldType.SELECT: render_select_input,
    FieldType.TEXTAREA: render_long_text_input,
    FieldType.TAGS: render_tags_input,
}


def render_field_widget(field: FieldDef, details: ContactDetails, key_prefix: Optional[str] = None) -> Any:
    """Despacha el campo al widget de su tipo (solo lectura si no se reconoce)."""
    field_type = resolve_field_type(field.type)
    renderer = WIDGET_RENDERERS.get(field_type, render_display_only) if field_type else render_display_only
    return renderer(field, details, key_prefix)


def render_field_read_mode(field: FieldDef, details: ContactDetails) -> None:
    """Modo lectura: etiqueta y valor formateado."""
    st.markdown(f"**{_label(field)}**")
    st.write(format_value(field, details.values.get(field.id)) or "—")
