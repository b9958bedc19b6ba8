"""
App - Aplicación principal Streamlit

Interfaz web que muestra la ficha de contacto definida por los documentos de
un plugin de vista (layout, campos y datos). La composición la hace el core;
esta capa solo traduce las secciones resueltas a elementos Streamlit.
"""

import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

import streamlit as st

# Ensure the project root is in the Python path when running directly with Streamlit
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.utils import setup_logger
from core.config_loader import is_view_ready
from core.contact_details import ContactDetails, TOGGLE_GLYPH, get_folder_icon, sort_folders
from core.debounce import VirtualTimers
from core.error_boundary import ErrorBoundary
from core.html_renderer import render_html
from core.layout_composer import CONTACT_FIELDS_TYPE, LOADING_MESSAGE, LayoutComposer
from core.lazy_visibility import LoadingMode
from core.render_tree import RenderNode
from core.schema_models import ColumnConfig, Section
from ui.field_widgets import render_field_read_mode, render_field_widget
from ui.router import get_view_info, list_available_views, load_view_plugin

logger = setup_logger(__name__)


# ==============================================================================
# CONFIGURACIÓN DE LA PÁGINA
# ==============================================================================

st.set_page_config(
    page_title="CRM Contact Management",
    page_icon="👤",
    layout="wide",
    initial_sidebar_state="expanded",
)

PAGE_CSS = """
<style>
.tag { display: inline-block; padding: 2px 8px; margin: 2px; border-radius: 10px; background: #eef2ff; font-size: 0.8rem; }
.status-badge { padding: 2px 10px; border-radius: 10px; background: #e6f4ea; font-weight: 600; }
.contact-meta small { display: block; color: #666; }
.avatar__initials { display: inline-flex; width: 64px; height: 64px; border-radius: 50%; background: #4f46e5; color: #fff; align-items: center; justify-content: center; font-size: 1.4rem; }
.avatar__image { width: 64px; height: 64px; border-radius: 50%; object-fit: cover; }
.activity-item, .note-item { border-bottom: 1px solid #eee; padding: 8px 0; }
.activity-header { display: flex; gap: 8px; }
.activity-meta span, .note-type { font-size: 0.75rem; text-transform: capitalize; margin-right: 6px; }
.activity-footer, .note-footer { color: #888; font-size: 0.75rem; display: flex; gap: 8px; }
.section-action { float: right; }
.empty-state { color: #999; font-style: italic; }
</style>
"""


# ==============================================================================
# ESTADO DE SESIÓN
# ==============================================================================

def init_session_state():
    """Inicializa el estado de sesión de Streamlit."""
    if 'selected_view' not in st.session_state:
        st.session_state.selected_view = st.query_params.get("view", None)

    if 'view_config' not in st.session_state:
        st.session_state.view_config = None

    if 'edit_mode' not in st.session_state:
        st.session_state.edit_mode = False

    if 'saved_changes' not in st.session_state:
        st.session_state.saved_changes = {}

    if 'timers' not in st.session_state:
        st.session_state.timers = VirtualTimers()
        st.session_state.last_tick = time.monotonic()

    if 'composer' not in st.session_state:
        st.session_state.composer = LayoutComposer(_details_factory)

    if 'boundary' not in st.session_state:
        st.session_state.boundary = ErrorBoundary()


def _details_factory(fields_config, contact) -> ContactDetails:
    return ContactDetails(
        fields_config,
        contact,
        timers=st.session_state.timers,
        on_field_change=_record_change,
        avatar_loading=LoadingMode.EAGER,
    )


def _record_change(field_id: str, value: Any) -> None:
    logger.info(f"{field_id} changed to: {value!r}")
    st.session_state.saved_changes[field_id] = value


def advance_timers() -> None:
    """Avanza el reloj virtual del debounce con el tiempo real entre reruns."""
    now = time.monotonic()
    elapsed_ms = (now - st.session_state.last_tick) * 1000
    st.session_state.last_tick = now
    st.session_state.timers.advance(elapsed_ms)


def reset_view_state() -> None:
    """Libera las fichas vivas y limpia el estado ligado a la vista."""
    st.session_state.composer.dispose()
    st.session_state.view_config = None
    st.session_state.saved_changes = {}
    for key in [k for k in st.session_state.keys() if str(k).startswith("view__")]:
        del st.session_state[key]


# ==============================================================================
# SIDEBAR
# ==============================================================================

def render_sidebar() -> Optional[str]:
    """Renderiza el sidebar con la selección de vista."""
    st.sidebar.title("👤 CRM Views")
    st.sidebar.markdown("---")

    available_views = list_available_views()
    if not available_views:
        st.sidebar.error("No se encontraron plugins de vista")
        return None

    ids = [manifest.id for manifest in available_views]
    names = {manifest.id: manifest.nombre for manifest in available_views}
    preselected = st.session_state.selected_view
    index = ids.index(preselected) if preselected in ids else 0

    selected = st.sidebar.selectbox(
        "Vista",
        options=ids,
        index=index,
        format_func=lambda view_id: names.get(view_id, view_id),
        key="view_selector",
    )

    if selected != st.session_state.selected_view or st.session_state.view_config is None:
        reset_view_state()
        st.session_state.selected_view = selected
        st.session_state.view_config = load_view_plugin(selected)
        st.query_params["view"] = selected

    if st.session_state.view_config:
        info = get_view_info(st.session_state.view_config)
        st.sidebar.markdown(f"**{info['nombre']}** v{info['version']}")
        if info['descripcion']:
            st.sidebar.caption(info['descripcion'])
        st.sidebar.caption(
            f"{info['num_secciones']} secciones · {info['num_carpetas']} carpetas · {info['num_campos']} campos"
        )

    st.session_state.edit_mode = st.sidebar.toggle("Modo edición", value=st.session_state.edit_mode)
    return selected


# ==============================================================================
# RENDERIZADO DE SECCIONES
# ==============================================================================

def render_contact_fields(section: Section, view_id: str) -> None:
    """Cabecera del contacto y carpetas con sus campos."""
    details = st.session_state.composer.details_for(section.id)
    if details is None:
        return

    st.markdown(render_html(details.render_header()), unsafe_allow_html=True)

    for folder in sort_folders(details.fields_config.folders):
        expanded = details.expansion.is_expanded(folder.id)
        glyph = TOGGLE_GLYPH if expanded else "▶"
        if st.button(
            f"{get_folder_icon(folder.icon)} {folder.name} {glyph}",
            key=f"view__{view_id}__folder__{folder.id}",
            use_container_width=True,
        ):
            details.toggle_folder(folder.id)
            st.rerun()

        if not expanded:
            continue

        columns = st.columns(2)
        for position, field in enumerate(folder.fields):
            with columns[position % 2]:
                if st.session_state.edit_mode:
                    render_field_widget(field, details, key_prefix=f"view__{view_id}")
                else:
                    render_field_read_mode(field, details)


def render_resolved_section(section: Section, rendered: RenderNode, view_id: str) -> None:
    # La ficha de contacto se traduce a widgets editables; el resto ya viene compuesto
    if section.type == CONTACT_FIELDS_TYPE:
        render_contact_fields(section, view_id)
    else:
        st.markdown(render_html(rendered), unsafe_allow_html=True)


def _column_weight(column: ColumnConfig) -> float:
    width = str(column.width).strip()
    if width.endswith('%'):
        try:
            return max(float(width[:-1]), 1.0)
        except ValueError:
            pass
    return 50.0


def render_layout(view_id: str) -> None:
    """Composición completa de la vista en dos columnas."""
    config = st.session_state.view_config
    composer: LayoutComposer = st.session_state.composer

    # Mantiene vivas las fichas (expansión, debounces) entre reruns
    composer.compose(config['layout_config'], config['fields_config'], config['contact_data'])
    if not composer.columns:
        st.info(LOADING_MESSAGE)
        return

    st_columns = st.columns([_column_weight(resolved.column) for resolved in composer.columns])
    for st_column, resolved in zip(st_columns, composer.columns):
        with st_column:
            for section, rendered in resolved.sections:
                render_resolved_section(section, rendered, view_id)


def render_header_actions() -> None:
    left, right = st.columns([4, 1])
    with left:
        st.title("CRM Contact Management")
    with right:
        if st.button("Save Changes", type="primary", disabled=not st.session_state.edit_mode):
            for details in st.session_state.composer.details:
                details.flush_pending()
            changes: Dict[str, Any] = st.session_state.saved_changes
            if changes:
                st.success(f"{len(changes)} campos actualizados")
            else:
                st.info("Sin cambios pendientes")


def render_error_fallback(boundary: ErrorBoundary) -> None:
    st.markdown(render_html(boundary.fallback_tree()), unsafe_allow_html=True)
    retry_col, reload_col = st.columns(2)
    with retry_col:
        if st.button("Try Again", type="primary"):
            boundary.retry()
            st.rerun()
    with reload_col:
        if st.button("Reload Page"):
            boundary.reload()
            reset_view_state()
            st.session_state.boundary = ErrorBoundary()
            st.rerun()


# ==============================================================================
# PUNTO DE ENTRADA
# ==============================================================================

def main():
    init_session_state()
    advance_timers()
    st.markdown(PAGE_CSS, unsafe_allow_html=True)

    view_id = render_sidebar()
    render_header_actions()

    if not view_id or not is_view_ready(st.session_state.view_config):
        st.info(LOADING_MESSAGE)
        return

    boundary: ErrorBoundary = st.session_state.boundary

    def _render():
        render_layout(view_id)

    result = boundary.render(_render)
    if not result.ok:
        render_error_fallback(boundary)


if __name__ == "__main__":
    main()
