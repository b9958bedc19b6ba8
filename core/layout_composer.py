"""
Layout Composer - Composición de la vista en dos columnas

Resuelve el documento de layout en un árbol ordenado:

1. Filtra las secciones visibles y las ordena por ``order`` (estable).
2. Para cada columna (main, side) traduce su lista de ids mediante un índice
   id -> sección. Los ids sin sección (inexistente o invisible) se omiten sin
   error ni log.
3. Despacha cada sección por tipo: ``contact-fields`` -> ficha de contacto,
   ``header`` -> título, resto -> ``render_section``.

Si falta cualquiera de los tres documentos se devuelve un placeholder de
carga: es un estado "todavía no listo", no un error.
"""

from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from core.contact_details import ContactDetails
from core.render_tree import RenderNode, node
from core.schema_models import ColumnConfig, ContactData, FieldsConfig, LayoutConfig, Section
from core.section_dispatcher import render_section
from core.utils import setup_logger

logger = setup_logger(__name__)

LOADING_MESSAGE = "Loading layout..."
CONTACT_FIELDS_TYPE = "contact-fields"
HEADER_TYPE = "header"


def loading_placeholder() -> RenderNode:
    return node("div", "layout-loading", text=LOADING_MESSAGE)


def resolve_sections(layout_config: LayoutConfig) -> List[Section]:
    """Secciones visibles ordenadas por ``order`` (sin modificar el documento)."""
    visible = [section for section in layout_config.sections if section.visible is True]
    return sorted(visible, key=lambda section: section.order)


def build_section_index(sections: List[Section]) -> Dict[Any, Section]:
    index: Dict[Any, Section] = {}
    for section in sections:
        index.setdefault(section.id, section)
    return index


def resolve_column(column: ColumnConfig, index: Dict[Any, Section]) -> List[Section]:
    """Secciones de una columna en el orden de la columna; ids sin resolver se omiten."""
    return [index[section_id] for section_id in column.sections if section_id in index]


def render_header_section(section: Section) -> RenderNode:
    return node("div", "section-header", key=section.id, children=[
        node("h2", text=section.title),
    ])


class ResolvedColumn(NamedTuple):
    """Columna compuesta: configuración y secciones con su nodo ya despachado."""
    class_name: str
    column: ColumnConfig
    sections: List[Tuple[Section, RenderNode]]


class LayoutComposer:
    """
    Compositor con estado.

    Mantiene una ``ContactDetails`` por sección ``contact-fields`` entre
    composiciones sucesivas, de modo que la expansión de carpetas y los
    debounces pendientes sobreviven a los re-renders. Las fichas cuya
    sección desaparece del layout se liberan.

    Tras cada ``compose()``, ``columns`` contiene las columnas resueltas de
    esa composición (vacío si se devolvió el placeholder).

    Args:
        details_factory: Crea la ficha de contacto; recibe
            ``(fields_config, contact)``. Por defecto ``ContactDetails``.
    """

    def __init__(self, details_factory: Optional[Callable[[FieldsConfig, Any], ContactDetails]] = None):
        self._details_factory = details_factory or ContactDetails
        self._details: Dict[Any, ContactDetails] = {}
        self.columns: List[ResolvedColumn] = []

    def compose(self, layout_config: Optional[LayoutConfig], fields_config: Optional[FieldsConfig],
                contact_data: Optional[ContactData]) -> RenderNode:
        if layout_config is None or fields_config is None or contact_data is None:
            self.columns = []
            return loading_placeholder()

        index = build_section_index(resolve_sections(layout_config))
        columns = layout_config.layout
        used = set()

        def resolve(column: ColumnConfig, class_name: str) -> ResolvedColumn:
            sections = []
            for section in resolve_column(column, index):
                rendered = self._render_section(section, fields_config, contact_data)
                if section.type == CONTACT_FIELDS_TYPE:
                    used.add(section.id)
                if rendered is not None:
                    sections.append((section, rendered))
            return ResolvedColumn(class_name, column, sections)

        self.columns = [
            resolve(columns.main_column, "main-column"),
            resolve(columns.side_column, "side-column"),
        ]

        for section_id in [key for key in self._details if key not in used]:
            self._details.pop(section_id).dispose()

        return node("div", "layout-container", children=[
            node("div", "layout-grid", children=[
                node(
                    "div", resolved.class_name,
                    style=f"width: {resolved.column.width}",
                    children=[rendered for _, rendered in resolved.sections],
                )
                for resolved in self.columns
            ]),
        ])

    def details_for(self, section_id: Any) -> Optional[ContactDetails]:
        """Ficha de contacto viva para una sección, si existe."""
        return self._details.get(section_id)

    @property
    def details(self) -> List[ContactDetails]:
        return list(self._details.values())

    def dispose(self) -> None:
        for details in self._details.values():
            details.dispose()
        self._details.clear()

    def _render_section(self, section: Section, fields_config: FieldsConfig,
                        contact_data: ContactData) -> Optional[RenderNode]:
        if section.type == CONTACT_FIELDS_TYPE:
            details = self._details.get(section.id)
            if details is None:
                details = self._details_factory(fields_config, contact_data.contact)
                self._details[section.id] = details
            else:
                details.update(fields_config, contact_data.contact)
            rendered = details.render()
            rendered.key = str(section.id)
            return rendered
        if section.type == HEADER_TYPE:
            return render_header_section(section)
        return render_section(section, contact_data)


def compose_layout(layout_config: Optional[LayoutConfig], fields_config: Optional[FieldsConfig],
                   contact_data: Optional[ContactData], **details_options: Any) -> RenderNode:
    """
    Composición de un solo uso.

    Args:
        layout_config: Documento de layout
        fields_config: Documento de campos
        contact_data: Documento de datos
        **details_options: Opciones para ``ContactDetails`` (timers,
            on_field_change, avatar_loading...)

    Returns:
        Árbol de la vista o placeholder de carga
    """
    composer = LayoutComposer(
        lambda fields, contact: ContactDetails(fields, contact, **details_options)
    )
    try:
        return composer.compose(layout_config, fields_config, contact_data)
    finally:
        composer.dispose()
