"""
Contact Details - Componente de ficha de contacto

Cabecera del contacto (avatar, nombre, cargo, empresa, tags, estado) y árbol
de carpetas plegables con un campo por definición. Cada instancia posee su
propio estado de UI:

- ``FolderExpansionState`` inicializado una sola vez desde la configuración
- un ``DebouncedCallback`` por campo editado
- el observador de visibilidad del avatar

``dispose()`` cancela cualquier temporizador pendiente y desconecta el
observador.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from core.avatar import AvatarProps, AvatarSize, create_observer, render_avatar
from core.debounce import DebouncedCallback, TimerBackend, VirtualTimers
from core.field_registry import get_handler, parse_input, render_field
from core.folder_state import FolderExpansionState
from core.lazy_visibility import LazyVisibilityObserver, LoadingMode
from core.render_tree import RenderNode, node
from core.schema_models import ContactRecord, FieldDef, FieldsConfig, Folder
from core.utils import setup_logger, slugify_class

logger = setup_logger(__name__)

DEFAULT_FIELD_DEBOUNCE_MS = 300
DEFAULT_FOLDER_ICON = "📄"
TOGGLE_GLYPH = "▼"


class FolderIcon(str, Enum):
    PERSON = "person"
    BUSINESS = "business"
    LOCATION = "location"
    INFO = "info"


FOLDER_ICONS: Dict[FolderIcon, str] = {
    FolderIcon.PERSON: "👤",
    FolderIcon.BUSINESS: "🏢",
    FolderIcon.LOCATION: "📍",
    FolderIcon.INFO: "ℹ️",
}


def get_folder_icon(icon: Optional[str]) -> str:
    try:
        return FOLDER_ICONS[FolderIcon(icon)]
    except ValueError:
        return DEFAULT_FOLDER_ICON


def sort_folders(folders: List[Folder]) -> List[Folder]:
    """Orden ascendente por ``order``; empates en el orden del documento."""
    return sorted(folders, key=lambda folder: folder.order)


FieldChangeListener = Callable[[str, Any], None]


def _log_field_change(field_id: str, value: Any) -> None:
    logger.debug("%s changed to: %r", field_id, value)


class ContactDetails:
    """
    Ficha de contacto con estado propio.

    Args:
        fields_config: Documento de campos
        contact: Registro del contacto
        timers: Backend de temporizadores para el debounce de campos. Por
            defecto un ``VirtualTimers`` propio: los cambios pendientes se
            aplican avanzando ``timers`` o con ``flush_pending()``
        on_field_change: Recibe ``(field_id, valor_parseado)`` tras el debounce
        debounce_ms: Retardo del debounce de campos
        avatar_loading: ``lazy`` o ``eager``
        image_loader: Función que inicia la carga de la imagen del avatar
    """

    def __init__(self, fields_config: FieldsConfig, contact: ContactRecord,
                 timers: Optional[TimerBackend] = None,
                 on_field_change: Optional[FieldChangeListener] = None,
                 debounce_ms: float = DEFAULT_FIELD_DEBOUNCE_MS,
                 avatar_loading: str = LoadingMode.LAZY,
                 image_loader: Optional[Callable[[str], None]] = None):
        self.fields_config = fields_config
        self.contact = contact
        self.expansion = FolderExpansionState.from_folders(fields_config.folders)
        self.values: Dict[str, Any] = contact.as_mapping()
        self.timers = timers or VirtualTimers()
        self._on_field_change = on_field_change or _log_field_change
        self._debounce_ms = debounce_ms
        self._avatar_loading = LoadingMode(avatar_loading)
        self._image_loader = image_loader
        self._debouncers: Dict[str, DebouncedCallback] = {}
        self._fields: Dict[str, FieldDef] = self._index_fields(fields_config)
        self.avatar_observer = self._create_avatar_observer()
        self._disposed = False

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------

    def update(self, fields_config: FieldsConfig, contact: ContactRecord) -> None:
        """
        Nuevas props del propietario.

        La expansión de carpetas no se vuelve a inicializar. Un cambio de
        contacto cancela los cambios pendientes: lo escrito para el contacto
        anterior no se emite nunca.
        """
        self.fields_config = fields_config
        self._fields = self._index_fields(fields_config)
        if contact is not self.contact:
            if self.has_pending_changes:
                logger.debug("Contacto cambiado con ediciones pendientes; se descartan")
            for debouncer in self._debouncers.values():
                debouncer.dispose()
            self._debouncers.clear()
            self.contact = contact
            self.values = contact.as_mapping()

    def dispose(self) -> None:
        for debouncer in self._debouncers.values():
            debouncer.dispose()
        self._debouncers.clear()
        self.avatar_observer.disconnect()
        self._disposed = True

    # ------------------------------------------------------------------
    # Interacción
    # ------------------------------------------------------------------

    def toggle_folder(self, folder_id: str) -> bool:
        return self.expansion.handle_click(folder_id)

    def handle_folder_key(self, folder_id: str, key: str) -> bool:
        return self.expansion.handle_key(folder_id, key)

    def change_field(self, field_id: str, raw: Any) -> bool:
        """
        Entrada del usuario para un campo.

        Returns:
            False si el campo no existe o es de solo lectura
        """
        field = self._fields.get(field_id)
        if field is None or not get_handler(field.type).editable:
            return False
        self._debouncer(field_id)(parse_input(field, raw))
        return True

    def flush_pending(self) -> None:
        """Aplica ya todos los cambios pendientes de debounce."""
        for debouncer in list(self._debouncers.values()):
            debouncer.flush()

    @property
    def has_pending_changes(self) -> bool:
        return any(debouncer.pending for debouncer in self._debouncers.values())

    # ------------------------------------------------------------------
    # Renderizado
    # ------------------------------------------------------------------

    def render(self) -> RenderNode:
        return node("div", "contact-details", children=[
            self.render_header(),
            node("div", "contact-fields", children=[
                self.render_folder(folder) for folder in sort_folders(self.fields_config.folders)
            ]),
        ])

    def render_header(self) -> RenderNode:
        contact = self.contact
        if not self.avatar_observer.rerender(contact.avatar):
            self.avatar_observer.disconnect()
            self.avatar_observer = self._create_avatar_observer()
        avatar_props = AvatarProps(
            src=contact.avatar,
            name=contact.full_name,
            alt=contact.full_name,
            size=AvatarSize.LARGE,
            loading=self._avatar_loading,
        )
        tags = [
            node("span", "tag", f"tag-{slugify_class(tag)}", text=tag, key=index)
            for index, tag in enumerate(contact.tags or [])
        ]
        return node("div", "contact-header", children=[
            node("div", "contact-avatar", children=[
                render_avatar(avatar_props, self.avatar_observer),
            ]),
            node("div", "contact-info", children=[
                node("h1", "contact-name", text=contact.full_name),
                node("p", "contact-title", text=contact.job_title),
                node("p", "contact-company", text=contact.company),
                node("div", "contact-tags", children=tags),
            ]),
            node("div", "contact-status", children=[
                node("span", "status-badge", f"status-{contact.status or ''}", text=contact.status),
                node("div", "contact-meta", children=[
                    node("small", text=f"Last Contact: {contact.last_contact or ''}"),
                    node("small", text=f"Next Follow-up: {contact.next_follow_up or ''}"),
                ]),
            ]),
        ])

    def render_folder(self, folder: Folder) -> RenderNode:
        expanded = self.expansion.is_expanded(folder.id)
        header = node(
            "div", "folder-header",
            role="button", tabindex=0,
            aria_expanded="true" if expanded else "false",
            data_folder_id=folder.id,
            children=[
                node("div", "folder-title", children=[
                    node("span", "folder-icon", text=get_folder_icon(folder.icon)),
                    node("span", "folder-name", text=folder.name),
                ]),
                node("span", "folder-toggle", ("expanded", expanded), text=TOGGLE_GLYPH),
            ],
        )
        content = None
        if expanded:
            content = node("div", "folder-content", children=[
                node("div", "field-grid", children=[
                    render_field(
                        field,
                        self.values.get(field.id),
                        on_change=self._debouncer(field.id),
                    ).element
                    for field in folder.fields
                ]),
            ])
        return node("div", "folder-section", key=folder.id, children=[header, content])

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------

    @staticmethod
    def _index_fields(fields_config: FieldsConfig) -> Dict[str, FieldDef]:
        index: Dict[str, FieldDef] = {}
        for folder in fields_config.folders:
            for field in folder.fields:
                index.setdefault(field.id, field)
        return index

    def _create_avatar_observer(self) -> LazyVisibilityObserver:
        props = AvatarProps(
            src=self.contact.avatar,
            name=self.contact.full_name,
            loading=self._avatar_loading,
        )
        return create_observer(props, loader=self._image_loader)

    def _debouncer(self, field_id: str) -> DebouncedCallback:
        debouncer = self._debouncers.get(field_id)
        if debouncer is None:
            debouncer = DebouncedCallback(
                self._commit_callback(field_id),
                self._debounce_ms,
                self.timers,
                deps=(id(self.contact),),
            )
            self._debouncers[field_id] = debouncer
        return debouncer

    def _commit_callback(self, field_id: str) -> Callable[[Any], None]:
        contact = self.contact

        def commit(value: Any) -> None:
            if self._disposed or contact is not self.contact:
                return
            self.values[field_id] = value
            self._on_field_change(field_id, value)

        return commit
