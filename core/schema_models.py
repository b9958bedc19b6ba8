"""
Schema Models - Modelos Pydantic para configuración

Define las estructuras de datos de los tres documentos que alimentan la vista
de detalle de contacto: layout (secciones y columnas), campos (carpetas y
definiciones de campo) y datos del contacto (registro, actividades y notas).

Los documentos usan claves camelCase (``mainColumn``, ``firstName``...);
los modelos aceptan tanto el alias como el nombre Python.
"""

from typing import Optional, List, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


SectionId = Union[str, int]


# ==============================================================================
# MODELOS PARA LAYOUT
# ==============================================================================

class Section(BaseModel):
    """Bloque direccionable desde el layout (cabecera, campos, actividades, notas)."""
    id: SectionId = Field(description="Identificador único de la sección")
    type: str = Field(description="Tipo de sección (contact-fields, header, activities, notes...)")
    title: str = Field("", description="Título visible")
    order: float = Field(0, description="Orden de renderizado (ascendente)")
    visible: bool = Field(False, description="Solo las secciones visibles se resuelven")


class ColumnConfig(BaseModel):
    """Columna del layout: ancho y lista ordenada de ids de sección."""
    width: str = Field("auto", description="Ancho CSS de la columna")
    sections: List[SectionId] = Field(default_factory=list, description="Ids de sección en orden")


class ColumnsLayout(BaseModel):
    """Disposición en dos columnas."""
    main_column: ColumnConfig = Field(default_factory=ColumnConfig, alias='mainColumn')
    side_column: ColumnConfig = Field(default_factory=ColumnConfig, alias='sideColumn')

    model_config = ConfigDict(populate_by_name=True)


class LayoutConfig(BaseModel):
    """
    Documento de layout.

    Un id en una columna puede apuntar a una sección inexistente o invisible:
    la resolución produce un hueco vacío, nunca un error.
    """
    sections: List[Section] = Field(default_factory=list)
    layout: ColumnsLayout = Field(default_factory=ColumnsLayout)

    @field_validator('sections')
    @classmethod
    def validate_unique_ids(cls, v: List[Section]) -> List[Section]:
        """Los ids de sección deben ser únicos."""
        _ensure_unique([section.id for section in v], "sección")
        return v


# ==============================================================================
# MODELOS PARA CAMPOS
# ==============================================================================

class FieldOption(BaseModel):
    """Opción de un campo select."""
    value: Any = Field(description="Valor almacenado")
    label: str = Field(description="Texto visible")


class FieldDef(BaseModel):
    """
    Definición de un campo de la ficha.

    ``type`` se conserva como texto libre: los tipos desconocidos son válidos
    y se muestran en modo solo lectura.
    """
    id: str = Field(description="Identificador único del campo dentro de la carpeta")
    label: str = Field("", description="Etiqueta visible")
    type: str = Field("text", description="Tipo de control")
    required: bool = Field(False, description="Solo marca la etiqueta; no se valida")
    placeholder: Optional[str] = Field(None, description="Texto placeholder")
    options: Optional[List[FieldOption]] = Field(None, description="Opciones para select")
    rows: Optional[int] = Field(None, description="Filas para textarea")


class Folder(BaseModel):
    """Grupo plegable de campos."""
    id: str = Field(description="Identificador único de la carpeta")
    name: str = Field("", description="Nombre visible")
    icon: Optional[str] = Field(None, description="Tipo de icono (person, business...)")
    order: float = Field(0, description="Orden de renderizado")
    expanded: bool = Field(False, description="Estado inicial de la carpeta")
    fields: List[FieldDef] = Field(default_factory=list)

    @field_validator('fields')
    @classmethod
    def validate_unique_fields(cls, v: List[FieldDef]) -> List[FieldDef]:
        _ensure_unique([field.id for field in v], "campo")
        return v


class FieldsConfig(BaseModel):
    """Documento de campos: carpetas ordenadas con sus definiciones."""
    folders: List[Folder] = Field(default_factory=list)

    @field_validator('folders')
    @classmethod
    def validate_unique_folders(cls, v: List[Folder]) -> List[Folder]:
        _ensure_unique([folder.id for folder in v], "carpeta")
        return v


# ==============================================================================
# MODELOS PARA DATOS DEL CONTACTO
# ==============================================================================

class ContactRecord(BaseModel):
    """
    Registro del contacto.

    Además de los atributos de identidad admite cualquier clave adicional:
    los valores de los campos se buscan por id en este mapa.
    """
    first_name: Optional[str] = Field(None, alias='firstName')
    last_name: Optional[str] = Field(None, alias='lastName')
    job_title: Optional[str] = Field(None, alias='jobTitle')
    company: Optional[str] = None
    avatar: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = None
    last_contact: Optional[str] = Field(None, alias='lastContact')
    next_follow_up: Optional[str] = Field(None, alias='nextFollowUp')

    model_config = ConfigDict(populate_by_name=True, extra='allow')

    @property
    def full_name(self) -> str:
        parts = [self.first_name or "", self.last_name or ""]
        return " ".join(part for part in parts if part)

    def as_mapping(self) -> Dict[str, Any]:
        """Devuelve el registro como diccionario con las claves del documento."""
        return self.model_dump(by_alias=True)


class Activity(BaseModel):
    """Actividad registrada sobre el contacto."""
    id: Union[str, int]
    type: Optional[str] = None
    title: str = ""
    description: str = ""
    status: Optional[str] = None
    priority: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None

    model_config = ConfigDict(extra='allow')


class Note(BaseModel):
    """Nota asociada al contacto."""
    id: Union[str, int]
    type: str = ""
    title: str = ""
    content: str = ""
    author: str = ""
    date: Optional[str] = None
    time: Optional[str] = None

    model_config = ConfigDict(extra='allow')


class ContactData(BaseModel):
    """Documento de datos: registro del contacto y colecciones ordenadas."""
    contact: ContactRecord = Field(default_factory=ContactRecord)
    activities: List[Activity] = Field(default_factory=list)
    notes: List[Note] = Field(default_factory=list)

    model_config = ConfigDict(extra='allow')


# ==============================================================================
# MODELOS PARA MANIFEST
# ==============================================================================

class ManifestPaths(BaseModel):
    """Paths de los documentos de configuración de la vista."""
    layout: str = Field(description="Path relativo al documento de layout")
    fields: str = Field(description="Path relativo al documento de campos")
    data: str = Field(description="Path relativo al documento de datos")


class Manifest(BaseModel):
    """
    Manifest de un plugin de vista.

    Define los metadatos y rutas de los documentos de una vista de detalle.
    """
    id: str = Field(description="Identificador único del plugin")
    nombre: str = Field(description="Nombre visible de la vista")
    version: str = Field(description="Versión del plugin")
    descripcion: Optional[str] = Field(None, description="Descripción detallada")
    autor: Optional[str] = Field(None, description="Autor del plugin")
    paths: ManifestPaths = Field(description="Rutas de recursos")

    @field_validator('id')
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Valida que el ID sea un identificador válido."""
        if not v.replace('_', '').isalnum():
            raise ValueError("El ID solo puede contener letras, números y guiones bajos")
        return v


# ==============================================================================
# FUNCIONES DE UTILIDAD
# ==============================================================================

def _ensure_unique(ids: List[Any], kind: str) -> None:
    seen = set()
    for item_id in ids:
        if item_id in seen:
            raise ValueError(f"Id de {kind} duplicado: {item_id}")
        seen.add(item_id)


def validate_manifest_dict(data: Dict[str, Any]) -> Manifest:
    """
    Valida y convierte un diccionario en un Manifest.

    Args:
        data: Diccionario con datos del manifest

    Returns:
        Manifest validado
    """
    return Manifest(**data)
