"""
Core - Núcleo de composición de vistas de detalle

Interpreta los documentos de configuración y produce el árbol de
renderizado de la ficha de contacto, independiente del framework de UI.

Módulos:
    - config_loader: Carga de manifests y documentos YAML
    - schema_models: Modelos Pydantic de los documentos
    - layout_composer: Resolución del layout en dos columnas
    - section_dispatcher: Secciones de actividades y notas
    - contact_details: Cabecera y carpetas de campos
    - field_registry: Controles, formato y parseo por tipo de campo
    - folder_state / debounce / lazy_visibility: Estado de UI por instancia
    - html_renderer: Serialización HTML con Jinja2
    - error_boundary: Captura de errores de renderizado
    - utils: Logging y fechas
"""

from .config_loader import load_manifest, load_yaml_config, load_view_config
from .schema_models import LayoutConfig, FieldsConfig, ContactData, Manifest
from .layout_composer import LayoutComposer, compose_layout

__all__ = [
    "load_manifest",
    "load_yaml_config",
    "load_view_config",
    "LayoutConfig",
    "FieldsConfig",
    "ContactData",
    "Manifest",
    "LayoutComposer",
    "compose_layout",
]
