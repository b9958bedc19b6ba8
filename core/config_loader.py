"""
Config Loader - Carga de configuración desde YAML

Funciones para cargar y validar los documentos de una vista: manifest,
layout, campos y datos del contacto. Los documentos pueden estar en YAML o
JSON (YAML es un superconjunto de JSON).

Cualquier fallo de carga se registra en el log y se devuelve ``None``; el
compositor interpreta ``None`` como "todavía no listo".
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError
from core.utils import setup_logger
from core.schema_models import (
    Manifest,
    LayoutConfig,
    FieldsConfig,
    ContactData,
    validate_manifest_dict,
)

logger = setup_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


# ==============================================================================
# CARGA DE MANIFEST
# ==============================================================================

def load_manifest(plugin_dir: Path) -> Optional[Manifest]:
    """
    Carga y valida el manifest de un plugin de vista.

    Args:
        plugin_dir: Directorio del plugin

    Returns:
        Manifest validado o None si hay error
    """
    manifest_path = plugin_dir / "manifest.yaml"

    if not manifest_path.exists():
        logger.error(f"No se encontró manifest.yaml en {plugin_dir}")
        return None

    try:
        with open(manifest_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        manifest = validate_manifest_dict(data or {})
        logger.info(f"Manifest cargado: {manifest.nombre} (v{manifest.version})")
        return manifest

    except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
        logger.error(f"Error cargando manifest de {plugin_dir}: {e}")
        return None


# ==============================================================================
# CARGA DE ARCHIVOS YAML GENÉRICOS
# ==============================================================================

def load_yaml_config(filepath: Path) -> Optional[Dict[str, Any]]:
    """
    Carga un archivo YAML (o JSON) genérico.

    Args:
        filepath: Path al archivo

    Returns:
        Diccionario con el contenido o None si hay error
    """
    if not filepath.exists():
        logger.warning(f"Archivo no encontrado: {filepath}")
        return None

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        logger.debug(f"YAML cargado: {filepath.name}")
        return data

    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error cargando YAML {filepath}: {e}")
        return None


def _load_document(filepath: Path, model: Type[ModelT], kind: str) -> Optional[ModelT]:
    data = load_yaml_config(filepath)
    if data is None:
        return None

    if not isinstance(data, dict):
        logger.error(f"El documento de {kind} {filepath} no es un mapa")
        return None

    try:
        document = model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Documento de {kind} inválido en {filepath}: {e}")
        return None

    logger.debug(f"Documento de {kind} validado: {filepath.name}")
    return document


# ==============================================================================
# CARGA DE DOCUMENTOS DE LA VISTA
# ==============================================================================

def load_layout_config(filepath: Path) -> Optional[LayoutConfig]:
    """Carga el documento de layout (secciones y columnas)."""
    layout = _load_document(filepath, LayoutConfig, "layout")
    if layout is not None:
        logger.info(f"Cargadas {len(layout.sections)} secciones de layout")
    return layout


def load_fields_config(filepath: Path) -> Optional[FieldsConfig]:
    """Carga el documento de campos (carpetas y definiciones)."""
    fields = _load_document(filepath, FieldsConfig, "campos")
    if fields is not None:
        total = sum(len(folder.fields) for folder in fields.folders)
        logger.info(f"Cargadas {len(fields.folders)} carpetas con {total} campos")
    return fields


def load_contact_data(filepath: Path) -> Optional[ContactData]:
    """Carga el documento de datos del contacto."""
    data = _load_document(filepath, ContactData, "datos")
    if data is not None:
        logger.info(
            f"Contacto cargado: {data.contact.full_name or '?'} "
            f"({len(data.activities)} actividades, {len(data.notes)} notas)"
        )
    return data


# ==============================================================================
# CARGA COMPLETA DE PLUGIN
# ==============================================================================

def load_view_config(plugin_dir: Path) -> Optional[Dict[str, Any]]:
    """
    Carga toda la configuración de un plugin de vista.

    Los documentos que fallen quedan a None dentro del diccionario; el
    compositor mostrará el placeholder de carga.

    Args:
        plugin_dir: Directorio del plugin

    Returns:
        Diccionario con manifest y documentos o None si el manifest falla
    """
    manifest = load_manifest(plugin_dir)
    if not manifest:
        return None

    config = {
        'manifest': manifest,
        'plugin_dir': plugin_dir,
        'layout_config': load_layout_config(plugin_dir / manifest.paths.layout),
        'fields_config': load_fields_config(plugin_dir / manifest.paths.fields),
        'contact_data': load_contact_data(plugin_dir / manifest.paths.data),
    }

    logger.info(f"Configuración completa cargada para vista: {manifest.id}")
    return config


def is_view_ready(config: Optional[Dict[str, Any]]) -> bool:
    """True si los tres documentos están disponibles."""
    if not config:
        return False
    return all(config.get(key) is not None for key in ('layout_config', 'fields_config', 'contact_data'))
