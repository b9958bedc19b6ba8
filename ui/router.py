"""
Router - Descubrimiento y carga de plugins de vista

Este módulo proporciona funciones para:
- Listar plugins disponibles en el directorio views/
- Cargar los documentos de un plugin específico
- Obtener información resumida del plugin
"""

import sys
from pathlib import Path
from typing import List, Optional, Dict, Any

# Asegurar que el directorio raíz del proyecto esté en sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.utils import setup_logger
from core.config_loader import load_manifest, load_view_config
from core.schema_models import Manifest

logger = setup_logger(__name__)


def get_views_dir() -> Path:
    """Obtiene el directorio de plugins/views."""
    return PROJECT_ROOT / "views"


def list_available_views(views_dir: Optional[Path] = None) -> List[Manifest]:
    """
    Lista todos los plugins de vista disponibles.

    Busca directorios en views/ que contengan manifest.yaml válido.

    Args:
        views_dir: Directorio alternativo de plugins

    Returns:
        Lista de objetos Manifest de los plugins encontrados
    """
    views_dir = views_dir or get_views_dir()
    manifests = []

    if not views_dir.exists():
        logger.warning(f"Directorio de views no encontrado: {views_dir}")
        return manifests

    for plugin_dir in sorted(views_dir.iterdir()):
        # Ignorar archivos y directorios especiales
        if not plugin_dir.is_dir():
            continue
        if plugin_dir.name.startswith('_') or plugin_dir.name.startswith('.'):
            continue

        if not (plugin_dir / "manifest.yaml").exists():
            continue

        manifest = load_manifest(plugin_dir)
        if manifest:
            manifests.append(manifest)
            logger.debug(f"Plugin encontrado: {manifest.id}")

    logger.info(f"Encontrados {len(manifests)} plugins de vista")
    return manifests


def load_view_plugin(view_id: str, views_dir: Optional[Path] = None) -> Optional[Dict[str, Any]]:
    """
    Carga la configuración completa de un plugin.

    Args:
        view_id: ID del plugin (coincide con nombre del directorio)
        views_dir: Directorio alternativo de plugins

    Returns:
        Diccionario con la configuración del plugin o None si hay error
    """
    plugin_dir = (views_dir or get_views_dir()) / view_id

    if not plugin_dir.exists():
        logger.error(f"Plugin no encontrado: {view_id}")
        return None

    config = load_view_config(plugin_dir)
    if config:
        logger.info(f"Plugin cargado: {view_id}")
    return config


def get_view_info(plugin_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Obtiene información resumida del plugin para mostrar en UI.

    Args:
        plugin_config: Configuración del plugin

    Returns:
        Diccionario con información del plugin
    """
    manifest = plugin_config.get('manifest')
    if not manifest:
        return {
            'id': 'unknown',
            'nombre': 'Plugin desconocido',
            'version': '0.0.0',
            'descripcion': '',
            'autor': '',
            'num_secciones': 0,
            'num_carpetas': 0,
            'num_campos': 0,
        }

    layout = plugin_config.get('layout_config')
    fields = plugin_config.get('fields_config')
    return {
        'id': manifest.id,
        'nombre': manifest.nombre,
        'version': manifest.version,
        'descripcion': manifest.descripcion or '',
        'autor': manifest.autor or '',
        'num_secciones': len(layout.sections) if layout else 0,
        'num_carpetas': len(fields.folders) if fields else 0,
        'num_campos': sum(len(folder.fields) for folder in fields.folders) if fields else 0,
    }
