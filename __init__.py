"""
Vista de detalle de contacto CRM

Sistema de composición de fichas de contacto a partir de tres documentos
declarativos (layout, campos y datos) con interfaz Streamlit.

Versión: 1.0.0
"""

__version__ = "1.0.0"

# Exportar componentes principales del core
from core.config_loader import load_view_config
from core.layout_composer import LayoutComposer, compose_layout

__all__ = [
    "load_view_config",
    "LayoutComposer",
    "compose_layout",
]
