"""
UI - Interfaz de usuario Streamlit

Proporciona la interfaz web que muestra las vistas de detalle definidas por
los plugins disponibles en views/.
"""

from .router import list_available_views, load_view_plugin

__all__ = ["list_available_views", "load_view_plugin"]
