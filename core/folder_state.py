"""
Folder State - Estado de expansión de las carpetas de campos

Se inicializa una única vez a partir del flag ``expanded`` de cada carpeta y
vive lo mismo que el componente que lo posee. Nunca escribe de vuelta en la
configuración de campos.
"""

from typing import Dict, Iterable

from core.schema_models import Folder

ACTIVATION_KEYS = ("Enter", " ")


class FolderExpansionState:
    """Mapa carpeta-id -> expandida."""

    def __init__(self, initial: Dict[str, bool]):
        self._expanded = dict(initial)

    @classmethod
    def from_folders(cls, folders: Iterable[Folder]) -> "FolderExpansionState":
        return cls({folder.id: folder.expanded for folder in folders})

    def is_expanded(self, folder_id: str) -> bool:
        return self._expanded.get(folder_id, False)

    def toggle(self, folder_id: str) -> bool:
        """Invierte solo la carpeta indicada y devuelve su nuevo estado."""
        self._expanded[folder_id] = not self._expanded.get(folder_id, False)
        return self._expanded[folder_id]

    def handle_click(self, folder_id: str) -> bool:
        return self.toggle(folder_id)

    def handle_key(self, folder_id: str, key: str) -> bool:
        """
        Activación por teclado de la cabecera de la carpeta.

        Returns:
            True si la tecla provocó el cambio de estado
        """
        if key not in ACTIVATION_KEYS:
            return False
        self.toggle(folder_id)
        return True

    def snapshot(self) -> Dict[str, bool]:
        return dict(self._expanded)
