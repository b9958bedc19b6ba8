"""
Lazy Visibility - Carga de recursos al entrar en el viewport

``LazyVisibilityObserver`` modela el ciclo de vida de una imagen diferida:

- modo ``eager``: el recurso se considera visible desde el principio.
- modo ``lazy``: la carga empieza con la primera notificación de
  visibilidad del punto de anclaje.

``loaded`` y ``error`` son terminales para la instancia: salir del viewport
no retrae la carga y un fallo no se reintenta nunca.
"""

from enum import Enum
from typing import Callable, Optional

from core.utils import setup_logger

logger = setup_logger(__name__)


class LoadingMode(str, Enum):
    EAGER = "eager"
    LAZY = "lazy"


class LazyVisibilityObserver:
    """
    Observador de visibilidad de un recurso.

    Args:
        src: Referencia al recurso (URL de la imagen)
        loading: ``"lazy"`` o ``"eager"``
        loader: Función opcional invocada una sola vez cuando la carga
            debe empezar; recibe ``src``. El resultado se comunica con
            ``on_load()`` / ``on_error()``.
        attachment_point: Identificador del elemento observado
    """

    def __init__(self, src: Optional[str], loading: str = LoadingMode.LAZY,
                 loader: Optional[Callable[[str], None]] = None,
                 attachment_point: Optional[str] = None):
        self.src = src
        self.mode = LoadingMode(loading)
        self.attachment_point = attachment_point
        self._loader = loader
        self._visible = False
        self._requested = False
        self._loaded = False
        self._error = False
        self._connected = True

        if self.mode is LoadingMode.EAGER:
            self._visible = True
            self._start_load()

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def error(self) -> bool:
        return self._error

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def should_load(self) -> bool:
        """True cuando la imagen debe solicitarse al navegador."""
        return self._visible and bool(self.src) and not self._error

    @property
    def should_show_image(self) -> bool:
        return ((self.mode is LoadingMode.EAGER or self._loaded)
                and bool(self.src) and not self._error)

    # ------------------------------------------------------------------
    # Eventos
    # ------------------------------------------------------------------

    def on_intersect(self, is_visible: bool) -> None:
        """Notificación de cruce del viewport."""
        if not self._connected or not is_visible or self._visible:
            return
        self._visible = True
        self._start_load()

    def on_load(self) -> None:
        if not self._connected or self._error or not self._requested:
            return
        self._loaded = True
        # Una vez cargado no hace falta seguir observando
        self._connected = False

    def on_error(self) -> None:
        if not self._connected or self._loaded:
            return
        logger.debug("Fallo cargando recurso %s; se usa el fallback", self.src)
        self._error = True
        self._connected = False

    def rerender(self, src: Optional[str]) -> bool:
        """
        Re-render del propietario.

        Con la misma fuente no cambia nada (en particular no se reintenta una
        carga fallida). Una fuente distinta no reutiliza esta instancia.

        Returns:
            False si ``src`` ha cambiado y el propietario debe crear un
            observador nuevo
        """
        if src == self.src:
            return True
        logger.debug("Fuente de imagen cambiada (%s -> %s)", self.src, src)
        return False

    def disconnect(self) -> None:
        self._connected = False

    def _start_load(self) -> None:
        if self._requested or not self.src or self._error:
            return
        self._requested = True
        if self._loader is not None:
            self._loader(self.src)
