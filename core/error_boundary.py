"""
Error Boundary - Captura de errores de renderizado

Máquina de dos estados (normal / con error). ``render()`` devuelve un
``RenderResult`` con el árbol o con el error capturado; ``retry()`` vuelve al
estado normal y ``reload()`` solo registra la petición de recarga, que
atiende quien aloje la vista.
"""

import traceback
import uuid
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from core.render_tree import RenderNode, node
from core.utils import setup_logger

logger = setup_logger(__name__)

DEFAULT_TITLE = "Oops! Something went wrong"
DEFAULT_MESSAGE = (
    "We're sorry for the inconvenience. Please try refreshing the page "
    "or contact support if the problem persists."
)


class BoundaryState(str, Enum):
    NORMAL = "normal"
    ERRORED = "errored"


class CapturedError(BaseModel):
    """Error capturado por el boundary."""
    event_id: str
    message: str
    error_type: str
    details: str

    model_config = ConfigDict(frozen=True)


class RenderResult(BaseModel):
    tree: Optional[RenderNode] = None
    error: Optional[CapturedError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ErrorBoundary:
    """
    Boundary alrededor de una función de renderizado.

    Args:
        on_error: Callback opcional que recibe el ``CapturedError``
        title: Título del panel de error
        message: Mensaje del panel de error
    """

    def __init__(self, on_error: Optional[Callable[[CapturedError], None]] = None,
                 title: str = DEFAULT_TITLE, message: str = DEFAULT_MESSAGE):
        self.state = BoundaryState.NORMAL
        self.error: Optional[CapturedError] = None
        self.reload_requested = False
        self._on_error = on_error
        self.title = title
        self.message = message

    def render(self, render_fn: Callable[[], RenderNode]) -> RenderResult:
        if self.state is BoundaryState.ERRORED:
            return RenderResult(error=self.error)

        try:
            return RenderResult(tree=render_fn())
        except Exception as e:
            self.error = CapturedError(
                event_id=uuid.uuid4().hex[:9],
                message=str(e),
                error_type=type(e).__name__,
                details=traceback.format_exc(),
            )
            self.state = BoundaryState.ERRORED
            logger.error(f"Error de renderizado capturado ({self.error.event_id}): {e}")
            if self._on_error is not None:
                self._on_error(self.error)
            return RenderResult(error=self.error)

    def retry(self) -> None:
        self.state = BoundaryState.NORMAL
        self.error = None

    def reload(self) -> None:
        self.reload_requested = True

    def fallback_tree(self, show_details: bool = False) -> RenderNode:
        """Panel de error con acciones de reintento y recarga."""
        event_id = None
        details = None
        if self.error is not None:
            event_id = node("p", "error-boundary__event-id", text=f"Error ID: {self.error.event_id}")
            if show_details:
                details = node("pre", "error-boundary__stack", text=self.error.details)

        return node("div", "error-boundary", children=[
            node("div", "error-boundary__container", children=[
                node("div", "error-boundary__icon", text="😵"),
                node("h2", "error-boundary__title", text=self.title),
                node("p", "error-boundary__message", text=self.message),
                event_id,
                node("div", "error-boundary__actions", children=[
                    node("button", "btn", "btn--primary", text="Try Again", type="button"),
                    node("button", "btn", "btn--secondary", text="Reload Page", type="button"),
                ]),
                details,
            ]),
        ])
