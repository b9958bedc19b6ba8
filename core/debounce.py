"""
Debounce - Programación diferida con flanco de bajada (trailing edge)

Dos primitivas:

- ``DebouncedValue``: emite el último valor recibido solo cuando transcurre
  ``delay_ms`` sin que llegue otro valor.
- ``DebouncedCallback``: misma política aplicada a una función con lista de
  dependencias explícita.

Los temporizadores se piden a un backend (``AsyncioTimers`` para el event
loop real, ``VirtualTimers`` con reloj manual). Cada instancia tiene como
mucho un temporizador pendiente: programar uno nuevo cancela el anterior, de
modo que solo la tarea más reciente puede llegar a ejecutarse.
"""

import asyncio
import heapq
import itertools
from typing import Any, Callable, List, Optional, Protocol, Sequence, Tuple

from core.utils import setup_logger

logger = setup_logger(__name__)


# ==============================================================================
# BACKENDS DE TEMPORIZADORES
# ==============================================================================

class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerBackend(Protocol):
    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class AsyncioTimers:
    """Backend sobre ``loop.call_later`` del event loop de asyncio."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000.0, callback, *args)


class VirtualTimerHandle:
    """Temporizador de ``VirtualTimers``."""

    def __init__(self, due: float, callback: Callable[..., Any], args: Tuple[Any, ...]):
        self.due = due
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualTimers:
    """
    Backend con reloj virtual en milisegundos.

    El tiempo solo avanza con ``advance()``; los temporizadores vencidos se
    ejecutan en orden de vencimiento (y de programación en caso de empate).
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self._queue: List[Tuple[float, int, VirtualTimerHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> VirtualTimerHandle:
        handle = VirtualTimerHandle(self.now + max(delay_ms, 0), callback, args)
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, ms: float) -> None:
        """Avanza el reloj ``ms`` milisegundos ejecutando lo que venza."""
        target = self.now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            handle.callback(*handle.args)
        self.now = target

    def run_all(self) -> None:
        """Ejecuta todos los temporizadores pendientes."""
        while self._queue:
            self.advance(max(self._queue[0][0] - self.now, 0))


# ==============================================================================
# DEBOUNCE DE VALORES
# ==============================================================================

class DebouncedValue:
    """
    Valor con debounce.

    ``value`` devuelve el último valor emitido. Cada ``set()`` cancela la
    espera en curso y arranca una nueva; al vencer se emite el valor más
    reciente y se notifica a ``on_emit``.
    """

    def __init__(self, initial: Any, delay_ms: float, timers: TimerBackend,
                 on_emit: Optional[Callable[[Any], None]] = None):
        self._value = initial
        self._delay_ms = delay_ms
        self._timers = timers
        self._on_emit = on_emit
        self._handle: Optional[TimerHandle] = None
        self._pending: Any = None
        self._disposed = False

    @property
    def value(self) -> Any:
        return self._value

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def set(self, value: Any) -> None:
        if self._disposed:
            return
        self._cancel()
        self._pending = value
        self._handle = self._timers.call_later(self._delay_ms, self._emit)

    def set_delay(self, delay_ms: float) -> None:
        """Cambiar el retardo reinicia la espera pendiente con el nuevo valor."""
        if delay_ms == self._delay_ms:
            return
        self._delay_ms = delay_ms
        if self._handle is not None:
            self.set(self._pending)

    def _emit(self) -> None:
        self._handle = None
        self._value = self._pending
        self._pending = None
        if self._on_emit is not None:
            self._on_emit(self._value)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def dispose(self) -> None:
        self._cancel()
        self._pending = None
        self._disposed = True


# ==============================================================================
# DEBOUNCE DE CALLBACKS
# ==============================================================================

class DebouncedCallback:
    """
    Callback con debounce y dependencias explícitas.

    Llamar a la instancia programa la función con los argumentos más
    recientes. Si ``update()`` recibe otra función u otras dependencias
    mientras hay una llamada pendiente, la espera antigua se cancela y se
    rearma con la función nueva, de modo que nunca se ejecuta un closure
    obsoleto.
    """

    def __init__(self, callback: Callable[..., Any], delay_ms: float, timers: TimerBackend,
                 deps: Sequence[Any] = ()):
        self._callback = callback
        self._delay_ms = delay_ms
        self._timers = timers
        self._deps = tuple(deps)
        self._handle: Optional[TimerHandle] = None
        self._args: Tuple[Any, ...] = ()
        self._kwargs: dict = {}
        self._disposed = False

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        if self._disposed:
            return
        self._args = args
        self._kwargs = kwargs
        self._arm()

    def update(self, callback: Callable[..., Any], deps: Sequence[Any] = ()) -> None:
        deps = tuple(deps)
        if callback == self._callback and deps == self._deps:
            return
        self._callback = callback
        self._deps = deps
        if self._handle is not None:
            logger.debug("Dependencias cambiadas con llamada pendiente; rearmando")
            self._arm()

    def flush(self) -> None:
        """Ejecuta ya la llamada pendiente, si la hay."""
        if self._handle is not None:
            self._cancel()
            self._fire()

    def cancel(self) -> None:
        self._cancel()

    def dispose(self) -> None:
        self._cancel()
        self._disposed = True

    def _arm(self) -> None:
        self._cancel()
        self._handle = self._timers.call_later(self._delay_ms, self._on_timer)

    def _on_timer(self) -> None:
        self._handle = None
        self._fire()

    def _fire(self) -> None:
        args, kwargs = self._args, self._kwargs
        self._args, self._kwargs = (), {}
        self._callback(*args, **kwargs)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
