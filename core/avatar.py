"""
Avatar - Imagen de contacto con carga diferida y fallback

Renderiza la imagen solo cuando el observador de visibilidad lo permite y cae
de forma permanente a iniciales o icono si la carga falla.
"""

from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.lazy_visibility import LazyVisibilityObserver, LoadingMode
from core.render_tree import RenderNode, node


class AvatarSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    XLARGE = "xlarge"


class AvatarVariant(str, Enum):
    CIRCULAR = "circular"
    ROUNDED = "rounded"
    SQUARE = "square"


class FallbackType(str, Enum):
    INITIALS = "initials"
    ICON = "icon"


class PresenceStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    AWAY = "away"
    BUSY = "busy"


class AvatarProps(BaseModel):
    """Configuración cerrada del avatar; no se admiten atributos adicionales."""
    src: Optional[str] = None
    alt: Optional[str] = None
    name: Optional[str] = None
    size: AvatarSize = AvatarSize.MEDIUM
    variant: AvatarVariant = AvatarVariant.CIRCULAR
    fallback_type: FallbackType = FallbackType.INITIALS
    loading: LoadingMode = LoadingMode.LAZY
    clickable: bool = False
    status: Optional[PresenceStatus] = None
    extra_class: str = Field("", description="Clase adicional del contenedor")

    model_config = ConfigDict(extra="forbid")


def get_initials(name: Optional[str]) -> str:
    """Iniciales de hasta dos palabras en mayúsculas; ``?`` si no hay nombre."""
    if not name:
        return "?"
    return "".join(part[:1] for part in name.split(" ")).upper()[:2]


def handle_avatar_key(key: str, on_click: Optional[Callable[[], None]]) -> bool:
    """Activación por teclado de un avatar clicable (Enter o Espacio)."""
    if on_click is not None and key in ("Enter", " "):
        on_click()
        return True
    return False


def create_observer(props: AvatarProps,
                    loader: Optional[Callable[[str], None]] = None) -> LazyVisibilityObserver:
    return LazyVisibilityObserver(
        props.src,
        loading=props.loading,
        loader=loader,
        attachment_point=f"avatar-{props.name or props.alt or 'anon'}",
    )


def render_avatar(props: AvatarProps, observer: LazyVisibilityObserver) -> RenderNode:
    """
    Construye el nodo del avatar según el estado del observador.

    El observador debe corresponder a ``props.src``; si la fuente cambia, el
    propietario crea uno nuevo (ver ``LazyVisibilityObserver.rerender``).
    """
    if observer.should_show_image:
        content = node(
            "img", "avatar__image",
            src=props.src,
            alt=props.alt or props.name or "Avatar",
        )
    elif props.fallback_type is FallbackType.INITIALS:
        content = node("div", "avatar__fallback", children=[
            node("span", "avatar__initials", text=get_initials(props.name or props.alt)),
        ])
    else:
        content = node("div", "avatar__fallback", children=[
            node("span", "avatar__icon", text="👤", aria_hidden="true"),
        ])

    status = None
    if props.status is not None:
        status = node("div", "avatar__status", f"avatar__status--{props.status.value}")

    container_attrs = {}
    if props.clickable:
        container_attrs = {"role": "button", "tabindex": 0}
    if props.loading is LoadingMode.LAZY:
        container_attrs["data-observe"] = observer.attachment_point

    return node(
        "div",
        "avatar",
        f"avatar--{props.size.value}",
        f"avatar--{props.variant.value}",
        ("avatar--clickable", props.clickable),
        props.extra_class,
        children=[content, status],
        **container_attrs,
    )
