"""
Render Tree - Árbol de renderizado independiente del framework

Todos los renderizadores del core producen nodos ``RenderNode``. El árbol se
puede serializar a HTML (ver ``core.html_renderer``), inspeccionar en tests o
traducir a widgets Streamlit.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple, Union
from pydantic import BaseModel, Field


ClassEntry = Union[str, Tuple[str, bool], None]


class RenderNode(BaseModel):
    """Nodo del árbol de renderizado."""
    tag: str = Field("div", description="Elemento HTML")
    classes: List[str] = Field(default_factory=list, description="Clases CSS")
    text: Optional[str] = Field(None, description="Texto del nodo (antes de los hijos)")
    attrs: Dict[str, Any] = Field(default_factory=dict, description="Atributos HTML")
    children: List["RenderNode"] = Field(default_factory=list)
    key: Optional[str] = Field(None, description="Identificador estable del nodo")

    @property
    def class_name(self) -> str:
        return " ".join(self.classes)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def iter(self) -> Iterator["RenderNode"]:
        """Recorre el árbol en profundidad (preorden)."""
        yield self
        for child in self.children:
            yield from child.iter()

    def find_all(self, class_name: str) -> List["RenderNode"]:
        return [node for node in self.iter() if class_name in node.classes]

    def find(self, class_name: str) -> Optional["RenderNode"]:
        for node in self.iter():
            if class_name in node.classes:
                return node
        return None

    def text_content(self) -> str:
        """Concatena el texto del nodo y de todos sus descendientes."""
        parts = [node.text for node in self.iter() if node.text]
        return " ".join(parts)


RenderNode.model_rebuild()


def class_names(*entries: ClassEntry) -> str:
    """
    Construye un atributo ``class`` a partir de entradas explícitas.

    Cada entrada es un string (siempre incluido si no está vacío) o una
    tupla ``(clase, activo)`` que solo se incluye cuando ``activo`` es True.

    Ejemplo:
        >>> class_names("avatar", "avatar--medium", ("avatar--clickable", False))
        'avatar avatar--medium'
    """
    return " ".join(_class_list(entries))


def _class_list(entries) -> List[str]:
    result = []
    for entry in entries:
        if entry is None:
            continue
        if isinstance(entry, tuple):
            name, active = entry
            if active and name:
                result.append(name)
        elif entry:
            result.append(entry)
    return result


def node(tag: str = "div", *classes: ClassEntry, text: Optional[Any] = None,
         children: Optional[List[Optional[RenderNode]]] = None,
         key: Optional[Any] = None, **attrs: Any) -> RenderNode:
    """
    Atajo para crear nodos.

    Los hijos ``None`` se descartan, lo que permite pasar directamente la salida
    de renderizadores que no producen nada. Los atributos con valor ``None``
    también se omiten.
    """
    clean_attrs = {name.rstrip('_').replace('_', '-'): value
                   for name, value in attrs.items() if value is not None}
    return RenderNode(
        tag=tag,
        classes=_class_list(classes),
        text=None if text is None else str(text),
        attrs=clean_attrs,
        children=[child for child in (children or []) if child is not None],
        key=None if key is None else str(key),
    )
