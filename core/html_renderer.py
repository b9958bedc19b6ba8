"""
HTML Renderer - Serialización del árbol de renderizado con Jinja2

Convierte un ``RenderNode`` en HTML. Todo el texto y los atributos se
escapan (autoescape activado).
"""

from typing import Any, Dict, Optional

from jinja2 import BaseLoader, Environment
from markupsafe import Markup, escape

from core.render_tree import RenderNode
from core.utils import setup_logger

logger = setup_logger(__name__)

VOID_ELEMENTS = frozenset({"area", "br", "col", "hr", "img", "input", "meta", "link", "source"})

NODE_TEMPLATE = """\
{%- for n in [root] recursive -%}
<{{ n.tag }}{{ attributes(n) }}>
{%- if n.tag not in void_elements -%}
{%- if n.text is not none %}{{ n.text }}{% endif -%}
{{ loop(n.children) }}</{{ n.tag }}>
{%- endif -%}
{%- endfor -%}
"""

PAGE_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
{%- if stylesheet %}
<link rel="stylesheet" href="{{ stylesheet }}">
{%- endif %}
</head>
<body>
<header class="app-header"><h1>{{ title }}</h1></header>
<main class="app-main">{{ body }}</main>
</body>
</html>
"""


def _attributes(n: RenderNode) -> Markup:
    attrs: Dict[str, Any] = {}
    if n.classes:
        attrs["class"] = n.class_name
    attrs.update(n.attrs)
    if n.key is not None:
        attrs.setdefault("data-key", n.key)

    parts = []
    for name, value in attrs.items():
        if value is False or value is None:
            continue
        if value is True:
            parts.append(f" {escape(name)}")
        else:
            parts.append(f' {escape(name)}="{escape(value)}"')
    return Markup("".join(parts))


def _build_environment() -> Environment:
    env = Environment(loader=BaseLoader(), autoescape=True)
    env.globals["attributes"] = _attributes
    env.globals["void_elements"] = VOID_ELEMENTS
    return env


_env = _build_environment()
_node_template = _env.from_string(NODE_TEMPLATE)
_page_template = _env.from_string(PAGE_TEMPLATE)


def render_html(root: RenderNode) -> str:
    """
    Serializa un árbol a HTML.

    Args:
        root: Nodo raíz

    Returns:
        Fragmento HTML
    """
    return _node_template.render(root=root)


def render_page(root: RenderNode, title: str = "CRM Contact Management",
                stylesheet: Optional[str] = None) -> str:
    """Documento HTML completo con la vista dentro de ``<main>``."""
    body = Markup(render_html(root))
    logger.debug(f"Página renderizada: {title}")
    return _page_template.render(title=title, body=body, stylesheet=stylesheet)
