from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from core.html_renderer import render_html, render_page
from core.render_tree import class_names, node


def test_text_is_escaped():
    assert render_html(node("p", "note", text="<b>hi</b>")) == '<p class="note">&lt;b&gt;hi&lt;/b&gt;</p>'


def test_attributes_are_escaped():
    html = render_html(node("span", title='say "hi"'))
    assert '&#34;hi&#34;' in html


def test_nested_and_void_elements():
    tree = node("div", "avatar", children=[node("img", src="a.png", alt="A"), node("br")])
    assert render_html(tree) == '<div class="avatar"><img src="a.png" alt="A"><br></div>'


def test_boolean_attributes_and_keys():
    html = render_html(node("option", value="x", selected=True, disabled=False, key=3))
    assert html == '<option value="x" selected data-key="3"></option>'


def test_underscored_attribute_names():
    tree = node("label", for_="email", aria_expanded="true")
    assert tree.attrs == {"for": "email", "aria-expanded": "true"}


def test_class_names_helper():
    assert class_names("avatar", ("avatar--clickable", False), None, ("expanded", True)) == "avatar expanded"


def test_page_wraps_fragment():
    page = render_page(node("div", "layout-container"), title="Contacts")
    assert page.startswith("<!DOCTYPE html>")
    assert '<main class="app-main"><div class="layout-container"></div></main>' in page
    assert "<title>Contacts</title>" in page
