from pathlib import Path
import sys

import pytest
import yaml
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from core.config_loader import (
    is_view_ready,
    load_contact_data,
    load_fields_config,
    load_layout_config,
    load_manifest,
    load_view_config,
)
from core.schema_models import FieldsConfig, LayoutConfig
from ui.router import get_view_info, list_available_views, load_view_plugin

VIEW_DIR = ROOT / "views" / "contact_detail"


def _write_plugin(base: Path, view_id: str = "demo", layout=None) -> Path:
    plugin_dir = base / view_id
    (plugin_dir / "config").mkdir(parents=True)
    manifest = {
        "id": view_id,
        "nombre": "Demo",
        "version": "0.1.0",
        "paths": {"layout": "config/layout.json", "fields": "config/fields.yaml", "data": "config/data.yaml"},
    }
    (plugin_dir / "manifest.yaml").write_text(yaml.safe_dump(manifest), encoding="utf-8")
    (plugin_dir / "config" / "layout.json").write_text(
        layout if layout is not None else
        '{"sections": [{"id": 1, "type": "notes", "visible": true}],'
        ' "layout": {"mainColumn": {"width": "100%", "sections": [1]}}}',
        encoding="utf-8",
    )
    (plugin_dir / "config" / "fields.yaml").write_text(
        "folders:\n  - id: main\n    fields:\n      - {id: email, type: email}\n", encoding="utf-8"
    )
    (plugin_dir / "config" / "data.yaml").write_text(
        "contact: {firstName: Ana}\nnotes: []\n", encoding="utf-8"
    )
    return plugin_dir


def test_bundled_view_loads_completely():
    config = load_view_config(VIEW_DIR)

    assert is_view_ready(config)
    assert config["manifest"].id == "contact_detail"
    assert config["layout_config"].layout.main_column.width == "65%"
    assert config["layout_config"].layout.side_column.sections == ["activities", "notes", "documents"]
    assert config["contact_data"].contact.full_name == "Sarah Johnson"
    assert config["contact_data"].contact.as_mapping()["industry"] == "technology"
    assert [folder.id for folder in config["fields_config"].folders][0] == "basic-info"


def test_json_documents_are_accepted(tmp_path):
    plugin_dir = _write_plugin(tmp_path)
    config = load_view_config(plugin_dir)
    assert is_view_ready(config)
    assert config["layout_config"].sections[0].id == 1


def test_invalid_document_leaves_view_not_ready(tmp_path):
    plugin_dir = _write_plugin(tmp_path, layout="sections: not-a-list")
    config = load_view_config(plugin_dir)
    assert config["layout_config"] is None
    assert not is_view_ready(config)


def test_missing_files_return_none(tmp_path):
    assert load_manifest(tmp_path) is None
    assert load_layout_config(tmp_path / "layout.yaml") is None
    assert load_fields_config(tmp_path / "fields.yaml") is None
    assert load_contact_data(tmp_path / "data.yaml") is None
    assert not is_view_ready(None)


def test_non_mapping_document_is_rejected(tmp_path):
    path = tmp_path / "layout.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_layout_config(path) is None


def test_duplicate_ids_are_rejected():
    with pytest.raises(ValidationError):
        LayoutConfig(sections=[{"id": "a", "type": "notes"}, {"id": "a", "type": "activities"}])
    with pytest.raises(ValidationError):
        FieldsConfig(folders=[{"id": "f", "fields": [{"id": "x"}, {"id": "x"}]}])


def test_section_defaults_to_invisible():
    layout = LayoutConfig(sections=[{"id": "a", "type": "notes"}])
    assert layout.sections[0].visible is False


def test_router_lists_and_loads_views(tmp_path):
    _write_plugin(tmp_path, "demo")
    (tmp_path / "_hidden").mkdir()
    (tmp_path / "no_manifest").mkdir()

    manifests = list_available_views(tmp_path)
    assert [manifest.id for manifest in manifests] == ["demo"]

    config = load_view_plugin("demo", tmp_path)
    info = get_view_info(config)
    assert info["nombre"] == "Demo"
    assert info["num_secciones"] == 1
    assert info["num_carpetas"] == 1
    assert info["num_campos"] == 1

    assert load_view_plugin("missing", tmp_path) is None


def test_router_finds_bundled_view():
    assert "contact_detail" in [manifest.id for manifest in list_available_views()]


def test_view_info_without_manifest():
    assert get_view_info({})["id"] == "unknown"
