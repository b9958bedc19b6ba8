from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from core.error_boundary import DEFAULT_TITLE, BoundaryState, ErrorBoundary
from core.render_tree import node


def _broken():
    raise ValueError("bad section")


def test_successful_render_passes_tree_through():
    boundary = ErrorBoundary()
    result = boundary.render(lambda: node("div", "ok"))
    assert result.ok
    assert result.tree.has_class("ok")
    assert boundary.state is BoundaryState.NORMAL


def test_error_is_captured_and_reported():
    captured = []
    boundary = ErrorBoundary(on_error=captured.append)

    result = boundary.render(_broken)

    assert not result.ok
    assert boundary.state is BoundaryState.ERRORED
    assert result.error.message == "bad section"
    assert result.error.error_type == "ValueError"
    assert len(result.error.event_id) == 9
    assert captured == [result.error]


def test_errored_state_does_not_rerender_until_retry():
    boundary = ErrorBoundary()
    boundary.render(_broken)

    calls = []
    result = boundary.render(lambda: calls.append(1) or node("div"))
    assert not result.ok
    assert calls == []

    boundary.retry()
    result = boundary.render(lambda: calls.append(1) or node("div"))
    assert result.ok
    assert calls == [1]


def test_reload_only_records_request():
    boundary = ErrorBoundary()
    boundary.render(_broken)
    boundary.reload()
    assert boundary.reload_requested
    assert boundary.state is BoundaryState.ERRORED


def test_fallback_tree_contents():
    boundary = ErrorBoundary()
    boundary.render(_broken)

    tree = boundary.fallback_tree()
    assert tree.find("error-boundary__title").text == DEFAULT_TITLE
    assert [button.text for button in tree.find_all("btn")] == ["Try Again", "Reload Page"]
    assert tree.find("error-boundary__stack") is None

    detailed = boundary.fallback_tree(show_details=True)
    assert "ValueError" in detailed.find("error-boundary__stack").text
