from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from core.schema_models import ContactData, Section
from core.section_dispatcher import (
    DEFAULT_ACTIVITY_ICON,
    get_activity_icon,
    render_section,
    sort_by_date_desc,
)

ACTIVITIES = Section(id="activities", type="activities", title="Recent Activities", visible=True)
NOTES = Section(id="notes", type="notes", title="Notes", visible=True)


def make_data(**kwargs):
    return ContactData(**kwargs)


def test_activities_sorted_by_date_descending():
    data = make_data(activities=[
        {"id": 1, "type": "email", "date": "2024-01-01", "time": "10:00"},
        {"id": 2, "type": "call", "date": "2024-03-01", "time": "11:00"},
    ])
    tree = render_section(ACTIVITIES, data)

    dates = [item.find("activity-date").text for item in tree.find_all("activity-item")]
    assert dates == ["Mar 1, 2024 at 11:00", "Jan 1, 2024 at 10:00"]


def test_equal_dates_keep_document_order():
    data = make_data(activities=[
        {"id": "first", "date": "2024-02-01"},
        {"id": "second", "date": "2024-02-01"},
        {"id": "older", "date": "2023-12-31"},
        {"id": "third", "date": "2024-02-01"},
    ])
    ordered = sort_by_date_desc(data.activities)
    assert [activity.id for activity in ordered] == ["first", "second", "third", "older"]


def test_sort_does_not_mutate_input():
    data = make_data(notes=[
        {"id": 1, "date": "2024-01-01"},
        {"id": 2, "date": "2024-05-01"},
    ])
    sort_by_date_desc(data.notes)
    assert [note.id for note in data.notes] == [1, 2]


def test_activity_icons_with_default_fallback():
    assert get_activity_icon("email") == "📧"
    assert get_activity_icon("meeting") == "🤝"
    assert get_activity_icon("fax") == DEFAULT_ACTIVITY_ICON
    assert get_activity_icon(None) == DEFAULT_ACTIVITY_ICON


def test_status_and_priority_classes_accept_any_string():
    data = make_data(activities=[
        {"id": 1, "type": "task", "status": "waiting-on-legal", "priority": "urgent!", "date": "2024-01-01"},
    ])
    item = render_section(ACTIVITIES, data).find("activity-item")

    assert "status-waiting-on-legal" in item.classes
    assert "priority-urgent!" in item.classes


def test_empty_activities_and_notes_show_empty_state():
    data = make_data()
    activities = render_section(ACTIVITIES, data)
    notes = render_section(NOTES, data)

    assert activities.find("empty-state").text_content() == "No activities found"
    assert notes.find("empty-state").text_content() == "No notes found"


def test_note_type_separator_replaced_and_footer():
    data = make_data(notes=[
        {"id": 1, "type": "meeting-notes", "title": "Kickoff", "author": "Alex",
         "date": "2024-02-20", "time": "4:45 PM"},
    ])
    tree = render_section(NOTES, data)

    assert tree.find("note-type").text == "meeting notes"
    assert tree.find("note-author").text == "by Alex"
    assert tree.find("note-date").text == "Feb 20, 2024 at 4:45 PM"


def test_section_container_has_title_and_action():
    tree = render_section(NOTES, make_data())
    assert tree.find("section-title").text == "Notes"
    assert tree.find("section-action").text == "+ Add New"


def test_unknown_section_type_renders_nothing():
    section = Section(id="docs", type="documents", title="Documents", visible=True)
    assert render_section(section, make_data()) is None
