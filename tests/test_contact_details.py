from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from core.contact_details import DEFAULT_FIELD_DEBOUNCE_MS, DEFAULT_FOLDER_ICON, ContactDetails, get_folder_icon
from core.debounce import VirtualTimers
from core.schema_models import ContactRecord, FieldsConfig

FIELDS = FieldsConfig(folders=[
    {"id": "company", "name": "Company", "icon": "business", "order": 2, "expanded": False,
     "fields": [{"id": "industry", "label": "Industry", "type": "select",
                 "options": [{"value": "tech", "label": "Technology"}]}]},
    {"id": "basic", "name": "Basic", "icon": "person", "order": 1, "expanded": True,
     "fields": [
         {"id": "email", "label": "Email", "type": "email", "required": True},
         {"id": "tags", "label": "Tags", "type": "tags"},
         {"id": "rating", "label": "Rating", "type": "rating"},
     ]},
])

CONTACT = ContactRecord(**{
    "firstName": "Sarah", "lastName": "Johnson", "jobTitle": "VP", "company": "TechCorp",
    "email": "sarah@example.com", "tags": ["VIP", "Decision Maker"], "industry": "tech",
    "rating": 4, "status": "active", "lastContact": "2024-03-01", "nextFollowUp": "2024-03-15",
})


def make_details(**kwargs):
    timers = VirtualTimers()
    changes = []
    details = ContactDetails(
        FIELDS, CONTACT, timers=timers,
        on_field_change=lambda field_id, value: changes.append((field_id, value)),
        debounce_ms=100, **kwargs
    )
    return details, timers, changes


def test_folders_rendered_in_order_and_only_expanded_show_fields():
    details, _, _ = make_details()
    tree = details.render()

    folders = tree.find_all("folder-section")
    assert [folder.key for folder in folders] == ["basic", "company"]
    assert folders[0].find("folder-content") is not None
    assert folders[1].find("folder-content") is None
    assert folders[0].find("folder-toggle").has_class("expanded")


def test_folder_header_is_keyboard_operable():
    details, _, _ = make_details()
    header = details.render().find("folder-header")
    assert header.attrs["role"] == "button"
    assert header.attrs["tabindex"] == 0

    assert details.handle_folder_key("company", "Enter")
    assert details.render().find_all("folder-section")[1].find("folder-content") is not None


def test_folder_icons_use_closed_table():
    assert get_folder_icon("business") == "🏢"
    assert get_folder_icon("star") == DEFAULT_FOLDER_ICON


def test_header_shows_identity_and_tags():
    details, _, _ = make_details()
    header = details.render_header()

    assert header.find("contact-name").text == "Sarah Johnson"
    assert [tag.text for tag in header.find_all("tag")] == ["VIP", "Decision Maker"]
    assert header.find("tag-decision-maker") is not None
    assert header.find("status-active").text == "active"
    assert header.find("avatar__initials").text == "SJ"


def test_field_changes_are_debounced_and_parsed():
    details, timers, changes = make_details()

    details.change_field("tags", "VIP")
    timers.advance(50)
    details.change_field("tags", "VIP, Partner")
    timers.advance(99)
    assert changes == []

    timers.advance(1)
    assert changes == [("tags", ["VIP", "Partner"])]
    assert details.values["tags"] == ["VIP", "Partner"]
    assert CONTACT.tags == ["VIP", "Decision Maker"]


def test_required_field_is_not_enforced():
    details, timers, changes = make_details()
    details.change_field("email", "")
    timers.advance(100)
    assert changes == [("email", "")]


def test_display_only_and_unknown_fields_have_no_edit_path():
    details, timers, changes = make_details()
    assert details.change_field("rating", "5") is False
    assert details.change_field("nope", "x") is False
    timers.advance(1000)
    assert changes == []


def test_dispose_cancels_pending_changes():
    details, timers, changes = make_details()
    details.change_field("email", "new@example.com")
    assert details.has_pending_changes

    details.dispose()
    timers.advance(1000)
    assert changes == []


def test_flush_pending_applies_immediately():
    details, _, changes = make_details()
    details.change_field("industry", "finance")
    details.flush_pending()
    assert changes == [("industry", "finance")]


def test_update_keeps_expansion_state():
    details, _, _ = make_details()
    details.toggle_folder("basic")
    details.update(FIELDS, ContactRecord(firstName="Other"))

    assert details.expansion.is_expanded("basic") is False
    assert details.render_header().find("contact-name").text == "Other"


def test_contact_change_discards_pending_edit():
    details, timers, changes = make_details()
    details.change_field("email", "typed-for-sarah@example.com")
    timers.advance(50)

    other = ContactRecord(firstName="Ana", email="ana@example.com")
    details.update(FIELDS, other)
    timers.advance(1000)

    assert changes == []
    assert details.values["email"] == "ana@example.com"
    assert not details.has_pending_changes

    details.change_field("email", "new@example.com")
    timers.advance(100)
    assert changes == [("email", "new@example.com")]


def test_default_timers_need_no_event_loop():
    changes = []
    details = ContactDetails(FIELDS, CONTACT, on_field_change=lambda *args: changes.append(args))

    assert details.change_field("email", "x@y.com")
    assert changes == []

    details.timers.advance(DEFAULT_FIELD_DEBOUNCE_MS)
    assert changes == [("email", "x@y.com")]


def test_avatar_observer_follows_source_changes():
    requested = []
    details, _, _ = make_details(avatar_loading="eager", image_loader=requested.append)
    details.update(FIELDS, ContactRecord(firstName="Ana", avatar="a.png"))
    details.update(FIELDS, ContactRecord(firstName="Ana", avatar="b.png"))

    header = details.render_header()

    assert details.avatar_observer.src == "b.png"
    assert requested == ["b.png"]
    assert header.find("avatar__image").attrs["src"] == "b.png"
