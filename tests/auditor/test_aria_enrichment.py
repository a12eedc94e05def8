# tests/auditor/test_aria_enrichment.py
import pytest
from bs4 import BeautifulSoup

from auditor.errors import HtmlTooLargeError, InvalidAriaAttributeError
from auditor.model import AccessibilityConfig
from auditor.services.aria_enrichment_service import (
    AriaEnricher,
    AttributeChange,
    add_aria_attributes,
    implicit_role,
    is_valid_aria_attribute,
    is_valid_aria_role,
)
from html_generator.core.errors import InputTooLargeError


def enrich(html, **kwargs):
    """Enriches html and returns the resulting soup for attribute assertions."""
    return BeautifulSoup(add_aria_attributes(html, **kwargs), "html.parser")


@pytest.fixture
def auto_fix():
    return AccessibilityConfig(auto_fix=True)


# --- Buttons ---

def test_button_with_text_is_left_alone():
    """Native semantics plus visible text need no role or label."""
    html = "<button>Save</button>"
    assert add_aria_attributes(html) == html


def test_icon_button_uses_title_as_label():
    button = enrich('<button title="Close"></button>').button
    assert button["aria-label"] == "Close"
    assert not button.has_attr("role")


def test_disabled_button_is_marked():
    button = enrich("<button disabled>Send</button>").button
    assert button["aria-disabled"] == "true"


def test_emoji_only_button_gets_label_from_table():
    soup = enrich("<button>❌</button><button>❌ Delete</button>", emoji_labels={"❌": "cross-mark"})
    first, second = soup.find_all("button")
    assert first["aria-label"] == "cross-mark"
    assert not second.has_attr("aria-label")


def test_existing_label_is_never_overwritten():
    html = '<button aria-label="Close dialog" title="Close"></button>'
    assert add_aria_attributes(html) == html


# --- Landmarks and live regions ---

def test_navigation_landmarks():
    soup = enrich('<nav><a href="/">Home</a></nav><div class="navbar"></div><nav role="menubar"></nav>')
    navs = soup.find_all("nav")
    assert navs[0]["role"] == "navigation"
    assert soup.div["role"] == "navigation"
    assert navs[1]["role"] == "menubar"


def test_live_regions():
    soup = enrich('<div role="alert">Failed</div><p class="status">Saved</p>')
    assert soup.div["aria-live"] == "assertive"
    assert soup.p["aria-live"] == "polite"


# --- Forms ---

def test_placeholder_becomes_label():
    control = enrich('<input type="search" placeholder="Search the docs">').input
    assert control["aria-label"] == "Search the docs"


def test_labelled_controls_are_untouched():
    html = '<label for="email">Email</label><input id="email" type="email" placeholder="you@example.com">'
    assert add_aria_attributes(html) == str(BeautifulSoup(html, "html.parser"))


def test_checkbox_takes_following_text():
    control = enrich('<input type="checkbox"> Subscribe to updates').input
    assert control["aria-label"] == "Subscribe to updates"


def test_form_is_labelled_by_its_heading():
    soup = enrich('<form><h2>Contact</h2><input type="submit"></form>')
    assert soup.h2["id"] == "form-title-1"
    assert soup.form["aria-labelledby"] == "form-title-1"


def test_form_title_reuses_existing_id():
    soup = enrich('<form><legend id="details">Details</legend></form>')
    assert soup.form["aria-labelledby"] == "details"


def test_generated_ids_avoid_existing_ones():
    soup = enrich('<p id="form-title-1"></p><form><h2>Contact</h2></form>')
    assert soup.h2["id"] == "form-title-2"


# --- Tables and widgets ---

def test_table_roles_and_header_scopes():
    soup = enrich(
        "<table><thead><tr><th>Name</th><th>Age</th></tr></thead>"
        "<tbody><tr><th>Ada</th><td>36</td></tr></tbody></table>"
    )
    assert soup.table["role"] == "table"
    scopes = [th["scope"] for th in soup.find_all("th")]
    assert scopes == ["col", "col", "row"]


def test_tablist_children_become_tabs():
    soup = enrich('<div role="tablist"><button>One</button><button>Two</button></div>')
    tabs = soup.find_all("button")
    assert [t["role"] for t in tabs] == ["tab", "tab"]
    assert [t["aria-selected"] for t in tabs] == ["true", "false"]


def test_accordion_buttons_control_their_panels():
    soup = enrich('<div class="accordion"><button>Question</button><div>Answer</div></div>')
    button = soup.button
    panel = button.find_next_sibling("div")
    assert button["aria-expanded"] == "false"
    assert button["aria-controls"] == panel["id"] == "accordion-panel-1"


# --- Invalid attributes ---

def test_invalid_attributes_are_kept_without_auto_fix():
    div = enrich('<div role="bogus" aria-hidden="maybe">x</div>').div
    assert div.attrs == {"role": "bogus", "aria-hidden": "maybe"}


def test_auto_fix_replaces_or_removes_invalid_attributes(auto_fix):
    soup = enrich(
        '<div role="bogus" aria-hidden="maybe">x</div><button role="clicky">Go</button>',
        config=auto_fix
    )
    assert not soup.div.has_attr("role")
    assert not soup.div.has_attr("aria-hidden")
    assert soup.button["role"] == "button"


# --- Plan/apply and idempotence ---

def test_plan_does_not_modify_tree():
    soup = BeautifulSoup('<nav></nav><button title="Close"></button>', "html.parser")
    before = str(soup)
    plan = AriaEnricher().plan(soup)

    assert str(soup) == before
    assert len(plan) == 2
    assert AriaEnricher.apply(plan) == 2
    assert soup.nav["role"] == "navigation"


def test_apply_rejects_invalid_aria_values_before_writing():
    soup = BeautifulSoup("<div>a</div><p>b</p>", "html.parser")
    plan = [
        AttributeChange(element=soup.p, set_attrs={"role": "note"}),
        AttributeChange(element=soup.div, set_attrs={"aria-live": "loud"}),
    ]

    with pytest.raises(InvalidAriaAttributeError) as exc_info:
        AriaEnricher.apply(plan)
    assert exc_info.value.attribute == "aria-live"
    assert soup.p.attrs == {}


@pytest.mark.parametrize("html", [
    '<nav></nav><div class="accordion"><button>Q</button><p>A</p></div>',
    '<form><h2>Contact</h2><input placeholder="Name"></form>',
    '<div role="tablist"><button>One</button><button>Two</button></div>',
])
def test_second_pass_changes_nothing(html):
    once = add_aria_attributes(html)
    assert add_aria_attributes(once) == once


# --- Admission ---

def test_oversized_html_is_rejected_before_parsing():
    html = "<p>" + "x" * 100 + "</p>"
    with pytest.raises(HtmlTooLargeError) as exc_info:
        add_aria_attributes(html, max_size=50)
    assert isinstance(exc_info.value, InputTooLargeError)
    assert exc_info.value.size == len(html)


def test_blank_input_is_returned_unchanged():
    assert add_aria_attributes("   ") == "   "


# --- Helpers ---

@pytest.mark.parametrize("role, valid", [
    ("button", True),
    ("navigation region", True),
    ("widget", False),
    ("", False),
    (None, False),
])
def test_is_valid_aria_role(role, valid):
    assert is_valid_aria_role(role) is valid


@pytest.mark.parametrize("name, value, valid", [
    ("aria-hidden", "true", True),
    ("aria-hidden", "yes", False),
    ("aria-live", "polite", True),
    ("aria-live", "loud", False),
    ("aria-level", "2", True),
    ("aria-level", "two", False),
    ("aria-valuenow", "2.5", True),
    ("aria-label", "", False),
    ("aria-made-up", "x", False),
])
def test_is_valid_aria_attribute(name, value, valid):
    assert is_valid_aria_attribute(name, value) is valid


def test_implicit_role():
    assert implicit_role("nav") == "navigation"
    assert implicit_role("input", "checkbox") == "checkbox"
    assert implicit_role("input") == "textbox"
    assert implicit_role("div") is None
