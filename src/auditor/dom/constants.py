# src/auditor/dom/constants.py
"""
Static lookup tables for the accessibility subsystem.

Loaded once at import time and never mutated afterwards; every table is a
frozenset or a read-only mapping.
"""
from types import MappingProxyType

MAX_HTML_SIZE = 1_000_000

DEFAULT_NAV_ROLE = "navigation"
DEFAULT_BUTTON_ROLE = "button"
DEFAULT_FORM_ROLE = "form"
DEFAULT_INPUT_ROLE = "textbox"

# WAI-ARIA 1.2 concrete roles (abstract roles are not allowed in markup).
VALID_ARIA_ROLES = frozenset({
    "alert", "alertdialog", "application", "article", "banner", "blockquote",
    "button", "caption", "cell", "checkbox", "code", "columnheader",
    "combobox", "complementary", "contentinfo", "definition", "deletion",
    "dialog", "directory", "document", "emphasis", "feed", "figure", "form",
    "generic", "grid", "gridcell", "group", "heading", "img", "insertion",
    "link", "list", "listbox", "listitem", "log", "main", "marquee", "math",
    "menu", "menubar", "menuitem", "menuitemcheckbox", "menuitemradio",
    "meter", "navigation", "none", "note", "option", "paragraph",
    "presentation", "progressbar", "radio", "radiogroup", "region", "row",
    "rowgroup", "rowheader", "scrollbar", "search", "searchbox", "separator",
    "slider", "spinbutton", "status", "strong", "subscript", "superscript",
    "switch", "tab", "table", "tablist", "tabpanel", "term", "textbox",
    "time", "timer", "toolbar", "tooltip", "tree", "treegrid", "treeitem",
})

VALID_ARIA_ATTRIBUTES = frozenset({
    "aria-activedescendant", "aria-atomic", "aria-autocomplete",
    "aria-busy", "aria-checked", "aria-colcount", "aria-colindex",
    "aria-colspan", "aria-controls", "aria-current", "aria-describedby",
    "aria-details", "aria-disabled", "aria-dropeffect", "aria-errormessage",
    "aria-expanded", "aria-flowto", "aria-grabbed", "aria-haspopup",
    "aria-hidden", "aria-invalid", "aria-keyshortcuts", "aria-label",
    "aria-labelledby", "aria-level", "aria-live", "aria-modal",
    "aria-multiline", "aria-multiselectable", "aria-orientation",
    "aria-owns", "aria-placeholder", "aria-posinset", "aria-pressed",
    "aria-readonly", "aria-relevant", "aria-required", "aria-roledescription",
    "aria-rowcount", "aria-rowindex", "aria-rowspan", "aria-selected",
    "aria-setsize", "aria-sort", "aria-valuemax", "aria-valuemin",
    "aria-valuenow", "aria-valuetext",
})

BOOLEAN_ARIA_ATTRIBUTES = frozenset({
    "aria-atomic", "aria-busy", "aria-disabled", "aria-hidden", "aria-modal",
    "aria-multiline", "aria-multiselectable", "aria-readonly",
    "aria-required", "aria-selected", "aria-expanded",
})

# Attributes restricted to a closed token set.
ENUMERATED_ARIA_VALUES = MappingProxyType({
    "aria-live": frozenset({"off", "polite", "assertive"}),
    "aria-pressed": frozenset({"true", "false", "mixed"}),
    "aria-checked": frozenset({"true", "false", "mixed"}),
    "aria-invalid": frozenset({"true", "false", "grammar", "spelling"}),
    "aria-orientation": frozenset({"horizontal", "vertical", "undefined"}),
    "aria-sort": frozenset({"ascending", "descending", "none", "other"}),
    "aria-autocomplete": frozenset({"inline", "list", "both", "none"}),
    "aria-current": frozenset({"page", "step", "location", "date", "time", "true", "false"}),
})

INTEGER_ARIA_ATTRIBUTES = frozenset({
    "aria-level", "aria-posinset", "aria-setsize", "aria-colcount",
    "aria-colindex", "aria-colspan", "aria-rowcount", "aria-rowindex",
    "aria-rowspan",
})

NUMBER_ARIA_ATTRIBUTES = frozenset({"aria-valuemax", "aria-valuemin", "aria-valuenow"})

# Attributes whose value is a space separated list of element ids.
ID_REFERENCE_ARIA_ATTRIBUTES = frozenset({
    "aria-labelledby", "aria-describedby", "aria-controls", "aria-owns",
    "aria-flowto", "aria-activedescendant", "aria-errormessage", "aria-details",
})

REQUIRED_ARIA_PROPERTIES = MappingProxyType({
    "checkbox": ("aria-checked",),
    "combobox": ("aria-expanded",),
    "heading": ("aria-level",),
    "menuitemcheckbox": ("aria-checked",),
    "menuitemradio": ("aria-checked",),
    "meter": ("aria-valuenow",),
    "option": ("aria-selected",),
    "radio": ("aria-checked",),
    "scrollbar": ("aria-controls", "aria-valuenow"),
    "slider": ("aria-valuenow", "aria-valuemin", "aria-valuemax"),
    "switch": ("aria-checked",),
    "tab": ("aria-selected",),
})

LIVE_REGION_ROLES = MappingProxyType({
    "alert": "assertive",
    "status": "polite",
    "log": "polite",
    "timer": "off",
    "marquee": "off",
})

LIVE_REGION_CLASS_TOKENS = MappingProxyType({
    "alert": "assertive",
    "status": "polite",
    "notification": "polite",
    "live": "polite",
})

NAVIGATION_CLASS_TOKENS = frozenset({"menu", "nav", "navbar", "navigation"})

# Roles carried natively by HTML elements.
IMPLICIT_ROLES = MappingProxyType({
    "a": "link",
    "article": "article",
    "aside": "complementary",
    "button": "button",
    "dialog": "dialog",
    "footer": "contentinfo",
    "form": "form",
    "h1": "heading", "h2": "heading", "h3": "heading",
    "h4": "heading", "h5": "heading", "h6": "heading",
    "header": "banner",
    "hr": "separator",
    "img": "img",
    "li": "listitem",
    "main": "main",
    "nav": "navigation",
    "ol": "list",
    "option": "option",
    "progress": "progressbar",
    "section": "region",
    "select": "combobox",
    "table": "table",
    "tbody": "rowgroup",
    "td": "cell",
    "textarea": "textbox",
    "th": "columnheader",
    "thead": "rowgroup",
    "tr": "row",
    "ul": "list",
})

INPUT_TYPE_ROLES = MappingProxyType({
    "button": "button",
    "checkbox": "checkbox",
    "email": "textbox",
    "image": "button",
    "number": "spinbutton",
    "radio": "radio",
    "range": "slider",
    "reset": "button",
    "search": "searchbox",
    "submit": "button",
    "tel": "textbox",
    "text": "textbox",
    "url": "textbox",
})

# Input types that either carry a native label or are never exposed.
UNLABELLED_INPUT_TYPES = frozenset({"hidden", "submit", "reset", "button", "image"})

FORM_CONTROL_TAGS = frozenset({"input", "select", "textarea"})

NATIVELY_FOCUSABLE_TAGS = frozenset({"button", "input", "select", "textarea", "summary", "iframe"})

INTERACTIVE_ROLES = frozenset({
    "button", "checkbox", "combobox", "link", "menuitem", "menuitemcheckbox",
    "menuitemradio", "option", "radio", "slider", "spinbutton", "switch",
    "tab", "textbox", "searchbox", "treeitem",
})

KEYBOARD_HANDLER_ATTRIBUTES = ("onkeydown", "onkeyup", "onkeypress")

# Success criterion -> conformance level.
WCAG_GUIDELINE_LEVELS = MappingProxyType({
    "1.1.1": "A",
    "1.3.1": "A",
    "1.4.3": "AA",
    "1.4.6": "AAA",
    "2.1.1": "A",
    "2.4.3": "A",
    "2.4.6": "AA",
    "2.4.10": "AAA",
    "3.1.1": "A",
    "3.1.2": "AA",
    "3.3.2": "A",
    "4.1.1": "A",
    "4.1.2": "A",
})

# Minimum contrast ratio per conformance level (normal text).
CONTRAST_RATIO_BY_LEVEL = MappingProxyType({
    "A": 3.0,
    "AA": 4.5,
    "AAA": 7.0,
})

CSS_NAMED_COLORS = MappingProxyType({
    "black": "#000000", "white": "#ffffff", "red": "#ff0000",
    "green": "#008000", "blue": "#0000ff", "yellow": "#ffff00",
    "orange": "#ffa500", "gray": "#808080", "grey": "#808080",
    "silver": "#c0c0c0", "navy": "#000080", "teal": "#008080",
    "purple": "#800080", "maroon": "#800000", "lime": "#00ff00",
    "aqua": "#00ffff", "fuchsia": "#ff00ff", "darkgray": "#a9a9a9",
    "darkgrey": "#a9a9a9", "lightgray": "#d3d3d3", "lightgrey": "#d3d3d3",
    "whitesmoke": "#f5f5f5", "gainsboro": "#dcdcdc", "dimgray": "#696969",
    "dimgrey": "#696969",
})

# Utility class tokens recognised as colour declarations (foreground "text-", background "bg-").
CLASS_COLOR_TOKENS = MappingProxyType({
    "white": "#ffffff",
    "black": "#000000",
    "gray-100": "#f3f4f6",
    "gray-200": "#e5e7eb",
    "gray-300": "#d1d5db",
    "gray-400": "#9ca3af",
    "gray-500": "#6b7280",
    "gray-600": "#4b5563",
    "gray-700": "#374151",
    "gray-800": "#1f2937",
    "gray-900": "#111827",
    "red-500": "#ef4444",
    "red-700": "#b91c1c",
    "green-500": "#22c55e",
    "green-700": "#15803d",
    "blue-500": "#3b82f6",
    "blue-700": "#1d4ed8",
    "yellow-300": "#fde047",
    "yellow-500": "#eab308",
})
