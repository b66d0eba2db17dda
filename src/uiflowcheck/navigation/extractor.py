"""Extraction of clickable elements from generated HTML screens.

The scan is purely textual: screens produced by the design workflow are small,
hand-shaped Tailwind pages, and the patterns below mirror the conventions they
use for navigation (``onclick="location.href='...'"``, ``<a href>``) and for
things that look interactive but lead nowhere.
"""

from __future__ import annotations

import re

from uiflowcheck.models.schemas import ClickableElement, IssueType

ONCLICK_HREF_RE = re.compile(
    r"""onclick\s*=\s*["'](?:[^"']*)?location\.href\s*=\s*['"]([^'"]+)['"]""", re.IGNORECASE
)
ANCHOR_HREF_RE = re.compile(r"""<a\b[^>]*?\shref\s*=\s*["']([^"'#][^"']*)["']""", re.IGNORECASE)
EMPTY_HREF_RE = re.compile(r"""href\s*=\s*["']#["']""", re.IGNORECASE)
EMPTY_ONCLICK_RE = re.compile(r"""onclick\s*=\s*["']\s*["']""", re.IGNORECASE)
VOID_ONCLICK_RE = re.compile(
    r"""<(?:button|a|div)\b[^>]*onclick\s*=\s*["'](?:javascript:)?void\s*\(\s*0\s*\)["'][^>]*>""",
    re.IGNORECASE,
)
BUTTON_RE = re.compile(r"<button\b[^>]*>[\s\S]*?</button>", re.IGNORECASE)
BUTTON_TAG_RE = re.compile(r"<button\b[^>]*>", re.IGNORECASE)
CLOSE_ICON_RE = re.compile(
    r"<(?:div|span)\b[^>]*>[\s\S]{0,400}?(?:M6 18L18 6|M6 6l12 12|×|✕|✖)[\s\S]{0,100}?</(?:div|span)>",
    re.IGNORECASE,
)
OPEN_DIV_SPAN_RE = re.compile(r"<(?:div|span)\b[^>]*>", re.IGNORECASE)
CLICKABLE_ROW_RE = re.compile(r"<(?:div|a)\b[^>]*(?:active:|hover:)[^>]*>", re.IGNORECASE)
CLICKABLE_BG_RE = re.compile(r"(?:active:|hover:)bg-")
ELEMENT_RE = re.compile(r"<(?:div|a)\b[^>]*>[\s\S]*?</(?:div|a)>", re.IGNORECASE)
ID_ATTR_RE = re.compile(r"""id\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
CLASS_ATTR_RE = re.compile(r"""class\s*=\s*["']([^"']*)["']""", re.IGNORECASE)
TAG_NAME_RE = re.compile(r"<(\w+)")
MULTIPLY_RE = re.compile(r"×\d")

SVG_RE = re.compile(r"<svg[\s\S]*?</svg>", re.IGNORECASE)
TAG_RE = re.compile(r"<[^>]+>")
WHITESPACE_RE = re.compile(r"\s+")

CLOSE_PATHS = ("M6 18L18 6", "M6 6l12 12", "m6 18l12-12", "M18 6L6 18", "M4 4L20 20", "M20 4L4 20")
CLOSE_CLASS_WORDS = ("close", "dismiss", "exit", "cancel", "back", "return", "leave", "quit")
CLOSE_GLYPHS = ("×", "✕", "✖", "╳", "&times;")
CLOSE_ARIA_LABELS = ('aria-label="close"', 'aria-label="關閉"', 'aria-label="離開"')
CLOSE_ICON_GLYPHS = ("M6 18L18 6", "M6 6l12 12", "✕", "✖")

CHEVRON_PATHS = (
    "M9 5l7 7-7 7",
    "M9 5 l7 7 -7 7",
    "m9 5l7 7-7 7",
    "M8.59 16.59L13.17 12 8.59 7.41",
    "M10 6L8.59 7.41 13.17 12l-4.58 4.59L10 18l6-6z",
)
CHEVRON_CLASSES = ("chevron-right", "chevron_right", "arrow-right", "arrow_right", "icon-right")
ARROW_GLYPHS = ("›", "&gt;", "→")

NAV_ID_PREFIXES = ("cell_", "btn_", "lnk_", "nav_")
EXTERNAL_TEXT_HINTS = ("評價", "評分", "App Store", "Rate")
EXTERNAL_ID_HINTS = ("rate", "external")
DECORATIVE_MARKERS = ('aria-hidden="true"', 'role="presentation"', "pointer-events-none")
CONTAINER_MARKERS = ("flex-col", "w-full", "h-full")

CRITICAL_CLOSE = "CRITICAL: Close/Exit button has no onclick handler (must navigate back)"
CRITICAL_SETTINGS = "CRITICAL: Settings row has no onclick handler (must navigate or show alert)"


def line_number(content: str, index: int) -> int:
    """1-based line number of a character offset."""
    return content.count("\n", 0, index) + 1


def truncate(text: str, limit: int = 80) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def extract_text_content(html: str) -> str:
    """Visible text of an HTML fragment, SVG content removed."""
    text = SVG_RE.sub("", html)
    text = TAG_RE.sub(" ", text)
    return WHITESPACE_RE.sub(" ", text).strip()


def detect_close_button(html: str) -> bool:
    """Whether an element looks like a close/exit control."""
    lower = html.lower()

    for pattern in CLOSE_PATHS:
        if pattern in html or pattern.lower() in lower:
            return True

    for classes in CLASS_ATTR_RE.findall(html):
        if any(word in classes.lower() for word in CLOSE_CLASS_WORDS):
            return True

    if any(glyph in html for glyph in CLOSE_GLYPHS):
        return True

    return any(label in lower for label in CLOSE_ARIA_LABELS)


def detect_settings_row(html: str) -> bool:
    """Whether an element looks like a list row leading to another screen."""
    if any(pattern in html for pattern in CHEVRON_PATHS):
        return True

    lower = html.lower()
    if any(name in lower for name in CHEVRON_CLASSES):
        return True

    # An arrow glyph only counts as a navigation hint on styled rows
    if any(glyph in html for glyph in ARROW_GLYPHS):
        return "active:" in lower or "hover:" in lower

    return False


def _is_external_link(text: str, element_id: str) -> bool:
    return any(hint in text for hint in EXTERNAL_TEXT_HINTS) or any(
        hint in element_id for hint in EXTERNAL_ID_HINTS
    )


def _extract_targets(content: str) -> list[ClickableElement]:
    elements = []
    for match in ONCLICK_HREF_RE.finditer(content):
        elements.append(
            ClickableElement(
                kind=IssueType.ONCLICK_HREF,
                target=match.group(1),
                raw=match.group(0),
                line=line_number(content, match.start()),
            )
        )
    for match in ANCHOR_HREF_RE.finditer(content):
        elements.append(
            ClickableElement(
                kind=IssueType.HREF,
                target=match.group(1),
                raw=match.group(0),
                line=line_number(content, match.start()),
            )
        )
    return elements


def _extract_empty_handlers(content: str) -> list[ClickableElement]:
    elements = []
    for match in EMPTY_HREF_RE.finditer(content):
        elements.append(
            ClickableElement(
                kind=IssueType.EMPTY_HREF,
                target="#",
                raw=match.group(0),
                line=line_number(content, match.start()),
                is_issue=True,
                message='Empty href="#" has no navigation target',
            )
        )
    for match in EMPTY_ONCLICK_RE.finditer(content):
        elements.append(
            ClickableElement(
                kind=IssueType.EMPTY_ONCLICK,
                target="",
                raw=match.group(0),
                line=line_number(content, match.start()),
                is_issue=True,
                message='Empty onclick="" has no action',
            )
        )
    return elements


def _extract_void_handlers(content: str) -> list[ClickableElement]:
    elements = []
    for match in VOID_ONCLICK_RE.finditer(content):
        tag = match.group(0)
        id_match = ID_ATTR_RE.search(tag)
        element_id = id_match.group(1) if id_match else "(no id)"

        tag_match = TAG_NAME_RE.match(tag)
        tag_name = tag_match.group(1) if tag_match else "element"
        close_pos = content.find(f"</{tag_name}>", match.start())
        fragment = content[match.start():close_pos + len(tag_name) + 3] if close_pos > match.start() else tag
        text = extract_text_content(fragment)

        if _is_external_link(text, element_id):
            continue

        is_navigation = detect_settings_row(fragment) or element_id.startswith(NAV_ID_PREFIXES)
        if is_navigation:
            elements.append(
                ClickableElement(
                    kind=IssueType.VOID_ONCLICK_NAVIGATION,
                    target="void(0)",
                    raw=truncate(tag),
                    line=line_number(content, match.start()),
                    is_issue=True,
                    message=f"Navigation button [{element_id}] uses void(0) - needs real target",
                    text=text,
                    element_id=element_id,
                )
            )
        else:
            elements.append(
                ClickableElement(
                    kind=IssueType.VOID_ONCLICK_WARNING,
                    target="void(0)",
                    raw=truncate(tag),
                    line=line_number(content, match.start()),
                    message=f"Element [{element_id}] uses void(0) - acceptable for UI interactions",
                    text=text,
                    element_id=element_id,
                )
            )
    return elements


def _extract_unhandled_buttons(content: str) -> list[ClickableElement]:
    elements = []
    for match in BUTTON_RE.finditer(content):
        button = match.group(0)
        tag_match = BUTTON_TAG_RE.match(button)
        tag = tag_match.group(0) if tag_match else ""

        if "onclick=" in tag or 'type="submit"' in tag:
            continue

        if detect_close_button(button):
            kind, message = IssueType.CLOSE_BUTTON_NO_ONCLICK, CRITICAL_CLOSE
        elif detect_settings_row(button):
            kind, message = IssueType.SETTINGS_ROW_NO_ONCLICK, CRITICAL_SETTINGS
        else:
            kind, message = IssueType.BUTTON_NO_ONCLICK, "Button has no onclick handler"

        elements.append(
            ClickableElement(
                kind=kind,
                raw=truncate(tag),
                line=line_number(content, match.start()),
                is_issue=True,
                message=message,
                text=extract_text_content(button),
            )
        )
    return elements


def _extract_close_icons(content: str) -> list[ClickableElement]:
    elements = []
    for match in CLOSE_ICON_RE.finditer(content):
        element = match.group(0)
        tag_match = OPEN_DIV_SPAN_RE.match(element)
        tag = tag_match.group(0) if tag_match else ""

        if "onclick=" in tag:
            continue
        if any(marker in tag for marker in CONTAINER_MARKERS):
            continue
        if any(marker in element for marker in DECORATIVE_MARKERS):
            continue
        if "<button" in element and "onclick=" in element:
            continue

        has_x_icon = any(glyph in element for glyph in CLOSE_ICON_GLYPHS)
        has_close_sign = "×" in element and not MULTIPLY_RE.search(element)
        if has_x_icon or has_close_sign:
            elements.append(
                ClickableElement(
                    kind=IssueType.CLOSE_ICON_NO_ONCLICK,
                    raw=truncate(tag, 60),
                    line=line_number(content, match.start()),
                    is_issue=True,
                    message="CRITICAL: Close icon (X) has no onclick handler",
                )
            )
    return elements


def _extract_clickable_rows(content: str) -> list[ClickableElement]:
    elements = []
    for match in CLICKABLE_ROW_RE.finditer(content):
        tag = match.group(0)

        if "onclick=" in tag:
            continue
        if "href=" in tag and 'href="#"' not in tag:
            continue
        if "group-hover:" in tag or "group-active:" in tag:
            continue
        if not CLICKABLE_BG_RE.search(tag):
            continue

        element_match = ELEMENT_RE.match(content, match.start())
        fragment = element_match.group(0) if element_match else tag

        if detect_settings_row(fragment):
            kind, message = IssueType.SETTINGS_ROW_NO_ONCLICK, CRITICAL_SETTINGS
        else:
            kind = IssueType.CLICKABLE_ROW_NO_ONCLICK
            message = "Clickable row (has active/hover style) has no onclick handler"

        elements.append(
            ClickableElement(
                kind=kind,
                raw=truncate(tag),
                line=line_number(content, match.start()),
                is_issue=True,
                message=message,
                text=extract_text_content(fragment),
            )
        )
    return elements


def extract_clickable_elements(content: str) -> list[ClickableElement]:
    """Find navigation targets and unhandled interactive elements in a screen."""
    return (
        _extract_targets(content)
        + _extract_empty_handlers(content)
        + _extract_void_handlers(content)
        + _extract_unhandled_buttons(content)
        + _extract_close_icons(content)
        + _extract_clickable_rows(content)
    )
