"""Ordered rewrite passes that turn component markup into static HTML."""

from __future__ import annotations

import html
import re
from typing import Callable, List, Optional, Tuple

from ..constants import DYNAMIC_PLACEHOLDER
from ..scanner import (
    VOID_ELEMENTS,
    read_tag_name,
    skip_expression,
    skip_js_string,
    starts_markup,
)
from .literals import read_string_literal

Attribute = Tuple[str, Optional[str]]

_ATTRIBUTE_NAME = re.compile(r"[A-Za-z_:@$][\w:.$-]*")
_BARE_VALUE = re.compile(r"[^\s\"'>/]+")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_COMMENT_ONLY = re.compile(r"(?:\s*/\*.*?\*/\s*|\s*//[^\n]*\n?)*", re.S)

_TAG_PATTERN = re.compile(r"""<(/?)([A-Za-z][\w.:-]*)((?:"[^"]*"|'[^']*'|[^'">])*?)(/?)>""")
_ATTRIBUTE_PATTERN = re.compile(r"""([^\s"'=/<>]+)(?:\s*=\s*("[^"]*"|'[^']*'|[^\s"'>]+))?""")
_FRAGMENT_PATTERN = re.compile(r"</?(?:React\.)?Fragment\b[^>]*>|<>|</>")
_SCRIPT_PATTERN = re.compile(r"<script\b[^>]*>.*?</script\s*>|<script\b[^>]*/>", re.I | re.S)
_WHITESPACE = re.compile(r"\s+")

_ATTRIBUTE_ALIASES = {"className": "class", "htmlFor": "for"}
_FRAMEWORK_ATTRIBUTES = frozenset(
    {"key", "ref", "dangerouslySetInnerHTML", "suppressHydrationWarning"}
)
_EVENT_HANDLER = re.compile(r"^on[a-z][\w:.-]*$", re.I)
_UNSAFE_URL_ATTRIBUTES = frozenset({"href", "src", "action", "formaction"})
_UNSAFE_SCHEMES = ("javascript:", "vbscript:")
_COMPONENT_ALIASES = {"Link": "a", "Image": "img", "NextImage": "img", "NextLink": "a"}
_UNITLESS_STYLE_PROPERTIES = frozenset(
    {
        "opacity",
        "zIndex",
        "fontWeight",
        "lineHeight",
        "flex",
        "flexGrow",
        "flexShrink",
        "order",
        "zoom",
        "gridRow",
        "gridColumn",
    }
)


# ----------------------------------------------------------------------
# Pass 1: embedded expressions


def resolve_expressions(markup: str) -> str:
    """Replace every ``{...}`` expression with a literal, a placeholder or nothing.

    The walk knows whether it sits inside a tag, so attribute values and
    children are resolved differently. Unterminated input drops the rest of
    the markup rather than leaking partial code.
    """
    out: List[str] = []
    index = 0
    length = len(markup)
    while index < length:
        char = markup[index]
        if char == "{":
            end = skip_expression(markup, index)
            if end is None:
                break
            out.append(_resolve_child(markup[index + 1 : end - 1]))
            index = end
            continue
        if char == "}":
            index += 1
            continue
        if char == "<":
            following = markup[index + 1 : index + 2]
            if markup.startswith("<!--", index):
                close = markup.find("-->", index + 4)
                if close == -1:
                    break
                out.append(markup[index : close + 3])
                index = close + 3
                continue
            if following == "/":
                close = markup.find(">", index)
                if close == -1:
                    break
                out.append(markup[index : close + 1])
                index = close + 1
                continue
            if following.isalpha() or following == ">":
                tag = _resolve_tag(markup, index)
                if tag is None:
                    break
                text, index = tag
                out.append(text)
                continue
            out.append("&lt;")
            index += 1
            continue
        out.append(char)
        index += 1
    return "".join(out)


def _escape_text(value: str) -> str:
    return html.escape(value, quote=False).replace("{", "&#123;").replace("}", "&#125;")


def _contains_markup(expression: str) -> bool:
    position = expression.find("<")
    while position != -1:
        if starts_markup(expression, position):
            return True
        position = expression.find("<", position + 1)
    return False


def _resolve_child(expression: str) -> str:
    if not expression.strip() or _COMMENT_ONLY.fullmatch(expression):
        return ""
    value = read_string_literal(expression)
    if value is not None:
        return _escape_text(value)
    if _contains_markup(expression):
        return DYNAMIC_PLACEHOLDER
    return ""


def _resolve_tag(markup: str, start: int) -> Optional[Tuple[str, int]]:
    if markup.startswith("<>", start):
        return "<>", start + 2
    name = read_tag_name(markup, start + 1)
    index = start + 1 + len(name)
    length = len(markup)
    attributes: List[str] = []
    while index < length:
        char = markup[index]
        if char.isspace():
            index += 1
            continue
        if char == ">":
            return _format_tag(name, attributes, False), index + 1
        if char == "/" and markup.startswith(">", index + 1):
            return _format_tag(name, attributes, True), index + 2
        if char == "{":
            # Spread attributes and comments inside a tag carry no static value.
            end = skip_expression(markup, index)
            if end is None:
                return None
            index = end
            continue
        match = _ATTRIBUTE_NAME.match(markup, index)
        if not match:
            index += 1
            continue
        attribute = match.group(0)
        index = _skip_spaces(markup, match.end())
        if index >= length or markup[index] != "=":
            attributes.append(attribute)
            continue
        index = _skip_spaces(markup, index + 1)
        if index >= length:
            return None
        opener = markup[index]
        if opener in "\"'":
            close = markup.find(opener, index + 1)
            if close == -1:
                return None
            value = markup[index + 1 : close]
            attributes.append(f'{attribute}="{html.escape(html.unescape(value))}"')
            index = close + 1
        elif opener == "{":
            end = skip_expression(markup, index)
            if end is None:
                return None
            resolved = _resolve_attribute(attribute, markup[index + 1 : end - 1])
            if resolved is not None:
                attributes.append(resolved)
            index = end
        elif opener == "`":
            end = skip_js_string(markup, index)
            if end is None:
                return None
            resolved = _resolve_attribute(attribute, markup[index:end])
            if resolved is not None:
                attributes.append(resolved)
            index = end
        else:
            bare = _BARE_VALUE.match(markup, index)
            if bare is None:
                index += 1
                continue
            attributes.append(f'{attribute}="{html.escape(bare.group(0))}"')
            index = bare.end()
    return None


def _skip_spaces(source: str, index: int) -> int:
    while index < len(source) and source[index].isspace():
        index += 1
    return index


def _format_tag(name: str, attributes: List[str], self_closing: bool) -> str:
    parts = [name, *attributes]
    return "<" + " ".join(parts) + ("/>" if self_closing else ">")


def _resolve_attribute(name: str, expression: str) -> Optional[str]:
    text = expression.strip()
    value = read_string_literal(text)
    if value is not None:
        return f'{name}="{html.escape(value)}"'
    if _NUMBER.fullmatch(text):
        return f'{name}="{text}"'
    if text == "true":
        return name
    if name == "style" and text.startswith("{") and text.endswith("}"):
        css = style_object_to_css(text[1:-1])
        if css:
            return f'style="{html.escape(css)}"'
    return None


_STYLE_KEY = re.compile(r"""\s*(?:([A-Za-z_$][\w$]*)|"([^"]+)"|'([^']+)')\s*:\s*""")


def style_object_to_css(body: str) -> Optional[str]:
    """Convert a style object literal body to inline CSS.

    Returns None unless every value is a literal, so computed styles never
    surface half-evaluated.
    """
    declarations: List[str] = []
    for item in _split_top_level(body):
        if not item.strip():
            continue
        key_match = _STYLE_KEY.match(item)
        if key_match is None:
            return None
        key = next(group for group in key_match.groups() if group)
        raw_value = item[key_match.end() :].strip()
        value = read_string_literal(raw_value)
        if value is None:
            if not _NUMBER.fullmatch(raw_value):
                return None
            value = raw_value
            if key not in _UNITLESS_STYLE_PROPERTIES and raw_value != "0":
                value += "px"
        declarations.append(f"{_kebab_case(key)}: {value}")
    return "; ".join(declarations) or None


def _split_top_level(body: str) -> List[str]:
    items: List[str] = []
    start = 0
    index = 0
    while index < len(body):
        char = body[index]
        if char in "'\"`":
            end = skip_js_string(body, index)
            index = end if end is not None else len(body)
            continue
        if char == ",":
            items.append(body[start:index])
            start = index + 1
        index += 1
    items.append(body[start:])
    return items


def _kebab_case(key: str) -> str:
    if "-" in key:
        return key.lower()
    kebab = re.sub(r"([A-Z])", r"-\1", key).lower()
    if kebab.startswith("ms-"):
        return "-" + kebab
    return kebab


# ----------------------------------------------------------------------
# Passes 2-7: tag level rewrites


def strip_fragments(markup: str) -> str:
    return _FRAGMENT_PATTERN.sub("", markup)


def _parse_attributes(raw: str) -> List[Attribute]:
    return [(match.group(1), match.group(2)) for match in _ATTRIBUTE_PATTERN.finditer(raw)]


def _rewrite_attributes(
    markup: str, transform: Callable[[str, str, Optional[str]], Optional[Attribute]]
) -> str:
    def _replace(match: re.Match[str]) -> str:
        closing, name, raw, slash = match.groups()
        if closing:
            return match.group(0)
        attributes = []
        for attribute, value in _parse_attributes(raw):
            rewritten = transform(name, attribute, value)
            if rewritten is None:
                continue
            new_name, new_value = rewritten
            attributes.append(new_name if new_value is None else f"{new_name}={new_value}")
        return _format_tag(name, attributes, bool(slash))

    return _TAG_PATTERN.sub(_replace, markup)


def alias_attributes(markup: str) -> str:
    return _rewrite_attributes(
        markup, lambda _tag, name, value: (_ATTRIBUTE_ALIASES.get(name, name), value)
    )


def strip_event_handlers(markup: str) -> str:
    return _rewrite_attributes(
        markup,
        lambda _tag, name, value: None if _EVENT_HANDLER.match(name) else (name, value),
    )


def strip_framework_attributes(markup: str) -> str:
    """Drop framework-only attributes, script elements and script URLs."""

    def _transform(_tag: str, name: str, value: Optional[str]) -> Optional[Attribute]:
        if name in _FRAMEWORK_ATTRIBUTES:
            return None
        if name.lower() in _UNSAFE_URL_ATTRIBUTES and value is not None:
            target = html.unescape(value.strip("\"'")).strip().lower()
            if target.startswith(_UNSAFE_SCHEMES):
                return name, '"#"'
        return name, value

    return _rewrite_attributes(_SCRIPT_PATTERN.sub("", markup), _transform)


def alias_components(markup: str) -> str:
    """Map framework components to HTML elements.

    ``Link`` becomes ``a`` and ``Image`` becomes ``img``; namespaced
    lowercase components such as ``motion.div`` keep their element name;
    any other capitalised component becomes a ``div`` when it wraps
    children and disappears when it is self-closing.
    """

    def _replace(match: re.Match[str]) -> str:
        closing, name, raw, slash = match.groups()
        element = _component_element(name)
        if element is None:
            return match.group(0)
        if element == "img":
            return "" if closing else f"<img{raw.rstrip()}>"
        if closing:
            return f"</{element}>"
        if slash and name[:1].isupper() and name not in _COMPONENT_ALIASES:
            return ""
        return f"<{element}{raw}{slash}>"

    return _TAG_PATTERN.sub(_replace, markup)


def _component_element(name: str) -> Optional[str]:
    if name in _COMPONENT_ALIASES:
        return _COMPONENT_ALIASES[name]
    if "." in name:
        suffix = name.rsplit(".", 1)[-1]
        if suffix[:1].islower():
            return suffix
        return "div"
    if name[:1].isupper():
        return "div"
    return None


def expand_self_closing(markup: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        closing, name, raw, slash = match.groups()
        if closing or not slash or name.lower() in VOID_ELEMENTS:
            return match.group(0)
        return f"<{name}{raw.rstrip()}></{name}>"

    return _TAG_PATTERN.sub(_replace, markup)


def collapse_whitespace(markup: str) -> str:
    return _WHITESPACE.sub(" ", markup).strip()


_PASSES = (
    resolve_expressions,
    strip_fragments,
    alias_attributes,
    strip_event_handlers,
    strip_framework_attributes,
    alias_components,
    expand_self_closing,
    collapse_whitespace,
)


def to_static_html(markup: str) -> str:
    """Run every rewrite pass over *markup* in order."""
    for rewrite in _PASSES:
        markup = rewrite(markup)
    return markup


__all__ = [
    "alias_attributes",
    "alias_components",
    "collapse_whitespace",
    "expand_self_closing",
    "resolve_expressions",
    "strip_event_handlers",
    "strip_fragments",
    "strip_framework_attributes",
    "style_object_to_css",
    "to_static_html",
]
