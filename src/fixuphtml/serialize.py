"""Serialization of rewritten tags and inline styles."""

from __future__ import annotations


def _choose_attr_quote(value: str) -> str:
    if '"' in value and "'" not in value:
        return "'"
    return '"'


def _escape_attr_value(value: str, quote_char: str, *, encoded: bool = False) -> str:
    # An encoded value is already in source form (entity references intact),
    # so only the quote needs escaping.
    if not encoded:
        value = value.replace("&", "&amp;")
        value = value.replace("<", "&lt;").replace(">", "&gt;")
    if quote_char == '"':
        return value.replace('"', "&quot;")
    return value.replace("'", "&#39;")


def serialize_attribute(name: str, value: str | None, *, encoded: bool = False) -> str:
    """Serialize one attribute, including its leading space."""
    if value is None:
        return f" {name}"
    quote = _choose_attr_quote(value)
    return f" {name}={quote}{_escape_attr_value(value, quote, encoded=encoded)}{quote}"


def serialize_start_tag(name: str, attrs: dict[str, str | None] | None, *, encoded: bool = False) -> str:
    attrs = attrs or {}
    parts: list[str] = ["<", name]
    for key, value in attrs.items():
        parts.append(serialize_attribute(key, value, encoded=encoded))
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def parse_style(style: str | None) -> list[tuple[str, str]]:
    """Split an inline style into ``(property, declaration)`` pairs.

    The declaration text is kept as written; the property name is case-folded
    for comparison. Empty declarations are dropped.
    """
    declarations = []
    for part in (style or "").split(";"):
        text = part.strip()
        if not text:
            continue
        prop = text.split(":", 1)[0].strip().lower()
        declarations.append((prop, text))
    return declarations


def merge_style(style: str | None, leading: list[str], defaults: list[str]) -> str:
    """Merge declarations into an inline style.

    ``leading`` declarations always come first; each of ``defaults`` is added
    after them only when the style does not already set that property. The
    original declarations follow, and a property declared more than once keeps
    its first occurrence. A trailing ";" on the original style is kept.
    """
    existing = parse_style(style)
    present = {prop for prop, _ in existing}
    merged = parse_style("; ".join(leading))
    for prop, text in parse_style("; ".join(defaults)):
        if prop not in present:
            merged.append((prop, text))
    merged.extend(existing)

    seen: set[str] = set()
    out: list[str] = []
    for prop, text in merged:
        if prop in seen:
            continue
        seen.add(prop)
        out.append(text)
    result = "; ".join(out)
    if out and (style or "").rstrip().endswith(";"):
        result += ";"
    return result
