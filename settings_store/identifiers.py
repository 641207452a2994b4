import re
from typing import NamedTuple

DEFAULT_CATEGORY = "settings"

# Any non-ASCII character counts as a "high" character, the same set UTF-8
# high bytes cover in byte strings.
LABEL = r"[A-Za-z_\x7f-\U0010ffff][A-Za-z0-9_\x7f-\U0010ffff]*"

_LABEL_RE = re.compile(LABEL)
_IDENTIFIER_RE = re.compile(rf"((?:{LABEL}\.)*)({LABEL})")


class SettingIdentifier(NamedTuple):
    category: str
    name: str


def is_label(value) -> bool:
    """Return True when ``value`` is a single label (no separators)."""
    return isinstance(value, str) and _LABEL_RE.fullmatch(value) is not None


def split(identifier) -> SettingIdentifier | None:
    """
    Split a flat setting identifier into its category and name.

    Everything before the last full stop is the category, the final label is
    the name. Identifiers without a full stop belong to the default category.
    Returns None for anything that is not a well-formed identifier.

    Example:
      split("app.mail.sender") -> SettingIdentifier("app.mail", "sender")
      split("title") -> SettingIdentifier("settings", "title")
    """
    if not isinstance(identifier, str):
        return None
    match = _IDENTIFIER_RE.fullmatch(identifier)
    if match is None:
        return None
    prefix, name = match.groups()
    category = prefix[:-1] if prefix else DEFAULT_CATEGORY
    return SettingIdentifier(category=category, name=name)


def is_category(category) -> bool:
    """Categories follow the same grammar as a whole identifier."""
    return split(category) is not None
