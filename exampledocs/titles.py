"""Title derivation for sections and examples."""

import re

# "02_create_user" -> "create_user"
ORDERING_PREFIX = re.compile(r"^\d+_")
SEPARATORS = re.compile(r"[\s_\-]+")


def filename_to_title(name: str) -> str:
    """
    Turn a file or directory name into a title.

    Strips a leading ``<digits>_`` ordering prefix, treats underscores, hyphens
    and whitespace as word separators, and capitalizes the first letter of
    each word. ``"02_create_user"`` becomes ``"Create User"``.
    """
    stripped = ORDERING_PREFIX.sub("", name) or name
    words = [word for word in SEPARATORS.split(stripped) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)
