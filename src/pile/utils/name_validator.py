"""Name normalization and validation for Pile projects.

A project name is also the literal name of its directory under the workspace
root, so it must be usable as a single directory entry.
"""

from pile.core.errors import InvalidName


# Names that can never be a project directory
RESERVED_NAMES = {".", ".."}

PATH_SEPARATORS = ("/", "\\")


def normalize_name(name: str) -> str:
    """Clean a raw project name.

    This performs basic cleaning:
    - Strip leading and trailing whitespace
    - Replace spaces with dashes

    The result of normalizing an already normalized name is unchanged, so it is
    safe to call on any name the user supplies.

    Args:
        name: The raw name as typed by the user

    Returns:
        Normalized name
    """
    return name.strip().replace(" ", "-")


def validate_name(name: str) -> None:
    """Validate that a normalized name can be used as a project directory.

    Valid names must:
    - Be at least 1 character long
    - Not be "." or ".."
    - Not contain a path separator
    - Not contain control characters

    Args:
        name: The normalized name to validate

    Raises:
        InvalidName: If the name is invalid
    """
    if not name:
        raise InvalidName("Project name cannot be empty")

    if name in RESERVED_NAMES:
        raise InvalidName(f"'{name}' is a reserved name and cannot be used")

    if any(sep in name for sep in PATH_SEPARATORS):
        raise InvalidName(
            f"Project name '{name}' cannot contain a path separator"
        )

    if any(ord(c) < 32 for c in name):
        raise InvalidName("Project name contains invalid control characters")


def clean_name(name: str) -> str:
    """Normalize a name and validate the result.

    Raises:
        InvalidName: If the normalized name is invalid
    """
    cleaned = normalize_name(name)
    validate_name(cleaned)
    return cleaned


def is_valid_name(name: str) -> bool:
    """Check if a name is valid without raising an exception."""
    try:
        validate_name(name)
        return True
    except InvalidName:
        return False
