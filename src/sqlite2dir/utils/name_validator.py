"""Validation of object names used as path segments.

Schema object and table names come straight from the database catalog and
end up as file names (or git tree entry names). A name that would escape
its directory is refused rather than rewritten.
"""


class InvalidNameError(ValueError):
    """Raised when a name cannot be used as a single path segment."""

    pass


FORBIDDEN_CHARACTERS = ("/", "\\", "\0")


def validate_path_segment(segment: str, entity_type: str = "entity") -> str:
    """Check that ``segment`` is a safe single path component.

    Args:
        segment: The file or directory name
        entity_type: Kind of object, for the error message

    Returns:
        The segment, unchanged

    Raises:
        InvalidNameError: If the segment is empty, is ``.`` or ``..``, or
            contains a path separator or NUL byte
    """
    if not segment:
        raise InvalidNameError(f"{entity_type.capitalize()} name cannot be empty")

    if segment in (".", ".."):
        raise InvalidNameError(
            f"Security violation: {entity_type} name '{segment}' is a relative path"
        )

    for char in FORBIDDEN_CHARACTERS:
        if char in segment:
            raise InvalidNameError(
                f"Security violation: {entity_type} name {segment!r} contains "
                f"forbidden path characters"
            )

    return segment


def is_valid_path_segment(segment: str) -> bool:
    """Check whether ``segment`` passes :func:`validate_path_segment`."""
    try:
        validate_path_segment(segment)
        return True
    except InvalidNameError:
        return False
