"""Identifier generation and caller-supplied name sanitization."""

import os
import re
import secrets

from core.models.errors import InvalidExtensionError, InvalidIdentifierError
from core.utils.constants import (
    ALLOWED_EXTENSIONS,
    DEFAULT_IDENTIFIER_LENGTH,
    ENV_IMAGE_ID_LENGTH,
    IDENTIFIER_ALPHABET,
    IDENTIFIER_PATTERN,
)

_IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN)
_PATH_SEPARATORS = ("/", "\\", "\x00")


def generate_identifier(length: int = DEFAULT_IDENTIFIER_LENGTH) -> str:
    """Return `length` characters drawn uniformly from [a-zA-Z0-9]."""
    if length < 1:
        raise ValueError("Identifier length must be at least 1")

    return "".join(secrets.choice(IDENTIFIER_ALPHABET) for _ in range(length))


def configured_identifier_length() -> int:
    """Identifier length from the environment, falling back to the default."""
    raw = os.getenv(ENV_IMAGE_ID_LENGTH)
    if not raw:
        return DEFAULT_IDENTIFIER_LENGTH

    length = int(raw)
    if length < 1:
        raise RuntimeError(f"{ENV_IMAGE_ID_LENGTH} must be a positive integer")
    return length


def normalize_extension(extension: str) -> str:
    """Lower-case `extension`, add the leading dot and check the allow-list.

    Raises:
        InvalidExtensionError: If the extension is not a supported image type
    """
    ext = (extension or "").strip().lower()
    if ext and not ext.startswith("."):
        ext = f".{ext}"

    if ext not in ALLOWED_EXTENSIONS:
        raise InvalidExtensionError(
            message=(
                f"Invalid image extension '{extension}'. "
                f"Allowed extensions: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
            ),
            details={"extension": extension},
        )

    return ext


def sanitize_filename(value: str) -> str:
    """Reduce a caller-supplied name to a single safe path segment.

    Any value that carries a path separator, or that is a relative
    directory reference, is rejected rather than rewritten.

    Raises:
        InvalidIdentifierError: If the value is empty or unsafe
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidIdentifierError(message="Image identifier must not be empty")

    name = value.strip()

    if any(sep in name for sep in _PATH_SEPARATORS) or name in (".", ".."):
        raise InvalidIdentifierError(
            message="Image identifier must not contain path separators",
            details={"identifier": value},
        )

    return os.path.basename(name)


def split_filename(value: str) -> tuple[str, str | None]:
    """Split `abc123.png` into (`abc123`, `.png`); a bare id yields (`abc123`, None).

    Raises:
        InvalidIdentifierError: If the identifier part is not alphanumeric
    """
    name = sanitize_filename(value)
    image_id, extension = os.path.splitext(name)

    if not _IDENTIFIER_RE.match(image_id):
        raise InvalidIdentifierError(
            message="Image identifier must be alphanumeric",
            details={"identifier": value},
        )

    return image_id, (extension.lower() or None)
