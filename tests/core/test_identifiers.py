import pytest

from core.models.errors import InvalidExtensionError, InvalidIdentifierError
from core.utils.constants import IDENTIFIER_ALPHABET
from core.utils.identifiers import (
    configured_identifier_length,
    generate_identifier,
    normalize_extension,
    sanitize_filename,
    split_filename,
)


class TestGenerateIdentifier:
    def test_default_length_and_alphabet(self) -> None:
        value = generate_identifier()

        assert len(value) == 6
        assert set(value) <= set(IDENTIFIER_ALPHABET)

    def test_custom_length(self) -> None:
        assert len(generate_identifier(12)) == 12

    def test_zero_length_rejected(self) -> None:
        with pytest.raises(ValueError):
            generate_identifier(0)

    def test_single_character_covers_alphabet(self) -> None:
        seen = {generate_identifier(1) for _ in range(5000)}

        assert seen <= set(IDENTIFIER_ALPHABET)
        assert len(seen) > 50


class TestConfiguredIdentifierLength:
    def test_default(self, monkeypatch) -> None:
        monkeypatch.delenv("IMAGE_ID_LENGTH", raising=False)

        assert configured_identifier_length() == 6

    def test_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("IMAGE_ID_LENGTH", "8")

        assert configured_identifier_length() == 8

    def test_non_positive_rejected(self, monkeypatch) -> None:
        monkeypatch.setenv("IMAGE_ID_LENGTH", "0")

        with pytest.raises(RuntimeError):
            configured_identifier_length()


class TestNormalizeExtension:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (".png", ".png"),
            ("PNG", ".png"),
            (".JPEG", ".jpeg"),
            ("jpg", ".jpg"),
            (".gif", ".gif"),
            (" .webp ", ".webp"),
        ],
    )
    def test_allowed(self, raw, expected) -> None:
        assert normalize_extension(raw) == expected

    @pytest.mark.parametrize("raw", [".svg", ".exe", "", ".", ".png.exe"])
    def test_rejected(self, raw) -> None:
        with pytest.raises(InvalidExtensionError):
            normalize_extension(raw)


class TestSanitizeFilename:
    def test_plain_name_kept(self) -> None:
        assert sanitize_filename("abc123.png") == "abc123.png"

    @pytest.mark.parametrize(
        "value",
        ["", "   ", "../etc/passwd", "..", ".", "a/b.png", "a\\b.png", "abc\x00.png"],
    )
    def test_unsafe_values_rejected(self, value) -> None:
        with pytest.raises(InvalidIdentifierError):
            sanitize_filename(value)


class TestSplitFilename:
    def test_with_extension(self) -> None:
        assert split_filename("abc123.PNG") == ("abc123", ".png")

    def test_bare_identifier(self) -> None:
        assert split_filename("abc123") == ("abc123", None)

    @pytest.mark.parametrize("value", ["abc-123.png", ".png", "ab c.png", "../abc.png"])
    def test_non_alphanumeric_identifier_rejected(self, value) -> None:
        with pytest.raises(InvalidIdentifierError):
            split_filename(value)
