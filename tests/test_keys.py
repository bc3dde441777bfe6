import pytest

from filetrie.exceptions import InvalidKeyError
from filetrie.keys import original_key, require_clean, sanitize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("John Doe", "johndoe"),
        ("JohnDoe", "johndoe"),
        ("Harry S. Truman", "harrystruman"),
        ("Little-Bobby-Tables", "littlebobbytables"),
        (".hidden", "hidden"),
        ("trailing.", "trailing"),
        ("a...b", "ab"),
        ("MiXeD123", "mixed123"),
        (12345, "12345"),
        (b"Bytes Key", "byteskey"),
        ("", ""),
        ("...", ""),
        ("  -- !! ", ""),
    ],
)
def test_sanitize(raw, expected):
    assert sanitize(raw) == expected


@pytest.mark.parametrize(
    "raw", ["John Doe", ".a.b..c.", "ÄÖÜ straße", "x" * 300, "", "12.5%", "\n\t"]
)
def test_sanitize_is_idempotent(raw):
    once = sanitize(raw)
    assert sanitize(once) == once


def test_sanitize_drops_non_ascii_letters():
    assert sanitize("café") == "caf"


def test_require_clean_raises_on_empty():
    with pytest.raises(InvalidKeyError) as exc:
        require_clean("!!!")
    assert exc.value.key == "!!!"
    # InvalidKeyError is also a ValueError
    with pytest.raises(ValueError):
        require_clean("")


def test_original_key_keeps_case_and_punctuation():
    assert original_key("Harry S. Truman") == "Harry S. Truman"
    assert original_key(42) == "42"
