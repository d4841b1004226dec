import pytest

from socialgraph.core.phone import (
    HASH_HEX_LENGTH,
    HASH_VERSION,
    hash_phone,
    hash_phone_v1,
    normalize_phone,
)

# Shared with the device app; changing any of these breaks every match
GOLDEN_V1 = {
    "5551234567": "3c95277da5fd0da6a1a44ee3fdf56d20af6c6d242695a40e18e6e90dc3c5872c",
    "5551112222": "b1ff90468e28ccae2fe9ea0cc8f88c6255736d8368eaeea2349c05bcfbd44c53",
    "12345": "5994471abb01112afcc18159f6cc74b4f511b99806da59b3caf5a9c173cacfc5",
    "": "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
}


@pytest.mark.parametrize("raw, expected", GOLDEN_V1.items())
def test_golden_vectors(raw, expected):
    assert hash_phone_v1(raw) == expected


def test_default_is_v1():
    assert HASH_VERSION == 1
    assert hash_phone is hash_phone_v1


@pytest.mark.parametrize(
    "raw",
    ["+1 (555) 123-4567", "5551234567", "15551234567", "555.123.4567", "+44 0 555 123 4567"],
)
def test_formatting_and_country_code_do_not_matter(raw):
    assert hash_phone(raw) == GOLDEN_V1["5551234567"]


def test_only_last_ten_digits_count():
    assert normalize_phone("0015551234567") == "5551234567"
    assert hash_phone("9995551234567") == hash_phone("5551234567")
    assert hash_phone("5551234568") != hash_phone("5551234567")


def test_short_numbers_hash_on_what_they_have():
    assert normalize_phone("12-345") == "12345"
    assert hash_phone("12-345") == GOLDEN_V1["12345"]


def test_garbage_is_not_an_error():
    assert hash_phone("not a phone") == GOLDEN_V1[""]
    # Non-ASCII digits are stripped like any other non-digit
    assert normalize_phone("٥٥٥ 123") == "123"


def test_digest_shape():
    digest = hash_phone("+1 555 123 4567")
    assert len(digest) == HASH_HEX_LENGTH
    assert digest == digest.lower()
    int(digest, 16)
