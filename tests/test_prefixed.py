import random

import pytest

from filetrie.constants import SortMode
from filetrie.keys import sanitize
from filetrie.scanner import ScanContext, scan

ALL_KEYS = {
    "John Doe",
    "JohnDoe",
    "John Smith",
    "Jane",
    "Ihave Novalue",
    "Little-Bobby-Tables",
    "Harry S. Truman",
}


def test_scenario(contacts):
    assert contacts.has("Jane")
    assert contacts.has("jane") == contacts.has("Jane")
    assert contacts.count("jane") == 1
    assert contacts.get("JANE") == "j4ne@acme.com"
    assert contacts.count("John Smith") == 2
    assert set(contacts.prefixed("john")) == {"John Doe", "JohnDoe", "John Smith"}
    assert contacts.prefixed("JOHN") == contacts.prefixed("john")
    assert contacts.key_count == len(ALL_KEYS)


def test_prefixed_values(contacts):
    assert contacts.prefixed("john s") == {"John Smith": "j0hn@smith.com"}


@pytest.mark.parametrize(
    "prefix, expected",
    [
        ("", ALL_KEYS),
        ("J", {"John Doe", "JohnDoe", "John Smith", "Jane"}),
        ("ja", {"Jane"}),
        ("johnd", {"John Doe", "JohnDoe"}),
        ("johndoe", {"John Doe", "JohnDoe"}),
        ("Little Bobby", {"Little-Bobby-Tables"}),
        ("harrystrumanjr", set()),
        ("xyz", set()),
        ("xyzabcdef", set()),
    ],
)
def test_prefix_membership(contacts, prefix, expected):
    assert set(contacts.prefixed(prefix)) == expected


def test_prefix_matches_sanitized_startswith(contacts):
    for prefix in ["", "j", "jo", "joh", "john", "johns", "l", "lit", "h", "i", "z"]:
        expected = {k for k in ALL_KEYS if sanitize(k).startswith(sanitize(prefix))}
        assert set(contacts.prefixed(prefix)) == expected, prefix


def test_prefix_longer_than_key_length_limit(make_trie):
    trie = make_trie(key_length_limit=6)
    trie.insert("abcdefONE", 1)
    trie.insert("abcdefTWO", 2)
    assert trie.prefixed("abcdefo") == {"abcdefONE": 1}
    assert set(trie.prefixed("abcdef")) == {"abcdefONE", "abcdefTWO"}


def test_suffix_look_alike_is_not_a_match(make_trie):
    trie = make_trie(suffix="json")
    trie.insert("ab", 1)
    trie.insert("abjz", 2)
    assert (trie.root_node / "abjson").is_file()
    assert trie.prefixed("abj") == {"abjz": 2}


def test_limit(contacts):
    for mode in SortMode:
        if mode in (SortMode.VALUE_ASC, SortMode.VALUE_DESC):
            continue
        result = contacts.prefixed("", 3, mode)
        assert len(result) == 3, mode
        assert set(result) <= ALL_KEYS


def test_zero_limit_is_unbounded(contacts):
    assert len(contacts.prefixed("", 0)) == len(ALL_KEYS)


def test_predicate(contacts):
    result = contacts.prefixed("", predicate=lambda key, value, count: ".gov" in str(value))
    assert result == {"Harry S. Truman": "trumanh@whitehouse.gov"}


def test_predicate_receives_counts(contacts):
    seen = {}

    def remember(key, value, count):
        seen[key] = count
        return count > 1

    assert set(contacts.prefixed("john", predicate=remember)) == {"John Smith"}
    assert seen == {"John Doe": 1, "JohnDoe": 1, "John Smith": 2}


def test_rejected_records_do_not_use_up_the_limit(contacts):
    result = contacts.prefixed("", 2, predicate=lambda k, v, c: k.startswith("John"))
    assert len(result) == 2
    assert all(k.startswith("John") for k in result)


def test_scan_stops_at_limit(contacts):
    calls = []
    contacts.prefixed("", 2, predicate=lambda k, v, c: calls.append(k) or True)
    assert len(calls) == 2


def test_random_scan_gathers_scaled_pool(contacts):
    calls = []
    contacts.random_pool_factor = 10
    result = contacts.prefixed(
        "", 2, SortMode.RANDOM, predicate=lambda k, v, c: calls.append(k) or True
    )
    assert len(result) == 2
    assert len(calls) == len(ALL_KEYS)


def test_random_is_reproducible_with_rng(contacts):
    first = list(contacts.prefixed("", 4, SortMode.RANDOM, rng=random.Random(7)))
    second = list(contacts.prefixed("", 4, SortMode.RANDOM, rng=random.Random(7)))
    assert first == second
    assert len(first) == 4


def test_sort_by_key(contacts):
    assert list(contacts.prefixed("", sort=SortMode.KEY_ASC)) == sorted(ALL_KEYS)
    assert list(contacts.prefixed("", sort="key_desc")) == sorted(ALL_KEYS, reverse=True)


def test_sort_by_count(contacts):
    counts = [r.count for r in contacts.scan("", sort=SortMode.COUNT_DESC)]
    assert counts == sorted(counts, reverse=True)
    assert contacts.scan("", sort=SortMode.COUNT_DESC)[0].key == "John Smith"
    counts = [r.count for r in contacts.scan("", sort=SortMode.COUNT_ASC)]
    assert counts == sorted(counts)


def test_sort_by_value(contacts):
    contacts.remove("Ihave Novalue")
    values = list(contacts.prefixed("", sort=SortMode.VALUE_ASC).values())
    assert values == sorted(values)
    values = list(contacts.prefixed("", sort=SortMode.VALUE_DESC).values())
    assert values == sorted(values, reverse=True)


def test_nested_scans_do_not_share_state(contacts):
    inner_sizes = []

    def nested(key, value, count):
        inner_sizes.append(len(contacts.prefixed("j")))
        return True

    outer = contacts.prefixed("", 5, predicate=nested)
    assert len(outer) == 5
    assert inner_sizes == [4] * 5


def test_scan_function_returns_context(contacts):
    ctx = scan(
        contacts.root_node,
        "john",
        contacts.piece_length,
        contacts.key_length_limit,
        contacts.suffix,
    )
    assert isinstance(ctx, ScanContext)
    assert ctx.prefix == "john"
    assert ctx.files_read == 2
    assert {r.key for r in ctx.results} == {"John Doe", "JohnDoe", "John Smith"}


def test_scan_on_empty_store(trie):
    assert trie.prefixed("") == {}
    assert trie.prefixed("abc", 5, SortMode.RANDOM) == {}


def test_scan_skips_stray_files(trie):
    trie.insert("abcdef", 1)
    (trie.root_node / "abc" / "notes.txt").write_text("not a record")
    assert trie.prefixed("abc") == {"abcdef": 1}
