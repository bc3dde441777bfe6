"""
FileTrie command line tools

Usage:
    python -m filetrie.cli insert <root> <key> <value>
    python -m filetrie.cli get <root> <key>
    python -m filetrie.cli count <root> <key>
    python -m filetrie.cli remove <root> <key>
    python -m filetrie.cli prefixed <root> [prefix] [--limit N] [--sort MODE]
    python -m filetrie.cli stats <root>
    python -m filetrie.cli demo <root>

Values are parsed as JSON when they can be, otherwise stored as strings.
Results are printed as JSON.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from .constants import SortMode
from .exceptions import FileTrieError
from .logger import configure_logging, get_logger
from .store import FileTrie

logger = get_logger(__name__)

DEMO_ENTRIES = [
    ("John Doe", "john@doe.com"),
    ("JohnDoe", "aasdf@acme.com"),
    ("John Smith", "j0hn@smith.com"),
    ("John Smith", "j0hn@smith.com"),
    ("Jane", "j4ne@acme.com"),
    ("Ihave Novalue", None),
    ("Little-Bobby-Tables", "xkcd@bobbytables.com"),
    ("Harry S. Truman", "trumanh@whitehouse.gov"),
]


def parse_value(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _emit(obj: Any) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def demo(trie: FileTrie) -> dict[str, Any]:
    """Load a handful of contacts and run the usual queries over them."""
    for key, value in DEMO_ENTRIES:
        trie.insert(key, value)
    return {
        "has Jane": trie.has("Jane"),
        "has jane": trie.has("jane"),
        "John Doe": trie.get("John Doe"),
        "prefixed john": trie.prefixed("john"),
        "key ascending": trie.prefixed("", sort=SortMode.KEY_ASC),
        "count descending": trie.prefixed("", sort=SortMode.COUNT_DESC),
        "first 3": trie.prefixed("", 3),
        ".gov only": trie.prefixed(
            "", predicate=lambda key, value, count: ".gov" in str(value)
        ),
        "John Smith count": trie.count("John Smith"),
        "LittleBobbyTables count": trie.count("LittleBobbyTables"),
        "distinct keys": trie.key_count,
    }


def run(args: argparse.Namespace) -> int:
    with FileTrie(args.root) as trie:
        if args.command == "insert":
            ok = trie.insert(args.key, parse_value(args.value))
            _emit({"inserted": ok, "count": trie.count(args.key)})
            return 0 if ok else 1
        if args.command == "get":
            found = trie.record(args.key)
            if found is None:
                return 1
            _emit(found.value)
        elif args.command == "count":
            _emit(trie.count(args.key))
        elif args.command == "remove":
            ok = trie.remove(args.key)
            _emit({"removed": ok})
            return 0 if ok else 1
        elif args.command == "prefixed":
            _emit(trie.prefixed(args.prefix, args.limit, args.sort))
        elif args.command == "stats":
            _emit({"root": str(trie.root), **trie.metadata.to_dict()})
        elif args.command == "demo":
            _emit(demo(trie))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="FileTrie CLI tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    insert_parser = subparsers.add_parser("insert", help="Insert a key")
    insert_parser.add_argument("root", help="Store directory", type=Path)
    insert_parser.add_argument("key")
    insert_parser.add_argument("value", help="JSON value or plain string")

    for name, help_text in (
        ("get", "Print the value of a key"),
        ("count", "Print how often a key was inserted"),
        ("remove", "Remove a key"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("root", help="Store directory", type=Path)
        p.add_argument("key")

    prefixed_parser = subparsers.add_parser("prefixed", help="List keys by prefix")
    prefixed_parser.add_argument("root", help="Store directory", type=Path)
    prefixed_parser.add_argument("prefix", nargs="?", default="")
    prefixed_parser.add_argument("--limit", type=int, default=0)
    prefixed_parser.add_argument(
        "--sort",
        type=SortMode.from_value,
        default=SortMode.NONE,
        help=f"One of: {', '.join(m.name.lower() for m in SortMode)}",
    )

    stats_parser = subparsers.add_parser("stats", help="Show store metadata")
    stats_parser.add_argument("root", help="Store directory", type=Path)

    demo_parser = subparsers.add_parser("demo", help="Fill a store with sample data")
    demo_parser.add_argument("root", help="Store directory", type=Path)

    args = parser.parse_args(argv)
    if args.verbose:
        configure_logging("DEBUG")
    if args.command is None:
        parser.print_help()
        return 2
    try:
        return run(args)
    except FileTrieError as e:
        logger.error(f"[cli] {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
