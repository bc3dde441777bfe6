"""paths.py - Mapping sanitized keys onto the directory tree.

A sanitized key is cut to ``key_length_limit`` characters and split into
``piece_length`` chunks. Every chunk becomes a directory below the root node
and the last chunk also names the leaf file:

    encode("johnsmith", root, piece_length=3, key_length_limit=20, suffix=".json")
    -> root/joh/nsm/ith.json   (parent_dir = root/joh/nsm)

Keys that agree on their first ``key_length_limit`` characters share a leaf
file. Their records are kept apart inside it by the original key.
"""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple


class EncodedPath(NamedTuple):
    segments: tuple[str, ...]
    node_name: str
    leaf_name: str
    parent_dir: Path
    node_path: Path
    full_path: Path


def split_pieces(clean: str, piece_length: int, key_length_limit: int = 0) -> list[str]:
    """Truncate to the key-length limit (0 = none) and chunk by piece length."""
    if piece_length < 1:
        raise ValueError(f"piece_length must be positive, got {piece_length}")
    if key_length_limit > 0 and len(clean) > key_length_limit:
        clean = clean[:key_length_limit]
    return [clean[i : i + piece_length] for i in range(0, len(clean), piece_length)]


def encode(
    clean: str,
    root_node: Path,
    piece_length: int,
    key_length_limit: int,
    suffix: str,
) -> EncodedPath:
    """Encode an already sanitized key (or prefix) below ``root_node``.

    The empty string encodes to the root node itself with an empty node name,
    which is what a scan over every key needs.
    """
    segments = tuple(split_pieces(clean, piece_length, key_length_limit))
    node_path = root_node.joinpath(*segments)
    if not segments:
        return EncodedPath((), "", "", root_node, root_node, root_node)
    node_name = segments[-1]
    leaf_name = node_name + suffix
    return EncodedPath(
        segments=segments,
        node_name=node_name,
        leaf_name=leaf_name,
        parent_dir=node_path.parent,
        node_path=node_path,
        full_path=node_path.parent / leaf_name,
    )
