"""Operations on nested JSON documents addressed by path segments."""

from __future__ import annotations

import copy
import typing as t

from notenbuch.lib.json import JSONValue

Tree = dict[str, JSONValue]


def is_empty(value: JSONValue) -> bool:
    return value is None or (isinstance(value, (dict, list)) and not value)


def lookup(node: JSONValue, segments: t.Sequence[str]) -> JSONValue:
    for segment in segments:
        if isinstance(node, dict) and segment in node:
            node = node[segment]
        elif isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
            node = node[int(segment)]
        else:
            return None
    return copy.deepcopy(node)


def as_tree(value: JSONValue) -> Tree:
    """`value` as a mapping: lists become index-keyed, scalars are dropped."""
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        return {str(i): v for i, v in enumerate(value) if v is not None}
    return {}


def insert(root: Tree, segments: t.Sequence[str], value: JSONValue) -> None:
    """Place `value` at `segments` below `root`, creating mappings on the way.

    A list standing in the way becomes an index-keyed mapping, and a scalar is
    replaced.
    """
    *parents, leaf = segments
    node = root
    for segment in parents:
        child = as_tree(node.get(segment))
        node[segment] = child
        node = child
    node[leaf] = copy.deepcopy(value)


def delete(root: Tree, segments: t.Sequence[str]) -> bool:
    """Remove the node at `segments` and prune mappings left empty.

    Returns:
        True if a node was removed
    """
    trail: list[tuple[Tree, str]] = []
    node: JSONValue = root
    for segment in segments:
        if not isinstance(node, dict) or segment not in node:
            return False
        trail.append((node, segment))
        node = node[segment]

    # an emptied node ceases to exist, so keep pruning upwards
    for parent, segment in reversed(trail):
        parent.pop(segment, None)
        if parent:
            break
    return True
