#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Turn flat result rows into nested dictionaries.

Column labels built by :func:`anydb_sql.model.naming.all_of` look like
``users.posts[].id##``. Normalization splits them on dots, drops the
primary key marker and turns ``[]`` segments into lists::

    >>> normalize({'users.id##': 1, 'users.posts[].title': 'Hi'})
    {'users': {'id': 1, 'posts': [{'title': 'Hi'}]}}
"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

from typing import Mapping

from anydb_sql.commons.constants import (
    MANY_MARKER,
    PATH_SEPARATOR,
    PRIMARY_KEY_MARKER,
)


def normalize(row: Mapping) -> dict:
    """Unflatten a result row.

    Keys are placed shortest path first. A key that would clash with a
    value already placed is kept flat, so the result does not depend on
    key order. Many-valued parts whose values are all ``None``, as
    produced by outer joins with no match, become empty lists.

    :param row: a mapping of column labels to values
    :return: a new dictionary
    """
    result = {}
    many = []
    for key, value in sorted(row.items(), key=_depth):
        if not isinstance(key, str):
            result[key] = value
            continue
        *path, leaf = key.split(PATH_SEPARATOR)
        node = result
        for segment in path:
            node = _child(node, segment, many)
            if node is None:
                break
        leaf = _strip(leaf, PRIMARY_KEY_MARKER)
        if node is None or leaf in node:
            result[key] = value
        else:
            node[leaf] = value

    for parent, name in many:
        if _all_none(parent[name][0]):
            parent[name] = []
    return result


def _depth(item):
    key = item[0]
    return key.count(PATH_SEPARATOR) if isinstance(key, str) else 0


def _child(node, segment, many):
    name = _strip(segment, MANY_MARKER)
    is_many = name != segment
    child = node.get(name)
    if child is None and name not in node:
        if is_many:
            node[name] = [{}]
            many.append((node, name))
            return node[name][0]
        node[name] = {}
        return node[name]
    if is_many and isinstance(child, list) and child and isinstance(child[0], dict):
        return child[0]
    if not is_many and isinstance(child, dict):
        return child
    return None


def _strip(name, suffix):
    if name.endswith(suffix) and len(name) > len(suffix):
        return name[: -len(suffix)]
    return name


def _all_none(value):
    if isinstance(value, dict):
        return all(_all_none(v) for v in value.values())
    if isinstance(value, list):
        return all(_all_none(v) for v in value)
    return value is None
