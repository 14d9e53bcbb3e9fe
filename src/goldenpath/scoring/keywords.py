"""Name tokenization shared by intent scoring and reporting."""

from __future__ import annotations

import re
from collections.abc import Iterable

from goldenpath.inbound import CommitAnalysis
from goldenpath.models import MethodNode
from goldenpath.scoring._constants import _MIN_KEYWORD_LENGTH

_CAMEL_BOUNDARY = re.compile(r"(?=[A-Z])")


def split_camel_case(name: str) -> list[str]:
    """``"createUserOrder"`` -> ``["create", "user", "order"]``; short fragments dropped."""
    return [p.lower() for p in _CAMEL_BOUNDARY.split(name) if len(p) >= _MIN_KEYWORD_LENGTH]


def method_keywords(method: MethodNode) -> set[str]:
    return set(split_camel_case(method.method_name)) | set(split_camel_case(method.class_name))


def path_keywords(methods: Iterable[MethodNode]) -> set[str]:
    keywords: set[str] = set()
    for m in methods:
        keywords |= method_keywords(m)
    return keywords


def commit_keywords(history: Iterable[CommitAnalysis]) -> set[str]:
    return {k.lower() for commit in history for k in commit.keywords}
