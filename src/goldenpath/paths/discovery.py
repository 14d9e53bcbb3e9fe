"""Candidate path discovery: every entry-point route that reaches a changed method."""

from __future__ import annotations

import logging
from collections.abc import Collection

from goldenpath.defaults import DEFAULT_MAX_PATH_DEPTH, DEFAULT_MAX_PATHS
from goldenpath.graph import GraphStore
from goldenpath.models import CallPath

log = logging.getLogger("goldenpath.paths")


def _paths_to(store: GraphStore, target: str, max_depth: int, max_paths: int) -> list[CallPath]:
    paths = [
        p
        for entry in store.entry_points()
        for p in store.find_paths(entry.id, target, max_depth, max_paths)
    ]
    if paths:
        return paths
    # Unreachable from any entry point within max_depth: score the method alone
    alone = store.build_path(target, [target])
    return [alone] if alone is not None else []


def discover_candidate_paths(
    store: GraphStore,
    changed_method_ids: Collection[str],
    max_depth: int = DEFAULT_MAX_PATH_DEPTH,
    max_paths: int = DEFAULT_MAX_PATHS,
) -> list[CallPath]:
    """Paths from entry points (controllers and uncalled methods) to changed methods.

    Duplicate method sequences are dropped and the survivors renumbered
    ``path_0``, ``path_1``, ... in discovery order. Unknown changed ids are
    ignored.
    """
    seen: set[tuple[str, ...]] = set()
    found: list[CallPath] = []
    with store.locked():
        targets = sorted(m for m in set(changed_method_ids) if store.has_method(m))
        for target in targets:
            for path in _paths_to(store, target, max_depth, max_paths):
                key = tuple(path.method_ids)
                if key in seen:
                    continue
                seen.add(key)
                path.id = f"path_{len(found)}"
                found.append(path)
                if len(found) >= max_paths:
                    log.info("Candidate path limit %d reached", max_paths, extra={"path_count": len(found)})
                    return found
    log.debug("Discovered %d candidate paths", len(found), extra={"path_count": len(found)})
    return found
