"""Structural signals read off a call path's methods and edges."""

from __future__ import annotations

from goldenpath.defaults import (
    BUSINESS_TERMS,
    CORE_BUSINESS_ENTITIES,
    DATA_ACCESS_LAYERS,
    DATA_MODEL_LAYERS,
    LAYER_VIOLATIONS,
)
from goldenpath.models import BlockType, CallPath

_MAPPING_ANNOTATION = "mapping"
_REST_ANNOTATIONS = ("restcontroller", "getmapping", "postmapping", "putmapping", "deletemapping", "patchmapping")
_EXTERNAL_API_ANNOTATIONS = ("feignclient", "resttemplate")
_SENSITIVE_ANNOTATIONS = ("secured", "preauthorize", "rolesallowed", "encrypted", "sensitive")


def has_new_endpoint(path: CallPath) -> bool:
    return any(
        m.block_type == BlockType.CONTROLLER and m.has_annotation(_MAPPING_ANNOTATION)
        for m in path.methods
    )


def is_restful_endpoint(path: CallPath) -> bool:
    return any(m.has_annotation(*_REST_ANNOTATIONS) for m in path.methods)


def has_data_model_changes(path: CallPath) -> bool:
    return any(m.block_type.value in DATA_MODEL_LAYERS for m in path.methods)


def is_core_business_entity(path: CallPath) -> bool:
    return any(
        m.block_type == BlockType.ENTITY and any(name in m.id for name in CORE_BUSINESS_ENTITIES)
        for m in path.methods
    )


def has_database_operations(path: CallPath) -> bool:
    return any(m.block_type.value in DATA_ACCESS_LAYERS for m in path.methods)


def has_transactional_operations(path: CallPath) -> bool:
    return any(m.has_annotation("transactional") for m in path.methods)


def has_external_api_calls(path: CallPath) -> bool:
    return any(m.has_annotation(*_EXTERNAL_API_ANNOTATIONS) for m in path.methods)


def has_sensitive_annotations(path: CallPath) -> bool:
    return any(m.has_annotation(*_SENSITIVE_ANNOTATIONS) for m in path.methods)


def layer_violation_type(path: CallPath) -> str | None:
    """``"CONTROLLER->REPOSITORY"`` style label of the first forbidden call, if any."""
    by_id = {m.id: m for m in path.methods}
    for edge in path.present_edges:
        caller, callee = by_id.get(edge.caller_id), by_id.get(edge.callee_id)
        if caller is None or callee is None:
            continue
        pair = (caller.block_type.value, callee.block_type.value)
        if pair in LAYER_VIOLATIONS:
            return f"{pair[0]}->{pair[1]}"
    return None


def has_layer_violation(path: CallPath) -> bool:
    return layer_violation_type(path) is not None


def has_circular_dependency(path: CallPath) -> bool:
    ids = path.method_ids
    return len(ids) != len(set(ids))


def path_test_coverage(path: CallPath) -> float:
    """Fraction of path methods that have tests."""
    if not path.methods:
        return 0.0
    return sum(1 for m in path.methods if m.has_tests) / len(path.methods)


def average_complexity(path: CallPath) -> float:
    if not path.methods:
        return 0.0
    return sum(m.cyclomatic_complexity for m in path.methods) / len(path.methods)


def average_method_length(path: CallPath) -> float:
    if not path.methods:
        return 0.0
    return sum(m.lines_of_code for m in path.methods) / len(path.methods)


def business_terms(path: CallPath) -> list[str]:
    """Business vocabulary found in the path's method names, in lexicon order."""
    names = [m.method_name.lower() for m in path.methods]
    return [term for term in BUSINESS_TERMS if any(term in n for n in names)]
