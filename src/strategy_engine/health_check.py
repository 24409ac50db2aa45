"""
Health check module for the strategy engine.

Checks store access and collection schema versions, and reports the
integrity gaps the engines tolerate (dangling links, blocking cycles).
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from .alignment import AlignmentQueries
from .config import CONFIG_FILENAME, get_project_root
from .dependencies import DependencyQueries
from .errors import StateEngineError
from .store import EntityStore, schema_version_for
from .store.database import STRATEGY_DIR

logger = logging.getLogger(__name__)


def check_store_health(store: EntityStore) -> dict[str, Any]:
    """
    Check that every stored collection is readable by this release.

    Returns:
        Dictionary with:
        - status: "healthy" | "incompatible" | "error"
        - reason: Explanation
        - collections: Mapping of collection name to stored schema version
    """
    try:
        versions = {name: store.stored_schema_version(name) for name in store.collections()}
    except Exception as e:
        logger.error(f"Error checking store health: {e}")
        return {"status": "error", "reason": str(e), "collections": {}}

    newer = [
        name
        for name, version in versions.items()
        if version is not None and version > schema_version_for(name)
    ]
    if newer:
        return {
            "status": "incompatible",
            "reason": f"Collections written by a newer schema: {', '.join(newer)}",
            "collections": versions,
        }
    return {
        "status": "healthy",
        "reason": f"{len(versions)} collection(s) readable",
        "collections": versions,
    }


def check_alignment_integrity(store: EntityStore) -> dict[str, Any]:
    """
    Report links pointing at removed objectives, metrics or actions.

    Returns:
        Dictionary with status "healthy" | "degraded" | "error"
    """
    try:
        dangling = AlignmentQueries(store).dangling_links()
    except StateEngineError as e:
        return {"status": "error", "reason": e.message, "dangling_links": 0}

    if dangling:
        return {
            "status": "degraded",
            "reason": f"{len(dangling)} link(s) reference removed matrix entries",
            "dangling_links": len(dangling),
        }
    return {"status": "healthy", "reason": "No dangling links", "dangling_links": 0}


def check_dependency_integrity(store: EntityStore) -> dict[str, Any]:
    """
    Report cycles among active blocking dependencies.

    Returns:
        Dictionary with status "healthy" | "degraded" | "error"
    """
    try:
        cycles = DependencyQueries(store).detect_cycles()
    except StateEngineError as e:
        return {"status": "error", "reason": e.message, "cycles": []}

    if cycles:
        return {
            "status": "degraded",
            "reason": f"{len(cycles)} blocking cycle(s) found",
            "cycles": cycles,
        }
    return {"status": "healthy", "reason": "No blocking cycles", "cycles": []}


def check_config_validity(config_path: Path | None = None) -> dict[str, Any]:
    """
    Check the project configuration file parses as YAML.

    Returns:
        Dictionary with status "valid" | "missing" | "invalid"
    """
    path = config_path or get_project_root() / STRATEGY_DIR / CONFIG_FILENAME
    if not path.exists():
        return {"status": "missing", "path": str(path), "reason": "Using defaults"}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return {"status": "invalid", "path": str(path), "reason": f"Invalid YAML: {e}"}

    if data is not None and not isinstance(data, dict):
        return {"status": "invalid", "path": str(path), "reason": "Top level must be a mapping"}
    return {"status": "valid", "path": str(path), "reason": "Configuration parsed"}


def get_health_status(store: EntityStore, config_path: Path | None = None) -> dict[str, Any]:
    """
    Get overall health of the store and engine state.

    Returns:
        Dictionary with:
        - overall: "healthy" | "degraded" | "unhealthy"
        - store, alignment, dependencies, config: individual checks
        - timestamp: Check timestamp (ISO format)
    """
    store_check = check_store_health(store)
    alignment = check_alignment_integrity(store)
    dependencies = check_dependency_integrity(store)
    config = check_config_validity(config_path)

    statuses = [
        store_check.get("status"),
        alignment.get("status"),
        dependencies.get("status"),
        config.get("status"),
    ]

    if any(s in ("error", "incompatible", "invalid") for s in statuses):
        overall = "unhealthy"
    elif all(s in ("healthy", "valid", "missing") for s in statuses):
        overall = "healthy"
    else:
        overall = "degraded"

    return {
        "overall": overall,
        "store": store_check,
        "alignment": alignment,
        "dependencies": dependencies,
        "config": config,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
