"""
Seed snapshot loading.

The console starts from a JSON snapshot of every collection. A copy ships
with the package; ``ADMIN_SEED_PATH`` (see ``utils.config``) or an explicit
path points at another one.
"""

import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .models.entities import (
    ChatMessage,
    Conversation,
    DashboardStats,
    Instructor,
    Package,
    Settings,
    Student,
    Transaction,
)
from .models.state import AdminState
from .store.projector import derive_stats
from .utils.file_utils import load_json
from .validation.state_validator import SeedValidator, StatsValidator


logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = Path(__file__).parent / "data" / "seed.json"

_COLLECTIONS = {
    "students": Student,
    "instructors": Instructor,
    "transactions": Transaction,
    "conversations": Conversation,
    "messages": ChatMessage,
    "packages": Package,
}


def _build_collection(data: Dict[str, Any], collection: str) -> tuple:
    record_cls = _COLLECTIONS[collection]
    items = data.get(collection, [])
    if not isinstance(items, list):
        raise ValueError(f"Seed {collection} must be a list, got {type(items).__name__}")

    records = []
    for index, item in enumerate(items):
        try:
            records.append(record_cls.from_dict(item))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            record_id = item.get("id", f"#{index}") if isinstance(item, dict) else f"#{index}"
            raise ValueError(f"Invalid {collection} record {record_id}: {e!r}") from e
    return tuple(records)


def state_from_seed(data: Dict[str, Any], today: Optional[date] = None) -> AdminState:
    """
    Build and validate a state tree from a seed dictionary.

    Args:
        data: Seed dictionary (see ``AdminState.to_dict`` for the format)
        today: Reference day for derived monthly revenue

    Returns:
        Validated AdminState. When the seed carries no ``dashboard_stats``
        they are derived from the collections.

    Raises:
        ValueError: If a record cannot be parsed or the snapshot is
            inconsistent
    """
    if not isinstance(data, dict):
        raise ValueError(f"Seed must be a JSON object, got {type(data).__name__}")

    state = AdminState(
        **{name: _build_collection(data, name) for name in _COLLECTIONS},
        settings=Settings.from_dict(data.get("settings") or {}),
        dashboard_stats=DashboardStats.from_dict(data.get("dashboard_stats") or {}),
    )

    validation = SeedValidator().validate(state)
    if not validation.is_valid:
        raise ValueError(f"Seed validation failed:\n{validation.get_summary()}")

    if "dashboard_stats" not in data:
        logger.info("Seed has no dashboard_stats; deriving them from the collections")
        return replace(state, dashboard_stats=derive_stats(state, today))

    stats_validation = StatsValidator(today).validate(state)
    for warning in stats_validation.warnings:
        logger.warning(f"Seed stats: {warning}")
    if not stats_validation.is_valid:
        raise ValueError(f"Seed stats are inconsistent:\n{stats_validation.get_summary()}")

    return state


def load_seed(
    path: Optional[Union[str, Path]] = None,
    today: Optional[date] = None,
) -> AdminState:
    """
    Load the initial state from a JSON seed file.

    Args:
        path: Seed file (default: the bundled seed)
        today: Reference day for derived monthly revenue

    Returns:
        Validated initial AdminState

    Raises:
        ValueError: If the file is missing, malformed or inconsistent

    Examples:
        >>> state = load_seed()
        >>> len(state.students)
        6
    """
    seed_path = Path(path) if path else DEFAULT_SEED_PATH
    data = load_json(seed_path, required=True)
    state = state_from_seed(data, today)

    logger.info(
        f"Loaded seed {seed_path.name}: {len(state.students)} students, "
        f"{len(state.instructors)} instructors, {len(state.transactions)} transactions, "
        f"{len(state.conversations)} conversations, {len(state.packages)} packages"
    )
    return state
