"""
Helpers shared by the record routers: serialization and /table responses.
"""
import enum
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.record_table import RecordTable, TableColumn, TableFilter
from database.models import User, UserRole
import config

WRITE_ACTIONS = ["view", "edit", "delete"]
READ_ACTIONS = ["view"]


def iso(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def enum_value(value: Any) -> Any:
    return value.value if isinstance(value, enum.Enum) else value


def actor_name(user: User) -> str:
    """Label recorded as the actor on activity entries."""
    return user.display_name


def can_write(user: User, roles: Iterable[UserRole]) -> bool:
    return user.role in tuple(roles)


def table_response(
    records: List[Dict[str, Any]],
    columns: List[TableColumn],
    filters: List[TableFilter],
    selected: Dict[str, Optional[str]],
    search: Optional[str] = None,
    page: int = 1,
    sort_by: Optional[str] = None,
    sort_dir: str = "asc",
    actions: Optional[Callable[[Any], Any]] = None,
) -> Dict[str, Any]:
    """
    Run serialized (camelCase) records through the table engine.

    Args:
        records: Serialized rows; search, filters and sortBy address their keys
        selected: Filter field -> chosen option ("all" or None disables)
        page: Requested page, clamped; the page size is fixed at config.TABLE_PAGE_SIZE
        sort_dir: "asc" or "desc"
    """
    table = RecordTable(columns=columns, filters=filters, page_size=config.TABLE_PAGE_SIZE, action_renderer=actions)
    view = table.view(
        records,
        search=search,
        filters=selected,
        page=page,
        sort_by=sort_by,
        descending=(sort_dir or "").lower() == "desc",
    )
    return view.to_dict()
