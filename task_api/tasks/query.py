from collections.abc import Mapping
from datetime import datetime

from task_api.common.current_datetime import as_utc
from task_api.common.exceptions import ValidationException
from task_api.tasks.schemas import SortDirection, SortField, TaskQuery

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50

SORT_FIELDS: dict[str, SortField] = {
    "due_date": SortField.DUE_DATE,
    "created_at": SortField.CREATED_AT,
    "updated_at": SortField.UPDATED_AT,
    "title": SortField.TITLE,
    "status": SortField.STATUS,
}


def _parse_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_date(name: str, value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return as_utc(datetime.fromisoformat(value.strip()))
    except ValueError as e:
        raise ValidationException(f"Invalid {name}") from e


def build_task_query(params: Mapping[str, str], owner_id: str) -> TaskQuery:
    """
    Build a bounded task query from raw request parameters.

    ``page`` and ``limit`` never fail: unparsable values fall back to their
    defaults and ``limit`` is clamped into ``[1, MAX_LIMIT]``. Unknown
    ``sort_by`` values sort by creation time, and anything other than
    ``sort_order=asc`` sorts descending.

    The owner filter always comes from ``owner_id``; request parameters
    cannot widen it.
    """
    page = max(_parse_int(params.get("page"), DEFAULT_PAGE), 1)
    limit = min(max(_parse_int(params.get("limit"), DEFAULT_LIMIT), 1), MAX_LIMIT)

    sort_field = SORT_FIELDS.get(params.get("sort_by") or "", SortField.CREATED_AT)
    sort_direction = (
        SortDirection.ASC if params.get("sort_order") == "asc" else SortDirection.DESC
    )

    return TaskQuery(
        owner_id=owner_id,
        status=params.get("status") or None,
        due_date_after=_parse_date("due_date_after", params.get("due_date_after")),
        due_date_before=_parse_date("due_date_before", params.get("due_date_before")),
        search=params.get("search") or None,
        sort_field=sort_field,
        sort_direction=sort_direction,
        page=page,
        limit=limit,
    )
