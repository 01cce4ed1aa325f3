"""
Generic record table engine.

Turns an in-memory list of homogeneous records (dicts or objects) into a
searched, filtered, sorted and paginated view, driven by column and filter
descriptors so the same engine serves every list page (stations, officers,
criminals, FIRs).

Pipeline: search -> filters -> optional sort -> pagination. Search and filters
are independent predicates, so the order in which filters are applied never
changes the result set. The engine is a pure function of its inputs.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

ALL = "all"
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_BUTTONS = 5

Accessor = Union[str, Callable[[Any], Any]]


def field_value(record: Any, name: str) -> Any:
    """Read a field from a dict record or an attribute from an object record."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def record_fields(record: Any) -> Dict[str, Any]:
    """All public fields of a record."""
    if isinstance(record, Mapping):
        return dict(record)
    return {k: v for k, v in vars(record).items() if not k.startswith("_")}


def _text_values(value: Any) -> List[str]:
    """String content of a field: the string itself, or the string elements of a list."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set)):
        return [v for v in value if isinstance(v, str)]
    return []


def matches_search(record: Any, term: str) -> bool:
    """True if any string field of the record contains term (case-insensitive)."""
    needle = term.lower()
    return any(
        needle in text.lower()
        for value in record_fields(record).values()
        for text in _text_values(value)
    )


def matches_filter(record: Any, field_name: str, selected: str) -> bool:
    """True if the field equals the selected option (case-insensitive)."""
    wanted = selected.lower()
    return any(text.lower() == wanted for text in _text_values(field_value(record, field_name)))


def active_filters(filters: Optional[Mapping[str, Optional[str]]]) -> Dict[str, str]:
    """Drop empty selections and the "all" sentinel."""
    if not filters:
        return {}
    return {
        name: value for name, value in filters.items()
        if value and value.lower() != ALL
    }


def search_records(records: Iterable[Any], term: Optional[str]) -> List[Any]:
    records = list(records)
    if not term:
        return records
    return [r for r in records if matches_search(r, term)]


def filter_records(records: Iterable[Any], filters: Optional[Mapping[str, Optional[str]]]) -> List[Any]:
    result = list(records)
    for name, value in active_filters(filters).items():
        result = [r for r in result if matches_filter(r, name, value)]
    return result


def _sort_key(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    return value


def sort_records(records: Sequence[Any], field_name: str, descending: bool = False) -> List[Any]:
    """Stable sort on one field. Records with no value always go last."""
    present = [r for r in records if field_value(r, field_name) is not None]
    missing = [r for r in records if field_value(r, field_name) is None]
    present.sort(key=lambda r: _sort_key(field_value(r, field_name)), reverse=descending)
    return present + missing


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total else 0


def clamp_page(page: int, total_pages: int) -> int:
    """Keep the page index inside [1, total_pages]; an empty result is page 1."""
    if total_pages <= 0:
        return 1
    return min(max(page, 1), total_pages)


def page_window(current: int, total_pages: int, max_buttons: int = MAX_PAGE_BUTTONS) -> List[int]:
    """
    Page numbers to show as buttons.

    First pages near the start, last pages near the end, otherwise a window
    centred on the current page.
    """
    if total_pages <= max_buttons:
        return list(range(1, total_pages + 1))
    half = max_buttons // 2
    if current <= half + 1:
        start = 1
    elif current >= total_pages - half:
        start = total_pages - max_buttons + 1
    else:
        start = current - half
    return list(range(start, start + max_buttons))


@dataclass
class TableColumn:
    """Column descriptor: header label, value accessor and optional cell renderer."""
    label: str
    accessor: Accessor
    render: Optional[Callable[[Any], Any]] = None

    def value(self, record: Any) -> Any:
        if callable(self.accessor):
            return self.accessor(record)
        return field_value(record, self.accessor)

    def cell(self, record: Any) -> Any:
        if self.render is not None:
            return self.render(record)
        value = self.value(record)
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return str(value)


@dataclass
class TableFilter:
    """Categorical filter descriptor. Options default to the distinct values in the data."""
    field: str
    label: str
    options: Optional[List[str]] = None

    @property
    def all_label(self) -> str:
        return f"All {self.label}s"

    def resolve_options(self, records: Iterable[Any]) -> List[str]:
        if self.options is not None:
            return list(self.options)
        seen: List[str] = []
        for record in records:
            for text in _text_values(field_value(record, self.field)):
                if text not in seen:
                    seen.append(text)
        return seen


@dataclass
class TableView:
    """One rendered page of a record table."""
    rows: List[Any]
    cells: List[List[Any]]
    actions: List[Any]
    total: int
    total_pages: int
    page: int
    page_size: int
    page_numbers: List[int]
    headers: List[str]
    filter_options: Dict[str, List[str]] = field(default_factory=dict)
    is_loading: bool = False

    @property
    def start_index(self) -> int:
        """1-based index of the first row on this page (0 when empty)."""
        if not self.rows:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        if not self.rows:
            return 0
        return min(self.page * self.page_size, self.total)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def empty_message(self) -> Optional[str]:
        if self.is_loading:
            return "Loading..."
        if not self.rows:
            return "No results found"
        return None

    def to_dict(self, serialize: Optional[Callable[[Any], Any]] = None) -> Dict[str, Any]:
        serialize = serialize or (lambda r: r)
        return {
            "data": [serialize(r) for r in self.rows],
            "headers": self.headers,
            "cells": self.cells,
            "actions": self.actions,
            "total": self.total,
            "totalPages": self.total_pages,
            "page": self.page,
            "pageSize": self.page_size,
            "pageNumbers": self.page_numbers,
            "showingFrom": self.start_index,
            "showingTo": self.end_index,
            "hasPrevious": self.has_previous,
            "hasNext": self.has_next,
            "filterOptions": self.filter_options,
            "isLoading": self.is_loading,
            "emptyMessage": self.empty_message,
        }


class RecordTable:
    """Searchable, filterable, paginated view over a list of records."""

    def __init__(
        self,
        columns: List[TableColumn],
        filters: Optional[List[TableFilter]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        on_row_click: Optional[Callable[[Any], Any]] = None,
        action_renderer: Optional[Callable[[Any], Any]] = None,
    ):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.columns = columns
        self.filters = filters or []
        self.page_size = page_size
        self.on_row_click = on_row_click
        self.action_renderer = action_renderer

    @property
    def filter_fields(self) -> List[str]:
        return [f.field for f in self.filters]

    def apply(
        self,
        records: Iterable[Any],
        search: Optional[str] = None,
        filters: Optional[Mapping[str, Optional[str]]] = None,
    ) -> List[Any]:
        """Search first, then every active filter. Original order is preserved."""
        return filter_records(search_records(records, search), filters)

    def view(
        self,
        records: Iterable[Any],
        search: Optional[str] = None,
        filters: Optional[Mapping[str, Optional[str]]] = None,
        page: int = 1,
        sort_by: Optional[str] = None,
        descending: bool = False,
        is_loading: bool = False,
    ) -> TableView:
        records = list(records)
        headers = [c.label for c in self.columns]
        filter_options = {f.field: f.resolve_options(records) for f in self.filters}

        if is_loading:
            return TableView(
                rows=[], cells=[], actions=[], total=0, total_pages=0, page=1,
                page_size=self.page_size, page_numbers=[], headers=headers,
                filter_options=filter_options, is_loading=True,
            )

        matched = self.apply(records, search, filters)
        if sort_by:
            matched = sort_records(matched, sort_by, descending)

        total = len(matched)
        total_pages = page_count(total, self.page_size)
        current = clamp_page(page, total_pages)
        start = (current - 1) * self.page_size
        rows = matched[start:start + self.page_size]

        return TableView(
            rows=rows,
            cells=[[c.cell(r) for c in self.columns] for r in rows],
            actions=[self.action_renderer(r) for r in rows] if self.action_renderer else [],
            total=total,
            total_pages=total_pages,
            page=current,
            page_size=self.page_size,
            page_numbers=page_window(current, total_pages),
            headers=headers,
            filter_options=filter_options,
        )

    def click(self, view: TableView, index: int) -> Any:
        """Invoke the row-click handler for the row at index on the given page."""
        if self.on_row_click is None:
            return None
        return self.on_row_click(view.rows[index])
