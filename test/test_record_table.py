"""
Tests for the record table engine.
"""
import itertools

import pytest

from core.record_table import (
    RecordTable, TableColumn, TableFilter,
    search_records, filter_records, sort_records, page_window, clamp_page, page_count,
)


def officer_rows(n=3):
    ranks = ['Inspector', 'Constable', 'Sergeant']
    stations = ['Central', 'North']
    return [
        {
            'id': f'OFF-2024-{i:04d}',
            'name': f'Officer {i}',
            'rank': ranks[i % len(ranks)],
            'stationName': stations[i % len(stations)],
            'badge': i,
        }
        for i in range(1, n + 1)
    ]


CRIMINALS = [
    {'id': 'C1', 'firstName': 'John', 'lastName': 'Doe', 'status': 'active', 'gender': 'Male',
     'crimeTypes': ['Theft', 'Fraud'], 'age': 30},
    {'id': 'C2', 'firstName': 'Jane', 'lastName': 'Roe', 'status': 'wanted', 'gender': 'Female',
     'crimeTypes': ['Assault'], 'age': 41},
    {'id': 'C3', 'firstName': 'Ravi', 'lastName': 'Theftson', 'status': 'active', 'gender': 'Male',
     'crimeTypes': [], 'age': 25},
]


def table(page_size=10, filters=None, **kwargs):
    columns = [TableColumn('ID', 'id'), TableColumn('Name', 'name')]
    return RecordTable(columns, filters=filters, page_size=page_size, **kwargs)


class TestSearch:

    def test_case_insensitive_substring_over_string_fields(self):
        result = search_records(CRIMINALS, 'JOHN')
        assert [r['id'] for r in result] == ['C1']

    def test_matches_tags_in_list_fields(self):
        result = search_records(CRIMINALS, 'theft')
        # C1 via crime type tag, C3 via last name
        assert [r['id'] for r in result] == ['C1', 'C3']

    def test_non_string_fields_are_ignored(self):
        assert search_records(CRIMINALS, '41') == []

    def test_empty_term_returns_everything_in_order(self):
        assert search_records(CRIMINALS, '') == CRIMINALS
        assert search_records(CRIMINALS, None) == CRIMINALS

    def test_works_on_objects(self):
        class Row:
            def __init__(self, name):
                self.name = name
                self._secret = 'hidden'

        rows = [Row('Alpha'), Row('Beta')]
        assert search_records(rows, 'bet') == [rows[1]]
        assert search_records(rows, 'hidden') == []


class TestFilters:

    def test_all_sentinel_disables_filter(self):
        assert filter_records(CRIMINALS, {'status': 'all'}) == CRIMINALS
        assert filter_records(CRIMINALS, {'status': None}) == CRIMINALS

    def test_case_insensitive_equality(self):
        result = filter_records(CRIMINALS, {'status': 'ACTIVE'})
        assert [r['id'] for r in result] == ['C1', 'C3']

    def test_filters_compose_with_and(self):
        result = filter_records(CRIMINALS, {'status': 'active', 'gender': 'male'})
        assert [r['id'] for r in result] == ['C1', 'C3']
        assert filter_records(CRIMINALS, {'status': 'wanted', 'gender': 'male'}) == []

    def test_filter_order_does_not_matter(self):
        selections = [('status', 'active'), ('gender', 'Male'), ('crimeTypes', 'Fraud')]
        results = {
            tuple(r['id'] for r in filter_records(CRIMINALS, dict(order)))
            for order in itertools.permutations(selections)
        }
        assert results == {('C1',)}

    def test_list_field_matches_any_element(self):
        result = filter_records(CRIMINALS, {'crimeTypes': 'fraud'})
        assert [r['id'] for r in result] == ['C1']


class TestSort:

    def test_sort_is_stable_and_case_insensitive(self):
        rows = [{'n': 'b', 'i': 1}, {'n': 'A', 'i': 2}, {'n': 'a', 'i': 3}]
        assert [r['i'] for r in sort_records(rows, 'n')] == [2, 3, 1]

    def test_descending_keeps_missing_values_last(self):
        rows = [{'n': 1}, {'n': None}, {'n': 3}]
        assert [r['n'] for r in sort_records(rows, 'n', descending=True)] == [3, 1, None]


class TestPagination:

    def test_page_count(self):
        assert page_count(0, 10) == 0
        assert page_count(10, 10) == 1
        assert page_count(11, 10) == 2

    @pytest.mark.parametrize('requested,expected', [(-3, 1), (0, 1), (2, 2), (99, 3)])
    def test_clamp_page(self, requested, expected):
        assert clamp_page(requested, 3) == expected

    def test_clamp_on_empty_result_is_page_one(self):
        assert clamp_page(5, 0) == 1

    @pytest.mark.parametrize('current,total,expected', [
        (1, 3, [1, 2, 3]),
        (1, 10, [1, 2, 3, 4, 5]),
        (3, 10, [1, 2, 3, 4, 5]),
        (6, 10, [4, 5, 6, 7, 8]),
        (8, 10, [6, 7, 8, 9, 10]),
        (10, 10, [6, 7, 8, 9, 10]),
    ])
    def test_page_window(self, current, total, expected):
        assert page_window(current, total) == expected

    def test_twenty_five_records_page_three(self):
        view = table().view(officer_rows(25), page=3)
        assert view.total == 25
        assert view.total_pages == 3
        assert len(view.rows) == 5
        assert (view.start_index, view.end_index) == (21, 25)
        assert view.has_previous and not view.has_next
        assert view.page_numbers == [1, 2, 3]

    def test_page_beyond_range_is_clamped(self):
        view = table().view(officer_rows(25), page=7)
        assert view.page == 3

    def test_empty_result(self):
        view = table().view(officer_rows(5), search='nobody')
        assert view.rows == []
        assert view.total_pages == 0
        assert view.page == 1
        assert view.empty_message == 'No results found'
        assert (view.start_index, view.end_index) == (0, 0)

    def test_rows_are_a_contiguous_slice_of_the_result(self):
        rows = officer_rows(23)
        t = table(page_size=4)
        collected = []
        for page in range(1, t.view(rows).total_pages + 1):
            collected.extend(t.view(rows, page=page).rows)
        assert collected == rows

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            table(page_size=0)


class TestView:

    def test_cells_headers_and_actions(self):
        t = table(action_renderer=lambda r: ['view'])
        view = t.view(officer_rows(2))
        assert view.headers == ['ID', 'Name']
        assert view.cells[0] == ['OFF-2024-0001', 'Officer 1']
        assert view.actions == [['view'], ['view']]

    def test_list_cells_are_joined(self):
        t = RecordTable([TableColumn('Crimes', 'crimeTypes')])
        assert t.view(CRIMINALS).cells[0] == ['Theft, Fraud']

    def test_filter_options_default_to_distinct_values(self):
        t = table(filters=[TableFilter('stationName', 'Station'), TableFilter('rank', 'Rank', options=['X'])])
        view = t.view(officer_rows(4))
        assert view.filter_options == {'stationName': ['North', 'Central'], 'rank': ['X']}
        assert t.filters[0].all_label == 'All Stations'

    def test_loading_state(self):
        view = table().view(officer_rows(4), is_loading=True)
        assert view.rows == []
        assert view.empty_message == 'Loading...'
        assert view.to_dict()['isLoading'] is True

    def test_row_click(self):
        clicked = []
        t = table(page_size=2, on_row_click=clicked.append)
        view = t.view(officer_rows(5), page=2)
        t.click(view, 1)
        assert clicked == [view.rows[1]]
        assert clicked[0]['id'] == 'OFF-2024-0004'

    def test_to_dict(self):
        data = table(page_size=2).view(officer_rows(3), page=2).to_dict()
        assert data['total'] == 3
        assert data['totalPages'] == 2
        assert data['showingFrom'] == 3
        assert data['showingTo'] == 3
        assert data['emptyMessage'] is None
        assert [r['id'] for r in data['data']] == ['OFF-2024-0003']

    def test_view_does_not_mutate_input(self):
        rows = officer_rows(6)
        snapshot = [dict(r) for r in rows]
        table().view(rows, search='officer', filters={'rank': 'Inspector'}, sort_by='name', descending=True)
        assert rows == snapshot
