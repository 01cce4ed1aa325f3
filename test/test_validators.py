"""
Input validator tests.
"""
from datetime import date, datetime

import pytest

from core.exceptions import ValidationError
from core.validators import parse_date, pick_fields


class TestParseDate:

    @pytest.mark.parametrize('value', [
        '2024-05-01',
        ' 2024-05-01 ',
        '2024-05-01T10:30:00',
        '2024-05-01T10:30:00.123',
        '2024-05-01T10:30:00Z',
        '2024-05-01T10:30:00+05:30',
        '2024-05-01 10:30',
        date(2024, 5, 1),
        datetime(2024, 5, 1, 23, 59),
    ])
    def test_accepted(self, value):
        assert parse_date(value, 'date_filed') == date(2024, 5, 1)

    @pytest.mark.parametrize('value', [
        '2024-05-01garbage',
        '2024-05-01T99:00',
        '2024-02-30',
        '01/05/2024',
        '',
        '   ',
        None,
        20240501,
    ])
    def test_rejected(self, value):
        with pytest.raises(ValidationError) as exc:
            parse_date(value, 'date_filed')
        assert exc.value.field == 'date_filed'


class TestPickFields:

    def test_none_means_absent(self):
        data = {'name': 'A', 'contact': None, 'officer_count': 3}
        assert pick_fields(data, ('name', 'contact')) == {'name': 'A'}

    def test_nullable_keeps_explicit_none(self):
        data = {'user_id': None, 'status': None}
        assert pick_fields(data, ('user_id', 'status'), nullable=('user_id',)) == {'user_id': None}
