import pytest

from core.pagination import pagination_meta, parse_pagination


@pytest.mark.parametrize('params, expected', [
    ({}, (1, 10)),
    ({'page': '3', 'limit': '20'}, (3, 20)),
    ({'page': '0'}, (1, 10)),
    ({'page': '-2'}, (1, 10)),
    ({'page': 'two'}, (1, 10)),
    ({'limit': '15'}, (1, 10)),
    ({'limit': '100'}, (1, 10)),
    ({'limit': 'x'}, (1, 10)),
    ({'limit': 50}, (1, 50)),
])
def test_parse_pagination(params, expected):
    assert parse_pagination(params) == expected


def test_meta_for_partial_last_page():
    assert pagination_meta(3, 10, 25) == {
        'page': 3, 'limit': 10, 'total': 25, 'totalPages': 3, 'hasNext': False, 'hasPrev': True,
    }


def test_meta_for_empty_result():
    assert pagination_meta(1, 10, 0) == {
        'page': 1, 'limit': 10, 'total': 0, 'totalPages': 0, 'hasNext': False, 'hasPrev': False,
    }


def test_meta_past_the_end():
    meta = pagination_meta(5, 10, 12)
    assert meta['hasNext'] is False
    assert meta['hasPrev'] is True
