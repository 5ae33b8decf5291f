import itertools
import re

import pytest

from customer_records_api.app.schemas.customer import CustomerFilter
from customer_records_api.app.services.customer_service import build_customer_search

PLACEHOLDER = re.compile(r"(\w+) = \?(\d+)")

VALUES = {
    "city": "Reno' OR '1'='1",
    "state": "NV; DROP TABLE customers",
    "pin_code": "89501--",
}


@pytest.mark.parametrize("presence", list(itertools.product([False, True], repeat=3)))
def test_placeholders_align_with_bound_values(presence):
    supplied = {
        field: VALUES[field]
        for field, present in zip(("city", "state", "pin_code"), presence)
        if present
    }
    query, params = build_customer_search(CustomerFilter(**supplied))

    conditions = PLACEHOLDER.findall(query)
    assert [column for column, _ in conditions] == list(supplied)
    assert [int(index) for _, index in conditions] == list(range(1, len(supplied) + 1))
    for column, index in conditions:
        assert params[int(index) - 1] == supplied[column]
    assert len(params) == len(supplied)
    for value in VALUES.values():
        assert value not in query


def test_no_filters_selects_everything():
    query, params = build_customer_search(CustomerFilter())
    assert "WHERE 1=1 ORDER BY" in query
    assert params == []


def test_empty_strings_are_ignored():
    query, params = build_customer_search(CustomerFilter(city="", state="NV", pin_code=None))
    assert PLACEHOLDER.findall(query) == [("state", "1")]
    assert params == ["NV"]


def test_pagination_is_bound_after_filters():
    query, params = build_customer_search(CustomerFilter(pin_code="89501"), limit=10, offset=20)
    assert query.endswith("LIMIT ?2 OFFSET ?3")
    assert params == ["89501", 10, 20]


def test_offset_without_limit_uses_unbounded_limit():
    query, params = build_customer_search(CustomerFilter(), offset=5)
    assert query.endswith("LIMIT ?1 OFFSET ?2")
    assert params == [-1, 5]
