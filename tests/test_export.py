from __future__ import annotations

import pytest

from core.export import ExportError, inventory_to_csv


def test_csv_has_header_and_rows_in_order() -> None:
    csv_text = inventory_to_csv([{"name": "apples", "quantity": 3}, {"name": "olive oil", "quantity": 1}])
    assert csv_text == "name,quantity\napples,3\nolive oil,1\n"


def test_empty_inventory_exports_header_only() -> None:
    assert inventory_to_csv([]) == "name,quantity\n"


def test_names_with_commas_are_quoted() -> None:
    assert inventory_to_csv([{"name": "salt, coarse", "quantity": 1}]).splitlines()[1] == '"salt, coarse",1'


def test_extra_fields_are_ignored() -> None:
    assert inventory_to_csv([{"name": "apples", "quantity": 1, "selected": True}]) == "name,quantity\napples,1\n"


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {"name": "apples", "quantity": 1},
        ["apples"],
        [{"quantity": 1}],
        [{"name": "apples", "quantity": -1}],
        [{"name": "apples", "quantity": "3"}],
        [{"name": "apples", "quantity": 1}, {"name": "", "quantity": 2}],
    ],
)
def test_any_malformed_record_fails_the_whole_export(payload) -> None:
    with pytest.raises(ExportError):
        inventory_to_csv(payload)
