import csv
import io
from typing import Any, List, Mapping

EXPORT_FIELDS = ["name", "quantity"]


class ExportError(ValueError):
    """The export payload is not a list of inventory records."""


def _validate_record(index: int, record: Any) -> Mapping:
    if not isinstance(record, Mapping):
        raise ExportError(f"Record {index} is not an object")
    name = record.get("name")
    quantity = record.get("quantity")
    if not isinstance(name, str) or not name.strip():
        raise ExportError(f"Record {index} has no name")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
        raise ExportError(f"Record {index} has an invalid quantity")
    return record


def inventory_to_csv(records: Any) -> str:
    """Render inventory records as CSV text.

    The export is all-or-nothing: one malformed record fails the whole call.
    """
    if not isinstance(records, list):
        raise ExportError("Inventory must be a list of records")
    rows: List[Mapping] = [_validate_record(i, r) for i, r in enumerate(records)]

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=EXPORT_FIELDS, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({"name": row["name"], "quantity": row["quantity"]})
    return output.getvalue()
