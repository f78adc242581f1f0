from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any
from urllib.parse import urlencode

ORDER_NUMBER_WIDTH = 4


def convert_number_to_order_number(number: int) -> str:
    if number < 0:
        raise ValueError("order number must be >= 0")
    return f"#{number:0{ORDER_NUMBER_WIDTH}d}"


def convert_dates_to_iso_string(value: Any) -> Any:
    """Recursively replace datetimes with ISO-8601 strings.

    Dataclasses are flattened to dicts and enums to their values so the
    result can go straight into a JSON payload.
    """
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return convert_dates_to_iso_string(asdict(value))
    if isinstance(value, Mapping):
        return {key: convert_dates_to_iso_string(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [convert_dates_to_iso_string(item) for item in value]
    return value


def convert_date_to_intl_string(value: datetime | str) -> str:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value.strftime("%Y/%m/%d %H:%M")


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def object_to_query_string(obj: Mapping[str, Any] | None) -> str:
    if not obj or not isinstance(obj, Mapping):
        return ""

    params: list[tuple[str, str]] = []
    for key, value in obj.items():
        if _is_empty(value):
            continue
        if isinstance(value, (list, tuple, set)):
            params.extend((key, str(item)) for item in value)
        elif isinstance(value, (datetime, date)):
            params.append((key, value.strftime("%Y-%m-%d")))
        elif isinstance(value, Enum):
            params.append((key, str(value.value)))
        elif isinstance(value, bool):
            params.append((key, "true" if value else "false"))
        else:
            params.append((key, str(value)))
    return urlencode(params)
