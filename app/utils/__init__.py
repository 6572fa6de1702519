from datetime import datetime, date
from decimal import Decimal
from uuid import UUID
from typing import Any

from sqlalchemy import inspect


def make_json_serializable(data: Any) -> Any:
    """
    Recursively convert non-serializable values (UUID, Decimal, datetime) to JSON-serializable formats.
    """
    if isinstance(data, dict):
        return {str(k): make_json_serializable(v) for k, v in data.items()}
    elif isinstance(data, (list, tuple)):
        return [make_json_serializable(v) for v in data]
    elif isinstance(data, UUID):
        return str(data)
    elif isinstance(data, Decimal):
        return float(data)
    elif isinstance(data, (datetime, date)):
        return data.isoformat()
    return data


def model_to_dict(instance: Any) -> dict[str, Any]:
    """Plain, JSON-ready dict of an ORM instance's mapped columns, keyed by attribute name."""
    mapper = inspect(instance).mapper
    return make_json_serializable(
        {attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs}
    )
