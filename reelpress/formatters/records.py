"""
Conversion of pipeline results into JSON-ready dictionaries.
"""
import dataclasses
from datetime import datetime
from typing import Any

from reelpress.core.extractor import ExtractionOutcome


def to_record(value: Any) -> Any:
    """
    Recursively convert dataclasses, tuples and datetimes to plain JSON types.
    """
    if isinstance(value, ExtractionOutcome):
        return {
            'url': value.link.url,
            'status': value.status,
            'attempts': value.attempts,
            'waited': value.waited,
            'error': str(value.error) if value.error else None,
            'article': to_record(value.article),
        }
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_record(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_record(item) for item in value]
    if isinstance(value, dict):
        return {key: to_record(item) for key, item in value.items()}
    return value
