"""
BCE Cloud Python SDK - Data Models

This module contains the response and query models of the BOS and BLS
resources. Models are dataclasses built from the camelCase JSON the
services return.
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


class BaseModel:
    """Base class for all models with common functionality."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return asdict(self)

    def to_json(self) -> str:
        """Convert model to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseModel":
        """Create model instance from a camelCase or snake_case dictionary."""
        fields = cls.__dataclass_fields__  # type: ignore[attr-defined]
        values = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name in fields:
                values[name] = value
        return cls(**values)


# =============================================================================
# Enums
# =============================================================================

class StorageClass(str, Enum):
    """BOS storage class."""
    STANDARD = "STANDARD"
    STANDARD_IA = "STANDARD_IA"
    COLD = "COLD"
    ARCHIVE = "ARCHIVE"


# =============================================================================
# BOS Models
# =============================================================================

@dataclass
class ObjectOwner(BaseModel):
    """Owner of a stored object."""
    id: str = ""
    display_name: str = ""


@dataclass
class ObjectSummary(BaseModel):
    """One entry of an object listing."""
    key: str
    last_modified: Optional[str] = None
    e_tag: Optional[str] = None
    size: int = 0
    storage_class: str = StorageClass.STANDARD.value
    owner: Optional[ObjectOwner] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ObjectSummary":
        summary = super().from_dict(data)
        if isinstance(summary.owner, dict):
            summary.owner = ObjectOwner.from_dict(summary.owner)
        return summary


@dataclass
class CommonPrefix(BaseModel):
    """A key prefix rolled up by the listing delimiter."""
    prefix: str


@dataclass
class ListObjectsResult(BaseModel):
    """Result of listing the objects in a bucket."""
    name: str
    prefix: str = ""
    delimiter: str = ""
    marker: str = ""
    next_marker: Optional[str] = None
    max_keys: int = 1000
    is_truncated: bool = False
    contents: List[ObjectSummary] = field(default_factory=list)
    common_prefixes: List[CommonPrefix] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ListObjectsResult":
        result = super().from_dict(data)
        result.contents = [ObjectSummary.from_dict(item) for item in result.contents or []]
        result.common_prefixes = [
            CommonPrefix.from_dict(item) for item in result.common_prefixes or []
        ]
        return result

    def __iter__(self):
        return iter(self.contents)

    def __len__(self):
        return len(self.contents)


# =============================================================================
# BLS Models
# =============================================================================

@dataclass
class LogRecordQuery(BaseModel):
    """A query against one log store over a time range."""
    log_store_name: str
    query: str
    start_datetime: datetime
    end_datetime: datetime


@dataclass
class LogRecordResultSet(BaseModel):
    """Tabular query result."""
    columns: List[str] = field(default_factory=list)
    rows: List[List[Any]] = field(default_factory=list)
    is_truncated: bool = False
    truncated_reason: str = ""

    def records(self) -> List[Dict[str, Any]]:
        """Return rows as column-keyed dictionaries."""
        return [dict(zip(self.columns, row)) for row in self.rows]


@dataclass
class QueryLogRecordResult(BaseModel):
    """Result of a log record query; result_set is absent when nothing matched."""
    result_set: Optional[LogRecordResultSet] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QueryLogRecordResult":
        result = super().from_dict(data)
        if isinstance(result.result_set, dict):
            result.result_set = LogRecordResultSet.from_dict(result.result_set)
        return result
