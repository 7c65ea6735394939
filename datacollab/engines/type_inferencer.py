"""Type Inferencer - 字段类型推断"""

from datetime import datetime, date
from typing import Any, Dict, List

from datacollab.core.constants import DATE_FORMATS
from datacollab.models.dataset import Record


def is_missing(value: Any) -> bool:
    return value is None


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_date(value: Any) -> bool:
    """是否可解析为日历日期"""
    if isinstance(value, (datetime, date)):
        return True
    if not isinstance(value, str):
        return False

    text = value.strip()
    if not text:
        return False
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
        return True
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            datetime.strptime(text, fmt)
            return True
        except ValueError:
            continue
    return False


def present_values(records: List[Record], field: str) -> List[Any]:
    """字段的全部非缺失值（保持原顺序）"""
    return [row.get(field) for row in records if not is_missing(row.get(field))]


# 按顺序判定，第一个对所有值都成立的类型胜出
TYPE_PREDICATES = [
    ("number", is_number),
    ("date", is_date),
    ("boolean", is_boolean),
]


def classify(values: List[Any]) -> str:
    if not values:
        return "unknown"
    for field_type, predicate in TYPE_PREDICATES:
        if all(predicate(v) for v in values):
            return field_type
    return "string"


def infer_types(records: List[Record]) -> Dict[str, str]:
    """
    推断每个字段的类型

    字段取自第一行；空集合返回空映射。

    Args:
        records: 记录集合

    Returns:
        字段名 -> number / date / boolean / string / unknown
    """
    if not records:
        return {}

    return {
        field: classify(present_values(records, field))
        for field in records[0].keys()
    }
