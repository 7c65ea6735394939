"""Filter/Sort Engine - 记录过滤、排序、搜索与分页"""

import math
import operator
from typing import Any, Callable, Dict, List, Optional, Tuple

from datacollab.core.constants import FILTER_OPERATORS, KIND_ORDER
from datacollab.engines.type_inferencer import is_boolean, is_missing, is_number
from datacollab.models.dataset import Page, Record
from datacollab.models.query import FilterClause, SortSpec


RELATIONAL_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "greaterThan": operator.gt,
    "lessThan": operator.lt,
    "greaterThanOrEqual": operator.ge,
    "lessThanOrEqual": operator.le,
}


def value_kind(value: Any) -> Optional[str]:
    """值的比较类别: number / boolean / string / other；缺失返回 None"""
    if is_missing(value):
        return None
    if is_boolean(value):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    return "other"


def _same_kind(left: Any, right: Any) -> bool:
    # 列表、对象等 other 类值不参与比较
    kind = value_kind(left)
    return kind in KIND_ORDER and kind == value_kind(right)


def _stringify(value: Any) -> str:
    if is_missing(value):
        return ""
    if is_boolean(value):
        return "true" if value else "false"
    return str(value)


def matches(row: Record, clause: FilterClause) -> bool:
    """
    判断单行是否满足条件

    比较规则：只有同类值（数值/布尔/字符串）之间才比较，不做类型转换；
    缺失值或类型不同时 equals 与关系运算均为 False，notEquals 为 True；
    未知操作符视为满足。
    """
    row_value = row.get(clause.column)
    op = clause.operator

    if op == "contains":
        return _stringify(clause.value) in _stringify(row_value)

    comparable = _same_kind(row_value, clause.value)
    if op == "equals":
        return comparable and row_value == clause.value
    if op == "notEquals":
        return not (comparable and row_value == clause.value)

    compare = RELATIONAL_OPERATORS.get(op)
    if compare is None:
        return True
    return comparable and compare(row_value, clause.value)


def filter_records(records: List[Record], clauses: Optional[List[FilterClause]]) -> List[Record]:
    """
    按条件过滤（所有条件 AND）

    没有条件时原样返回；未指定列或操作符未知的条件被忽略。
    """
    if not clauses:
        return records

    active = [c for c in clauses if c.column and c.operator in FILTER_OPERATORS]
    if not active:
        return records

    return [row for row in records if all(matches(row, c) for c in active)]


def _sort_key(value: Any) -> Tuple[int, Any]:
    kind = value_kind(value)
    if kind not in KIND_ORDER:
        return len(KIND_ORDER), str(value)
    return KIND_ORDER[kind], value


def sort_records(records: List[Record], spec: Optional[SortSpec]) -> List[Record]:
    """
    按单列稳定排序

    缺失值无论升降序都排在最后；不同类型的值按 数值 / 布尔 / 字符串 分组。
    """
    if spec is None or not spec.column:
        return list(records)

    column = spec.column
    present = [row for row in records if not is_missing(row.get(column))]
    missing = [row for row in records if is_missing(row.get(column))]

    # reverse=True 时 sorted 仍保持并列行的原始顺序
    ordered = sorted(
        present,
        key=lambda row: _sort_key(row.get(column)),
        reverse=spec.direction == "desc"
    )
    return ordered + missing


def search_records(records: List[Record], term: Optional[str]) -> List[Record]:
    """全文搜索：任一字段包含关键词（忽略大小写）"""
    if not term:
        return records

    needle = term.lower()
    return [
        row for row in records
        if any(needle in _stringify(value).lower() for value in row.values())
    ]


def paginate(records: List[Record], page: int = 1, page_size: int = 10) -> Page:
    """分页（页码从1开始，越界时收敛到合法范围）"""
    page_size = max(1, page_size)
    total_rows = len(records)
    total_pages = math.ceil(total_rows / page_size)

    page = min(max(1, page), max(1, total_pages))
    start = (page - 1) * page_size

    return Page(
        rows=records[start:start + page_size],
        page=page,
        page_size=page_size,
        total_rows=total_rows,
        total_pages=total_pages
    )
