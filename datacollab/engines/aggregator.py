"""Aggregator - 分组聚合"""

import statistics
from typing import Any, Callable, Dict, List, Optional, Tuple

from datacollab.core.constants import AGGREGATION_FUNCTIONS
from datacollab.engines.filter_engine import value_kind
from datacollab.engines.type_inferencer import is_missing, is_number
from datacollab.models.dataset import Record
from datacollab.models.query import AggregationSpec


def _sum(values: List[Any]) -> Any:
    return sum(v for v in values if is_number(v))


def _avg(values: List[Any]) -> Optional[float]:
    numbers = [v for v in values if is_number(v)]
    return statistics.mean(numbers) if numbers else None


def _min(values: List[Any]) -> Any:
    numbers = [v for v in values if is_number(v)]
    return min(numbers) if numbers else None


def _max(values: List[Any]) -> Any:
    numbers = [v for v in values if is_number(v)]
    return max(numbers) if numbers else None


# 空值已在调用前剔除；avg/min/max 无数值时返回 None
REDUCERS: Dict[str, Callable[[List[Any]], Any]] = {
    "sum": _sum,
    "avg": _avg,
    "min": _min,
    "max": _max,
    "count": len,
}


def _group_key(value: Any) -> Tuple[Optional[str], Any]:
    # 带上类别，避免 1 / True / "1" 被合并到同一组
    return value_kind(value), value


def group_records(records: List[Record], column: str) -> Dict[Tuple[Optional[str], Any], List[Record]]:
    """按列值分组（保持首次出现顺序）"""
    groups: Dict[Tuple[Optional[str], Any], List[Record]] = {}
    for row in records:
        groups.setdefault(_group_key(row.get(column)), []).append(row)
    return groups


def aggregate(records: List[Record], spec: Optional[AggregationSpec]) -> List[Record]:
    """
    分组聚合

    Args:
        records: 记录集合
        spec: 聚合规范；未知函数被跳过，缺少 group_by 或有效聚合时原样返回输入

    Returns:
        每组一行：{group_by: 组值, "{column}_{function}": 结果, ...}
    """
    if spec is None or not spec.group_by:
        return records

    items = [agg for agg in spec.aggregations if agg.function in AGGREGATION_FUNCTIONS]
    if not items:
        return records

    result: List[Record] = []
    for (_, group_value), rows in group_records(records, spec.group_by).items():
        aggregated: Record = {spec.group_by: group_value}
        for agg in items:
            values = [row.get(agg.column) for row in rows if not is_missing(row.get(agg.column))]
            aggregated[agg.output_name] = REDUCERS[agg.function](values)
        result.append(aggregated)

    return result
