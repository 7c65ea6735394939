"""Stats Summarizer - 字段描述统计"""

import math
import statistics
from collections import Counter
from typing import Any, Dict, List

from datacollab.engines.type_inferencer import infer_types, present_values
from datacollab.models.dataset import FieldStats, Record


def _numeric_stats(values: List[Any]) -> Dict[str, Any]:
    if not values:
        return {"mean": math.nan, "std_dev": math.nan}

    # statistics.mean 精确求和，保证 min <= mean <= max
    mean = statistics.mean(values)
    return {
        "min": min(values),
        "max": max(values),
        "sum": sum(values),
        "mean": mean,
        "std_dev": statistics.pstdev(values, mu=mean),
    }


def _categorical_stats(values: List[Any]) -> Dict[str, Any]:
    counter = Counter(values)
    # 并列时取最先出现的值（Counter 按首次出现顺序排列）
    most_frequent, most_frequent_count = counter.most_common(1)[0] if counter else (None, 0)
    return {
        "unique_count": len(counter),
        "most_frequent": most_frequent,
        "most_frequent_count": most_frequent_count,
    }


def summarize(records: List[Record]) -> Dict[str, FieldStats]:
    """
    计算每个字段的描述统计

    - 所有字段: type, count, missing
    - number: min, max, sum, mean, std_dev（总体标准差）
    - string: unique_count, most_frequent, most_frequent_count
    - 其他类型不额外计算

    Args:
        records: 记录集合

    Returns:
        字段名 -> FieldStats
    """
    types = infer_types(records)
    stats: Dict[str, FieldStats] = {}

    for field, field_type in types.items():
        values = present_values(records, field)
        extra: Dict[str, Any] = {}

        if field_type == "number":
            extra = _numeric_stats(values)
        elif field_type == "string":
            extra = _categorical_stats(values)

        stats[field] = FieldStats(
            type=field_type,
            count=len(values),
            missing=len(records) - len(values),
            **extra
        )

    return stats
