"""Data Parser - 上传文件解析（CSV / JSON → 记录集合）"""

import io
import json
import re
import pandas as pd
from pathlib import Path
from typing import Any, List, Optional

from datacollab.core.constants import SUPPORTED_FILE_EXTENSIONS, BOOLEAN_LITERALS, MAX_COLUMNS
from datacollab.core.exceptions import DataParseError
from datacollab.models.dataset import Record
from datacollab.utils.logger import log


INT_PATTERN = re.compile(r"^[+-]?\d+$")
FLOAT_PATTERN = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")


def coerce_cell(value: Any) -> Any:
    """
    CSV 单元格自动类型转换

    空字符串 → None，true/false → bool，整数 → int，小数 → float，其余保持字符串
    """
    if not isinstance(value, str):
        # 短行补齐的 NaN
        return None

    stripped = value.strip()
    if stripped == "":
        return None

    lowered = stripped.lower()
    if lowered in BOOLEAN_LITERALS:
        return BOOLEAN_LITERALS[lowered]

    if INT_PATTERN.match(stripped):
        return int(stripped)
    if FLOAT_PATTERN.match(stripped):
        return float(stripped)

    return value


def parse_csv(content: bytes) -> List[Record]:
    """解析 CSV（首行为表头）"""
    try:
        df = pd.read_csv(
            io.BytesIO(content),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig"
        )
    except pd.errors.EmptyDataError as e:
        raise DataParseError("CSV 文件为空或缺少表头") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DataParseError(f"CSV 解析失败: {e}") from e

    if len(df.columns) > MAX_COLUMNS:
        raise DataParseError(f"列数超过限制: {len(df.columns)} > {MAX_COLUMNS}")

    columns = [str(c) for c in df.columns]
    records: List[Record] = []
    for row in df.itertuples(index=False, name=None):
        records.append({col: coerce_cell(cell) for col, cell in zip(columns, row)})
    return records


def _reject_constant(name: str) -> Any:
    raise DataParseError(f"JSON 不支持非有限数值: {name}", detail={"constant": name})


def parse_json(content: bytes) -> List[Record]:
    """解析 JSON（扁平对象数组）"""
    try:
        data = json.loads(content.decode("utf-8-sig"), parse_constant=_reject_constant)
    except UnicodeDecodeError as e:
        raise DataParseError(f"JSON 编码错误: {e}") from e
    except json.JSONDecodeError as e:
        raise DataParseError(f"JSON 格式错误: {e.msg} (行 {e.lineno}, 列 {e.colno})") from e

    if not isinstance(data, list):
        raise DataParseError("JSON 顶层必须是对象数组")

    records: List[Record] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise DataParseError(f"第 {index + 1} 项不是对象", detail={"index": index})
        for key, value in item.items():
            if isinstance(value, (dict, list)):
                raise DataParseError(
                    f"第 {index + 1} 项的字段 {key} 不是标量值",
                    detail={"index": index, "field": key}
                )
        records.append({str(k): v for k, v in item.items()})
    return records


def parse_file(filename: str, content: bytes) -> List[Record]:
    """
    根据扩展名解析上传文件

    Args:
        filename: 原始文件名
        content: 文件内容

    Returns:
        记录集合

    Raises:
        DataParseError: 不支持的扩展名、格式错误或解析结果为空
    """
    suffix = Path(filename or "").suffix.lower()
    if suffix not in SUPPORTED_FILE_EXTENSIONS:
        raise DataParseError(
            f"不支持的文件类型: {suffix or filename}. 请使用 CSV 或 JSON",
            detail={"supported": sorted(SUPPORTED_FILE_EXTENSIONS)}
        )

    log.info(f"解析文件: {filename} ({len(content)} 字节)")

    if suffix == ".csv":
        records = parse_csv(content)
    else:
        records = parse_json(content)

    if not records:
        raise DataParseError("文件中没有数据")

    log.info(f"文件 {filename} 解析成功: {len(records)} 行")
    return records


def records_to_csv(records: List[Record], columns: Optional[List[str]] = None) -> str:
    """导出为 CSV 文本（列取自首行，缺失值为空）"""
    if not records:
        return ""

    if columns is None:
        columns = list(records[0].keys())

    rows = [
        {col: _format_csv_value(row.get(col)) for col in columns}
        for row in records
    ]
    df = pd.DataFrame(rows, columns=columns, dtype=object)
    return df.to_csv(index=False, lineterminator="\n")


def _format_csv_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value
