"""工具函数模块

包含一些常用的工具函数
"""

import re
import unicodedata
from typing import Optional


def make_order_id(order_number, product_code) -> str:
    """由订单号和产品编码生成订单行ID

    两部分各自去掉首尾空白，斜杠替换为下划线，连续空白合并为一个空格
    """
    raw = f"{str(order_number).strip()}__{str(product_code).strip()}"
    raw = re.sub(r"[/\\]", "_", raw)
    return re.sub(r"\s+", " ", raw)


def normalize_text(value) -> str:
    """小写、去掉重音符号、合并空白，用于列名匹配"""
    text = unicodedata.normalize("NFD", str(value).lower())
    text = "".join(ch for ch in text if unicodedata.category(ch) != "Mn")
    return re.sub(r"\s+", " ", text).strip()


def as_number(value) -> Optional[float]:
    """解析数字，支持逗号作为小数点；空值或无法解析时返回 None"""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text.replace(",", "."))
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def as_int(value) -> Optional[int]:
    number = as_number(value)
    return int(number) if number is not None else None


def format_duration_hms(total_seconds) -> str:
    """秒数格式化为 HH:MM:SS"""
    sec = max(0, int(total_seconds or 0))
    return f"{sec // 3600:02d}:{(sec % 3600) // 60:02d}:{sec % 60:02d}"
