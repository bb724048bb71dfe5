"""CSV 导入

列名匹配忽略大小写、重音和多余空白，每个字段有一组同义列名。
缺少订单号或产品编码的行会被跳过。
"""

import csv
import io
import logging
from typing import Dict, List, Optional, Tuple

from .helpers import as_int, as_number, normalize_text

logger = logging.getLogger(__name__)

COLUMN_ALIASES = {
    "order_number": ["numero ordine", "n ordine", "ordine", "num ordine", "order number", "order"],
    "customer": ["cliente", "customer"],
    "product_code": ["codice prodotto", "codice", "prodotto", "codice prod", "product code"],
    "ml": ["ml"],
    "requested_qty": ["quantita inserita", "quantita", "qty richiesta", "qta richiesta", "requested qty", "quantity"],
    "qty_in_oven": ["inforno", "in forno"],
    "step_count": ["passaggi", "n passaggi", "passi", "steps"],
}


def pick(row: Dict[str, str], aliases: List[str]):
    """按同义列名取值，列名比较前先归一化"""
    wanted = {normalize_text(a) for a in aliases}
    for key, value in row.items():
        if key is not None and normalize_text(key) in wanted:
            return value
    return None


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _delimiter(text: str) -> str:
    """按表头中出现次数最多的分隔符判断（逗号、分号、制表符）"""
    header = text.splitlines()[0]
    return max(",;\t", key=header.count)


def parse_orders_csv(text: str) -> Tuple[List[dict], int]:
    """解析CSV文本，返回 (规范化记录列表, 跳过的行数)"""
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise ValueError("The CSV file is empty or has no header")

    reader = csv.DictReader(io.StringIO(text), delimiter=_delimiter(text))
    records = []
    skipped = 0
    for row in reader:
        order_number = _clean(pick(row, COLUMN_ALIASES["order_number"]))
        product_code = _clean(pick(row, COLUMN_ALIASES["product_code"]))
        if not order_number or not product_code:
            skipped += 1
            continue
        records.append({
            "order_number": order_number,
            "customer": _clean(pick(row, COLUMN_ALIASES["customer"])) or "",
            "product_code": product_code,
            "ml": as_number(pick(row, COLUMN_ALIASES["ml"])),
            "requested_qty": as_int(pick(row, COLUMN_ALIASES["requested_qty"])) or 0,
            "qty_in_oven": as_int(pick(row, COLUMN_ALIASES["qty_in_oven"])),
            "step_count": as_int(pick(row, COLUMN_ALIASES["step_count"])) or 0,
        })

    logger.info("Parsed %d order rows from CSV (%d skipped)", len(records), skipped)
    return records, skipped
