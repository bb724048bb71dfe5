"""CSV 报表导出

只读取订单文档，不做任何修改。
"""

import csv
import io
from typing import Iterable, List

from ..core import batches as batch_ledger
from ..core.steps import aggregate_step_stats
from .helpers import format_duration_hms


def _status(value) -> str:
    return getattr(value, "value", value) or ""


def _write(header: List[str], rows: Iterable[list]) -> str:
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(header)
    writer.writerows(rows)
    return out.getvalue()


def orders_csv(documents: Iterable[dict]) -> str:
    """订单汇总：一行一个订单"""
    rows = []
    for doc in documents:
        requested = doc.get("requested_qty") or 0
        done = doc.get("fully_done_qty") or 0
        rows.append([
            doc["order_number"],
            doc.get("customer") or "",
            doc["product_code"],
            requested,
            done,
            max(0, requested - done),
            batch_ledger.total_qty(batch_ledger.effective_batches(doc)),
            doc.get("step_count") or 0,
            _status(doc.get("status")),
            format_duration_hms(doc.get("elapsed_sec")),
        ])
    return _write(
        ["order_number", "customer", "product_code", "requested_qty", "done_qty",
         "remaining_qty", "batched_qty", "step_count", "status", "elapsed"],
        rows,
    )


def steps_csv(documents: Iterable[dict]) -> str:
    """每个订单每个有记录的工序一行"""
    rows = []
    for doc in documents:
        for stat in aggregate_step_stats(doc.get("step_progress"), doc.get("step_time")):
            rows.append([
                doc["order_number"],
                doc["product_code"],
                stat["step"],
                stat["pieces"],
                format_duration_hms(stat["time_sec"]),
            ])
    return _write(["order_number", "product_code", "step", "pieces", "time"], rows)


def batches_csv(documents: Iterable[dict]) -> str:
    """每个批次一行（旧数据显示虚拟批次）"""
    rows = []
    for doc in documents:
        for batch in batch_ledger.effective_batches(doc):
            rows.append([
                doc["order_number"],
                doc["product_code"],
                batch["id"],
                batch["qty"],
                batch["status"],
                batch.get("packed_qty") or 0,
                "" if batch.get("boxes") is None else batch["boxes"],
                batch.get("size") or "",
                "" if batch.get("weight") is None else batch["weight"],
                batch.get("notes") or "",
                batch.get("created_at") or "",
            ])
    return _write(
        ["order_number", "product_code", "batch_id", "qty", "phase", "packed_qty",
         "boxes", "size", "weight", "notes", "created_at"],
        rows,
    )
