"""工序进度账本与完成数量计算

- StepLedger：按工序号累计已完成件数与耗时
- compute_fully_done：所有工序都完成的件数（各工序累计件数的最小值）
- is_order_complete：完成数量是否达到订单需求数量
"""

from typing import Dict, List, Optional

from .errors import InvalidQuantityError, InvalidStepError


def normalize_step_map(raw: Optional[dict]) -> Dict[int, int]:
    """JSON 中的键是字符串，这里统一转成 int；无法解析的键忽略"""
    result: Dict[int, int] = {}
    for key, value in (raw or {}).items():
        try:
            step = int(key)
        except (TypeError, ValueError):
            continue
        if step < 1:
            continue
        result[step] = int(value or 0)
    return result


def validate_step(step: int, step_count: int, legacy_max_step: int = 10):
    """step_count > 0 时工序号必须在 1..step_count；否则按旧数据放宽到 1..legacy_max_step"""
    upper = step_count if step_count and step_count > 0 else legacy_max_step
    if step is None or step < 1 or step > upper:
        raise InvalidStepError(f"Step {step} is out of range 1..{upper}")


def validate_pieces(pieces: int):
    if pieces is None or pieces <= 0:
        raise InvalidQuantityError(f"Pieces must be greater than 0 (got {pieces})")


class StepLedger:
    """每个工序的累计件数和累计秒数"""

    def __init__(self, step_count: int, step_progress: Optional[dict] = None, step_time: Optional[dict] = None):
        self.step_count = int(step_count or 0)
        self.step_progress = normalize_step_map(step_progress)
        self.step_time = normalize_step_map(step_time)

    @classmethod
    def from_document(cls, doc: dict) -> "StepLedger":
        return cls(doc.get("step_count") or 0, doc.get("step_progress"), doc.get("step_time"))

    def record_step(self, step: int, pieces_delta: int, time_delta: int = 0):
        if self.step_count > 0 and not 1 <= step <= self.step_count:
            raise InvalidStepError(f"Step {step} is out of range 1..{self.step_count}")
        validate_pieces(pieces_delta)
        self.step_progress[step] = self.step_progress.get(step, 0) + pieces_delta
        self.step_time[step] = self.step_time.get(step, 0) + max(0, int(time_delta or 0))

    def compute_fully_done(self, previous: int = 0) -> int:
        return compute_fully_done(self.step_count, self.step_progress, previous)

    def as_patch(self) -> dict:
        # JSON 列只能保存字符串键
        return {
            "step_progress": {str(k): v for k, v in sorted(self.step_progress.items())},
            "step_time": {str(k): v for k, v in sorted(self.step_time.items())},
        }


def compute_fully_done(step_count: int, step_progress: Optional[dict], previous: int = 0) -> int:
    """计算"真正完成"的件数

    一件产品只有经过全部工序才算完成，所以取 1..step_count 各工序累计件数的最小值；
    再与之前的结果取 max，保证该值不会回退。step_count <= 0 时始终为 0。
    """
    if not step_count or step_count <= 0:
        return 0
    progress = normalize_step_map(step_progress)
    lowest = min(progress.get(i, 0) for i in range(1, step_count + 1))
    return max(int(previous or 0), lowest)


def is_order_complete(fully_done: int, requested: Optional[int]) -> bool:
    """requested 为 0 的订单永远不会自动完成，只能由管理员强制完成"""
    requested = requested or 0
    return requested > 0 and (fully_done or 0) >= requested


def aggregate_step_stats(step_progress: Optional[dict], step_time: Optional[dict]) -> List[dict]:
    """汇总每个有记录的工序的件数与耗时，按工序号排序"""
    progress = normalize_step_map(step_progress)
    times = normalize_step_map(step_time)
    steps = sorted(set(progress) | set(times))
    return [
        {"step": step, "pieces": progress.get(step, 0), "time_sec": times.get(step, 0)}
        for step in steps
    ]
