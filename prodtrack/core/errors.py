"""跟踪引擎错误类型

所有校验错误都在修改订单状态之前抛出；PersistenceError 在写入数据库失败时抛出。
"""


class TrackingError(Exception):
    """跟踪引擎错误基类"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TrackingError):
    """输入校验失败，订单未被修改"""

    status_code = 422


class InvalidStepError(ValidationError):
    """工序号超出范围"""


class InvalidQuantityError(ValidationError):
    """件数必须大于 0"""


class MissingOperatorError(ValidationError):
    """操作员为空或不存在"""


class PackingIncompleteError(ValidationError):
    """进入待交付阶段前未填写包装数量"""


class InvalidPhaseError(ValidationError):
    """未知的阶段"""


class InvalidTransitionError(ValidationError):
    """当前状态下不允许该操作（例如运行中再次开始）"""

    status_code = 409


class OrderNotFoundError(TrackingError):
    status_code = 404


class BatchNotFoundError(TrackingError):
    status_code = 404


class PersistenceError(TrackingError):
    """写入文档存储失败；本地状态可能已乐观更新，不自动回滚"""

    status_code = 503
