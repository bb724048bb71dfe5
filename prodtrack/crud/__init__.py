from .order import (
    apply_order_patch,
    create_order,
    get_order,
    list_orders,
    order_to_document,
    upsert_order,
)
from .operator import (
    active_operator_names,
    create_operator,
    get_operator,
    get_operator_by_name,
    list_operators,
    update_operator,
)
from .order_log import list_order_logs

__all__ = [
    # Order functions
    "apply_order_patch",
    "create_order",
    "get_order",
    "list_orders",
    "order_to_document",
    "upsert_order",

    # Operator functions
    "active_operator_names",
    "create_operator",
    "get_operator",
    "get_operator_by_name",
    "list_operators",
    "update_operator",

    # Order log functions
    "list_order_logs",
]
