from .grouping import group_running_order, sort_fan_zone, sort_running_order
from .migrate import CURRENT_DATA_VERSION, ensure_document_shape, migrate
from .normalise import ensure_fan_zone_schedule
from .timecode import fan_zone_key, is_fan_zone_time, is_running_order_time, running_order_key
from .tokens import TokenContext, apply_tokens

__all__ = [
    "CURRENT_DATA_VERSION",
    "TokenContext",
    "apply_tokens",
    "ensure_document_shape",
    "ensure_fan_zone_schedule",
    "fan_zone_key",
    "group_running_order",
    "is_fan_zone_time",
    "is_running_order_time",
    "migrate",
    "running_order_key",
    "sort_fan_zone",
    "sort_running_order",
]
