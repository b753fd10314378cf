from __future__ import annotations

from buildoffice.data.projects.order import ORDER_STATUSES


class OrderStatusValidator:
    """
    Status rules of the order board.

    Orders may move freely between the three board columns; anything outside
    them is rejected.
    """

    STATUSES = set(ORDER_STATUSES)

    _NEXT = {
        "Pending": {"Ordered", "Delivered"},
        "Ordered": {"Pending", "Delivered"},
        "Delivered": {"Pending", "Ordered"},
    }

    @classmethod
    def is_valid(cls, status: str) -> bool:
        return status in cls.STATUSES

    @classmethod
    def can_transition(cls, current_status: str | None, new_status: str) -> bool:
        if not cls.is_valid(new_status):
            return False
        allowed = cls._NEXT.get(current_status)
        if allowed is None:
            # legacy rows without a known status can be moved anywhere valid
            return True
        return new_status == current_status or new_status in allowed

    @staticmethod
    def is_delivery(old_status: str | None, new_status: str) -> bool:
        return old_status != "Delivered" and new_status == "Delivered"
