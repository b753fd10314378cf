from __future__ import annotations

from dataclasses import dataclass, replace

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from buildoffice import db
from buildoffice.business.orders.order_status_manager import CascadeResult, OrderStatusManager
from buildoffice.data.projects.order import ORDER_STATUSES
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.orders.board")


@dataclass(frozen=True)
class BoardCard:
    id: int
    title: str
    status: str
    added_to_warehouse: bool = False
    supplier_name: str = ''
    amount: float = 0.0

    @classmethod
    def from_order(cls, order) -> BoardCard:
        return cls(
            id=order.id,
            title=order.title,
            status=order.status,
            added_to_warehouse=bool(order.added_to_warehouse),
            supplier_name=order.supplier_name,
            amount=order.amount or 0.0,
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'status': self.status,
            'added_to_warehouse': self.added_to_warehouse,
            'supplier_name': self.supplier_name,
            'amount': self.amount,
        }


@dataclass
class MoveOutcome:
    applied: bool
    reverted: bool = False
    error: str | None = None
    cascade: CascadeResult | None = None

    @property
    def warnings(self) -> list[str]:
        return list(self.cascade.warnings) if self.cascade else []


class OrderBoard:
    """
    Kanban board of a project's orders, one column per order status.

    The board starts from a server snapshot. A move is applied locally first
    and then persisted through the status manager; if persisting fails the
    whole board goes back to the snapshot it was built from (or last
    refreshed with), dropping every local change since then.
    """

    COLUMNS = ORDER_STATUSES

    def __init__(self, orders, status_manager: OrderStatusManager | None = None):
        self.status_manager = status_manager or OrderStatusManager()
        self.refresh(orders)

    def refresh(self, orders) -> None:
        """Replace both the snapshot and the visible cards with fresh server data"""
        cards = [o if isinstance(o, BoardCard) else BoardCard.from_order(o) for o in orders]
        self._snapshot = tuple(cards)
        self._cards = list(cards)

    @property
    def cards(self) -> list[BoardCard]:
        return list(self._cards)

    @property
    def snapshot(self) -> tuple[BoardCard, ...]:
        return self._snapshot

    def card(self, order_id: int) -> BoardCard | None:
        return next((c for c in self._cards if c.id == order_id), None)

    def columns(self) -> dict[str, list[BoardCard]]:
        return {status: [c for c in self._cards if c.status == status] for status in self.COLUMNS}

    def move(self, order_id: int, new_status: str) -> MoveOutcome:
        """
        Drop a card on a column.

        Dropping on an unknown column, dropping an unknown card or dropping a
        card on its own column changes nothing.
        """
        if new_status not in self.COLUMNS:
            logger.warning(f"Ignoring drop of order {order_id} on invalid column {new_status!r}")
            return MoveOutcome(applied=False)

        card = self.card(order_id)
        if card is None:
            logger.warning(f"Ignoring drop of unknown order {order_id}")
            return MoveOutcome(applied=False)
        if card.status == new_status:
            return MoveOutcome(applied=False)

        # optimistic local update
        self._cards = [replace(c, status=new_status) if c.id == order_id else c for c in self._cards]

        try:
            cascade = self.status_manager.change_status(order_id, new_status)
        except (ValueError, HTTPException, SQLAlchemyError) as e:
            db.session.rollback()
            self._cards = list(self._snapshot)
            message = getattr(e, 'description', None) or str(e)
            logger.error(f"Moving order {order_id} to {new_status} failed, board reverted: {message}")
            return MoveOutcome(applied=False, reverted=True, error=message)

        self._cards = [
            replace(c, added_to_warehouse=bool(cascade.order.added_to_warehouse)) if c.id == order_id else c
            for c in self._cards
        ]
        return MoveOutcome(applied=True, cascade=cascade)

    def to_dict(self) -> dict:
        return {status: [c.to_dict() for c in cards] for status, cards in self.columns().items()}
