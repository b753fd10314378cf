"""
Project Service
Presentation service for projects, their orders and expenses.
"""

from typing import Any, Dict, List, Optional

from buildoffice.data.projects.expense import Expense
from buildoffice.data.projects.order import Order
from buildoffice.data.projects.project import Project
from buildoffice.data.projects.supplier import Supplier


class ProjectService:

    @staticmethod
    def get_list(status: Optional[str] = None, search: Optional[str] = None) -> List[Project]:
        query = Project.active()
        if status:
            query = query.filter(Project.status == status)
        if search:
            query = query.filter(Project.name.ilike(f'%{search}%'))
        return query.order_by(Project.created_at.desc(), Project.id.desc()).all()

    @staticmethod
    def orders(project_id: int, status: Optional[str] = None) -> List[Order]:
        query = Order.active().filter(Order.project_id == project_id)
        if status:
            query = query.filter(Order.status == status)
        return query.order_by(Order.date.desc(), Order.id.desc()).all()

    @staticmethod
    def order_to_dict(order: Order) -> Dict[str, Any]:
        data = order.to_dict()
        data.update(supplier_name=order.supplier_name, total_net=order.total_net)
        return data

    @staticmethod
    def expenses(project_id: int) -> List[Expense]:
        return (
            Expense.active()
            .filter(Expense.project_id == project_id)
            .order_by(Expense.date.desc(), Expense.id.desc())
            .all()
        )

    @staticmethod
    def summary(project: Project) -> Dict[str, Any]:
        """Project header figures: quotation value against money spent"""
        expenses = ProjectService.expenses(project.id)
        spent = round(sum(e.amount or 0.0 for e in expenses), 2)
        data = project.to_dict()
        data.update(
            expenses_total=round(spent, 2),
            balance=round((project.total_value or 0.0) - spent, 2),
            order_count=Order.active().filter(Order.project_id == project.id).count(),
        )
        return data

    @staticmethod
    def suppliers() -> List[Supplier]:
        return Supplier.query.order_by(Supplier.name).all()
