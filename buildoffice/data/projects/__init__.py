from buildoffice.data.projects.supplier import Supplier
from buildoffice.data.projects.project import Project
from buildoffice.data.projects.order import Order
from buildoffice.data.projects.expense import Expense
from buildoffice.data.projects.cost_estimate_item import CostEstimateItem
from buildoffice.data.projects.quotation_item import QuotationItem
from buildoffice.data.projects.notification import Notification

__all__ = [
    'Supplier',
    'Project',
    'Order',
    'Expense',
    'CostEstimateItem',
    'QuotationItem',
    'Notification',
]
