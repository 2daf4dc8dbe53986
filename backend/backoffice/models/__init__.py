from .tenancy import Owner
from .auth import User, SessionToken
from .inventory import Product, ProductVariant, StockMovement
from .customers import Customer, CustomerPayment
from .suppliers import Supplier, SupplierPayment
from .sales import Order, OrderLine
from .purchasing import PurchaseOrder, PurchaseOrderLine
from .communications import Notification

__all__ = [
    'Owner',
    'User', 'SessionToken',
    'Product', 'ProductVariant', 'StockMovement',
    'Customer', 'CustomerPayment',
    'Supplier', 'SupplierPayment',
    'Order', 'OrderLine',
    'PurchaseOrder', 'PurchaseOrderLine',
    'Notification',
]
