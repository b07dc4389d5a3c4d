from .tenancy import Organization
from .inventory import MenuItem, StockItem
from .sales import Sale
from .losses import Loss, LOSS_TYPES

__all__ = [
    'Organization',
    'MenuItem', 'StockItem',
    'Sale',
    'Loss', 'LOSS_TYPES',
]
