from .core import Card, PageResult
from .filters import CardFilters

__all__ = ["Card", "CardFilters", "PageResult"]
