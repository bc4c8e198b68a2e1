from .signal import Signal, ObservableProperty
from .base import BaseViewModel
from .detail_viewmodel import CardDetailViewModel
from .card_list_viewmodel import CardListViewModel

__all__ = [
    "BaseViewModel",
    "CardDetailViewModel",
    "CardListViewModel",
    "ObservableProperty",
    "Signal",
]
