from .scroll_trigger import ScrollAreaVisibilityTrigger, visible_fraction

__all__ = ["ScrollAreaVisibilityTrigger", "visible_fraction"]
