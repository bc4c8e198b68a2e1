from .continuation import ContinuationBinder, ManualTrigger

__all__ = ["ContinuationBinder", "ManualTrigger"]
