from . import notify

__all__ = ["notify"]
