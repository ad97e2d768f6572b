"""Cart package: live line snapshot shared with the host."""
from .lines import LinesListener, LiveCartLines

__all__ = [
    "LinesListener",
    "LiveCartLines",
]
