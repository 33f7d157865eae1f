import math
from dataclasses import dataclass, field
from typing import List

from app.config import settings
from app.utils.exceptions import ValidationError


@dataclass
class Page:
    items: List = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def page_window(page: int = 1, limit: int = None):
    """Validate paging input and return (page, limit, skip)."""
    limit = settings.DEFAULT_PAGE_SIZE if limit is None else limit
    if page < 1:
        raise ValidationError("Page must be a positive number")
    if limit < 1:
        raise ValidationError("Limit must be a positive number")
    limit = min(limit, settings.MAX_PAGE_SIZE)
    return page, limit, (page - 1) * limit
