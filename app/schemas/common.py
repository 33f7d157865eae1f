from pydantic import BaseModel


class PaginationInfo(BaseModel):
    total: int
    page: int
    pages: int

    @classmethod
    def from_page(cls, page):
        return cls(total=page.total, page=page.page, pages=page.pages)


class MessageResponse(BaseModel):
    message: str
