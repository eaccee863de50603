from pydantic import BaseModel
from typing import List, Union

class PageWindow(BaseModel):
    current_page: int
    page_size: int
    total_count: int
    start_index: int
    end_index: int
    total_pages: int
    has_prev_page: bool
    has_next_page: bool

class PaginationResponse(PageWindow):
    shown_from: int
    shown_to: int
    pages: List[Union[int, str]]
