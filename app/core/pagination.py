from typing import List, Sequence, Tuple, TypeVar

from core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


def normalize_paging(page: int, page_size: int) -> Tuple[int, int]:
    """
    Clamp paging arguments the way every list endpoint does.

    page < 1 becomes 1; page_size outside 1..100 becomes 10.
    """
    if page < 1:
        page = DEFAULT_PAGE
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size


def paginate(items: Sequence[T], page: int, page_size: int) -> List[T]:
    start = (page - 1) * page_size
    return list(items[start:start + page_size])
