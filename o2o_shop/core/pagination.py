# o2o_shop/core/pagination.py


def calculate_row_index(page_index: int, page_size: int) -> int:
    """
    Convert a 1-based page index into a zero-based row offset.

    Example: page_index=2, page_size=10 -> 10.
    A page index below 1 is treated as the first page.
    """
    return (page_index - 1) * page_size if page_index > 0 else 0
