"""Read helpers shared by the repositories."""

PAGE_SIZE = 500


def fetch_all(query) -> list:
    """Every record ``query`` matches, read page by page.

    ``query`` should carry an ``order_by`` so pages stay stable.
    """
    records = []
    offset = 0
    while True:
        page = query.offset(offset).limit(PAGE_SIZE).all().items
        records.extend(page)
        if len(page) < PAGE_SIZE:
            return records
        offset += PAGE_SIZE
