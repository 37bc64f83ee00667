from typing import List, Any, Dict, Tuple
from math import ceil
from sqlalchemy.orm import Query


def paginate(page: int, limit: int, total: int) -> Dict[str, Any]:
    """
    Pagination block returned next to admin list results
    """
    total_pages = ceil(total / limit) if limit > 0 else 0

    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1
    }


def paginate_query(query: Query, page: int, limit: int) -> Tuple[List[Any], Dict[str, Any]]:
    total = query.count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, paginate(page, limit, total)
