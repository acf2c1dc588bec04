# Page-number pagination over a SELECT

import math
from typing import Any, List, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session


def paginate(db: Session, stmt: Select, page: int, per_page: int) -> Tuple[List[Any], int, int]:
    """
    Run ``stmt`` for one page.

    Returns (rows, total_pages, current_page). total_pages is at least 1 and
    the requested page is clamped into [1, total_pages].
    """
    total = db.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    total_pages = max(1, math.ceil(total / per_page))
    current_page = min(max(1, page), total_pages)

    rows = db.execute(stmt.offset((current_page - 1) * per_page).limit(per_page)).scalars().all()
    return list(rows), total_pages, current_page
