from __future__ import annotations

import logging

from .db import SessionLocal
from .services.invoices import regenerate_all_invoices

logger = logging.getLogger(__name__)


def rebuild_invoices() -> int:
    with SessionLocal() as session:
        try:
            count = regenerate_all_invoices(session)
            session.commit()
        except Exception:
            session.rollback()
            logger.exception("Invoice rebuild failed")
            raise
    return count


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    count = rebuild_invoices()
    print(f"Rebuilt invoices: {count}")


if __name__ == "__main__":
    main()
