from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import PayrollComponents, PayrollRecord


class PayrollRepository(Protocol):
    def get_latest_for_user(self, user_id: int) -> Optional[PayrollRecord]:
        """Most recent row by effective date."""

        raise NotImplementedError

    def upsert_current(self, *, user_id: int, components: PayrollComponents, effective_date: date) -> PayrollRecord:
        """Overwrite the latest row (re-stamping its effective date) or insert the first one.

        Returns the stored row with the store-computed net salary.
        """

        raise NotImplementedError
