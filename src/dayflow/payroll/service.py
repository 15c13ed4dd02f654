from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, Mapping, Optional, Union

from ..common.datetime_utils import now_local
from ..common.validators import parse_money
from ..core.constants import MONEY_MAX
from ..core.exceptions import NotFoundError, ValidationError
from ..identity.authorization import AuthorizationContext
from ..identity.repository import ProfileRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import COMPONENT_FIELDS, PayrollComponents, PayrollRecord, PayrollSummary
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    """Admin-maintained salary structure with a derived net salary.

    One current record per employee: saving again overwrites the latest row and
    moves its effective date to today instead of appending history.
    """

    def __init__(
        self,
        payroll: PayrollRepository,
        profiles: ProfileRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._profiles = profiles
        self._calculator = calculator or StandardPayrollCalculator()

    def upsert(
        self,
        ctx: AuthorizationContext,
        *,
        target_user_id: int,
        components: Union[PayrollComponents, Mapping[str, Any]],
        today: Optional[date] = None,
    ) -> PayrollRecord:
        ctx.require_admin()

        if not self._profiles.get_by_id(int(target_user_id)):
            raise NotFoundError("Employee not found")

        current = self._payroll.get_latest_for_user(int(target_user_id))
        merged = self._merge(current, components)
        if abs(self._calculator.net_salary(merged)) > MONEY_MAX:
            raise ValidationError(errors={"net_salary": f"net salary cannot exceed {MONEY_MAX}"})

        record = self._payroll.upsert_current(
            user_id=int(target_user_id),
            components=merged,
            effective_date=today or now_local().date(),
        )
        logger.info(
            "payroll for user %s %s by %s (net=%s)",
            target_user_id,
            "updated" if current else "created",
            ctx.user_id,
            record.net_salary,
        )
        return record

    def view(self, ctx: AuthorizationContext, *, target_user_id: int) -> Optional[PayrollRecord]:
        """Latest payroll, or None when nothing is configured yet (normal for new hires)."""
        ctx.require_owner_or_admin(target_user_id)
        return self._payroll.get_latest_for_user(int(target_user_id))

    def summarize(self, record: PayrollRecord) -> PayrollSummary:
        return PayrollSummary(
            total_earnings=self._calculator.total_earnings(record.components),
            total_deductions=self._calculator.total_deductions(record.components),
            net_salary=record.net_salary,
        )

    @staticmethod
    def _merge(
        current: Optional[PayrollRecord],
        components: Union[PayrollComponents, Mapping[str, Any]],
    ) -> PayrollComponents:
        if isinstance(components, PayrollComponents):
            changes: Mapping[str, Any] = asdict(components)
        else:
            changes = components

        errors: Dict[str, str] = {}
        if "net_salary" in changes:
            errors["net_salary"] = "net_salary is computed and cannot be set"
        unknown = set(changes) - set(COMPONENT_FIELDS) - {"net_salary"}
        for field_name in sorted(unknown):
            errors[field_name] = f"Unknown payroll field: {field_name}"

        base = asdict(current.components) if current else asdict(PayrollComponents())
        for field_name in COMPONENT_FIELDS:
            if field_name in changes:
                base[field_name] = parse_money(changes[field_name], field_name, errors)

        if errors:
            raise ValidationError(errors=errors)
        return PayrollComponents(**base)
