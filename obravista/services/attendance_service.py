"""Daily attendance (frequencia), deductions and the period payroll report."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import func, select

from obravista.core.enums import ContractType
from obravista.core.exceptions import ValidationError
from obravista.domain.attendance import assert_presence
from obravista.domain.budget import money
from obravista.domain.payroll import PayTerms, gross_pay, net_pay, period_days
from obravista.models import AttendanceRecord, Contractor, Deduction, Site
from obravista.schemas.attendance import (
    AttendanceEntry,
    AttendanceUpsertRequest,
    DeductionCreateRequest,
    PayrollLine,
)
from obravista.services.base_service import BaseService

logger = logging.getLogger(__name__)


class AttendanceService(BaseService):
    def daily_sheet(self, day: date) -> list[AttendanceEntry]:
        """One entry per tracked contractor for ``day``; contractors without a record default to absent."""
        contractors = self.db.scalars(
            select(Contractor)
            .where(Contractor.active.is_(True), Contractor.uses_attendance.is_(True))
            .order_by(Contractor.name)
        ).all()
        records = {
            record.contractor_id: record
            for record in self.db.scalars(select(AttendanceRecord).where(AttendanceRecord.date == day))
        }

        entries: list[AttendanceEntry] = []
        for contractor in contractors:
            record = records.get(contractor.id)
            entries.append(
                AttendanceEntry(
                    contractor_id=contractor.id,
                    name=contractor.name,
                    specialty=contractor.specialty_name,
                    record_id=record.id if record else None,
                    present=record.present if record else False,
                    site_id=record.site_id if record else None,
                    site_name=record.site.name if record and record.site else None,
                    note=record.note if record else None,
                )
            )
        return entries

    def upsert(self, payload: AttendanceUpsertRequest) -> AttendanceRecord:
        """Create or replace the single record for (date, contractor)."""
        presence = assert_presence(payload.present, payload.site_id)
        contractor = self._require(Contractor, payload.contractor_id, "Contractor")
        if not contractor.uses_attendance:
            raise ValidationError(f"Contractor {contractor.id} does not take part in daily attendance.")
        if presence.site_id is not None:
            self._require(Site, presence.site_id, "Site")

        record = self.db.scalars(
            select(AttendanceRecord).where(
                AttendanceRecord.date == payload.date,
                AttendanceRecord.contractor_id == contractor.id,
            )
        ).first()
        if record is None:
            record = AttendanceRecord(date=payload.date, contractor_id=contractor.id)
            self.db.add(record)
        record.present = presence.present
        record.site_id = presence.site_id
        record.note = payload.note
        self.commit()
        self.db.refresh(record)
        logger.info(
            "attendance.recorded",
            extra={
                "event": "attendance.recorded",
                "contractor_id": contractor.id,
                "date": payload.date.isoformat(),
                "present": presence.present,
            },
        )
        return record

    def list_deductions(
        self,
        contractor_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Deduction]:
        self._require(Contractor, contractor_id, "Contractor")
        query = select(Deduction).where(Deduction.contractor_id == contractor_id)
        if start is not None and end is not None:
            query = query.where(Deduction.date >= start, Deduction.date <= end)
        return list(self.db.scalars(query.order_by(Deduction.date.desc(), Deduction.id.desc())))

    def add_deduction(self, payload: DeductionCreateRequest) -> Deduction:
        self._require(Contractor, payload.contractor_id, "Contractor")
        deduction = Deduction(**payload.model_dump())
        self.db.add(deduction)
        self.commit()
        self.db.refresh(deduction)
        return deduction

    def payroll(self, start: date, end: date) -> list[PayrollLine]:
        """Amounts owed per contractor for [start, end].

        Lists active payroll (``clt``) contractors plus anyone present at least
        once in the period.
        """
        period_days(start, end)

        days_worked = dict(
            self.db.execute(
                select(AttendanceRecord.contractor_id, func.count(AttendanceRecord.id))
                .where(
                    AttendanceRecord.date >= start,
                    AttendanceRecord.date <= end,
                    AttendanceRecord.present.is_(True),
                )
                .group_by(AttendanceRecord.contractor_id)
            ).all()
        )
        deductions = dict(
            self.db.execute(
                select(Deduction.contractor_id, func.coalesce(func.sum(Deduction.amount), 0))
                .where(Deduction.date >= start, Deduction.date <= end)
                .group_by(Deduction.contractor_id)
            ).all()
        )

        lines: list[PayrollLine] = []
        for contractor in self.db.scalars(select(Contractor).order_by(Contractor.name)):
            worked = int(days_worked.get(contractor.id, 0))
            on_payroll = contractor.contract_type == ContractType.PAYROLL and contractor.active
            if not on_payroll and worked == 0:
                continue

            terms = PayTerms(
                contract_type=ContractType(contractor.contract_type),
                daily_rate=contractor.daily_rate,
                salary=contractor.salary,
                advance_amount=contractor.advance_amount,
                pay_day=contractor.pay_day,
                advance_day=contractor.advance_day,
            )
            gross = gross_pay(terms, worked, start, end)
            deducted = Decimal(str(deductions.get(contractor.id, 0)))
            lines.append(
                PayrollLine(
                    contractor_id=contractor.id,
                    name=contractor.name,
                    contract_type=terms.contract_type,
                    days_worked=worked,
                    gross=gross,
                    deductions=money(deducted),
                    total=net_pay(gross, deducted),
                    pix_key_type=contractor.pix_key_type.value if contractor.pix_key_type else None,
                    pix_key=contractor.pix_key,
                )
            )
        logger.info(
            "attendance.payroll_generated",
            extra={"event": "attendance.payroll_generated", "start": start.isoformat(), "end": end.isoformat()},
        )
        return lines
