"""Payroll snapshots."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.core.errors import bad_request
from app.db.models import Payslip, User
from app.schemas.dashboard import PayslipCreate

logger = logging.getLogger(__name__)


def get_latest_payslip(db: Session, user_id: UUID) -> Payslip | None:
    return db.query(Payslip).filter(
        Payslip.user_id == user_id,
    ).order_by(Payslip.year.desc(), Payslip.month.desc()).first()


def list_user_payslips(db: Session, user_id: UUID) -> list[Payslip]:
    return db.query(Payslip).filter(
        Payslip.user_id == user_id,
    ).order_by(
        Payslip.year.desc(), Payslip.month.desc(), Payslip.created_at.desc()
    ).all()


def list_all_payslips(db: Session) -> list[Payslip]:
    return db.query(Payslip).options(
        joinedload(Payslip.user),
    ).order_by(Payslip.created_at.desc()).all()


def create_payslip(db: Session, data: PayslipCreate) -> Payslip:
    """Record a payslip; net defaults to basic + allowances - deductions."""
    if not db.get(User, data.user_id):
        raise bad_request("Employee not found")
    if data.present_days > data.working_days:
        raise bad_request("present_days cannot exceed working_days")

    net = data.net_salary
    if net is None:
        net = round(data.basic_salary + data.allowances - data.deductions, 2)

    payslip = Payslip(
        user_id=data.user_id,
        month=data.month,
        year=data.year,
        basic_salary=data.basic_salary,
        allowances=data.allowances,
        deductions=data.deductions,
        net_salary=net,
        working_days=data.working_days,
        present_days=data.present_days,
        paid_at=data.paid_at,
    )
    db.add(payslip)
    db.commit()
    db.refresh(payslip)
    logger.info("Payslip %s/%s created for user_id=%s", data.month, data.year, data.user_id)
    return payslip
