from dataclasses import asdict

from fastapi import APIRouter, Depends
from fastapi.exceptions import HTTPException

from app.dependencies import get_ledger
from marmita_ops.core.report import build_report, format_report
from marmita_ops.errors import StoreError

router = APIRouter(prefix="/report", tags=["report"])


@router.get("")
def report_page(ledger=Depends(get_ledger)):
    try:
        report = build_report(ledger)
    except StoreError:
        raise HTTPException(status_code=503, detail="Ledger unavailable")
    return {**asdict(report), "text": format_report(report)}
