"""Escalation report routes."""
from fastapi import APIRouter, Depends, Query, status

from groupchat.dependencies import get_store
from groupchat.schemas.report import ReportCreate, ReportOut
from groupchat.services import report_service
from groupchat.store import EntityStore

router = APIRouter()


@router.post("/", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def submit_report(payload: ReportCreate, store: EntityStore = Depends(get_store)):
    """File a report with the super admins (group admins only)."""
    with store.reading():
        report = report_service.submit_report(
            store,
            reporter_id=payload.reporter_id,
            subject=payload.subject,
            message=payload.message,
            report_type=payload.type,
            related_user_id=payload.related_user_id,
        )
        return ReportOut.model_validate(report)


@router.get("/", response_model=list[ReportOut])
def list_reports(admin_id: str = Query(...), store: EntityStore = Depends(get_store)):
    return [ReportOut.model_validate(r) for r in report_service.list_reports(store, admin_id)]
