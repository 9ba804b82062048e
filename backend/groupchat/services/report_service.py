"""Escalation reports: group admins file them, super admins read them.

Reports stay ``pending``; there is no triage workflow.
"""
import logging
from typing import Optional

from groupchat.errors import BadRequest, Forbidden
from groupchat.models.report import Report
from groupchat.services import roles
from groupchat.services.lookup import get_user_or_404
from groupchat.store import EntityStore

logger = logging.getLogger(__name__)


def submit_report(
    store: EntityStore,
    reporter_id: str,
    subject: str,
    message: str,
    report_type: str = "general",
    related_user_id: Optional[str] = None,
) -> Report:
    with store.transaction():
        reporter = get_user_or_404(store, reporter_id, "Reporter")
        if not (roles.is_global_group_admin(reporter) or roles.is_super_admin(reporter)):
            raise Forbidden("Only group admins may submit reports")
        if not (subject or "").strip() or not (message or "").strip():
            raise BadRequest("Subject and message are required")
        if related_user_id is not None:
            get_user_or_404(store, related_user_id, "Related user")

        report = store.insert_report(Report(
            reporter_id=reporter.id,
            subject=subject.strip(),
            message=message.strip(),
            type=report_type or "general",
            related_user_id=related_user_id,
        ))
    logger.info("Report %s (%s) submitted by %s", report.id, report.type, reporter_id)
    return report


def list_reports(store: EntityStore, admin_id: str) -> list[Report]:
    """All reports in submission order. Super admins only."""
    with store.reading():
        admin = get_user_or_404(store, admin_id, "Admin")
        if not roles.is_super_admin(admin):
            raise Forbidden("Only super admins may view reports")
        return [r.model_copy(deep=True) for r in store.list_reports()]
