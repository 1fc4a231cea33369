"""
Audit Log Service - records every successful mutation.

Each entry goes to the `followuply.audit` logger and, when a sheet is
configured, to a dedicated "Audit Log" worksheet in Google Sheets.
Fire-and-forget: never crashes the request. Routes go through AuditTrail,
which defers the write to a background task so the sheet call runs in the
threadpool after the response is sent.
"""
import base64
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import gspread
from google.oauth2.service_account import Credentials

from followuply.config import config

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("followuply.audit")

AUDIT_TAB = "Audit Log"
AUDIT_HEADERS = ["Timestamp", "User ID", "Action", "Entity Type", "Entity ID", "Details"]
SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class AuditService:
    """Audit logging to the log stream and, optionally, Google Sheets"""

    def __init__(self, worksheet=None, sheet_id: Optional[str] = None, credentials_b64: Optional[str] = None):
        self._worksheet = worksheet
        self._sheet_id = config.AUDIT_SHEET_ID if sheet_id is None else sheet_id
        self._credentials_b64 = config.GOOGLE_SERVICE_ACCOUNT_B64 if credentials_b64 is None else credentials_b64
        self._init_done = worksheet is not None

    @property
    def sheet_enabled(self) -> bool:
        return self._worksheet is not None or bool(self._sheet_id and self._credentials_b64)

    def _get_worksheet(self):
        """Lazy-init: get or create the Audit Log worksheet"""
        if self._init_done:
            return self._worksheet
        if not self.sheet_enabled:
            return None

        # One attempt per process; a broken sheet should not cost every request
        self._init_done = True
        try:
            sa_info = json.loads(base64.b64decode(self._credentials_b64).decode("utf-8"))
            credentials = Credentials.from_service_account_info(sa_info, scopes=SCOPES)
            sheet = gspread.authorize(credentials).open_by_key(self._sheet_id)

            try:
                self._worksheet = sheet.worksheet(AUDIT_TAB)
            except gspread.WorksheetNotFound:
                self._worksheet = sheet.add_worksheet(title=AUDIT_TAB, rows=2000, cols=len(AUDIT_HEADERS))
                self._worksheet.append_row(AUDIT_HEADERS)
                logger.info("Created Audit Log worksheet")
        except Exception as e:
            logger.error(f"Failed to init audit worksheet: {e}")
            self._worksheet = None
        return self._worksheet

    def log_action(
        self,
        user_id: str,
        action: str,
        entity_type: str = "",
        entity_id: str = "",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Log an action. Fire-and-forget - catches all exceptions.

        Actions: client_created, client_updated, client_deleted, client_restored,
                 invoice_created, invoice_updated, invoice_deleted, invoice_paid,
                 reminder_created, reminder_completed, expense_created, ...
        """
        detail_text = json.dumps(details, default=str) if details else ""
        audit_logger.info(
            f"user={user_id} action={action} entity={entity_type}:{entity_id} {detail_text}".rstrip()
        )

        try:
            ws = self._get_worksheet()
            if not ws:
                return

            ws.append_row([
                datetime.now(timezone.utc).isoformat(),
                user_id,
                action,
                entity_type,
                str(entity_id),
                detail_text
            ])
        except Exception as e:
            # Never crash - audit is non-critical
            logger.warning(f"Audit log failed ({action}): {e}")


class AuditTrail:
    """Request-scoped handle: queues log_action on the request's background tasks"""

    def __init__(self, service: AuditService, background):
        self.service = service
        self._background = background

    def log_action(self, *args, **kwargs):
        self._background.add_task(self.service.log_action, *args, **kwargs)


# Singleton
_audit_service: Optional[AuditService] = None


def get_audit_service() -> AuditService:
    global _audit_service
    if _audit_service is None:
        _audit_service = AuditService()
    return _audit_service
