import logging

from followuply.services.audit_service import AuditService


class BrokenWorksheet:
    def append_row(self, row):
        raise RuntimeError("quota exceeded")


def test_actions_are_appended_to_the_sheet(audit, worksheet, user_id):
    audit.log_action(user_id, "client_created", "client", "c-1", {"name": "Jane"})

    assert len(worksheet.rows) == 1
    _, logged_user, action, entity_type, entity_id, details = worksheet.rows[0]
    assert (logged_user, action, entity_type, entity_id) == (user_id, "client_created", "client", "c-1")
    assert details == '{"name": "Jane"}'


def test_actions_are_logged_even_without_a_sheet(caplog, user_id):
    service = AuditService(sheet_id="", credentials_b64="")
    assert not service.sheet_enabled

    with caplog.at_level(logging.INFO, logger="followuply.audit"):
        service.log_action(user_id, "invoice_paid", "invoice", "i-1")

    assert any("action=invoice_paid" in r.getMessage() for r in caplog.records)


def test_sheet_failures_never_raise(user_id):
    service = AuditService(worksheet=BrokenWorksheet())
    service.log_action(user_id, "client_deleted", "client", "c-1")


def test_bad_credentials_disable_the_sheet(user_id):
    service = AuditService(sheet_id="sheet", credentials_b64="not base64 json")
    service.log_action(user_id, "client_deleted", "client", "c-1")
    assert service._get_worksheet() is None
