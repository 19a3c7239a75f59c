"""Integration tests for AuditTrailService against a real database session

Tests cover:
- Best-effort writes that never break the audited business operation
- Filtering, pagination and newest-first ordering
- Decoding of stored payloads, including malformed ones
"""

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from audit.codec import REDACTED
from audit.schemas import AuditAction
from audit.service import AuditLogFilters, AuditTrailService
from models import AuditLog, Donor


BASE = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def audit(db_session):
    return AuditTrailService(db_session)


class TestLog:

    def test_persists_sanitized_payload(self, db_session, audit, admin_user):
        entry = audit.log(
            action=AuditAction.UPDATE,
            entity_type="user",
            entity_id=admin_user.id,
            user_id=admin_user.id,
            ip_address="198.51.100.1",
            before={"role": "staff", "password": "old"},
            after={"role": "admin", "password": "new"},
        )
        db_session.commit()

        assert entry is not None
        stored = db_session.query(AuditLog).one()
        assert stored.action == "update"
        assert stored.ip_address == "198.51.100.1"
        assert stored.created_at is not None

        payload = json.loads(stored.changes)
        assert payload["before"]["password"] == REDACTED
        assert payload["diff"] == {"role": {"before": "staff", "after": "admin"}}

    def test_entry_without_payload(self, db_session, audit):
        audit.log(action=AuditAction.LOGIN, entity_type="user", entity_id=1)
        db_session.commit()
        assert db_session.query(AuditLog).one().changes is None

    def test_failed_insert_does_not_abort_business_write(self, db_session, audit, caplog):
        donor = Donor(first_name="Ada", last_name="Lovelace")
        db_session.add(donor)
        db_session.flush()

        with caplog.at_level(logging.ERROR, logger="audit.service"):
            # entity_type is NOT NULL, so the audit insert fails
            entry = audit.log(action=AuditAction.CREATE, entity_type=None, entity_id=donor.id)

        assert entry is None
        assert "Failed to persist audit trail entry: IntegrityError" in caplog.text

        db_session.commit()
        assert db_session.query(Donor).filter_by(first_name="Ada").count() == 1
        assert db_session.query(AuditLog).count() == 0

    def test_unserializable_payload_is_swallowed(self, db_session, audit, caplog):
        with caplog.at_level(logging.ERROR, logger="audit.service"):
            entry = audit.log(action=AuditAction.UPDATE, entity_type="event", metadata={"handle": object()})

        assert entry is None
        assert "TypeError" in caplog.text
        db_session.commit()
        assert db_session.query(AuditLog).count() == 0


class TestList:

    def test_empty_store(self, audit):
        result = audit.list()
        assert result.items == []
        assert result.total == 0
        assert result.total_pages == 1
        assert result.page == 1
        assert result.limit == 25

    def test_second_page_of_filtered_entries(self, audit, make_audit_log):
        for i in range(25):
            make_audit_log(BASE + timedelta(minutes=i), action="update", entity_id=i)
        for i in range(5):
            make_audit_log(BASE + timedelta(minutes=i), action="create", entity_id=100 + i)

        result = audit.list(AuditLogFilters(action=AuditAction.UPDATE), page=2, limit=10)

        assert result.total == 25
        assert result.total_pages == 3
        assert result.page == 2
        assert result.limit == 10
        # 11th to 20th newest entries
        assert [item.entity_id for item in result.items] == list(range(14, 4, -1))

    def test_out_of_range_pagination_falls_back(self, audit, make_audit_log):
        for i in range(30):
            make_audit_log(BASE + timedelta(minutes=i))

        result = audit.list(page=0, limit=500)
        assert result.page == 1
        assert result.limit == 25
        assert len(result.items) == 25
        assert result.total_pages == 2

    def test_ties_ordered_by_id(self, audit, make_audit_log):
        first = make_audit_log(BASE)
        second = make_audit_log(BASE)
        assert [item.id for item in audit.list().items] == [second.id, first.id]

    def test_date_bounds_are_inclusive(self, audit, make_audit_log):
        days = [BASE + timedelta(days=d) for d in range(4)]
        for day in days:
            make_audit_log(day, entity_id=days.index(day))

        result = audit.list(AuditLogFilters(start_date=days[1], end_date=days[2]))
        assert sorted(item.entity_id for item in result.items) == [1, 2]

        assert audit.list(AuditLogFilters(start_date=days[3])).total == 1
        assert audit.list(AuditLogFilters(end_date=days[0])).total == 1

    def test_date_bounds_include_entries_written_by_log(self, db_session, audit):
        entry = audit.log(action=AuditAction.LOGIN, entity_type="user", entity_id=1)
        db_session.commit()
        db_session.refresh(entry)
        created = entry.created_at

        assert audit.list(AuditLogFilters(start_date=created)).total == 1
        assert audit.list(AuditLogFilters(end_date=created)).total == 1
        assert audit.list(AuditLogFilters(start_date=created, end_date=created)).total == 1

    def test_entity_type_and_user_filters(self, audit, make_audit_log, admin_user):
        make_audit_log(BASE, entity_type="event", user_id=admin_user.id)
        make_audit_log(BASE, entity_type="event")
        make_audit_log(BASE, entity_type="user", user_id=admin_user.id)

        assert audit.list(AuditLogFilters(entity_type="event")).total == 2
        assert audit.list(AuditLogFilters(user_id=admin_user.id)).total == 2
        assert audit.list(AuditLogFilters(entity_type="event", user_id=admin_user.id)).total == 1

    def test_malformed_payload_decoded_as_none(self, audit, make_audit_log, caplog):
        make_audit_log(BASE, changes="{broken")
        make_audit_log(BASE + timedelta(minutes=1), changes='{"after": {"id": 1}}')

        with caplog.at_level(logging.WARNING, logger="audit.service"):
            items = audit.list().items

        assert items[0].changes == {"after": {"id": 1}}
        assert items[1].changes is None
        assert "Unable to parse audit log changes payload" in caplog.text


class TestFindOneAndExport:

    def test_find_one(self, db_session, audit):
        entry = audit.log(
            action=AuditAction.DELETE,
            entity_type="event_donor",
            entity_id=5,
            before={"status": "invited"},
        )
        db_session.commit()

        view = audit.find_one(entry.id)
        assert view.action == "delete"
        assert view.entity_type == "event_donor"
        assert view.changes == {"before": {"status": "invited"}}

    def test_find_missing(self, audit):
        assert audit.find_one(999) is None

    def test_export_is_unpaginated_and_newest_first(self, audit, make_audit_log):
        for i in range(30):
            make_audit_log(BASE + timedelta(minutes=i), entity_id=i)

        items = audit.export()
        assert len(items) == 30
        assert items[0].entity_id == 29
        assert items[-1].entity_id == 0

    def test_export_applies_filters(self, audit, make_audit_log):
        make_audit_log(BASE, action="login")
        make_audit_log(BASE, action="update")
        items = audit.export(AuditLogFilters(action=AuditAction.LOGIN))
        assert [item.action for item in items] == ["login"]
