"""
Tests for the AuditService.

Every role can write the audit trail through the service even
though no role can insert into it directly. Only auditors and
managers can read it back.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select, func

from secure_banking.exceptions import UnauthorizedError
from secure_banking.models import AuditAction, AuditLog
from secure_banking.security.identity import Principal
from secure_banking.services.audit_service import AuditService


def an_hour_ago():
    return datetime.utcnow() - timedelta(hours=1)


def audit_count(db_session):
    return db_session.execute(select(func.count(AuditLog.id))).scalar()


class TestRecord:

    @pytest.mark.parametrize("role_fixture", ["teller", "manager", "auditor"])
    def test_every_role_can_record(self, db_session, request, role_fixture):
        principal = request.getfixturevalue(role_fixture)
        service = AuditService(db_session)

        entry = service.record(
            principal, AuditAction.CREATE, "CUSTOMERS", 7,
            new_value="New customer: A",
        )

        assert entry.id is not None
        assert entry.principal == principal.name
        assert entry.action_type == "CREATE"
        assert entry.affected_entity == "CUSTOMERS"
        assert entry.affected_id == 7
        assert entry.old_value is None
        assert entry.new_value == "New customer: A"
        assert entry.timestamp is not None

    def test_record_commits(self, db_session, teller, session_factory):
        AuditService(db_session).record(teller, "VIEW", "CUSTOMERS", 1)

        other = session_factory()
        try:
            assert other.execute(select(func.count(AuditLog.id))).scalar() == 1
        finally:
            other.close()

    def test_principal_without_role_cannot_record(self, db_session, nobody):
        with pytest.raises(UnauthorizedError):
            AuditService(db_session).record(nobody, "CREATE", "CUSTOMERS", 1)
        assert audit_count(db_session) == 0

    def test_entity_name_is_taken_as_given(self, db_session, teller):
        entry = AuditService(db_session).record(
            teller, "CUSTOM_ACTION", "NOT_A_TABLE", None,
            old_value="anything", new_value="goes",
        )
        assert entry.affected_entity == "NOT_A_TABLE"
        assert entry.affected_id is None

    def test_origin_defaults_to_principal_origin(self, db_session, staff):
        principal = Principal("teller1", origin="10.0.0.7")
        entry = AuditService(db_session).record(principal, "VIEW", "ACCOUNTS", 3)
        assert entry.origin == "10.0.0.7"

    def test_explicit_origin_wins(self, db_session, staff):
        principal = Principal("teller1", origin="10.0.0.7")
        entry = AuditService(db_session).record(
            principal, "VIEW", "ACCOUNTS", 3, origin="192.168.1.1"
        )
        assert entry.origin == "192.168.1.1"


class TestQuery:

    def _record_three(self, db_session, staff):
        service = AuditService(db_session)
        service.record(staff["teller"], "CREATE", "CUSTOMERS", 1)
        service.record(staff["manager"], "UPDATE", "CUSTOMERS", 1)
        service.record(staff["teller"], "VIEW", "CUSTOMERS", 1)

    def test_teller_cannot_query(self, db_session, teller):
        with pytest.raises(UnauthorizedError):
            AuditService(db_session).query(teller, an_hour_ago())

    @pytest.mark.parametrize("role_fixture", ["auditor", "manager"])
    def test_auditor_and_manager_can_query(
        self, db_session, staff, request, role_fixture
    ):
        self._record_three(db_session, staff)
        principal = request.getfixturevalue(role_fixture)

        entries = list(AuditService(db_session).query(principal, an_hour_ago()))
        assert len(entries) == 3

    def test_newest_first(self, db_session, staff, auditor):
        self._record_three(db_session, staff)

        entries = list(AuditService(db_session).query(auditor, an_hour_ago()))
        assert [e.action_type for e in entries] == ["VIEW", "UPDATE", "CREATE"]
        ids = [e.id for e in entries]
        assert ids == sorted(ids, reverse=True)

    def test_principal_filter(self, db_session, staff, auditor):
        self._record_three(db_session, staff)

        entries = list(AuditService(db_session).query(
            auditor, an_hour_ago(), principal_filter="teller1"
        ))
        assert len(entries) == 2
        assert {e.principal for e in entries} == {"teller1"}

    def test_time_window(self, db_session, staff, auditor):
        self._record_three(db_session, staff)
        db_session.add(AuditLog(
            principal="old", action_type="CREATE", affected_entity="CUSTOMERS",
            timestamp=datetime.utcnow() - timedelta(days=30),
        ))
        db_session.commit()

        service = AuditService(db_session)
        recent = list(service.query(auditor, an_hour_ago()))
        everything = list(service.query(
            auditor, datetime.utcnow() - timedelta(days=31)
        ))
        older_only = list(service.query(
            auditor,
            datetime.utcnow() - timedelta(days=31),
            end_time=datetime.utcnow() - timedelta(days=29),
        ))

        assert len(recent) == 3
        assert len(everything) == 4
        assert [e.principal for e in older_only] == ["old"]

    def test_offset_aware_bounds_are_converted_to_utc(self, db_session, staff, auditor):
        self._record_three(db_session, staff)
        plus_five = timezone(timedelta(hours=5))
        start = datetime.now(timezone.utc).astimezone(plus_five) - timedelta(minutes=5)

        service = AuditService(db_session)
        assert len(list(service.query(auditor, start))) == 3

        # Window closes before any of the entries were written
        too_early = list(service.query(
            auditor, start - timedelta(hours=1), end_time=start - timedelta(minutes=30)
        ))
        assert too_early == []

    def test_trail_is_lazy_and_restartable(self, db_session, staff, auditor):
        trail = AuditService(db_session).query(
            auditor, an_hour_ago(), end_time=datetime.utcnow() + timedelta(hours=1)
        )

        # Written after the trail was built, still seen when iterated
        self._record_three(db_session, staff)

        first = [e.id for e in trail]
        second = [e.id for e in trail]
        assert len(first) == 3
        assert first == second

    def test_format_lines(self, db_session, staff, auditor):
        AuditService(db_session).record(staff["teller"], "CREATE", "CUSTOMERS", 42)

        lines = AuditService(db_session).query(auditor, an_hour_ago()).format_lines()
        assert len(lines) == 1
        assert "teller1" in lines[0]
        assert "CREATE" in lines[0]
        assert lines[0].endswith("ID: 42")
