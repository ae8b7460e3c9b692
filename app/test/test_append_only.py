"""
Tests for the append-only guard on slips, movements and audit events
"""

import pytest
from app import db
from app.buisness.core.errors import ImmutableRecordError
from app.buisness.slips.slip_engine import SlipEngine
from app.data.core.audit_event import AuditEvent
from app.data.inventory.movement_log import MovementLog
from app.data.slips.signature import Signature
from app.data.slips.slip import Slip
from app.data.slips.slip_line import SlipLine


@pytest.fixture
def slip(world, actor, slip_payload):
    return SlipEngine().create_slip(
        slip_payload('RETURN', world['property'], world['store'], [{'item_id': world['soap'].id, 'qty': '3'}]),
        actor,
    )


def test_movement_cannot_be_edited(slip):
    movement = MovementLog.query.filter_by(slip_id=slip.id).one()
    movement.note = 'rewritten history'

    with pytest.raises(ImmutableRecordError) as exc_info:
        db.session.commit()
    db.session.rollback()

    assert exc_info.value.model_name == 'MovementLog'
    assert exc_info.value.record_id == movement.id
    assert MovementLog.query.filter_by(slip_id=slip.id).one().note is None


def test_audit_event_cannot_be_deleted(slip):
    event = AuditEvent.query.first()
    db.session.delete(event)

    with pytest.raises(ImmutableRecordError):
        db.session.flush()
    db.session.rollback()

    assert AuditEvent.query.count() == 1


@pytest.mark.parametrize('model', [Slip, SlipLine, Signature])
def test_slip_records_cannot_be_deleted(slip, model):
    record = model.query.first()
    db.session.delete(record)

    with pytest.raises(ImmutableRecordError):
        db.session.flush()
    db.session.rollback()


def test_slip_header_cannot_be_edited(slip):
    record = db.session.get(Slip, slip.id)
    record.notes = 'changed after signing'

    with pytest.raises(ImmutableRecordError):
        db.session.flush()
    db.session.rollback()

    assert db.session.get(Slip, slip.id).notes is None


def test_loading_relationships_does_not_trip_guard(slip):
    """Touching collections without changing columns is not an update"""
    record = db.session.get(Slip, slip.id)
    assert len(record.lines) == 1
    assert record.signature is not None
    db.session.commit()
