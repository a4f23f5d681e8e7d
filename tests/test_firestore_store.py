"""
Tests for the Firestore store against a mocked client
"""

from unittest.mock import MagicMock, patch

import pytest
from google.api_core import exceptions as google_exceptions

from app.core.exceptions import DatabaseError, DuplicateParticipant, EventIdTaken, SlotTaken
from app.services.repositories import FirestoreStore


@pytest.fixture(autouse=True)
def run_transactions_inline():
    # Call the transaction body once with the mocked transaction instead of the retry wrapper
    with patch("app.services.repositories.firestore.transactional", lambda fn: fn):
        yield


def submit_named(store, votes, exclusive=False):
    return store.record_submission(
        event_id="eventra-3f2a9c1e-AbC12",
        participant_id=None,
        participant_name="P1",
        participant_email="p1@acme.io",
        user_id=None,
        is_anonymous=False,
        votes=votes,
        voter_email="p1@acme.io",
        exclusive=exclusive,
    )


def participant_doc(doc_id, availability):
    doc = MagicMock(id=doc_id)
    doc.to_dict.return_value = {"availability": availability}
    return doc


def test_existing_event_id_reported_as_taken():
    client = MagicMock()
    client.collection.return_value.document.return_value.create.side_effect = google_exceptions.AlreadyExists("exists")

    with pytest.raises(EventIdTaken):
        FirestoreStore(client).create_event({"id": "eventra-3f2a9c1e-AbC12"}, [])


def test_named_participant_uses_email_document_id():
    client = MagicMock()
    participants = client.collection.return_value.document.return_value.collection.return_value
    participants.document.return_value.id = "5d41402abc4b2a76"
    transaction = client.transaction.return_value

    record = submit_named(FirestoreStore(client), {1: True, 2: False})

    participants.document.assert_any_call(FirestoreStore._participant_doc_id("p1@acme.io"))
    ref, data = transaction.create.call_args.args
    assert ref is participants.document.return_value
    assert data["participant_email"] == "p1@acme.io"
    transaction.set.assert_called_once()
    assert record.id == "5d41402abc4b2a76"
    assert [(a.time_slot_id, a.vote) for a in record.availability] == [(1, True), (2, False)]


def test_one_on_one_slot_held_by_other_participant_rejected():
    client = MagicMock()
    participants = client.collection.return_value.document.return_value.collection.return_value
    participants.document.return_value.id = "5d41402abc4b2a76"
    participants.get.return_value = [
        participant_doc("9c1185a5c5e9fc54", [{"time_slot_id": 1, "vote": True}, {"time_slot_id": 2, "vote": False}]),
    ]
    transaction = client.transaction.return_value

    with pytest.raises(SlotTaken) as exc:
        submit_named(FirestoreStore(client), {1: True}, exclusive=True)

    assert exc.value.slot_ids == [1]
    participants.get.assert_called_once_with(transaction=transaction)
    transaction.create.assert_not_called()
    transaction.set.assert_not_called()


def test_one_on_one_ignores_own_booking_and_declined_slots():
    client = MagicMock()
    participants = client.collection.return_value.document.return_value.collection.return_value
    participants.document.return_value.id = "5d41402abc4b2a76"
    participants.get.return_value = [
        participant_doc("5d41402abc4b2a76", [{"time_slot_id": 1, "vote": True}]),
        participant_doc("9c1185a5c5e9fc54", [{"time_slot_id": 2, "vote": False}]),
    ]

    record = submit_named(FirestoreStore(client), {1: True, 2: True}, exclusive=True)

    client.transaction.return_value.create.assert_called_once()
    assert record.id == "5d41402abc4b2a76"


def test_concurrent_duplicate_maps_to_domain_signal():
    client = MagicMock()
    client.transaction.return_value.create.side_effect = google_exceptions.AlreadyExists("exists")

    with pytest.raises(DuplicateParticipant):
        submit_named(FirestoreStore(client), {1: True})


def test_backend_failure_maps_to_database_error():
    client = MagicMock()
    client.transaction.return_value.set.side_effect = google_exceptions.ServiceUnavailable("down")

    with pytest.raises(DatabaseError):
        FirestoreStore(client).record_submission(
            event_id="eventra-3f2a9c1e-AbC12",
            participant_id=None,
            participant_name="Anonymous",
            participant_email=None,
            user_id=None,
            is_anonymous=True,
            votes={1: True},
            voter_email=None,
        )
