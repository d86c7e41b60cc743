"""Integration tests for POST /api/events/bulk."""

import io
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.db.models import Event, EventImportBatch
from app.imports.service import EventImportService

HEADER = "school,date,title,department,time,description"


def _post(client, csv_text, mode="preview", **extra):
    return client.post("/api/events/bulk", json={"csvData": csv_text, "mode": mode, **extra})


def _key_count(db, school="wlhs", date="2025-10-10", title="Homecoming"):
    return (
        db.query(Event)
        .filter(Event.school == school, Event.date == date, Event.title == title)
        .count()
    )


@pytest.fixture
def existing_event(db):
    event = Event(
        school="wlhs",
        date="2025-10-10",
        title="Homecoming",
        department="ASB",
        time="6pm",
        description="Original",
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


DUPLICATE_CSV = f"{HEADER}\nwlhs,2025-10-10,Homecoming,Life,7pm,Updated\n"


class TestEventsPreview:
    """Preview classification."""

    def test_valid_rows(self, client, db):
        csv_text = f"{HEADER}\nwlhs,2025-10-10,Homecoming,ASB,7pm,Dance\nwvhs,10/11/2025,Spirit Day,,,\n"

        response = _post(client, csv_text)

        assert response.status_code == 200
        data = response.json()
        assert data["summary"] == {"total": 2, "valid": 2, "invalid": 0, "duplicates": 0}
        assert data["headers"] == ["school", "date", "title", "department", "time", "description"]
        assert data["valid"][1]["data"]["date"] == "2025-10-11"
        assert data["valid"][1]["data"]["department"] is None
        assert data["valid"][0]["isDuplicate"] is False
        assert len(data["sampleValid"]) == 2
        assert db.query(Event).count() == 0

    def test_unknown_school_is_invalid(self, client):
        csv_text = f"{HEADER}\ntx,2025-10-10,Homecoming,,,\nwlhs,2025-10-11,Pep Rally,,,\n"

        data = _post(client, csv_text).json()

        assert data["summary"]["valid"] == 1
        assert data["summary"]["invalid"] == 1
        invalid = data["invalid"][0]
        assert invalid["row"] == 2
        assert "'wlhs' or 'wvhs'" in invalid["errors"][0]
        assert all(v["row"] != 2 for v in data["valid"])

    def test_sample_valid_capped_at_five(self, client):
        rows = "\n".join(f"wlhs,2025-10-{day:02d},Event {day},,," for day in range(1, 9))

        data = _post(client, f"{HEADER}\n{rows}\n").json()

        assert data["summary"]["valid"] == 8
        assert len(data["sampleValid"]) == 5

    def test_duplicate_flagged_but_valid(self, client, existing_event):
        data = _post(client, DUPLICATE_CSV).json()

        assert data["summary"] == {"total": 1, "valid": 1, "invalid": 0, "duplicates": 1}
        assert data["valid"][0]["isDuplicate"] is True
        assert data["duplicates"][0]["existingId"] == existing_event.id
        assert data["duplicates"][0]["existing"]["title"] == "Homecoming"

    def test_missing_headers(self, client):
        response = _post(client, "school,title\nwlhs,Homecoming\n")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Missing required headers: date"
        assert data["requiredHeaders"] == ["school", "date", "title"]


class TestEventsCommit:
    """Commit writes events and one batch record."""

    def test_commit_inserts_rows(self, client, db):
        csv_text = f"{HEADER}\nwlhs,2025-10-10,Homecoming,ASB,7pm,Dance\nwvhs,2025-10-11,Spirit Day,,,\n"

        response = _post(client, csv_text, mode="commit")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["imported"] == 2
        assert data["summary"]["inserted"] == 2
        assert len(data["batchId"]) == 36

        events = db.query(Event).order_by(Event.id).all()
        assert [e.title for e in events] == ["Homecoming", "Spirit Day"]
        assert all(e.import_batch_id == data["batchId"] for e in events)
        assert events[0].department == "ASB"
        assert events[1].time is None

        batch = db.get(EventImportBatch, data["batchId"])
        assert batch.imported_by == "admin"
        assert batch.success_count == 2
        assert batch.status == "completed"
        assert batch.summary["insertedCount"] == 2
        assert batch.summary["totalRows"] == 2

    def test_invalid_rows_counted_as_errors(self, client, db):
        csv_text = f"{HEADER}\nwlhs,2025-10-10,Homecoming,,,\nwlhs,,No date,,,\n"

        data = _post(client, csv_text, mode="commit").json()

        batch = db.get(EventImportBatch, data["batchId"])
        assert batch.error_count == 1
        assert batch.success_count == 1

    def test_no_valid_rows_rejected(self, client, db):
        csv_text = f"{HEADER}\ntx,2025-10-10,Homecoming,,,\n"

        response = _post(client, csv_text, mode="commit")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "No valid events to import"
        assert data["summary"]["invalid"] == 1
        assert db.query(EventImportBatch).count() == 0

    def test_second_identical_import_flags_every_row(self, client, db):
        csv_text = f"{HEADER}\nwlhs,2025-10-10,Homecoming,,,\nwvhs,2025-10-11,Spirit Day,,,\n"

        _post(client, csv_text, mode="commit")
        data = _post(client, csv_text).json()

        assert all(v["isDuplicate"] for v in data["valid"])
        assert data["summary"]["duplicates"] == 2

    def test_insert_failure_does_not_abort_other_rows(self, client, db):
        original_insert = EventImportService._insert

        def flaky_insert(self, record, batch_id):
            if record.data["title"] == "Broken":
                raise SQLAlchemyError("database is locked")
            return original_insert(self, record, batch_id)

        csv_text = (
            f"{HEADER}\n"
            "wlhs,2025-10-10,Homecoming,,,\n"
            "wlhs,2025-10-11,Broken,,,\n"
            "wvhs,2025-10-12,Spirit Day,,,\n"
        )

        with patch.object(EventImportService, "_insert", flaky_insert):
            response = _post(client, csv_text, mode="commit")

        assert response.status_code == 200
        data = response.json()
        assert data["imported"] == 2
        assert data["summary"]["inserted"] == 2
        assert len(data["errors"]) == 1
        failure = data["errors"][0]
        assert failure["row"] == 3
        assert failure["data"]["title"] == "Broken"
        assert failure["error"] == "database is locked"

        titles = sorted(e.title for e in db.query(Event).all())
        assert titles == ["Homecoming", "Spirit Day"]
        batch = db.get(EventImportBatch, data["batchId"])
        assert batch.success_count == 2
        assert batch.error_count == 1

    def test_replace_failure_leaves_existing_event(self, client, db, existing_event):
        def failing_replace(self, verdict, batch_id):
            raise SQLAlchemyError("database is locked")

        csv_text = DUPLICATE_CSV + "wlhs,2025-10-12,Pep Rally,,,\n"

        with patch.object(EventImportService, "_replace", failing_replace):
            data = _post(client, csv_text, mode="commit", duplicateAction="replace").json()

        assert data["imported"] == 1
        assert [f["row"] for f in data["errors"]] == [2]
        db.refresh(existing_event)
        assert existing_event.description == "Original"
        assert existing_event.import_batch_id is None
        batch = db.get(EventImportBatch, data["batchId"])
        assert (batch.success_count, batch.error_count) == (1, 1)


class TestDuplicateActions:
    """skip / replace / importAll handling of flagged duplicates."""

    def test_skip_leaves_existing_untouched(self, client, db, existing_event):
        data = _post(client, DUPLICATE_CSV, mode="commit", duplicateAction="skip").json()

        assert data["imported"] == 0
        assert data["duplicateAction"] == "skip"
        db.refresh(existing_event)
        assert existing_event.department == "ASB"
        assert existing_event.time == "6pm"
        assert existing_event.description == "Original"
        assert existing_event.import_batch_id is None
        assert _key_count(db) == 1

    def test_skip_is_default(self, client, db, existing_event):
        data = _post(client, DUPLICATE_CSV, mode="commit").json()

        assert data["imported"] == 0
        assert data["duplicateAction"] == "skip"
        assert _key_count(db) == 1

    def test_replace_updates_matched_event(self, client, db, existing_event):
        original_id = existing_event.id

        data = _post(client, DUPLICATE_CSV, mode="commit", duplicateAction="replace").json()

        assert data["imported"] == 1
        db.refresh(existing_event)
        assert existing_event.id == original_id
        assert existing_event.department == "Life"
        assert existing_event.time == "7pm"
        assert existing_event.description == "Updated"
        assert existing_event.import_batch_id == data["batchId"]
        assert _key_count(db) == 1

    def test_import_all_adds_duplicate_rows(self, client, db, existing_event):
        csv_text = DUPLICATE_CSV + "wlhs,2025-10-10,Homecoming,Staff,8pm,Second copy\n"

        data = _post(client, csv_text, mode="commit", duplicateAction="importAll").json()

        assert data["imported"] == 2
        assert _key_count(db) == 3
        db.refresh(existing_event)
        assert existing_event.description == "Original"

    def test_mixed_clean_and_duplicate_rows_with_skip(self, client, db, existing_event):
        csv_text = DUPLICATE_CSV + "wlhs,2025-10-12,Pep Rally,,,\n"

        data = _post(client, csv_text, mode="commit").json()

        assert data["imported"] == 1
        assert db.query(Event).count() == 2

    def test_invalid_duplicate_action_rejected(self, client, db, existing_event):
        response = _post(client, DUPLICATE_CSV, mode="commit", duplicateAction="merge")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid duplicateAction"
        assert _key_count(db) == 1

    def test_multipart_duplicate_action(self, client, db, existing_event):
        response = client.post(
            "/api/events/bulk",
            files={"file": ("events.csv", io.BytesIO(DUPLICATE_CSV.encode()), "text/csv")},
            data={"mode": "commit", "duplicateAction": "importAll"},
        )

        assert response.status_code == 200
        assert _key_count(db) == 2

    def test_raw_body_always_skips(self, client, db, existing_event):
        response = client.post(
            "/api/events/bulk?mode=commit",
            content=DUPLICATE_CSV,
            headers={"content-type": "text/plain"},
        )

        assert response.status_code == 200
        assert response.json()["imported"] == 0
        assert _key_count(db) == 1
