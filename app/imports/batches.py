"""Undo and history for committed import batches."""

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.config import get_settings
from app.db.models import BatchStatus, Event, EventImportBatch, Material, MaterialImportBatch
from app.imports.exceptions import BatchNotFoundError
from app.imports.schemas import BatchResponse, ImportHistory, UndoneBatch, UndoResult

logger = logging.getLogger(__name__)
settings = get_settings()


class BatchService:
    """Undo and list import batches of one entity kind.

    Args:
        db: Database session.
        batch_model: Batch table model (materials or events).
        entity_model: Entity table whose rows carry ``import_batch_id``.
        entity_label: Plural noun used in messages.
    """

    def __init__(self, db: Session, batch_model: type, entity_model: type, entity_label: str):
        self.db = db
        self.batch_model = batch_model
        self.entity_model = entity_model
        self.entity_label = entity_label
        self.window_days = settings.undo_window_days

    def _cutoff(self) -> datetime:
        return datetime.utcnow() - timedelta(days=self.window_days)

    def undo(self, batch_id: str) -> UndoResult:
        """Delete every entity tagged with the batch and mark the batch undone.

        Args:
            batch_id: Identifier returned by the commit.

        Returns:
            UndoResult: Number of rows removed and the batch's identity.

        Raises:
            BatchNotFoundError: If the batch does not exist, is not
                ``completed``, or is older than the recency window.
        """
        batch = (
            self.db.query(self.batch_model)
            .filter(
                self.batch_model.id == batch_id,
                self.batch_model.status == BatchStatus.COMPLETED.value,
                self.batch_model.imported_at > self._cutoff(),
            )
            .first()
        )
        if not batch:
            raise BatchNotFoundError(batch_id, self.window_days)

        deleted = (
            self.db.query(self.entity_model)
            .filter(self.entity_model.import_batch_id == batch_id)
            .delete(synchronize_session=False)
        )
        batch.status = BatchStatus.UNDONE.value
        self.db.commit()

        logger.info("Undid import batch %s: removed %s %s", batch_id, deleted, self.entity_label)
        return UndoResult(
            message=f"Removed {deleted} {self.entity_label} from batch {batch_id}",
            deleted_count=deleted,
            batch=UndoneBatch(
                id=batch.id,
                imported_at=batch.imported_at,
                total_count=batch.total_count,
            ),
        )

    def history(self) -> ImportHistory:
        """Batches inside the recency window, newest first."""
        batches = (
            self.db.query(self.batch_model)
            .filter(self.batch_model.imported_at > self._cutoff())
            .order_by(self.batch_model.imported_at.desc())
            .limit(settings.history_limit)
            .all()
        )
        imports = [BatchResponse.model_validate(b) for b in batches]
        return ImportHistory(imports=imports, count=len(imports))


def get_material_batch_service(db: Session) -> BatchService:
    """Get the batch service for materials imports."""
    return BatchService(db, MaterialImportBatch, Material, "materials")


def get_event_batch_service(db: Session) -> BatchService:
    """Get the batch service for events imports."""
    return BatchService(db, EventImportBatch, Event, "events")
