from __future__ import annotations
import logging
from datetime import datetime, timedelta
from sqlalchemy import delete
from sqlalchemy.orm import Session

from .models import AuthSession, ReviewDraft, ReviewRecord, ChatMessageRow
from .settings import settings

logger = logging.getLogger(__name__)


def purge_older_than(db: Session, days: int | None = None) -> int:
	threshold = datetime.utcnow() - timedelta(days=days if days is not None else settings.retention_days)
	removed = 0

	for model in (ReviewDraft, ReviewRecord, ChatMessageRow):
		res = db.execute(delete(model).where(model.updated_at < threshold))
		removed += res.rowcount or 0

	# Sessions idle for longer than the retention window are revoked as well
	res = db.execute(delete(AuthSession).where(AuthSession.last_activity_at < threshold))
	removed += res.rowcount or 0

	db.commit()
	if removed:
		logger.info("Purged %d rows older than %s", removed, threshold.isoformat())
	return removed
