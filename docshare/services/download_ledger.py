import logging

from sqlalchemy.orm import Session

from docshare.auth.dependencies import Identity
from docshare.core.exceptions import Unauthenticated
from docshare.models.download import Download

logger = logging.getLogger(__name__)


class DownloadLedger:
    """Append-only log of download events.

    Every call writes a new row. The document id is recorded as given,
    whether or not such a document exists.
    """

    def __init__(self, db: Session):
        self.db = db

    def record_download(self, identity: Identity | None, document_id: int) -> int:
        if identity is None:
            raise Unauthenticated()

        event = Download(document_id=document_id, user_id=identity.id)
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        logger.debug('Recorded download of document id=%s by user id=%s', document_id, identity.id)
        return event.id
