from sqlalchemy import func, select
from sqlalchemy.orm import Session

from docshare.auth.dependencies import Identity
from docshare.core.exceptions import Forbidden, Unauthenticated
from docshare.models.document import Document
from docshare.models.download import Download
from docshare.models.user import ROLE_TEACHER, User

RECENT_DOCUMENTS_LIMIT = 10


def _require_identity(identity: Identity | None) -> Identity:
    if identity is None:
        raise Unauthenticated()
    return identity


class StatsAggregator:
    """Read-only rollups over documents, users and the download ledger.

    Per-user views accept any authenticated caller; the caller does not have
    to be the user being looked up.
    """

    def __init__(self, db: Session):
        self.db = db

    def _count(self, query) -> int:
        return int(query.scalar() or 0)

    def count_documents_owned_by(self, user_id: int) -> int:
        return self._count(
            self.db.query(func.count(Document.id)).filter(Document.uploaded_by == user_id)
        )

    def count_downloads_of_documents_owned_by(self, user_id: int) -> int:
        return self._count(
            self.db.query(func.count(Download.id))
            .select_from(Download)
            .join(Document, Download.document_id == Document.id)
            .filter(Document.uploaded_by == user_id)
        )

    def recent_documents_owned_by(self, user_id: int, limit: int = RECENT_DOCUMENTS_LIMIT) -> list[dict]:
        downloads_count = (
            select(func.count(Download.id))
            .where(Download.document_id == Document.id)
            .correlate(Document)
            .scalar_subquery()
        )
        rows = (
            self.db.query(Document.id, Document.title, Document.created_at, downloads_count)
            .filter(Document.uploaded_by == user_id)
            .order_by(Document.created_at.desc(), Document.id.desc())
            .limit(limit)
            .all()
        )
        return [
            {
                'id': document_id,
                'title': title,
                'created_at': created_at,
                'downloads_count': int(count or 0),
            }
            for document_id, title, created_at, count in rows
        ]

    def system_stats(self) -> dict:
        return {
            'totalDocuments': self._count(self.db.query(func.count(Document.id))),
            'totalUsers': self._count(self.db.query(func.count(User.id))),
            'totalTeachers': self._count(
                self.db.query(func.count(User.id)).filter(User.role == ROLE_TEACHER)
            ),
            'totalDownloads': self._count(self.db.query(func.count(Download.id))),
        }

    def teacher_stats(self, identity: Identity | None, user_id: int) -> dict:
        _require_identity(identity)
        return {
            'totalDocuments': self.count_documents_owned_by(user_id),
            'totalDownloads': self.count_downloads_of_documents_owned_by(user_id),
            'recentDocuments': self.recent_documents_owned_by(user_id),
        }

    def student_stats(self, identity: Identity | None, user_id: int) -> dict:
        _require_identity(identity)
        total = self._count(
            self.db.query(func.count(Download.id)).filter(Download.user_id == user_id)
        )
        return {'totalDownloads': total}

    def owner_summary(self, identity: Identity | None) -> dict:
        """Stats for the calling teacher's own documents."""
        identity = _require_identity(identity)
        if identity.role != ROLE_TEACHER:
            raise Forbidden('Only teachers can view document statistics.')

        return {
            'stats': {
                'total_documents': self.count_documents_owned_by(identity.id),
                'total_downloads': self.count_downloads_of_documents_owned_by(identity.id),
            },
            'recent_documents': self.recent_documents_owned_by(identity.id),
        }
