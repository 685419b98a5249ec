import logging
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from docshare.auth.dependencies import Identity
from docshare.core.exceptions import Conflict, Forbidden, NotFound, ValidationError
from docshare.models.document import Document
from docshare.models.user import ROLE_TEACHER, User

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 20
DEFAULT_PAGE_OFFSET = 0
UPDATABLE_FIELDS = ('title', 'description', 'file_path', 'file_type')
REQUIRED_FIELDS = ('title', 'file_path')

DUPLICATE_TITLE_MESSAGE = 'You already have a document with this title.'


class DocumentCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None


class DocumentUpdate(BaseModel):
    """Partial update; only fields the caller actually sent are applied.

    Fields outside the allow-list are dropped when the body is parsed.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None

    def changes(self) -> dict:
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if field in UPDATABLE_FIELDS
        }


def serialize_document(document: Document, **joined) -> dict:
    payload = {
        'id': document.id,
        'title': document.title,
        'description': document.description,
        'file_path': document.file_path,
        'file_type': document.file_type,
        'uploaded_by': document.uploaded_by,
        'created_at': document.created_at,
        'updated_at': document.updated_at,
    }
    payload.update(joined)
    return payload


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class DocumentRepository:
    """Document CRUD with teacher-only writes and owner-only mutation."""

    def __init__(self, db: Session):
        self.db = db

    def list_documents(
        self,
        search: Optional[str] = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = DEFAULT_PAGE_OFFSET,
    ) -> dict:
        query = self.db.query(Document, User.full_name, User.role).outerjoin(
            User, Document.uploaded_by == User.id
        )
        if search:
            term = f'%{search}%'
            query = query.filter(or_(Document.title.ilike(term), Document.description.ilike(term)))

        rows = (
            query.order_by(Document.created_at.desc(), Document.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        documents = [
            serialize_document(document, uploader_name=uploader_name, uploader_role=uploader_role)
            for document, uploader_name, uploader_role in rows
        ]
        return {'documents': documents, 'limit': limit, 'offset': offset}

    def get_document(self, document_id: int) -> dict:
        row = (
            self.db.query(Document, User.full_name, User.email, User.role)
            .outerjoin(User, Document.uploaded_by == User.id)
            .filter(Document.id == document_id)
            .first()
        )
        if row is None:
            raise NotFound('Document not found.')

        document, uploader_name, uploader_email, uploader_role = row
        return serialize_document(
            document,
            uploader_name=uploader_name,
            uploader_email=uploader_email,
            uploader_role=uploader_role,
        )

    def find_by_owner_and_title(self, owner_id: int, title: str) -> Optional[Document]:
        return self.db.query(Document).filter(
            Document.uploaded_by == owner_id,
            Document.title == title,
        ).first()

    def create_document(self, identity: Identity, data: DocumentCreate) -> int:
        if identity.role != ROLE_TEACHER:
            raise Forbidden('Only teachers can upload documents.')

        title = (data.title or '').strip()
        file_path = data.file_path or ''
        if not title:
            raise ValidationError('Title is required.')
        if not file_path:
            raise ValidationError('File path is required.')

        if self.find_by_owner_and_title(identity.id, title) is not None:
            logger.warning('Rejected duplicate title %r for uploader id=%s', title, identity.id)
            raise Conflict(DUPLICATE_TITLE_MESSAGE)

        document = Document(
            title=title,
            description=_strip_or_none(data.description),
            file_path=file_path,
            file_type=data.file_type or None,
            uploaded_by=identity.id,
        )
        self.db.add(document)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # A concurrent insert won the race past the duplicate check.
            self.db.rollback()
            raise Conflict(DUPLICATE_TITLE_MESSAGE) from exc
        self.db.refresh(document)

        logger.info('Created document id=%s for uploader id=%s', document.id, identity.id)
        return document.id

    def _get_owned_document(self, identity: Identity, document_id: int, action: str) -> Document:
        if identity.role != ROLE_TEACHER:
            raise Forbidden(f'Only teachers can {action} documents.')

        document = self.db.query(Document).filter(Document.id == document_id).first()
        if document is None:
            raise NotFound('Document not found.')

        if document.uploaded_by != identity.id:
            raise Forbidden(f'You do not have permission to {action} this document.')

        return document

    def update_document(self, identity: Identity, document_id: int, data: DocumentUpdate) -> None:
        document = self._get_owned_document(identity, document_id, 'edit')

        changes = data.changes()
        if not changes:
            raise ValidationError('No fields to update.')

        for field in REQUIRED_FIELDS:
            if field in changes and not (changes[field] or '').strip():
                raise ValidationError(f'{field} cannot be empty.')

        for field, value in changes.items():
            setattr(document, field, value)

        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise Conflict(DUPLICATE_TITLE_MESSAGE) from exc

        logger.info('Updated document id=%s fields=%s', document_id, sorted(changes))

    def delete_document(self, identity: Identity, document_id: int) -> None:
        document = self._get_owned_document(identity, document_id, 'delete')

        self.db.delete(document)
        self.db.commit()
        logger.info('Deleted document id=%s by uploader id=%s', document_id, identity.id)
