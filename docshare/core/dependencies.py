"""Dependency providers for FastAPI routes.

Each service is built per request around the request-scoped session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from docshare.database import get_db
from docshare.services.credential_store import CredentialStore
from docshare.services.document_repository import DocumentRepository
from docshare.services.download_ledger import DownloadLedger
from docshare.services.file_storage import FileStorage
from docshare.services.stats_aggregator import StatsAggregator


def get_credential_store(db: Session = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db)


def get_document_repository(db: Session = Depends(get_db)) -> DocumentRepository:
    return DocumentRepository(db)


def get_download_ledger(db: Session = Depends(get_db)) -> DownloadLedger:
    return DownloadLedger(db)


def get_stats_aggregator(db: Session = Depends(get_db)) -> StatsAggregator:
    return StatsAggregator(db)


def get_file_storage() -> FileStorage:
    return FileStorage()


CredentialStoreDep = Annotated[CredentialStore, Depends(get_credential_store)]
DocumentRepositoryDep = Annotated[DocumentRepository, Depends(get_document_repository)]
DownloadLedgerDep = Annotated[DownloadLedger, Depends(get_download_ledger)]
StatsAggregatorDep = Annotated[StatsAggregator, Depends(get_stats_aggregator)]
FileStorageDep = Annotated[FileStorage, Depends(get_file_storage)]
