from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from docshare.auth.dependencies import Identity, get_current_identity, get_optional_identity
from docshare.core.dependencies import DocumentRepositoryDep, DownloadLedgerDep, StatsAggregatorDep
from docshare.services.document_repository import (
    DEFAULT_PAGE_LIMIT,
    DEFAULT_PAGE_OFFSET,
    DocumentCreate,
    DocumentUpdate,
)

router = APIRouter(tags=['documents'])


@router.get('')
def list_documents(
    repository: DocumentRepositoryDep,
    search: Optional[str] = Query(default=None),
    limit: int = Query(default=DEFAULT_PAGE_LIMIT, ge=0),
    offset: int = Query(default=DEFAULT_PAGE_OFFSET, ge=0),
    identity: Optional[Identity] = Depends(get_optional_identity),
):
    del identity
    return repository.list_documents(search=search, limit=limit, offset=offset)


# Registered before '/{document_id}' so the literal path wins.
@router.get('/teacher/stats')
def my_document_stats(
    aggregator: StatsAggregatorDep,
    identity: Identity = Depends(get_current_identity),
):
    return aggregator.owner_summary(identity)


@router.get('/{document_id}')
def get_document(document_id: int, repository: DocumentRepositoryDep):
    return repository.get_document(document_id)


@router.post('', status_code=status.HTTP_201_CREATED)
def create_document(
    data: DocumentCreate,
    repository: DocumentRepositoryDep,
    identity: Identity = Depends(get_current_identity),
):
    document_id = repository.create_document(identity, data)
    return {'id': document_id, 'message': 'Document uploaded successfully.'}


@router.put('/{document_id}')
def update_document(
    document_id: int,
    data: DocumentUpdate,
    repository: DocumentRepositoryDep,
    identity: Identity = Depends(get_current_identity),
):
    repository.update_document(identity, document_id, data)
    return {'message': 'Document updated successfully.'}


@router.delete('/{document_id}')
def delete_document(
    document_id: int,
    repository: DocumentRepositoryDep,
    identity: Identity = Depends(get_current_identity),
):
    repository.delete_document(identity, document_id)
    return {'message': 'Document deleted successfully.'}


@router.post('/{document_id}/download')
def record_download(
    document_id: int,
    ledger: DownloadLedgerDep,
    identity: Identity = Depends(get_current_identity),
):
    ledger.record_download(identity, document_id)
    return {'message': 'Download recorded. Students may download without limit.'}
