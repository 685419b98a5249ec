import asyncio
import json
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from docshare.core import config
from docshare.core.exceptions import Conflict, Forbidden, InternalError, NotFound
from docshare.main import handle_database_error, handle_docshare_error
from docshare.routes.document_routes import (
    create_document,
    delete_document,
    get_document,
    list_documents,
    record_download,
    update_document,
)
from docshare.routes.stats_routes import student_stats, system_stats, teacher_stats
from docshare.services.document_repository import DocumentCreate, DocumentRepository, DocumentUpdate
from docshare.services.download_ledger import DownloadLedger
from docshare.services.stats_aggregator import StatsAggregator

_FAKE_REQUEST = SimpleNamespace(method='GET', url=SimpleNamespace(path='/api/documents'))


def test_syllabus_ownership_scenario(db, make_user, as_identity) -> None:
    repository = DocumentRepository(db)
    t1 = as_identity(make_user('t1@x.com'))
    t2 = as_identity(make_user('t2@x.com'))
    syllabus = DocumentCreate(title='Syllabus', file_path='/f1.pdf')

    created = create_document(data=syllabus, repository=repository, identity=t1)
    with pytest.raises(Conflict):
        create_document(data=syllabus, repository=repository, identity=t1)
    assert create_document(data=syllabus, repository=repository, identity=t2)['id'] != created['id']

    with pytest.raises(Forbidden):
        delete_document(document_id=created['id'], repository=repository, identity=t2)
    assert delete_document(document_id=created['id'], repository=repository, identity=t1) == {
        'message': 'Document deleted successfully.',
    }
    with pytest.raises(NotFound):
        get_document(document_id=created['id'], repository=repository)


def test_update_by_owner_is_visible_on_get(db, make_user, as_identity) -> None:
    repository = DocumentRepository(db)
    teacher = as_identity(make_user('t1@x.com'))
    document_id = create_document(
        data=DocumentCreate(title='Draft', file_path='/draft.pdf'), repository=repository, identity=teacher
    )['id']

    update_document(
        document_id=document_id,
        data=DocumentUpdate(description='Final version'),
        repository=repository,
        identity=teacher,
    )

    assert get_document(document_id=document_id, repository=repository)['description'] == 'Final version'


def test_list_documents_ignores_caller_identity(db, make_user, as_identity) -> None:
    repository = DocumentRepository(db)
    teacher = as_identity(make_user('t1@x.com'))
    create_document(data=DocumentCreate(title='Public', file_path='/p.pdf'), repository=repository, identity=teacher)

    anonymous = list_documents(repository=repository, search=None, limit=20, offset=0, identity=None)
    signed_in = list_documents(repository=repository, search=None, limit=20, offset=0, identity=teacher)

    assert anonymous == signed_in
    assert [document['title'] for document in anonymous['documents']] == ['Public']


def test_download_route_counts_every_call(db, make_user, as_identity) -> None:
    student = as_identity(make_user('s1@x.com', role='student'))
    ledger = DownloadLedger(db)
    aggregator = StatsAggregator(db)

    record_download(document_id=7, ledger=ledger, identity=student)
    record_download(document_id=7, ledger=ledger, identity=student)

    assert system_stats(aggregator=aggregator, identity=None)['totalDownloads'] == 2
    assert student_stats(user_id=student.id, aggregator=aggregator, identity=student) == {'totalDownloads': 2}
    assert teacher_stats(user_id=student.id, aggregator=aggregator, identity=student)['totalDownloads'] == 0


def test_domain_error_renders_error_body() -> None:
    response = asyncio.run(handle_docshare_error(_FAKE_REQUEST, Conflict('Duplicate title.')))

    assert response.status_code == 409
    assert json.loads(response.body) == {'error': 'Duplicate title.'}


def test_internal_error_hides_detail_outside_development(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')

    response = asyncio.run(handle_docshare_error(_FAKE_REQUEST, InternalError('disk full')))

    assert response.status_code == 500
    assert json.loads(response.body) == {'error': 'Internal server error'}


def test_database_error_shows_detail_in_development(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'development')
    exc = OperationalError('SELECT 1', {}, Exception('connection refused'))

    response = asyncio.run(handle_database_error(_FAKE_REQUEST, exc))
    body = json.loads(response.body)

    assert response.status_code == 500
    assert body['error'] == 'Internal server error'
    assert 'connection refused' in body['message']
