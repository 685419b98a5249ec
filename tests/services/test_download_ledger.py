import pytest

from docshare.core.exceptions import Unauthenticated
from docshare.models.download import Download
from docshare.services.document_repository import DocumentCreate, DocumentRepository
from docshare.services.download_ledger import DownloadLedger
from docshare.services.stats_aggregator import StatsAggregator


@pytest.fixture
def ledger(db):
    return DownloadLedger(db)


def test_record_download_requires_identity(ledger) -> None:
    with pytest.raises(Unauthenticated):
        ledger.record_download(None, 1)


def test_repeated_downloads_each_append_a_row(ledger, db, make_user, as_identity) -> None:
    teacher = make_user('t1@x.com')
    student = make_user('s1@x.com', role='student')
    document_id = DocumentRepository(db).create_document(
        as_identity(teacher), DocumentCreate(title='Syllabus', file_path='/f1.pdf')
    )
    before = StatsAggregator(db).system_stats()['totalDownloads']

    first = ledger.record_download(as_identity(student), document_id)
    second = ledger.record_download(as_identity(student), document_id)

    assert first != second
    assert db.query(Download).filter(
        Download.document_id == document_id,
        Download.user_id == student.id,
    ).count() == 2
    assert StatsAggregator(db).system_stats()['totalDownloads'] == before + 2


def test_record_download_does_not_check_document_existence(ledger, db, make_user, as_identity) -> None:
    student = make_user('s1@x.com', role='student')

    event_id = ledger.record_download(as_identity(student), 424242)

    event = db.get(Download, event_id)
    assert event.document_id == 424242
    assert event.user_id == student.id
    assert event.downloaded_at is not None
