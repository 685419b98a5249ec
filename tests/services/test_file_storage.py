import io

import pytest

from docshare.core.exceptions import InternalError, NotFound, ValidationError
from docshare.services import file_storage
from docshare.services.file_storage import FileStorage, original_name_from_stored


@pytest.fixture
def storage(tmp_path):
    return FileStorage(root=tmp_path / 'uploads', max_bytes=1024)


def test_save_writes_bytes_under_generated_name(storage, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(file_storage.time, 'time', lambda: 1700000000.5)
    monkeypatch.setattr(file_storage.random, 'randint', lambda low, high: 42)

    stored = storage.save(io.BytesIO(b'hello'), 'week-1 notes.pdf', 'application/pdf')

    assert stored == {
        'filename': 'week-1 notes-1700000000500-42.pdf',
        'originalname': 'week-1 notes.pdf',
        'path': '/api/uploads/week-1 notes-1700000000500-42.pdf',
        'size': 5,
        'mimetype': 'application/pdf',
    }
    assert storage.resolve(stored['filename']).read_bytes() == b'hello'


def test_save_accepts_allowed_mimetype_with_unknown_extension(storage) -> None:
    stored = storage.save(io.BytesIO(b'a,b'), 'export.data', 'text/csv')

    assert stored['size'] == 3


def test_save_rejects_disallowed_type(storage) -> None:
    with pytest.raises(ValidationError):
        storage.save(io.BytesIO(b'MZ'), 'tool.exe', 'application/x-msdownload')


def test_save_rejects_missing_filename(storage) -> None:
    with pytest.raises(ValidationError):
        storage.save(io.BytesIO(b'x'), '', 'text/plain')


def test_save_rejects_oversized_upload_and_removes_partial_file(storage) -> None:
    with pytest.raises(ValidationError):
        storage.save(io.BytesIO(b'x' * 2048), 'big.txt', 'text/plain')

    assert list(storage.root.iterdir()) == []


def test_save_reports_disk_failure_as_internal_error(tmp_path) -> None:
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory')
    storage = FileStorage(root=blocker, max_bytes=1024)

    with pytest.raises(InternalError) as exception_info:
        storage.save(io.BytesIO(b'hello'), 'notes.txt', 'text/plain')

    assert exception_info.value.status_code == 500
    assert exception_info.value.message == 'Could not store the uploaded file.'


@pytest.mark.parametrize('name', ['missing.pdf', '../secret.txt', '..', ''])
def test_resolve_rejects_unknown_or_unsafe_names(storage, name: str) -> None:
    with pytest.raises(NotFound):
        storage.resolve(name)


@pytest.mark.parametrize(
    ('stored_name', 'expected'),
    [
        ('notes-1700000000500-42.pdf', 'notes.pdf'),
        ('week-1-notes-1700000000500-42.pdf', 'week-1-notes.pdf'),
        ('plain.pdf', 'plain.pdf'),
    ],
)
def test_original_name_from_stored(stored_name: str, expected: str) -> None:
    assert original_name_from_stored(stored_name) == expected
