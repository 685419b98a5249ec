"""Local-disk storage for uploaded files.

Stored names look like ``<stem>-<epoch-ms>-<random><ext>``; the original
name is recovered from that shape when a file is served back.
"""

import logging
import random
import time
from pathlib import Path
from typing import BinaryIO

from docshare.core import config
from docshare.core.exceptions import InternalError, NotFound, ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
PUBLIC_PREFIX = '/api/uploads'

ALLOWED_EXTENSIONS = {
    '.pdf', '.doc', '.docx', '.ppt', '.pptx', '.txt', '.zip', '.rar', '.xls', '.xlsx', '.csv',
    '.mp4', '.avi', '.mov', '.wmv', '.flv', '.mkv',
    '.mp3', '.wav', '.aac', '.flac', '.ogg', '.wma',
}
ALLOWED_MIMETYPES = {
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'application/vnd.ms-powerpoint',
    'application/vnd.openxmlformats-officedocument.presentationml.presentation',
    'text/plain',
    'application/zip',
    'application/x-zip-compressed',
    'application/x-rar-compressed',
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'text/csv',
    'video/mp4',
    'video/x-msvideo',
    'video/quicktime',
    'video/x-ms-wmv',
    'video/x-flv',
    'video/x-matroska',
    'audio/mpeg',
    'audio/wav',
    'audio/aac',
    'audio/flac',
    'audio/ogg',
    'audio/x-ms-wma',
}
UNSUPPORTED_TYPE_MESSAGE = (
    'Only these file types can be uploaded: PDF, DOC, DOCX, PPT, PPTX, TXT, ZIP, RAR, '
    'XLS, XLSX, CSV, MP4, AVI, MOV, WMV, FLV, MKV, MP3, WAV, AAC, FLAC, OGG, WMA.'
)


def is_allowed_file(filename: str, content_type: str | None) -> bool:
    return Path(filename).suffix.lower() in ALLOWED_EXTENSIONS or content_type in ALLOWED_MIMETYPES


def build_stored_name(original_name: str) -> str:
    original = Path(original_name)
    unique_suffix = f'{int(time.time() * 1000)}-{random.randint(0, 10**9)}'
    return f'{original.stem}-{unique_suffix}{original.suffix}'


def original_name_from_stored(stored_name: str) -> str:
    stored = Path(stored_name)
    parts = stored_name.split('-')
    if len(parts) < 3:
        return stored_name
    return '-'.join(parts[:-2]) + stored.suffix


class FileStorage:
    def __init__(self, root: str | Path | None = None, max_bytes: int | None = None):
        self.root = Path(root or config.UPLOAD_DIR)
        self.max_bytes = config.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes

    def save(self, stream: BinaryIO, original_name: str, content_type: str | None) -> dict:
        if not original_name:
            raise ValidationError('No file was uploaded.')
        if not is_allowed_file(original_name, content_type):
            raise ValidationError(UNSUPPORTED_TYPE_MESSAGE)

        stored_name = build_stored_name(Path(original_name).name)
        target = self.root / stored_name

        size = 0
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with target.open('wb') as output:
                while chunk := stream.read(CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_bytes:
                        output.close()
                        target.unlink(missing_ok=True)
                        raise ValidationError(f'File exceeds the {self.max_bytes // (1024 * 1024)} MB upload limit.')
                    output.write(chunk)
        except OSError as exc:
            logger.exception('Could not write upload %s under %s', stored_name, self.root)
            raise InternalError('Could not store the uploaded file.') from exc

        logger.info('Stored upload %s (%d bytes)', stored_name, size)
        return {
            'filename': stored_name,
            'originalname': original_name,
            'path': f'{PUBLIC_PREFIX}/{stored_name}',
            'size': size,
            'mimetype': content_type,
        }

    def resolve(self, stored_name: str) -> Path:
        # Stored names never contain directory parts.
        if not stored_name or Path(stored_name).name != stored_name or stored_name in ('.', '..'):
            raise NotFound('File does not exist.')

        path = self.root / stored_name
        if not path.is_file():
            raise NotFound('File does not exist.')
        return path
