from urllib.parse import quote

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import FileResponse

from docshare.core.dependencies import FileStorageDep
from docshare.services.file_storage import original_name_from_stored

router = APIRouter(tags=['uploads'])


@router.post('/upload')
def upload_file(storage: FileStorageDep, file: UploadFile = File(...)):
    try:
        stored = storage.save(file.file, file.filename or '', file.content_type)
    finally:
        file.file.close()
    return {'success': True, 'file': stored}


@router.get('/{filename}')
def download_file(filename: str, storage: FileStorageDep):
    path = storage.resolve(filename)
    original_name = original_name_from_stored(filename)
    return FileResponse(
        path,
        media_type='application/octet-stream',
        headers={'Content-Disposition': f'attachment; filename="{quote(original_name)}"'},
    )
