"""
Storage endpoints: upload, list and delete stand-alone images.
All endpoints require Firebase authentication; posts require an anti-forgery token.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_storage_service, has_upload
from app.api.errors import error_response
from app.api.rendering import banner, render
from app.auth.csrf import verify_csrf_token
from app.auth.dependencies import get_current_user
from app.database import get_db
from app.services.errors import ImageServiceError, ImageValidationError
from app.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

UPLOAD_TEMPLATE = "storage/upload.html"


@router.get("", response_class=HTMLResponse)
async def storage_index(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """List every stored image."""
    images = await StorageService.list_images(db)
    return render(request, "storage/index.html", {"images": images})


@router.get("/upload", response_class=HTMLResponse)
async def upload_form(request: Request):
    """Show the upload form."""
    return render(request, UPLOAD_TEMPLATE)


@router.post("/upload", response_class=HTMLResponse, dependencies=[Depends(verify_csrf_token)])
async def upload_image(
    request: Request,
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    service: StorageService = Depends(get_storage_service)
):
    """
    Upload an image to blob storage and store its metadata.

    Re-renders the form with a banner; storage failures return 500.
    """
    if not has_upload(file):
        return render(
            request,
            UPLOAD_TEMPLATE,
            banner(False, "Please choose an image to upload."),
            status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        image = await service.upload_image(db, file.file, file.content_type)
    except ImageValidationError as e:
        return render(request, UPLOAD_TEMPLATE, banner(False, e.message), status_code=status.HTTP_400_BAD_REQUEST)
    except ImageServiceError as e:
        return error_response(e)
    finally:
        await file.close()

    return render(
        request,
        UPLOAD_TEMPLATE,
        {**banner(True, "Image was successfully uploaded!"), "image": image}
    )


@router.post("/delete", dependencies=[Depends(verify_csrf_token)])
async def delete_image(
    request: Request,
    image_name: Optional[str] = Form(None, alias="ImageName"),
    db: AsyncSession = Depends(get_db),
    service: StorageService = Depends(get_storage_service)
):
    """
    Delete an image's metadata and then its blob.
    Redirects to the list on success.
    """
    try:
        await service.delete_image(db, image_name)
    except ImageServiceError as e:
        return error_response(e)

    return RedirectResponse(url=str(request.url_for("storage_index")), status_code=status.HTTP_303_SEE_OTHER)

