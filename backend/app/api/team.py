"""
Team endpoints: list, view, create, edit and delete team member profiles.
All endpoints require Firebase authentication; posts require an anti-forgery token.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_team_service, has_upload
from app.api.errors import error_response
from app.api.rendering import banner, render
from app.auth.csrf import verify_csrf_token
from app.auth.dependencies import get_current_user
from app.database import get_db
from app.schemas.team import TeamMemberForm
from app.services.errors import ImageServiceError, ImageValidationError, RecordNotFoundError
from app.services.team_service import TeamService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

CREATE_TEMPLATE = "team/create.html"
EDIT_TEMPLATE = "team/edit.html"


def _validation_message(error: ValidationError) -> str:
    fields = sorted({str(err["loc"][0]) for err in error.errors() if err.get("loc")})
    return f"Please check the following fields: {', '.join(fields)}"


async def _get_or_404(db: AsyncSession, member_id: int):
    try:
        return await TeamService.get_member(db, member_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("", response_class=HTMLResponse)
async def team_index(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """List team members."""
    members = await TeamService.list_members(db)
    return render(request, "team/index.html", {"members": members})


@router.get("/create", response_class=HTMLResponse)
async def create_form(request: Request):
    """Show the create form."""
    return render(request, CREATE_TEMPLATE, {"form": {}})


@router.post("/create", response_class=HTMLResponse, dependencies=[Depends(verify_csrf_token)])
async def create_member(
    request: Request,
    first_name: Optional[str] = Form(None, alias="FirstName"),
    last_name: Optional[str] = Form(None, alias="LastName"),
    position: Optional[str] = Form(None, alias="Position"),
    email: Optional[str] = Form(None, alias="Email"),
    phone: Optional[str] = Form(None, alias="Phone"),
    linkedin: Optional[str] = Form(None, alias="LinkedIn"),
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    service: TeamService = Depends(get_team_service)
):
    """
    Create a team member with a photo.

    The photo is mandatory; the form is re-rendered with a banner on
    invalid input.
    """
    submitted = {
        "first_name": first_name,
        "last_name": last_name,
        "position": position,
        "email": email,
        "phone": phone,
        "linkedin": linkedin,
    }

    if not has_upload(file):
        return render(
            request,
            CREATE_TEMPLATE,
            {**banner(False, "All parameters needs to be filled!"), "form": submitted},
            status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        fields = TeamMemberForm(**submitted)
        member = await service.create_member(db, fields, file.file, file.content_type)
    except ValidationError as e:
        return render(
            request,
            CREATE_TEMPLATE,
            {**banner(False, _validation_message(e)), "form": submitted},
            status_code=status.HTTP_400_BAD_REQUEST
        )
    except ImageValidationError as e:
        return render(
            request,
            CREATE_TEMPLATE,
            {**banner(False, e.message), "form": submitted},
            status_code=status.HTTP_400_BAD_REQUEST
        )
    except ImageServiceError as e:
        return error_response(e)
    finally:
        await file.close()

    return render(
        request,
        CREATE_TEMPLATE,
        {**banner(True, "Team member was successfully created!"), "form": {}, "member": member}
    )


@router.get("/edit/{member_id}", response_class=HTMLResponse)
async def edit_form(
    request: Request,
    member_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Show the edit form for a team member."""
    member = await _get_or_404(db, member_id)
    return render(request, EDIT_TEMPLATE, {"member": member, "form": member})


@router.post("/edit/{member_id}", dependencies=[Depends(verify_csrf_token)])
async def edit_member(
    request: Request,
    member_id: int,
    first_name: Optional[str] = Form(None, alias="FirstName"),
    last_name: Optional[str] = Form(None, alias="LastName"),
    position: Optional[str] = Form(None, alias="Position"),
    email: Optional[str] = Form(None, alias="Email"),
    phone: Optional[str] = Form(None, alias="Phone"),
    linkedin: Optional[str] = Form(None, alias="LinkedIn"),
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    service: TeamService = Depends(get_team_service)
):
    """
    Update a team member; a submitted file replaces the photo.
    Redirects to the team list on success.
    """
    member = await _get_or_404(db, member_id)
    submitted = {
        "first_name": first_name,
        "last_name": last_name,
        "position": position,
        "email": email,
        "phone": phone,
        "linkedin": linkedin,
    }
    replacement = file if has_upload(file) else None

    try:
        fields = TeamMemberForm(**submitted)
        await service.edit_member(
            db,
            member_id,
            fields,
            file=replacement.file if replacement else None,
            content_type=replacement.content_type if replacement else None
        )
    except ValidationError as e:
        return render(
            request,
            EDIT_TEMPLATE,
            {**banner(False, _validation_message(e)), "member": member, "form": submitted},
            status_code=status.HTTP_400_BAD_REQUEST
        )
    except ImageValidationError as e:
        return render(
            request,
            EDIT_TEMPLATE,
            {**banner(False, e.message), "member": member, "form": submitted},
            status_code=status.HTTP_400_BAD_REQUEST
        )
    except ImageServiceError as e:
        return error_response(e)
    finally:
        if file is not None:
            await file.close()

    return RedirectResponse(url=str(request.url_for("team_index")), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/delete/{member_id}", dependencies=[Depends(verify_csrf_token)])
async def delete_member(
    request: Request,
    member_id: int,
    db: AsyncSession = Depends(get_db),
    service: TeamService = Depends(get_team_service)
):
    """Delete a team member and their photo. Redirects to the team list."""
    try:
        await service.delete_member(db, member_id)
    except ImageServiceError as e:
        return error_response(e)

    return RedirectResponse(url=str(request.url_for("team_index")), status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{member_id}", response_class=HTMLResponse)
async def member_detail(
    request: Request,
    member_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Show one team member."""
    member = await _get_or_404(db, member_id)
    return render(request, "team/detail.html", {"member": member})
