from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel

from sulama.core.config import get_settings
from sulama.core.utils import payload_model
from sulama.services import pdf_service, project_service

router = APIRouter(tags=["projects"])


class ExportPdfIn(BaseModel):
    email: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None


@router.get("/projects")
def list_projects(email: str = "", page: int = 1, per_page: int = project_service.DEFAULT_PER_PAGE):
    return project_service.list_projects(email, page, per_page)


@router.get("/projects/{project_id}")
def get_project(project_id: str, email: str = ""):
    return project_service.get_project(email, project_id)


@router.delete("/projects/{project_id}")
def delete_project(project_id: str, email: str = ""):
    return project_service.delete_project(email, project_id)


@router.post("/export-pdf")
async def export_pdf(body: ExportPdfIn = Depends(payload_model(ExportPdfIn))):
    file_name, pdf = pdf_service.export_pdf(
        body.email,
        body.title,
        body.content,
        font_path=get_settings().pdf_font_path,
    )
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": pdf_service.content_disposition(file_name)},
    )
