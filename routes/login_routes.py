"""
Login page and captcha verification endpoints.

GET  /login                — rendered login page (HTML)
GET  /login/assets/{name}  — static asset of the active theme
POST /login/verify         — check a captcha token with the active driver

Rendering never fails the request: template problems are logged by the page
and the response carries whatever markup was produced.
"""

from __future__ import annotations

import mimetypes

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from dependencies import get_login_context, get_login_page
from schemas.dto.requests.login import VerifyCaptchaRequest
from schemas.dto.responses.common import ErrorResponse
from schemas.dto.responses.login import VerifyCaptchaResponse
from services.login_context import LoginContext
from services.login_page import LoginPage
from shared.ip_utils import get_client_ip

router = APIRouter(prefix="/login", tags=["login"])


@router.get("", response_class=HTMLResponse)
def login_page(page: LoginPage = Depends(get_login_page)) -> HTMLResponse:
    # Sync: image drawing and template work run in the threadpool
    result = page.render()
    return HTMLResponse(content=result.content)


@router.get(
    "/assets/{name:path}",
    responses={404: {"model": ErrorResponse}},
)
async def login_asset(name: str, page: LoginPage = Depends(get_login_page)) -> Response:
    content = page.get_asset("/" + name)
    media_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
    return Response(content=content, media_type=media_type)


@router.post("/verify", response_model=VerifyCaptchaResponse)
async def verify_captcha(
    body: VerifyCaptchaRequest,
    request: Request,
    context: LoginContext = Depends(get_login_context),
) -> VerifyCaptchaResponse:
    # Empty, malformed and unverifiable tokens all answer success=false,
    # as does a service with captchas switched off.
    success = await context.verify(body.token, remote_ip=get_client_ip(request))
    return VerifyCaptchaResponse(success=success)
