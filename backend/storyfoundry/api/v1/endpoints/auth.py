"""Authentication endpoints"""
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from storyfoundry.core.config import settings
from storyfoundry.core.dependencies import get_user_client
from storyfoundry.services.header_widget import sign_out_session
from storyfoundry.services.supabase_client import SupabaseClient

router = APIRouter()


@router.post("/signout")
async def sign_out(
    request: Request,
    client: SupabaseClient = Depends(get_user_client),
):
    """Revoke the session, clear the auth cookies and redirect home."""
    redirect = await sign_out_session(client)
    response = RedirectResponse(url=redirect, status_code=status.HTTP_303_SEE_OTHER)

    cookie_name = settings.auth_cookie_name
    if cookie_name:
        for name in request.cookies:
            if name == cookie_name or name.startswith(f"{cookie_name}."):
                response.delete_cookie(name, path="/")
    return response
