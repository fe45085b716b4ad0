"""Auth Pages — sign-in page (target of area gate redirects), sign-in API and sign-out."""

from fastapi import Depends, Form, Request
from fastapi.responses import JSONResponse, RedirectResponse

from transwarp.api.context import RequestContext, request_context
from transwarp.core.errors import auth_failed, invalid_param
from transwarp.infrastructure.identity import check_password, make_session_cookie


async def signin_page(ctx: RequestContext = Depends(request_context)):
    return ctx.render("signin.html", {"signed_in": ctx.identity is not None})


async def authenticate(
    request: Request, email: str = Form(""), passwd: str = Form(""),
):
    """Sign in with email and password.

    Form fields: `email`, `passwd`.
    Sets the session cookie and returns the signed-in user.
    Errors: parameter:invalid (missing field), auth:failed (bad credentials).
    """
    if not email.strip():
        raise invalid_param("email")
    if not passwd:
        raise invalid_param("passwd")
    user = await request.app.state.user_store.find_by_email(email)
    if user is None or not check_password(user, passwd):
        raise auth_failed("passwd", "Bad email or password.")
    settings = request.app.state.settings
    response = JSONResponse(user.identity.to_dict())
    response.set_cookie(
        settings.session_cookie,
        make_session_cookie(user, settings.session_secret),
        max_age=settings.session_max_age,
        httponly=True,
    )
    return response


async def signout(request: Request):
    response = RedirectResponse("/", status_code=302)
    response.delete_cookie(request.app.state.settings.session_cookie)
    return response


def routes():
    return {
        "GET /auth/": signin_page,
        "GET /auth/signout": signout,
        "POST /api/authenticate": authenticate,
    }
