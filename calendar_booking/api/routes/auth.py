# calendar_booking/api/routes/auth.py
import html
import logging
from http import HTTPStatus

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, RedirectResponse

from calendar_booking.api.dependencies.calendar import get_credential_store, get_oauth_client
from calendar_booking.services.calendar_errors import CalendarGatewayError
from calendar_booking.services.credential_store import CredentialStore
from calendar_booking.services.google_oauth import GoogleOAuthClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _success_page(refresh_token: str | None) -> str:
    if refresh_token:
        token_block = (
            "<p><strong>Refresh Token (store it as GOOGLE_REFRESH_TOKEN):</strong><br>"
            f"<code>{html.escape(refresh_token)}</code></p>"
        )
    else:
        token_block = "<p>No refresh token returned. (Did you already authorize?)</p>"
    return (
        "<h1>Authentication successful!</h1>"
        "<p>You can close this window. Backend is ready to schedule events.</p>"
        f"{token_block}"
    )


def _failure_page(detail: str) -> str:
    return (
        "<h1>Authentication failed</h1>"
        "<p>Error details:</p>"
        f"<pre>{html.escape(detail)}</pre>"
    )


@router.get(
    "",
    summary="Start the OAuth consent flow",
    description=(
        "Manual step for the calendar owner: redirects to Google's consent "
        "screen requesting offline access so a refresh token is issued."
    ),
    status_code=HTTPStatus.TEMPORARY_REDIRECT,
)
async def start_authorization(
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
) -> RedirectResponse:
    return RedirectResponse(oauth.authorization_url())


@router.get(
    "/callback",
    response_class=HTMLResponse,
    summary="OAuth redirect target",
    description=(
        "Exchanges the authorization code for tokens, installs them for this "
        "process and saves them to the local token file when possible. The "
        "refresh token is shown so the operator can configure it as a secret."
    ),
)
async def authorization_callback(
    code: str | None = Query(default=None, description="Authorization code issued by Google."),
    store: CredentialStore = Depends(get_credential_store),
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
) -> HTMLResponse:
    if not code:
        return HTMLResponse(
            _failure_page("Missing authorization code."),
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    try:
        credentials = await oauth.exchange_code(code)
    except CalendarGatewayError as exc:
        logger.error("Error getting tokens: %s", exc)
        return HTMLResponse(_failure_page(str(exc)), status_code=HTTPStatus.INTERNAL_SERVER_ERROR)

    store.install(credentials)
    store.save(credentials)

    return HTMLResponse(_success_page(credentials.refresh_token))
