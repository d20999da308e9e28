from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from loggedin.app import App
from loggedin.core.modules.session.models import AuthToken
from loggedin.errors import AuthenticationError

AUTH_COOKIE_NAME = "loggedin_session"

bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=AUTH_COOKIE_NAME, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


def offered_tokens(credentials: HTTPAuthorizationCredentials | None, token_cookie: str | None) -> list[AuthToken]:
    """Tokens sent by the client, bearer header before cookie."""
    tokens = []
    if credentials is not None:
        tokens.append(AuthToken(credentials.credentials))
    if token_cookie:
        tokens.append(AuthToken(token_cookie))
    return tokens


async def get_auth_token(
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AuthToken:
    """Return the first offered token that still belongs to an active session.

    A session evicted by the login limit fails here just like an expired one.
    """
    for auth_token in offered_tokens(credentials, token_cookie):
        if await app.is_auth_token_valid(auth_token):
            return auth_token
    raise AuthenticationError("Invalid or expired session")


AppDep = Annotated[App, Depends(get_app)]
AuthTokenDep = Annotated[AuthToken, Depends(get_auth_token)]
