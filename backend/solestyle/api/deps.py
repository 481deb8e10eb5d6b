import uuid
from typing import NamedTuple

from fastapi import Request, Response

CLIENT_COOKIE = "client_id"
SESSION_COOKIE = "session_id"
CLIENT_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


class ClientContext(NamedTuple):
    client_id: str
    session_id: str


def get_client(request: Request, response: Response) -> ClientContext:
    """
    Identify the browser: ``client_id`` is a long-lived cookie (local
    storage owner), ``session_id`` a session cookie (session storage owner).
    Missing cookies are issued on the way out.
    """
    client_id = request.cookies.get(CLIENT_COOKIE)
    if not client_id:
        client_id = uuid.uuid4().hex
        response.set_cookie(
            CLIENT_COOKIE, client_id, max_age=CLIENT_COOKIE_MAX_AGE, httponly=False, samesite="Lax"
        )
    session_id = request.cookies.get(SESSION_COOKIE)
    if not session_id:
        session_id = uuid.uuid4().hex
        # no max_age: dropped when the browser session ends
        response.set_cookie(SESSION_COOKIE, session_id, httponly=False, samesite="Lax")
    return ClientContext(client_id, session_id)
