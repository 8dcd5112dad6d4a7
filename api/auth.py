"""
Authentication blueprint:
- POST /register
- POST /login
- POST /refresh_token
- POST /logout

The implementation:
- Uses argon2 for credential hashing (via utils.security)
- Issues short-lived access tokens in the response body and long-lived
  refresh tokens in an httpOnly cookie scoped to the refresh path
- Tracks exactly one live refresh token per account and rotates it on every refresh
- Refresh failures are deliberately indistinguishable: 200 with an empty access token
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, abort, current_app, make_response

from auth.guard import extract_bearer_token
from auth.outcomes import AuthError
from api.cookies import clear_refresh_cookie, read_refresh_cookie, set_refresh_cookie
from models.schemas.account import AccountOutSchema, CredentialsSchema
from utils.decorators import get_auth

bp = Blueprint("auth", __name__)

credentials_schema = CredentialsSchema()
account_out_schema = AccountOutSchema()


def _token_body(access_token: str) -> dict:
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": int(current_app.config["ACCESS_TOKEN_EXPIRES"]),
    }


@bp.post("/register")
def register():
    """
    Register a new account.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            identity: { type: string }
            credential: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Identity already registered
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = credentials_schema.load(payload)

    result = get_auth().accounts.register(data["identity"], data["credential"])
    if result.error is AuthError.ALREADY_REGISTERED:
        abort(409, description="User already exists")

    return jsonify(
        {
            "message": "User created",
            "data": account_out_schema.dump(result.value),
        }
    ), 201


@bp.post("/login")
def login():
    """
    Login: access token in the body, refresh token as an httpOnly cookie
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             identity: { type: string }
             credential: { type: string }
    responses:
      200:
        description: OK (returns access token, sets refresh cookie)
      401:
        description: Invalid credentials
    """
    payload = request.get_json(silent=True) or {}
    data = credentials_schema.load(payload)

    result = get_auth().accounts.login(data["identity"], data["credential"])
    if not result.ok:
        # same answer for unknown identity and wrong credential
        abort(401, description="Invalid credentials")

    body = _token_body(result.value.access_token)
    body["identity"] = data["identity"]
    response = make_response(jsonify(body), 200)
    set_refresh_cookie(response, result.value.refresh_token)
    return response


@bp.post("/refresh_token")
def refresh_token():
    """
    Exchange the refresh cookie for a new access token (rotation)
    ---
    tags:
      - Auth
    responses:
      200:
        description: >
          New access token and refresh cookie; an empty access_token means
          the refresh was refused and the client must log in again.
    """
    result = get_auth().rotator.rotate(read_refresh_cookie(request))
    if not result.ok:
        return jsonify({"access_token": ""}), 200

    response = make_response(jsonify(_token_body(result.value.access_token)), 200)
    set_refresh_cookie(response, result.value.refresh_token)
    return response


@bp.post("/logout")
def logout():
    """
    Logout: clear the refresh cookie and revoke the server-side refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
    """
    ctx = get_auth()
    account_id = None
    bearer = extract_bearer_token(request.headers)
    if bearer:
        verified = ctx.guard.verify(bearer)
        account_id = verified.value if verified.ok else None

    ctx.accounts.logout(read_refresh_cookie(request), account_id=account_id)

    response = make_response(jsonify({"message": "Logged out"}), 200)
    clear_refresh_cookie(response)
    return response
