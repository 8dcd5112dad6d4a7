from __future__ import annotations
from functools import wraps
from flask import request, g, abort, current_app


def get_auth():
    """Return the AuthContext attached to the running app."""
    return current_app.extensions["auth"]


def jwt_required():
    """
    Require a valid bearer access token.
    On success the account id is available as g.current_account_id;
    any failure becomes the same 401.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            result = get_auth().guard.authenticate(request)
            if not result.ok:
                abort(401, description="Not authenticated")
            g.current_account_id = result.value
            return fn(*args, **kwargs)

        return wrapper

    return decorator

