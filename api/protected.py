from flask import Blueprint, g, jsonify

from models.schemas.account import AccountOutSchema
from utils.decorators import get_auth, jwt_required

bp = Blueprint("protected", __name__)

account_out_schema = AccountOutSchema()


@bp.post("/protected")
@jwt_required()
def protected():
    """
    Example protected resource
    ---
    tags:
      - Protected
    security:
      - Bearer: []
    responses:
      200:
        description: Protected data for the authenticated account
      401:
        description: Not authenticated
    """
    account = get_auth().store.get(g.current_account_id)
    return jsonify(
        {
            "data": "This is protected data.",
            "user": account_out_schema.dump(account) if account is not None else None,
        }
    ), 200
