from marshmallow import Schema, fields, pre_load, validate


def _norm_identity(v):
    return v.strip().lower() if isinstance(v, str) else v


class CredentialsSchema(Schema):
    identity = fields.Email(required=True)
    credential = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "identity" in data:
            data = dict(data)
            data["identity"] = _norm_identity(data["identity"])
        return data


class AccountOutSchema(Schema):
    id = fields.String(allow_none=False)
    identity = fields.String(allow_none=False)
