"""Response Envelope — the {success, message?, data?} shape every route returns.

Invariants:
    - success is always present; message and data are omitted when None
    - Errors never go through here: they are raised and rendered by error_handlers
"""


def ok(data=None, message: str | None = None, **extra) -> dict:
    body: dict = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body
