from functools import wraps

from flask import jsonify, session


def login_required(fn):
    """Reject the request with 401 unless the session carries a uid."""
    @wraps(fn)
    async def wrapper(*args, **kwargs):
        if "uid" not in session:
            return jsonify(error="Unauthorized", message="Please sign in first"), 401
        return await fn(*args, **kwargs)

    return wrapper
