# hackreg/deps.py
from fastapi import Request


def get_db(request: Request):
    """The database handle owned by the app (see main.lifespan)."""
    return request.app.state.db
