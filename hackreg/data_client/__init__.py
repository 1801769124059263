# hackreg/data_client/__init__.py
from . import mongo, user_store, team_store

__all__ = ["mongo", "team_store", "user_store"]
