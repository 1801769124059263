# hackreg/__init__.py
"""
Package root for the hackathon registration backend.

Contains the FastAPI application (`hackreg.main:app`), the MongoDB data
clients and the registration workflow.

Usage (development):
    python -m uvicorn hackreg.main:app --reload

Seed an admin account for the dashboard login:
    python -m hackreg.seed_admin --name "Jane Doe" --contact 9876543210
"""
