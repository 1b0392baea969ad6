"""API web JSON de CineAmore (FastAPI)."""
