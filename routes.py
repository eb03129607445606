# routes.py
from fastapi import FastAPI
from controller.plagiarism_controller import plagiarism_router
from controller.style_controller import style_router


def register_routes(app: FastAPI) -> None:
    """Register controllers here."""
    app.include_router(plagiarism_router)
    app.include_router(style_router)
