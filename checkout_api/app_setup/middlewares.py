"""
Middlewares transverses de l'application.
- register_basic_middlewares: CORS pour le front (Vite/React) qui appelle /api/*.
"""
from typing import List
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


def register_basic_middlewares(app: FastAPI, origins: List[str]) -> None:
    """
    Ajoute CORSMiddleware avec les origines configurées (CORS_ORIGINS).
    - Méthodes limitées à celles utilisées par le front.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )
