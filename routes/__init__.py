# Routes package __init__.py - re-exports routers for main.py convenience
from .users import router as users_router
from .relationships import router as relationships_router
from .forests import router as forests_router
from .milestones import router as milestones_router
from .completions import router as completions_router

__all__ = ['users_router', 'relationships_router', 'forests_router', 'milestones_router', 'completions_router']
