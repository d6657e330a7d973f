"""Voter API: HTTP service for voters and their poll history."""

from .main import app, create_app
from .service import VoterService

__all__ = ['app', 'create_app', 'VoterService']
