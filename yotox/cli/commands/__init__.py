"""Command modules for the yotox CLI."""

from .auth import login_cmd, logout_cmd
from .cards import cards_cmd
from .upload import upload_cmd

__all__ = [
    "login_cmd",
    "logout_cmd",
    "cards_cmd",
    "upload_cmd",
]
