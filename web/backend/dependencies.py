from fastapi import Depends, Request

from core.app_context import AppContext, create_app_context
from core.models import User


def get_context(request: Request) -> AppContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        context = create_app_context()
        request.app.state.context = context
    return context


def get_current_user(context: AppContext = Depends(get_context)) -> User:
    """Logged-in user; AuthenticationError (401) otherwise."""
    return context.auth.require_user()
