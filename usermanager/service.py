"""Application factory wiring the controller to its HTML and JSON surfaces."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Callable, List, Optional

import httpx
from fastapi import FastAPI, Request
from pydantic import BaseModel, Field

from .config import Settings, load_settings, resolve_config_path
from .controller import UserListController
from .remote import RemoteUserAPI
from .web import register_ui_routes

logger = logging.getLogger("usermanager.service")

ControllerFactory = Callable[[Settings], UserListController]


class UserView(BaseModel):
    id: int
    name: str
    email: str
    date_of_birth: str = Field(..., alias="dateOfBirth")

    model_config = {"populate_by_name": True}


class DraftView(BaseModel):
    name: str = ""
    email: str = ""
    date_of_birth: str = Field("", alias="dateOfBirth")

    model_config = {"populate_by_name": True}


class NotificationView(BaseModel):
    message: str
    kind: str


class StateResponse(BaseModel):
    mode: str = Field(..., description="Either 'create' or 'edit'")
    users: List[UserView]
    draft: DraftView
    editing_id: Optional[int] = None
    notification: Optional[NotificationView] = None


def build_controller(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> UserListController:
    api = RemoteUserAPI(
        settings.api_url,
        timeout=settings.request_timeout,
        transport=transport,
    )
    return UserListController(
        api,
        placeholder_birthdate=settings.placeholder_birthdate,
        notification_lifetime=settings.notification_seconds,
    )


def _state_response(controller: UserListController) -> StateResponse:
    state = controller.state
    notification = controller.notification
    return StateResponse(
        mode="edit" if state.is_editing else "create",
        users=[
            UserView(
                id=user.id,
                name=user.name,
                email=user.email,
                date_of_birth=user.date_of_birth,
            )
            for user in state.users
        ],
        draft=DraftView(
            name=state.draft.name,
            email=state.draft.email,
            date_of_birth=state.draft.date_of_birth,
        ),
        editing_id=state.editing.id if state.editing is not None else None,
        notification=(
            NotificationView(**notification.to_dict()) if notification is not None else None
        ),
    )


def create_app(
    *,
    settings: Settings | None = None,
    controller_factory: ControllerFactory | None = None,
) -> FastAPI:
    """Create the single-page user management application.

    The controller is built and its initial fetch performed when the
    application starts; it is torn down when the application stops.
    """

    if settings is None:
        settings = load_settings(resolve_config_path(os.getenv("USER_MANAGER_CONFIG")))
    factory = controller_factory or build_controller

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        controller = factory(settings)
        app.state.controller = controller
        logger.info("Loading users from %s", settings.api_url)
        await controller.initialize()
        try:
            yield
        finally:
            await controller.close()

    app = FastAPI(
        title="User Management System",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.get("/api/state", response_model=StateResponse, name="api_state")
    async def read_state(request: Request) -> StateResponse:
        return _state_response(request.app.state.controller)

    register_ui_routes(app)
    return app


__all__ = ["StateResponse", "build_controller", "create_app"]
