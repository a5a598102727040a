"""HTML rendering surface for the user management form."""

from __future__ import annotations

import html
import logging
from datetime import datetime
from typing import Dict, Optional
from urllib.parse import parse_qs

from fastapi import APIRouter, FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from .controller import UserListController
from .models import Notification, NotificationKind, UserRecord

logger = logging.getLogger("usermanager.web")

EMPTY_LIST_MESSAGE = "No users found. Add a user to see them listed here."
MISSING_FIELDS_MESSAGE = "Please provide a name, email address and date of birth."

_STYLESHEET = """
body { font-family: system-ui, sans-serif; margin: 0; background: #f5f3ff; color: #1f2937; }
.page { max-width: 1100px; margin: 0 auto; padding: 1.5rem; }
.page__title { text-align: center; color: #5b21b6; }
.grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(320px, 1fr)); gap: 2rem; }
.card { background: #fff; border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,.1); padding: 1rem 1.5rem; }
.form { display: flex; flex-direction: column; gap: .5rem; }
.form__input { padding: .5rem; border: 1px solid #d1d5db; border-radius: 6px; }
.button { padding: .5rem 1rem; border: 0; border-radius: 6px; cursor: pointer; }
.button--primary { background: #6d28d9; color: #fff; }
.button--link { background: none; color: #4f46e5; }
.alert { position: fixed; top: 1rem; right: 1rem; padding: 1rem; border-radius: 6px; color: #fff; display: flex; gap: 1rem; }
.alert--success { background: #22c55e; }
.alert--error { background: #ef4444; }
.table { width: 100%; border-collapse: collapse; }
.table th, .table td { text-align: left; padding: .5rem; border-bottom: 1px solid #e5e7eb; }
.table__actions { display: flex; gap: .5rem; }
.form__error { color: #b91c1c; margin-bottom: .5rem; }
"""


async def _parse_form(request: Request) -> Dict[str, str]:
    body_bytes = await request.body()
    content_type = request.headers.get("content-type", "")
    charset = "utf-8"
    if "charset=" in content_type:
        charset = content_type.split("charset=", 1)[1].split(";", 1)[0].strip() or "utf-8"
    try:
        decoded = body_bytes.decode(charset)
    except (LookupError, UnicodeDecodeError):
        decoded = body_bytes.decode("utf-8", errors="ignore")
    data = parse_qs(decoded, keep_blank_values=True)
    return {key: values[0] for key, values in data.items() if values}


def _render_notification(request: Request, notification: Optional[Notification]) -> str:
    if notification is None:
        return ""
    css = "alert--success" if notification.kind is NotificationKind.SUCCESS else "alert--error"
    dismiss_url = request.url_for("ui_dismiss_notification")
    return (
        f'<div class="alert {css}" role="status">'
        f"<span>{html.escape(notification.message)}</span>"
        f'<form method="post" action="{dismiss_url}">'
        '<button type="submit" class="button button--link" aria-label="Dismiss">&times;</button>'
        "</form>"
        "</div>"
    )


def _render_row(request: Request, user: UserRecord) -> str:
    edit_url = request.url_for("ui_edit_user", user_id=str(user.id))
    delete_url = request.url_for("ui_delete_user", user_id=str(user.id))
    return (
        f'<tr data-user-id="{user.id}">'
        f"<td>{html.escape(user.name)}</td>"
        f"<td>{html.escape(user.email)}</td>"
        f"<td>{html.escape(user.date_of_birth)}</td>"
        '<td class="table__actions">'
        f'<form method="post" action="{edit_url}"><button type="submit" class="button">Edit</button></form>'
        f'<form method="post" action="{delete_url}"><button type="submit" class="button">Delete</button></form>'
        "</td>"
        "</tr>"
    )


def render_page(
    request: Request,
    controller: UserListController,
    *,
    error: Optional[str] = None,
) -> str:
    """Render the full single-page view from the controller's current state."""
    state = controller.state
    error_html = f'<div class="form__error" role="alert">{html.escape(error)}</div>' if error else ""
    draft = state.draft
    editing = state.is_editing
    title = "Edit User" if editing else "Add New User"
    submit_label = "Update User" if editing else "Add User"

    cancel_html = ""
    if editing:
        cancel_html = (
            f'<form method="post" action="{request.url_for("ui_cancel_edit")}">'
            '<button type="submit" class="button button--link">Cancel editing</button>'
            "</form>"
        )

    if state.users:
        rows = "".join(_render_row(request, user) for user in state.users)
        listing = (
            '<table class="table">'
            "<thead><tr><th>Name</th><th>Email</th><th>Date of Birth</th><th>Actions</th></tr></thead>"
            f"<tbody>{rows}</tbody>"
            "</table>"
        )
    else:
        listing = f'<p class="empty">{EMPTY_LIST_MESSAGE}</p>'

    content = f"""
<h1 class="page__title">User Management System</h1>
{_render_notification(request, controller.notification)}
<div class="grid">
  <section class="card">
    <h2 class="card__title">{title}</h2>
    <p class="card__subtitle">Enter user details below</p>
    {error_html}
    <form method="post" action="{request.url_for('ui_submit_user')}" class="form">
      <label for="name">Name</label>
      <input class="form__input" type="text" id="name" name="name" placeholder="Name...." value="{html.escape(draft.name)}" required />
      <label for="email">Email</label>
      <input class="form__input" type="email" id="email" name="email" placeholder="email address...." value="{html.escape(draft.email)}" required />
      <label for="date_of_birth">Date of Birth</label>
      <input class="form__input" type="date" id="date_of_birth" name="date_of_birth" value="{html.escape(draft.date_of_birth)}" required />
      <button type="submit" class="button button--primary">{submit_label}</button>
    </form>
    {cancel_html}
  </section>
  <section class="card">
    <h2 class="card__title">Registered Users</h2>
    <p class="card__subtitle">Manage your users here</p>
    {listing}
  </section>
</div>
"""
    year = datetime.now().year
    return (
        "<!DOCTYPE html>\n"
        "<html lang=\"en\">\n"
        "  <head>\n"
        "    <meta charset=\"utf-8\" />\n"
        "    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />\n"
        "    <title>User Management System</title>\n"
        f"    <style>{_STYLESHEET}</style>\n"
        "  </head>\n"
        "  <body>\n"
        "    <main class=\"page\">\n"
        f"{content}\n"
        "    </main>\n"
        f"    <footer class=\"footer\">© {year} User Management System</footer>\n"
        "  </body>\n"
        "</html>"
    )


def register_ui_routes(app: FastAPI) -> None:
    """Expose the HTML form and table on the provided FastAPI app."""

    router = APIRouter(include_in_schema=False)

    def _controller(request: Request) -> UserListController:
        return request.app.state.controller

    def _redirect_home(request: Request) -> RedirectResponse:
        return RedirectResponse(request.url_for("ui_home"), status_code=status.HTTP_303_SEE_OTHER)

    @router.get("/", response_class=HTMLResponse, name="ui_home")
    async def homepage(request: Request):
        return HTMLResponse(render_page(request, _controller(request)))

    @router.post("/users", name="ui_submit_user")
    async def submit_user(request: Request):
        controller = _controller(request)
        form = await _parse_form(request)
        draft = controller.update_draft(
            name=form.get("name", "").strip(),
            email=form.get("email", "").strip(),
            date_of_birth=form.get("date_of_birth", "").strip(),
        )
        if not (draft.name and draft.email and draft.date_of_birth):
            logger.warning("Rejected incomplete user form submission")
            return HTMLResponse(
                render_page(request, controller, error=MISSING_FIELDS_MESSAGE),
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        await controller.submit()
        return _redirect_home(request)

    @router.post("/users/{user_id}/edit", name="ui_edit_user")
    async def edit_user(user_id: int, request: Request):
        try:
            _controller(request).request_edit(user_id)
        except KeyError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return _redirect_home(request)

    @router.post("/users/{user_id}/delete", name="ui_delete_user")
    async def delete_user(user_id: int, request: Request):
        await _controller(request).delete(user_id)
        return _redirect_home(request)

    @router.post("/edit/cancel", name="ui_cancel_edit")
    async def cancel_edit(request: Request):
        _controller(request).cancel_edit()
        return _redirect_home(request)

    @router.post("/notification/dismiss", name="ui_dismiss_notification")
    async def dismiss_notification(request: Request):
        _controller(request).dismiss_notification()
        return _redirect_home(request)

    app.include_router(router)


__all__ = ["EMPTY_LIST_MESSAGE", "MISSING_FIELDS_MESSAGE", "register_ui_routes", "render_page"]
