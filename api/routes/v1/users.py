"""
api/routes/v1/users.py -- Account and session REST endpoints.

Routes:
  POST   /api/v1/register          -- create account; sets session cookie; 201
  POST   /api/v1/login             -- password login; sets session cookie
  GET    /api/v1/logout            -- clears cookie; 200 (idempotent)
  GET    /api/v1/login-status      -- true/false, never an error
  GET    /api/v1/user              -- current user's public profile (requires session)
  PATCH  /api/v1/user              -- update name/bio/photo (requires session)
  DELETE /api/v1/admin/users/{id}  -- delete any account (requires admin)

Handlers that hash passwords or hit the store are plain `def` so FastAPI
runs them in its thread pool; bcrypt never blocks the event loop. logout and
login-status do neither and are `async def`.

Errors are raised as AuthError subclasses by auth/accounts.py and the auth
dependencies; api/main.py renders them. Routes never build error bodies.

Register and login responses carry Cache-Control: no-store so the token in
the body is not kept by intermediaries.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import AuthResponse, LoginRequest, MessageResponse, ProfilePatch, RegisterRequest, UserProfile
from auth import accounts
from auth.cookies import attach_session_cookie, clear_session_cookie, extract_token
from auth.dependencies import require_admin, require_session
from auth.models import User
from auth.store import UserStore

# Auth policy:
# - POST   /register, /login:    public -- they create the session
# - GET    /logout:              public -- clearing a cookie needs no prior auth
# - GET    /login-status:        public -- answers the question, never 401s
# - GET    /user, PATCH /user:   requires session (require_session)
# - DELETE /admin/users/{id}:    requires admin (require_admin)
router = APIRouter()


def _auth_response(user: User, token: str, status_code: int) -> JSONResponse:
    resp = JSONResponse(
        status_code=status_code,
        content=AuthResponse.from_user_and_token(user, token).model_dump(mode="json", by_alias=True),
    )
    attach_session_cookie(resp, token)
    resp.headers["Cache-Control"] = "no-store"
    return resp


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Create an account and start a session for it."""
    user_store: UserStore = request.app.state.user_store
    user, token = accounts.register(user_store, body.name, body.email, body.password)
    return _auth_response(user, token, status_code=201)


@router.post("/login", response_model=AuthResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; set the session cookie."""
    user_store: UserStore = request.app.state.user_store
    user, token = accounts.login(user_store, body.email, body.password)
    return _auth_response(user, token, status_code=200)


@router.get("/logout", response_model=MessageResponse)
async def logout() -> JSONResponse:
    """Clear the session cookie.

    The token itself stays valid until it expires; there is no server-side
    revocation.
    """
    resp = JSONResponse(content=MessageResponse(message="User logged out").model_dump())
    clear_session_cookie(resp)
    return resp


@router.get("/login-status", response_model=bool)
async def login_status(request: Request) -> bool:
    """Return whether the request carries a valid session token."""
    return accounts.login_status(extract_token(request))


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/user", response_model=UserProfile)
def get_user(request: Request, current_user: User = Depends(require_session)) -> UserProfile:
    """Return the current user's public profile."""
    user_store: UserStore = request.app.state.user_store
    return UserProfile.from_user(accounts.get_profile(user_store, current_user.id))


@router.patch("/user", response_model=UserProfile)
def update_user(
    request: Request,
    body: ProfilePatch,
    current_user: User = Depends(require_session),
) -> UserProfile:
    """Update name, bio, and/or photo of the current user."""
    user_store: UserStore = request.app.state.user_store
    updated = accounts.update_profile(user_store, current_user.id, name=body.name, bio=body.bio, photo=body.photo)
    return UserProfile.from_user(updated)


# ---------------------------------------------------------------------------
# Admin endpoints
# ---------------------------------------------------------------------------


@router.delete("/admin/users/{user_id}", response_model=MessageResponse)
def delete_user(
    request: Request,
    user_id: str,
    admin: User = Depends(require_admin),
) -> MessageResponse:
    """Delete any account by id. Admin only."""
    user_store: UserStore = request.app.state.user_store
    accounts.delete_user(user_store, user_id, acting_user_id=admin.id)
    return MessageResponse(message="User deleted successfully")
