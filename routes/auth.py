import logging
from fastapi import APIRouter, Depends, Request, status
from app.database import CredentialStore, get_credentials
from app.errors import AuthenticationFailedError, ValidationError
from app.security import get_current_username, require_session_claims, start_session
from app.validators import USERNAME_RULE, is_valid_username, validate_password
from schemas.schemas import (
    ErrorResponse, LoginData, LoginResponse, ProfileData, ProfileResponse,
    RegisteredUser, RegisterResponse, UserCreate, UserLogin
)

logger = logging.getLogger(__name__)

router = APIRouter(
    tags = ["Authentication"]
)

protected_router = APIRouter(
    prefix = "/customer/auth",
    tags = ["Authentication"],
    dependencies = [Depends(require_session_claims)]
)


def _check_credentials_present(username, password):
    if not username or not password:
        errors = {}
        if not username:
            errors["username"] = "Username is required"
        if not password:
            errors["password"] = "Password is required"
        raise ValidationError("Username and password are required", errors = errors)

def _check_username_shape(username: str):
    if not is_valid_username(username):
        raise ValidationError("Invalid username format", errors = {"username": USERNAME_RULE})


@router.post(
    "/register",
    response_model = RegisterResponse,
    status_code = status.HTTP_201_CREATED,
    responses = {
        400: {"model": ErrorResponse, "description": "Missing or malformed username or password"},
        409: {"model": ErrorResponse, "description": "Username already exists"}
    })
async def register(user_data: UserCreate, credentials: CredentialStore = Depends(get_credentials)):
    """
    Register a new user in the system.

    The username must be 3-30 letters, digits or underscores and the password
    6-100 characters. The password is hashed before it is stored.

    Args:
        user_data (UserCreate): The desired username and password.
        credentials (CredentialStore): The user registry.

    Raises:
        ValidationError: If a field is missing or malformed.
        ConflictError: If the username is already taken.

    Returns:
        RegisterResponse: The username and registration time.
    """
    _check_credentials_present(user_data.username, user_data.password)
    _check_username_shape(user_data.username)

    check = validate_password(user_data.password)
    if not check.valid:
        raise ValidationError(check.reason, errors = {"password": check.reason})

    user = await credentials.register(user_data.username, user_data.password)
    return RegisterResponse(
        message = "User registered successfully",
        data = RegisteredUser(username = user.username, registered_at = user.registered_at)
    )

@router.post(
    "/customer/login",
    response_model = LoginResponse,
    responses = {
        400: {"model": ErrorResponse, "description": "Missing credentials or malformed username"},
        401: {"model": ErrorResponse, "description": "Invalid username or password"}
    })
async def login(login_data: UserLogin, request: Request, credentials: CredentialStore = Depends(get_credentials)):
    """
    Authenticate a user and open a session.

    On success a JWT valid for one hour is minted, stored in the session
    together with the login time, and returned to the caller.

    Raises:
        ValidationError: If a field is missing or the username is malformed.
        AuthenticationFailedError: If the credentials do not match a user.
    """
    _check_credentials_present(login_data.username, login_data.password)
    _check_username_shape(login_data.username)

    if not await credentials.authenticate(login_data.username, login_data.password):
        logger.info("Failed login for %s", login_data.username)
        raise AuthenticationFailedError("Invalid username or password")

    entry = start_session(request, login_data.username)
    logger.info("User %s logged in", login_data.username)
    return LoginResponse(
        message = "Login successful",
        data = LoginData(username = entry.username, token = entry.access_token, expires_in = "1 hour")
    )

@protected_router.get(
    "/profile",
    response_model = ProfileResponse,
    responses = {
        401: {"model": ErrorResponse, "description": "No active session"},
        403: {"model": ErrorResponse, "description": "Token expired or invalid"}
    })
async def profile(
    request: Request,
    username: str = Depends(get_current_username),
    credentials: CredentialStore = Depends(get_credentials)):
    """Return the logged-in user's registration and last-login times."""
    user = await credentials.get(username)
    return ProfileResponse(
        message = "Profile retrieved successfully",
        data = ProfileData(
            username = username,
            registered_at = user.registered_at if user else None,
            last_login = request.state.session_entry.logged_in_at
        )
    )
