# userhub/api/v1/routers/users.py
from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status

from userhub.api.v1.cookies import clear_token_cookies, set_token_cookies
from userhub.api.v1.deps import (
    REFRESH_COOKIE,
    get_current_user,
    get_media_manager,
    get_token_service,
)
from userhub.api.v1.uploads import spooled
from userhub.core.security import TokenService
from userhub.models.user import User
from userhub.schemas.auth import ChangePasswordIn, LoginRequest, RefreshTokenIn, TokenPairOut
from userhub.schemas.response import api_response
from userhub.schemas.user import RegisterInput, UpdateAccountIn
from userhub.services import profiles, sessions
from userhub.services.media import MediaAttachmentManager

router = APIRouter(prefix="/users", tags=["users"])

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    username: str | None = Form(default=None),
    email: str | None = Form(default=None),
    fullname: str | None = Form(default=None),
    password: str | None = Form(default=None),
    avatar: UploadFile | None = File(default=None),
    coverImage: UploadFile | None = File(default=None),
    media: MediaAttachmentManager = Depends(get_media_manager),
):
    """
    Register a new user account.

    Multipart form with the identity fields plus an avatar file (required) and a
    cover image (optional). Files are uploaded to the media host; the stored user
    references their URLs.

    Returns:
        dict: Envelope with the sanitized user (no password hash, no refresh token)

    Raises:
        ValidationError (400): Missing/blank fields, upper-case username,
            invalid email, missing avatar or failed avatar upload
        ConflictError (409): Username or email already taken
        InternalError (500): User could not be read back after creation
    """
    body = RegisterInput(username=username, email=email, fullname=fullname, password=password)
    async with spooled(avatar, coverImage) as (avatar_file, cover_file):
        user = await profiles.register(body, media, avatar=avatar_file, cover_image=cover_file)
    return api_response(user, "User registered successfully!", status.HTTP_201_CREATED)

@router.post("/login")
async def login(
    payload: LoginRequest,
    response: Response,
    tokens: TokenService = Depends(get_token_service),
):
    """
    Authenticate by username or email and open a session.

    Both tokens are returned in the body and also set as HttpOnly, Secure
    cookies ("accessToken", "refreshToken"). The refresh token is recorded on
    the user, replacing any previous one.

    Raises:
        ValidationError (400): Neither username nor email given
        NotFoundError (404): No such user
        AuthError (401): Wrong password
    """
    result = await sessions.login(payload, tokens)
    set_token_cookies(response, result.tokens)
    data = {
        "user": result.user.model_dump(mode="json"),
        "accessToken": result.tokens.access_token,
        "refreshToken": result.tokens.refresh_token,
    }
    return api_response(data, "User logged in successfully!")

@router.post("/logout")
async def logout(response: Response, user: User = Depends(get_current_user)):
    """
    Log out: clear the stored refresh token and both cookies.
    Outstanding access tokens stay valid until they expire.
    """
    await sessions.logout(user)
    clear_token_cookies(response)
    return api_response({}, "User logged out successfully!")

@router.post("/refresh-token")
async def refresh_token(
    request: Request,
    response: Response,
    body: RefreshTokenIn | None = None,
    tokens: TokenService = Depends(get_token_service),
):
    """
    Rotate the session: exchange the current refresh token for a new pair.

    The refresh token is read from the "refreshToken" cookie, falling back to
    the JSON body field of the same name. A token that was already rotated or
    cleared by logout is rejected even if it has not expired.

    Raises:
        AuthError (400): Missing, invalid, expired, or stale refresh token
    """
    presented = request.cookies.get(REFRESH_COOKIE) or (body.refreshToken if body else None)
    result = await sessions.refresh(presented, tokens)
    set_token_cookies(response, result.tokens)
    data = TokenPairOut(
        accessToken=result.tokens.access_token,
        refreshToken=result.tokens.refresh_token,
    )
    return api_response(data, "Access token refreshed.")

@router.patch("/change-password")
async def change_password(body: ChangePasswordIn, user: User = Depends(get_current_user)):
    """
    Change the password of the logged-in user after checking the old one.

    Raises:
        ValidationError (400): Missing old or new password
        AuthError (400): Old password is wrong
    """
    await sessions.change_password(user, body)
    return api_response({}, "Password changed successfully.")

@router.get("/current-user")
async def current_user(user: User = Depends(get_current_user)):
    return api_response(sessions.get_current_user(user), "Current user fetched successfully.")

@router.patch("/update-account")
async def update_account(body: UpdateAccountIn, user: User = Depends(get_current_user)):
    """
    Update fullname and/or email of the logged-in user.

    Raises:
        ValidationError (400): Neither field given, or invalid email
        ConflictError (409): Email belongs to another account
    """
    updated = await profiles.update_account(user, body)
    return api_response(updated, "Account details updated successfully.")

@router.patch("/avatar")
async def update_avatar(
    avatar: UploadFile | None = File(default=None),
    user: User = Depends(get_current_user),
    media: MediaAttachmentManager = Depends(get_media_manager),
):
    """
    Replace the avatar. The previous remote file is deleted only after the new
    URL has been saved on the user.
    """
    async with spooled(avatar) as (avatar_file,):
        updated = await profiles.update_avatar(user, avatar_file, media)
    return api_response(updated, "Avatar updated successfully.")

@router.patch("/cover-image")
async def update_cover_image(
    coverImage: UploadFile | None = File(default=None),
    user: User = Depends(get_current_user),
    media: MediaAttachmentManager = Depends(get_media_manager),
):
    """Replace the cover image (same ordering guarantee as the avatar)."""
    async with spooled(coverImage) as (cover_file,):
        updated = await profiles.update_cover_image(user, cover_file, media)
    return api_response(updated, "Cover image updated successfully.")

@router.get("/channel/{username}")
async def channel_profile(username: str, user: User = Depends(get_current_user)):
    """
    Public channel profile of `username`: profile fields plus subscriberCount,
    subscribedToCount and whether the caller is subscribed.

    Raises:
        NotFoundError (404): Unknown username
    """
    profile = await profiles.get_channel_profile(username, user)
    return api_response(profile, "Channel fetched successfully.")
