from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from settings_store.core.config import ConfigDep
from settings_store.exceptions import InvalidName, ReadOnly, SettingsError
from settings_store.models import SettingResponse, SettingStored, SettingValue
from settings_store.services.base import Settings
from settings_store.services.factory import create_store

router = APIRouter(prefix="/settings", tags=["settings"])

# Distinguishes "unset" from a stored None
_MISSING = object()


def get_store(request: Request, config: ConfigDep) -> Settings:
    """One store per request, sharing the app's engine and cache"""
    return create_store(
        config.model_copy(update={"create_table": False}),
        engine=request.app.state.engine,
        cache=request.app.state.cache,
    )


StoreDep = Annotated[Settings, Depends(get_store)]


def _http_error(error: SettingsError) -> HTTPException:
    if isinstance(error, InvalidName):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(error, ReadOnly):
        code = status.HTTP_405_METHOD_NOT_ALLOWED
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(error))


@router.get("/{identifier}", response_model=SettingResponse)
def read_setting(identifier: str, store: StoreDep):
    """Get a single setting"""
    try:
        value = store.get(identifier, _MISSING)
    except SettingsError as e:
        raise _http_error(e) from e

    if value is _MISSING:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Setting {identifier} not found",
        )
    return SettingResponse(identifier=identifier, value=value)


@router.put("/{identifier}", response_model=SettingStored)
def write_setting(identifier: str, body: SettingValue, store: StoreDep):
    try:
        stored = store.set(identifier, body.value)
    except SettingsError as e:
        raise _http_error(e) from e
    return SettingStored(identifier=identifier, stored=stored)


@router.delete("/{identifier}", status_code=status.HTTP_204_NO_CONTENT)
def delete_setting(identifier: str, store: StoreDep):
    """Delete a setting"""
    try:
        deleted = store.delete(identifier)
    except SettingsError as e:
        raise _http_error(e) from e

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Setting {identifier} not found",
        )
