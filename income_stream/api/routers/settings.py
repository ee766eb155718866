"""Settings API routes."""

from typing import Any

from fastapi import APIRouter, Depends
from typing_extensions import Annotated

from income_stream.api.dependencies import CommonDependencies, get_common_deps
from income_stream.api.models import SettingValue

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
async def get_settings(
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
) -> dict[str, Any]:
    """Get all settings."""
    return await deps.settings.all()


@router.put("/{key}")
async def set_setting(
    key: str,
    body: SettingValue,
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
) -> dict[str, Any]:
    """Set a setting value. Unknown keys and values of the wrong type are rejected."""
    stored = await deps.settings.set(key, body.value)
    if key == "quote_cache_ttl_days":
        deps.quotes.set_cache_ttl_days(stored)
    return {"status": "ok", "key": key, "value": stored}
