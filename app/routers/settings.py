from fastapi import APIRouter, Form

from marmita_ops.config import get_setting, set_setting

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
def settings_page():
    key = get_setting("claude_api_key") or ""
    return {
        "key_set": bool(key),
        "masked_key": key[:8] + "..." if len(key) > 8 else "",
        "owner_number": get_setting("owner_number") or "",
    }


@router.post("")
def settings_save(claude_api_key: str = Form(""), owner_number: str = Form("")):
    if claude_api_key.strip():
        set_setting("claude_api_key", claude_api_key.strip())
    if owner_number.strip():
        set_setting("owner_number", owner_number.strip())
    return settings_page()
