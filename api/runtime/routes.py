from fastapi import APIRouter

from config.settings import APP_NAME, APP_VERSION

router = APIRouter()


@router.get("")
def get_runtime_status():
    """Return service status and version"""
    return {"status": "ok", "name": APP_NAME, "version": APP_VERSION}
