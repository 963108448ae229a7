import os

from dotenv import load_dotenv

# Service-side settings: focus on HTTP/runtime switches.
# Infrastructure env/path settings live under `backend/infrastructure/config/`.
load_dotenv(override=True)


def _get_env_int(key: str, default: int) -> int:
    """读取整型环境变量，未设置时返回默认值"""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"环境变量 {key} 需要整数值，但实际为 {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    """读取布尔型环境变量，支持 true/false/1/0 等表达"""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "y", "yes", "on"}


# ===== FastAPI / Uvicorn 运行参数 =====

SERVER_HOST = os.getenv("SERVER_HOST", "127.0.0.1")  # 服务监听地址
SERVER_PORT = _get_env_int("SERVER_PORT", 8000)  # 服务端口
SERVER_RELOAD = _get_env_bool("SERVER_RELOAD", False)  # 热重载开关
SERVER_LOG_LEVEL = os.getenv("SERVER_LOG_LEVEL", "info")  # 日志等级

# The tracker is a single-writer dataset: one worker only.
SERVER_WORKERS = 1

UVICORN_CONFIG = {
    "host": SERVER_HOST,
    "port": SERVER_PORT,
    "reload": SERVER_RELOAD,
    "log_level": SERVER_LOG_LEVEL,
    "workers": SERVER_WORKERS,
}

# ===== 展示 =====

# IANA zone used to group the activity log by day; empty means server local time.
TRACKER_DISPLAY_TZ = (os.getenv("TRACKER_DISPLAY_TZ") or "").strip()

# Feature switch for the folder save/load endpoints.
TRACKER_FOLDER_ENABLE = _get_env_bool("TRACKER_FOLDER_ENABLE", True)
