import os


def _env_flag(name, default="0"):
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


UNITYATLAS_MAX_WORKERS = int(os.environ.get("UNITYATLAS_MAX_WORKERS", "1"))
UNITYATLAS_TOP_REFERENCED = int(os.environ.get("UNITYATLAS_TOP_REFERENCED", "10"))
UNITYATLAS_INCLUDE_PACKAGES = _env_flag("UNITYATLAS_INCLUDE_PACKAGES")
UNITYATLAS_LOG_LEVEL = os.environ.get("UNITYATLAS_LOG_LEVEL", "WARNING").upper()
