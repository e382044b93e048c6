# api/config.py
"""
Service settings, read from the environment (and `.env` when present).
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_PORT = 3000
DEFAULT_BUILDER_IMAGE = "ondemand-build-service/builder:latest"
DEFAULT_MAX_SOURCE_SIZE = 10 * 1024 * 1024  # 10 MB


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    app_env: str = "development"
    log_file: str = "app.log"
    build_tmp_root: str = os.path.abspath("./tmp")
    docker_bin: str = "docker"
    builder_image: str = DEFAULT_BUILDER_IMAGE
    builder_context_dir: str = os.path.join(PROJECT_ROOT, "docker", "builder")
    max_source_size: int = DEFAULT_MAX_SOURCE_SIZE
    skip_image_build: bool = False

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from `environ` (os.environ after loading `.env` by default).
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    return Settings(
        host=environ.get("HOST", "0.0.0.0"),
        port=int(environ.get("PORT", DEFAULT_PORT)),
        app_env=environ.get("APP_ENV", "development"),
        log_file=environ.get("LOG_FILE", "app.log"),
        build_tmp_root=os.path.abspath(environ.get("BUILD_TMP_ROOT", "./tmp")),
        docker_bin=environ.get("DOCKER_BIN", "docker"),
        builder_image=environ.get("BUILDER_IMAGE", DEFAULT_BUILDER_IMAGE),
        builder_context_dir=os.path.abspath(
            environ.get("BUILDER_CONTEXT_DIR", os.path.join(PROJECT_ROOT, "docker", "builder"))
        ),
        max_source_size=int(environ.get("MAX_SOURCE_SIZE", DEFAULT_MAX_SOURCE_SIZE)),
        skip_image_build=_flag(environ.get("SKIP_IMAGE_BUILD")),
    )
