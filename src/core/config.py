"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que los adaptadores (HTTP sobre socket, FIFO) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "fcctl"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "fcctl"
    return Path.home() / ".config" / "fcctl"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="FCCTL_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_socket: Path = Field(
        default=Path("/tmp/firecracker.socket"),
        description="Socket Unix de la API del VMM.",
    )
    http_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="fcctl/0.1",
        min_length=1,
        description="User-Agent para las peticiones a la API.",
    )

    # Boot source
    kernel_image_path: str = Field(
        default="./loader-stripped-64.elf",
        min_length=1,
        description="Ruta (en el host) de la imagen de kernel.",
    )
    boot_args: str | None = Field(
        default="--ip=eth0,169.254.0.165,255.255.255.252 --defaultgw=169.254.0.166 /hello",
        description="Línea de comandos del kernel invitado.",
    )

    # Drive
    drive_id: str = Field(
        default="rootfs",
        min_length=1,
        description="Identificador del dispositivo de bloque.",
    )
    drive_path_on_host: str = Field(
        default="./usr.zfs",
        min_length=1,
        description="Fichero de imagen que respalda el dispositivo de bloque.",
    )
    drive_is_root_device: bool = Field(default=False)
    drive_is_read_only: bool = Field(default=False)

    fifo_sentinel: str = Field(
        default="quit",
        min_length=1,
        description="Línea que termina el lector de FIFO.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )
