"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta de los cuerpos JSON antes de llegar al socket.
- Serialización estable (`model_dump`) para que dos invocaciones iguales
  produzcan exactamente la misma petición.

Nota:
- Estos modelos describen *qué* se configura en la microVM, no *cómo* se envía.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class BootSource(BaseModel):
    """Fuente de arranque: imagen de kernel + argumentos."""

    model_config = ConfigDict(extra="forbid")

    kernel_image_path: str = Field(
        ...,
        min_length=1,
        description="Ruta (en el host) del kernel que arranca la microVM.",
    )
    boot_args: str | None = Field(
        default=None,
        description="Línea de comandos del kernel invitado.",
    )


class BlockDevice(BaseModel):
    """Dispositivo de bloque respaldado por un fichero del host."""

    model_config = ConfigDict(extra="forbid")

    drive_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Identificador del drive; también forma la ruta `/drives/<id>`.",
    )
    path_on_host: str = Field(
        ...,
        min_length=1,
        description="Fichero de imagen en el host.",
    )
    is_root_device: bool = Field(
        default=False,
        description="Si el drive se expone como dispositivo raíz.",
    )
    is_read_only: bool = Field(
        default=False,
        description="Si el invitado lo ve como solo lectura.",
    )
    partuuid: str | None = Field(
        default=None,
        description="PARTUUID de la partición raíz (solo si `is_root_device`).",
    )

    @field_validator("drive_id")
    @classmethod
    def _drive_id_is_path_safe(cls, value: str) -> str:
        if "/" in value or value.strip() != value:
            raise ValueError("drive_id must not contain '/' or surrounding whitespace")
        return value


class MachineConfig(BaseModel):
    """Recursos de la microVM (vCPUs, memoria)."""

    model_config = ConfigDict(extra="forbid")

    vcpu_count: int = Field(default=1, ge=1, le=32)
    mem_size_mib: int = Field(default=64, gt=0)
    ht_enabled: bool = Field(default=False)
    cpu_template: str | None = Field(default=None)


class InstanceInfo(BaseModel):
    """Respuesta de `GET /` (estado de la instancia)."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Identificador de la instancia.")
    state: str = Field(..., description="Estado (p.ej. 'Uninitialized', 'Running').")
    vmm_version: str = Field(..., description="Versión del VMM.")
    app_name: str | None = Field(default=None)


class ApiResponse(BaseModel):
    """Respuesta HTTP cruda, tal y como la mostraría `curl -i`."""

    http_version: str = Field(default="HTTP/1.1")
    status_code: int = Field(..., ge=100, le=599)
    reason_phrase: str = Field(default="")
    headers: list[tuple[str, str]] = Field(
        default_factory=list,
        description="Cabeceras en el orden recibido.",
    )
    body: str = Field(default="")


def request_body(model: BaseModel) -> dict[str, Any]:
    """Cuerpo JSON canónico de un modelo (sin claves `None`)."""

    return model.model_dump(mode="json", exclude_none=True)
