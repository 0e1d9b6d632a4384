"""Adaptador httpx de la API de control del VMM (estilo Firecracker).

Cada método emite exactamente una petición y devuelve la respuesta sin
interpretarla; los errores de transporte (`httpx.TransportError`) suben tal cual.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from core.domain.models import (
    ApiResponse,
    BlockDevice,
    BootSource,
    InstanceInfo,
    MachineConfig,
    request_body,
)
from core.interfaces.vmm_api import VmmApi
from adapters.http_client import JSON_HEADERS

logger = logging.getLogger(__name__)


def to_api_response(response: httpx.Response) -> ApiResponse:
    """Normaliza un `httpx.Response` a `ApiResponse` conservando el orden de cabeceras."""

    headers = [
        (name.decode("latin-1"), value.decode("latin-1"))
        for name, value in response.headers.raw
    ]
    return ApiResponse(
        http_version=response.http_version,
        status_code=response.status_code,
        reason_phrase=response.reason_phrase,
        headers=headers,
        body=response.text,
    )


class FirecrackerApi(VmmApi):
    """Cliente mínimo de la API de configuración previa al arranque."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def put_boot_source(self, boot_source: BootSource) -> ApiResponse:
        return self._put("/boot-source", request_body(boot_source))

    def put_drive(self, drive: BlockDevice) -> ApiResponse:
        return self._put(f"/drives/{drive.drive_id}", request_body(drive))

    def put_machine_config(self, machine_config: MachineConfig) -> ApiResponse:
        return self._put("/machine-config", request_body(machine_config))

    def get_instance_info(self) -> InstanceInfo:
        logger.debug("GET /")
        response = self._client.get("/")
        response.raise_for_status()
        return InstanceInfo.model_validate(response.json())

    def _put(self, path: str, body: dict[str, Any]) -> ApiResponse:
        logger.debug("PUT %s %s", path, body)
        response = self._client.put(
            path,
            content=json.dumps(body).encode("utf-8"),
            headers=JSON_HEADERS,
        )
        logger.debug("PUT %s -> %s", path, response.status_code)
        return to_api_response(response)
