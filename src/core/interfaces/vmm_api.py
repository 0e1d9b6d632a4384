"""Contrato de la API de control del VMM.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir el adaptador httpx por un doble en tests o por otro VMM
  compatible sin acoplar la CLI a la implementación concreta.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import (
    ApiResponse,
    BlockDevice,
    BootSource,
    InstanceInfo,
    MachineConfig,
)


@runtime_checkable
class VmmApi(Protocol):
    """Operaciones de configuración previas al arranque.

    Reglas de diseño:
    - Cada llamada es una única petición; sin reintentos.
    - El código de estado no se interpreta: se devuelve la respuesta cruda.
    - Los fallos de transporte se propagan tal cual.
    """

    def put_boot_source(self, boot_source: BootSource) -> ApiResponse:
        ...

    def put_drive(self, drive: BlockDevice) -> ApiResponse:
        ...

    def put_machine_config(self, machine_config: MachineConfig) -> ApiResponse:
        ...

    def get_instance_info(self) -> InstanceInfo:
        ...
