"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: la CLI depende de abstracciones.
"""

from core.interfaces.vmm_api import VmmApi

__all__ = ["VmmApi"]
