"""Lector de named pipes con valor centinela.

Semántica:
- Lee una línea cada vez, byte a byte y sin buffer, para no consumir nada del
  pipe más allá de la línea centinela.
- Si la línea (sin espacios en los extremos) es el centinela, termina.
- En un FIFO, que los escritores se desconecten no termina el bucle: se sigue
  esperando al siguiente. En un fichero regular, EOF termina el bucle.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Literal

logger = logging.getLogger(__name__)

DEFAULT_SENTINEL = "quit"


@dataclass(frozen=True)
class ReadOutcome:
    """Resultado del bucle de lectura."""

    lines_read: int
    reason: Literal["sentinel", "eof"]


def is_fifo(path: Path) -> bool:
    try:
        return stat.S_ISFIFO(os.stat(path).st_mode)
    except FileNotFoundError:
        return False


def _open_fifo(path: Path) -> tuple[BinaryIO, bool]:
    """Abre el FIFO; devuelve (stream, hay_que_reabrir_en_eof).

    Con O_RDWR el propio lector cuenta como escritor, así que el kernel nunca
    devuelve EOF cuando los demás escritores cierran y no se pierden datos
    entre una conexión y la siguiente. Sin permiso de escritura se abre en
    solo lectura (bloquea hasta que haya un escritor) y se reabre en cada EOF.
    """

    try:
        fd = os.open(path, os.O_RDWR)
    except PermissionError:
        return open(path, "rb", buffering=0), True
    return open(fd, "rb", buffering=0), False


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").strip()


def read_until_sentinel(
    path: Path | str,
    *,
    on_line: Callable[[str], None],
    sentinel: str = DEFAULT_SENTINEL,
    follow_fifo: bool = True,
) -> ReadOutcome:
    """Lee líneas de `path` y llama a `on_line` con cada una hasta ver `sentinel`.

    `follow_fifo=False` trata un FIFO como un fichero cualquiera: el primer
    EOF (todos los escritores cerrados) termina la lectura.
    """

    path = Path(path)
    follow = follow_fifo and is_fifo(path)
    reopen = False
    lines_read = 0

    if follow:
        stream, reopen = _open_fifo(path)
    else:
        stream = open(path, "rb", buffering=0)
    logger.debug("opened %s (follow=%s, reopen=%s)", path, follow, reopen)
    try:
        while True:
            # readline() de un stream sin buffer lee de un byte en un byte.
            raw = stream.readline()
            if not raw:
                if not (follow and reopen):
                    logger.debug("EOF on %s", path)
                    return ReadOutcome(lines_read=lines_read, reason="eof")
                logger.debug("writers closed %s; waiting for the next one", path)
                stream.close()
                stream = open(path, "rb", buffering=0)
                continue

            line = _decode(raw)
            if line == sentinel:
                logger.debug("sentinel %r received after %d lines", sentinel, lines_read)
                return ReadOutcome(lines_read=lines_read, reason="sentinel")

            lines_read += 1
            on_line(line)
    finally:
        stream.close()
