"""Delivery sinks that receive encoded documents."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DeliverySink:
    """Interface: accept PDF bytes under a file name."""

    def deliver(self, data: bytes, filename: str) -> Optional[Path]:
        raise NotImplementedError


class DirectorySink(DeliverySink):
    """Writes each document into an output directory."""

    def __init__(self, out_dir: Path):
        self.out_dir = Path(out_dir)

    def deliver(self, data: bytes, filename: str) -> Path:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        path = self.out_dir / filename
        path.write_bytes(data)
        logger.info("Wrote %s (%d bytes)", path, len(data))
        return path


class TempFileSink(DeliverySink):
    """
    Stages the document in a temp file and hands it to `send`.

    The temp file is removed only after `send` returns; if sending fails the
    file is left in place (and logged) so it can be retried or inspected.
    """

    def __init__(self, send: Callable[[Path, str], None], tmp_dir: Optional[Path] = None):
        self.send = send
        self.tmp_dir = tmp_dir

    def deliver(self, data: bytes, filename: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=Path(filename).stem + "_", suffix=".pdf", dir=self.tmp_dir
        )
        path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except Exception:
            path.unlink()
            raise

        try:
            self.send(path, filename)
        except Exception:
            logger.error("Delivery of %s failed; keeping %s", filename, path)
            raise

        path.unlink()
        logger.debug("Delivered %s and removed %s", filename, path)
