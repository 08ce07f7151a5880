# motor_sysid/logger/logger.py
from __future__ import annotations

import json
import logging
import os
import threading
import time
from dataclasses import asdict, is_dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

import numpy as np


class DedupFilter(logging.Filter):
    """
    Drop a message identical to the previous one from the same (logger, level)
    inside the cooldown window. A cooldown of 0 drops every consecutive repeat.
    """
    def __init__(self, cooldown_s: float = 0.0) -> None:
        super().__init__()
        self.cooldown_s = float(cooldown_s)
        self._lock = threading.Lock()
        self._last: dict[tuple[str, int], tuple[str, float]] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        now = time.time()
        key = (record.name, record.levelno)

        with self._lock:
            prev = self._last.get(key)
            if prev is not None and prev[0] == msg:
                if self.cooldown_s <= 0.0 or (now - prev[1]) < self.cooldown_s:
                    return False
            self._last[key] = (msg, now)
            return True


class Logger:
    """
    Rotating text log for a characterization run.

    Attaches handlers to the named stdlib logger once; library modules below
    that name (e.g. "motor_sysid.research.feedforward") propagate into it.
    """
    def __init__(
        self,
        log_file: str,
        logger_name: str = "motor_sysid",
        log_dir: str = "logs",
        level: int = logging.INFO,
        timestamp_format: str = "%Y-%m-%d %H:%M:%S",
        max_bytes: int = 2_000_000,
        backup_count: int = 3,
        console: bool = False,
        dedup_cooldown_s: float = 0.0,
    ) -> None:
        os.makedirs(log_dir, exist_ok=True)
        self.path = os.path.join(log_dir, log_file)

        _logger = logging.getLogger(logger_name)
        _logger.setLevel(level)
        _logger.propagate = False

        # pytest re-instantiates loggers with the same name
        if not _logger.handlers:
            fmt = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt=timestamp_format,
            )

            fh = RotatingFileHandler(
                self.path,
                maxBytes=int(max_bytes),
                backupCount=int(backup_count),
                encoding="utf-8",
            )
            fh.setLevel(level)
            fh.setFormatter(fmt)
            fh.addFilter(DedupFilter(cooldown_s=dedup_cooldown_s))
            _logger.addHandler(fh)

            if console:
                ch = logging.StreamHandler()
                ch.setLevel(level)
                ch.setFormatter(fmt)
                ch.addFilter(DedupFilter(cooldown_s=dedup_cooldown_s))
                _logger.addHandler(ch)

        self._logger = _logger
        self._logger.debug(f"Logger '{logger_name}' initialized → {self.path}")

    def get_logger(self) -> logging.Logger:
        return self._logger

    def close(self) -> None:
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)
        self._logger.propagate = True


class JsonlLogger:
    """
    Append-only JSONL event log. One object per line, each carrying
    "ts_ns" and "event" plus the keyword fields of the call.
    """
    def __init__(self, path: str, mkdirs: bool = True) -> None:
        self.path = str(path)
        if mkdirs:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._f = open(self.path, "a", buffering=1, encoding="utf-8")

    def write(self, event: str, **data: Any) -> None:
        row = {
            "ts_ns": time.time_ns(),
            "event": event,
            **self._normalize(data),
        }
        line = json.dumps(row, ensure_ascii=False, default=str)
        with self._lock:
            self._f.write(line + "\n")

    def close(self) -> None:
        with self._lock:
            if not self._f.closed:
                self._f.close()

    def __enter__(self) -> "JsonlLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _normalize(self, obj: Any) -> Any:
        """
        Make fit artifacts JSON-friendly:
        - dataclasses -> dict
        - numpy scalars -> float/int/bool, arrays -> lists
        - non-finite floats -> None
        - Path -> str
        """
        if isinstance(obj, dict):
            return {k: self._normalize(v) for k, v in obj.items()}

        if isinstance(obj, (list, tuple)):
            return [self._normalize(v) for v in obj]

        if is_dataclass(obj) and not isinstance(obj, type):
            return self._normalize(asdict(obj))

        if isinstance(obj, np.ndarray):
            return self._normalize(obj.tolist())

        if isinstance(obj, np.generic):
            return self._normalize(obj.item())

        if isinstance(obj, float) and not np.isfinite(obj):
            return None

        if isinstance(obj, Path):
            return str(obj)

        if isinstance(obj, BaseException):
            return repr(obj)

        return obj


class SysIdLogBundle:
    """
    Text log + JSONL event log for one characterization pass.
    """
    def __init__(
        self,
        name: str,
        log_dir: str = "logs",
        level: int = logging.INFO,
        console: bool = False,
        dedup_cooldown_s: float = 0.0,
        jsonl_file: Optional[str] = None,
        text_file: Optional[str] = None,
    ) -> None:
        self.name = name
        self.text = Logger(
            log_file=text_file or f"{name}.log",
            logger_name="motor_sysid",
            log_dir=log_dir,
            level=level,
            console=console,
            dedup_cooldown_s=dedup_cooldown_s,
        )
        self.events = JsonlLogger(path=str(Path(log_dir) / (jsonl_file or f"{name}.jsonl")))

    def close(self) -> None:
        self.events.close()
        self.text.close()
