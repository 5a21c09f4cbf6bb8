"""
BaseScript — abstract base class for the command-line scripts shipped with oauth2cli.

Provides:
  - Rotating file logger + stderr handler, scoped to <log_dir>/<script>.log
  - Abstract run() method that must return a JSON-serialisable dict
  - main() classmethod: parses --debug (plus subclass arguments), runs the script,
    prints JSON to stdout
  - Automatic elapsed-time logging

Subclass usage:
    class MyScript(BaseScript):
        @classmethod
        def add_arguments(cls, parser):
            parser.add_argument("--creds")

        def run(self) -> dict:
            self.logger.info("doing work with %s", self.args.creds)
            return {"result": "done"}

    if __name__ == "__main__":
        MyScript.main()
"""
from __future__ import annotations

import argparse
import json
import logging
import time
from abc import ABC, abstractmethod
from logging.handlers import RotatingFileHandler
from typing import Any, Optional, Sequence

from .settings import Settings, load_settings


class BaseScript(ABC):
    """Abstract base for oauth2cli scripts."""

    def __init__(
        self,
        args: Optional[argparse.Namespace] = None,
        log_level: int = logging.INFO,
        settings: Optional[Settings] = None,
    ) -> None:
        self.args = args if args is not None else argparse.Namespace()
        self.settings = settings if settings is not None else load_settings()
        # Derive script name from the concrete class name (lowercased)
        self.script_name: str = type(self).__name__.lower()
        self.logger: logging.Logger = self._setup_logger(log_level)

    # ── Logging ───────────────────────────────────────────────────────────────

    def _setup_logger(self, log_level: int) -> logging.Logger:
        """
        Configure a logger that writes to both:
          - <log_dir>/<script_name>.log  (rotating, max 2 MB × 5 backups)
          - stderr (stdout is reserved for the JSON result)
        """
        log_dir = self.settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)

        logger = logging.getLogger(self.script_name)
        logger.setLevel(log_level)
        logging.getLogger("oauth2cli").setLevel(log_level)

        # Avoid adding duplicate handlers if the script is constructed twice
        if logger.handlers:
            return logger

        fmt = logging.Formatter(
            "%(asctime)s [%(levelname)-8s] %(name)s — %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        file_handler = RotatingFileHandler(
            log_dir / f"{self.script_name}.log",
            maxBytes=2_000_000,   # 2 MB per file
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(fmt)

        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(fmt)

        logger.addHandler(file_handler)
        logger.addHandler(stream_handler)
        return logger

    # ── Abstract interface ────────────────────────────────────────────────────

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Hook for subclasses to register their own CLI arguments."""

    @abstractmethod
    def run(self) -> dict[str, Any]:
        """
        Execute the script.

        Must return a dict that is JSON-serialisable (str keys, JSON-safe values).
        datetime objects are serialised via default=str.
        """

    # ── CLI entrypoint ────────────────────────────────────────────────────────

    @classmethod
    def main(cls, argv: Optional[Sequence[str]] = None) -> dict[str, Any]:
        """
        Standard CLI entrypoint. Wire up as:
            if __name__ == "__main__":
                MyScript.main()

        Parses arguments, instantiates the script, calls run(), prints JSON.
        """
        doc = (cls.__doc__ or cls.__name__).strip().splitlines()[0]
        parser = argparse.ArgumentParser(description=doc)
        parser.add_argument(
            "--debug", action="store_true", help="Enable DEBUG-level logging"
        )
        cls.add_arguments(parser)
        args = parser.parse_args(argv)

        settings = load_settings()
        if args.debug:
            log_level = logging.DEBUG
        else:
            log_level = logging.getLevelName(settings.log_level)
            if not isinstance(log_level, int):
                log_level = logging.INFO
        script = cls(args=args, log_level=log_level, settings=settings)

        t0 = time.monotonic()
        try:
            result = script.run()
            elapsed = time.monotonic() - t0
            script.logger.info("Completed in %.2fs", elapsed)
            print(json.dumps(result, indent=2, default=str))
            return result
        except Exception:
            elapsed = time.monotonic() - t0
            script.logger.exception("Script failed after %.2fs", elapsed)
            raise
