# storefront/utils/log.py
# Журнал магазина: log/<год>/<месяц>/<день>.log

import os
import datetime
from aiologger import Logger
from aiologger.handlers.files import AsyncFileHandler
import logging

from storefront.config import settings

# значения этих ключей в data не попадают в файл
SECRET_KEYS = {"password", "x-admin-password", "api_key", "authorization", "token"}
MASK = "***"

LEVEL_PREFIX = {
    "info": "",
    "warning": "WARNING: ",
    "error": "ERROR: ",
}


class Log:
    """
    Один файл на день, строки вида
    `04.10.2025 12:00:00 order: ERROR: Заказ не принят: {...}`.
    Асинхронные методы пишут через aiologger, *_sync через logging
    (старт приложения, до event loop).
    """

    def __init__(self, log_dir: str | None = None, log_print: bool | None = None):
        self.log_dir = log_dir or settings.LOG_DIR
        os.makedirs(self.log_dir, exist_ok=True)
        if log_print is None:
            log_print = settings.LOG_PRINT.lower() in ("1", "true", "yes")
        self.log_print = log_print
        self.handlers = {}
        self.sync_loggers = {}

    def build_log_path(self, now: datetime.datetime) -> str:
        day_dir = os.path.join(self.log_dir, f"{now.year}", f"{now:%m}")
        os.makedirs(day_dir, exist_ok=True)
        return os.path.join(day_dir, f"{now:%d}.log")

    def format_line(self, now: datetime.datetime, target: str, level: str, message: str, data) -> str:
        line = f"{now:%d.%m.%Y %H:%M:%S} {target}: {LEVEL_PREFIX[level]}{message}"
        if data:
            line += f": {self.safe_serialize(data)}"
        return line

    def echo(self, line: str, is_console: bool | None):
        if self.log_print if is_console is None else is_console:
            print(line)

    # ────────────── aiologger ──────────────
    async def get_logger(self, target: str, now: datetime.datetime) -> Logger:
        """Логгер target на текущий день; при смене дня старый файл закрывается."""
        log_path = self.build_log_path(now)
        current = self.handlers.get(target)

        if current is None or current["path"] != log_path:
            target_logger = Logger(name=f"storefront_{target}")
            target_logger.add_handler(AsyncFileHandler(filename=log_path, mode="a", encoding="utf-8"))
            if current is not None:
                await current["logger"].shutdown()
            self.handlers[target] = {"path": log_path, "logger": target_logger}

        return self.handlers[target]["logger"]

    async def write(self, level: str, target: str, message: str, data=None, is_console: bool | None = None):
        now = datetime.datetime.now()
        line = self.format_line(now, target, level, message, data)
        target_logger = await self.get_logger(target, now)
        await target_logger.info(line)
        self.echo(line, is_console)

    async def log_info(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        await self.write("info", target, message, data, is_console)

    async def log_warning(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        await self.write("warning", target, message, data, is_console)

    async def log_error(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        await self.write("error", target, message, data, is_console)

    # ────────────── logging (sync) ──────────────
    def get_sync_logger(self, log_path: str) -> logging.Logger:
        logger = self.sync_loggers.get(log_path)
        if logger is None:
            logger = logging.getLogger(f"storefront_sync.{log_path}")
            logger.setLevel(logging.INFO)
            logger.propagate = False
            if not logger.handlers:
                handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
                handler.setFormatter(logging.Formatter("%(message)s"))
                logger.addHandler(handler)
            self.sync_loggers[log_path] = logger
        return logger

    def write_sync(self, level: str, target: str, message: str, data=None, is_console: bool | None = None):
        now = datetime.datetime.now()
        line = self.format_line(now, target, level, message, data)
        self.get_sync_logger(self.build_log_path(now)).info(line)
        self.echo(line, is_console)

    def log_info_sync(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        self.write_sync("info", target, message, data, is_console)

    def log_warning_sync(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        self.write_sync("warning", target, message, data, is_console)

    def log_error_sync(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        self.write_sync("error", target, message, data, is_console)

    def safe_serialize(self, obj):
        """
        Объект в вид, пригодный для строки лога:
        контейнеры рекурсивно, pydantic через model_dump,
        секреты заменяются на ***.
        """
        if obj is None or isinstance(obj, (str, int, float, bool)):
            return obj
        if isinstance(obj, (datetime.date, datetime.datetime)):
            return obj.isoformat()
        if isinstance(obj, dict):
            return {
                k: MASK if str(k).lower() in SECRET_KEYS else self.safe_serialize(v)
                for k, v in obj.items()
            }
        if isinstance(obj, (list, tuple, set)):
            return [self.safe_serialize(v) for v in obj]
        if hasattr(obj, "model_dump"):  # Pydantic
            return self.safe_serialize(obj.model_dump())
        return f"<{type(obj).__name__}>"

    async def shutdown(self):
        for h in list(self.handlers.values()):
            await h["logger"].shutdown()
        self.handlers = {}
        for logger in self.sync_loggers.values():
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
        self.sync_loggers = {}
