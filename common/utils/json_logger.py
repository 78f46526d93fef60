from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import logging.config
import pathlib
import traceback
from datetime import datetime
from logging import LogRecord, Filter
from typing import Sequence

_LOG_FORMAT = "%(asctime)s - pid:%(process)d [%(levelname)-.1s] %(filename)s:%(lineno)d - %(message)s"


class Logger:
    """Common logging utilities and setup."""

    @staticmethod
    def setup(level: str = "INFO", *, json_format: bool = False) -> None:
        logging.basicConfig(level=level, format=_LOG_FORMAT)
        if json_format:
            for handler in logging.getLogger().handlers:
                handler.setFormatter(JSONFormatter())
                handler.addFilter(ContextFilter())

        log_cfg_path = pathlib.Path("log_cfg.json")
        if log_cfg_path.exists() and log_cfg_path.is_file():
            with open(log_cfg_path, "r") as log_cfg_file:
                data = json.load(log_cfg_file)
                logging.config.dictConfig(data)

    @staticmethod
    def enable_debug(name_list: Sequence[str]) -> None:
        for name in name_list:
            logging.getLogger(name).setLevel(logging.DEBUG)


def log_msg(message: str, **kwargs) -> dict:
    return dict(message=message, **kwargs)


class JSONFormatter(logging.Formatter):
    def format(self, record: LogRecord) -> str:
        msg_dict = {
            "level": record.levelname,
            "date": datetime.fromtimestamp(record.created).isoformat(),
            "module": record.module + ":" + str(record.lineno),
        }

        msg_filter = getattr(record, "msg_filter", None)
        if isinstance(record.msg, dict):
            # signers and addresses are rendered by their public form
            msg = {k: (v.to_string() if hasattr(v, "to_string") else v) for k, v in record.msg.items()}
            if msg_filter:
                msg = {k: msg_filter(v) for k, v in msg.items()}

            base_msg = msg.pop("message", "")
            msg_dict["message"] = base_msg.format(**msg)

        else:
            msg = record.getMessage()
            if msg_filter:
                msg = msg_filter(msg)
            msg_dict["message"] = msg

        if ctx := getattr(record, "context", None):
            msg_dict.update(ctx)

        if record.exc_info:
            exc_msg = str(record.exc_info[1])
            if msg_filter:
                exc_msg = msg_filter(exc_msg)
            msg_dict["exc_info"] = {
                "type": str(record.exc_info[0]),
                "error": exc_msg,
                "traceback": [
                    line.strip().replace('"', "'").replace("\n", "; ")
                    for line in traceback.format_tb(record.exc_info[2])
                ],
            }

        return json.dumps(msg_dict)


_LOG_CTX: contextvars.ContextVar[dict] = contextvars.ContextVar("fury_log_context", default=dict())


class ContextFilter(Filter):
    def filter(self, record: LogRecord) -> bool:
        record.context = _LOG_CTX.get()
        return True


@contextlib.contextmanager
def logging_context(**kwargs):
    """Fields added to every record of the current task, for example the operation name."""
    token = _LOG_CTX.set({**_LOG_CTX.get(), **kwargs})
    try:
        yield
    finally:
        _LOG_CTX.reset(token)
