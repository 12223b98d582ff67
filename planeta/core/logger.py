# -*- coding: utf-8 -*-
"""
@File    : logger.py
@Desc    : 日志配置 (控制台 + 轮转文件, 可选 JSON 格式)
"""
import sys
import json
import logging
import logging.config
from planeta.core.config import settings


class JSONFormatter(logging.Formatter):
    """
    JSON 行格式, 供日志采集端解析
    """

    # LogRecord 自带的属性，不作为 extra 输出
    skip_keys = {
        "args", "asctime", "created", "exc_info", "exc_text", "filename",
        "funcName", "levelname", "levelno", "lineno", "module",
        "msecs", "message", "msg", "name", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "thread", "threadName",
        "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
            "process_id": record.process,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # extra={"post_id": ...} 之类的附加字段
        payload.update(
            (key, value) for key, value in record.__dict__.items() if key not in self.skip_keys
        )
        return json.dumps(payload, ensure_ascii=False, default=str)


def _rotating(filename: str, level, formatter: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": str(settings.BASE_DIR / settings.LOG_DIR / filename),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
    }


def build_logging_config() -> dict:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    formatter = "json" if settings.LOG_JSON_FORMAT else "standard"

    # logger 名 -> (handlers, level); 均不向 root 传播
    routes = {
        "planeta": (["console", "file_info", "file_error"], level),
        "uvicorn": (["console", "file_info"], "INFO"),
        "uvicorn.access": (["console", "file_info"], "INFO"),
        "uvicorn.error": (["console", "file_error"], "INFO"),
        "apscheduler": (["console", "file_info"], "WARNING"),
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,  # uvicorn 在此之前已创建自己的 logger
        "formatters": {
            "standard": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {"()": JSONFormatter, "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": formatter,
                "stream": sys.stdout,
            },
            "file_info": _rotating("app.log", level, formatter),
            "file_error": _rotating("error.log", "ERROR", formatter),
        },
        "loggers": {
            name: {"handlers": handlers, "level": lvl, "propagate": False}
            for name, (handlers, lvl) in routes.items()
        },
    }


def setup_logging():
    """初始化日志: 先建日志目录, 再应用 dictConfig"""
    (settings.BASE_DIR / settings.LOG_DIR).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config())
