import logging
from pathlib import Path
from typing import Any, Callable, Optional, TextIO, Union

from .config import RunConfig
from .utils import (
    ALERT_STYLES,
    HEADER,
    INPUT,
    NOTICE,
    SUCCESS,
    set_logging_default_config,
)

ALERT_LEVELS = {
    "emergency": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "success": SUCCESS,
    "debug": logging.DEBUG,
    "header": HEADER,
    "input": INPUT,
    "info": logging.INFO,
    "notice": NOTICE,
}


class MessageLogger:
    """分级消息输出

    每条消息带时间戳和 ``[    level]`` 标记; print_log 时追加到日志文件,
    非 quiet 时输出到控制台.

    Usage:
        messages.success("Backup was completed successfully.")
    """

    def __init__(
        self,
        config: RunConfig,
        log_file: Optional[Union[str, Path]] = None,
        stream: Optional[TextIO] = None,
        color: Optional[bool] = None,
        name: str = "script_scaffold",
    ):
        self.config = config
        self.logger = set_logging_default_config(
            config, log_file, stream=stream, name=name, color=color
        )

    def alert(self, level: str, message: str) -> None:
        if level not in ALERT_STYLES:
            raise ValueError(f"Unknown alert level: {level}")
        self.logger.log(ALERT_LEVELS[level], message, extra={"alert": level})

    def error(self, message: str) -> None:
        self.alert("error", message)

    def warning(self, message: str) -> None:
        self.alert("warning", message)

    def notice(self, message: str) -> None:
        self.alert("notice", message)

    def info(self, message: str) -> None:
        self.alert("info", message)

    def debug(self, message: str) -> None:
        self.alert("debug", message)

    def success(self, message: str) -> None:
        self.alert("success", message)

    def input(self, message: str) -> None:
        self.alert("input", message)

    def header(self, message: str) -> None:
        self.alert("header", f"========== {message} ==========  ")

    def verbose(self, message: str) -> None:
        if self.config.verbose:
            self.debug(message)

    def call_or_trace(self, action: Callable, *args, **kwargs) -> Any:
        """verbose 模式下只记录调用而不执行, 否则执行并返回结果"""
        if self.config.verbose:
            params = [repr(a) for a in args]
            params += [f"{k}={v!r}" for k, v in kwargs.items()]
            name = getattr(action, "__name__", repr(action))
            self.debug(f"{name}({', '.join(params)})")
            return None
        return action(*args, **kwargs)

    def close(self) -> None:
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        self.logger.addHandler(logging.NullHandler())
