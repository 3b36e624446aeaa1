import contextlib
import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, TextIO, Union

from rich.console import Console

from .config import RunConfig

NOTICE = 21
HEADER = 22
INPUT = 23
SUCCESS = 25

CONSOLE_FORMAT = "%(asctime)s [%(alert)9s] %(message)s"
CONSOLE_DATEFMT = "%I:%M:%S %p"
FILE_FORMAT = "%(asctime)s [%(alert)9s] %(message)s"
FILE_DATEFMT = "%m-%d-%Y %I:%M:%S %p"

# 各消息级别的颜色 (rich 样式), info/notice 不着色
ALERT_STYLES = {
    "emergency": "bold red",
    "error": "red",
    "warning": "yellow",
    "success": "color(76)",
    "debug": "color(171)",
    "header": "bold yellow",
    "input": "bold",
    "info": "",
    "notice": "",
}


def mkdir_if_not_exist(path: Union[str, Path]) -> None:
    if not os.path.exists(path):
        os.makedirs(path)


def supports_color(stream: TextIO) -> bool:
    """管道或无法识别的终端不使用颜色"""
    isatty = getattr(stream, "isatty", None)
    if isatty is None or not isatty():
        return False
    term = os.environ.get("TERM", "")
    return term not in ("", "dumb")


class RichConsoleHandler(logging.Handler):
    """通过 rich 把日志记录按级别着色输出到控制台"""

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        super().__init__()
        stream = sys.stdout if stream is None else stream
        if color is None:
            color = supports_color(stream)
        self.console = Console(
            file=stream,
            color_system="256" if color else None,
            highlight=False,
            emoji=False,
            markup=False,
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            alert = getattr(record, "alert", "info")
            # input 级别后面紧跟用户输入, 不换行
            end = "" if alert == "input" else "\n"
            self.console.out(
                self.format(record), style=ALERT_STYLES.get(alert) or None, end=end
            )
        except Exception:
            self.handleError(record)


class LazyFileHandler(logging.FileHandler):
    """第一条记录到来时才创建日志目录并打开文件"""

    def _open(self):
        mkdir_if_not_exist(os.path.dirname(self.baseFilename))
        return super()._open()


def set_logging_default_config(
    config: RunConfig,
    log_file: Optional[Union[str, Path]] = None,
    stream: Optional[TextIO] = None,
    name: str = "script_scaffold",
    color: Optional[bool] = None,
) -> logging.Logger:
    """配置脚本专用的 logger

    quiet 模式不挂控制台 handler; print_log 模式追加写入 ``log_file``,
    文件在第一条记录时才打开. input 级别的消息不写入文件.
    """
    logging.addLevelName(NOTICE, "NOTICE")
    logging.addLevelName(HEADER, "HEADER")
    logging.addLevelName(INPUT, "INPUT")
    logging.addLevelName(SUCCESS, "SUCCESS")

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    if config.print_log and log_file is not None:
        file_handler = LazyFileHandler(
            log_file, mode="a", encoding="utf-8", delay=True
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, FILE_DATEFMT))
        file_handler.addFilter(lambda record: getattr(record, "alert", None) != "input")
        logger.addHandler(file_handler)

    if not config.quiet:
        console_handler = RichConsoleHandler(stream, color=color)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, CONSOLE_DATEFMT))
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


@contextmanager
def xtrace(filename: str, stream: Optional[TextIO] = None):
    """类似 shell 的 ``set -x``: 把 ``filename`` 中的函数调用打印到 stderr"""
    stream = sys.stderr if stream is None else stream

    def tracer(frame, event, arg):
        code = frame.f_code
        if event == "call" and code.co_filename == filename:
            print(
                f"+ {code.co_name} ({Path(filename).name}:{frame.f_lineno})",
                file=stream,
            )
        return None

    previous = sys.gettrace()
    sys.settrace(tracer)
    try:
        yield
    finally:
        sys.settrace(previous)


@contextmanager
def suppress_stdout():
    """在文件描述符层面把 stdout 指向 os.devnull, 子进程的输出同样被丢弃"""
    sys.stdout.flush()
    saved_fd = os.dup(1)
    devnull_fd = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull_fd, 1)
        with open(os.devnull, "w") as sink, contextlib.redirect_stdout(sink):
            yield
    finally:
        os.dup2(saved_fd, 1)
        os.close(saved_fd)
        os.close(devnull_fd)
