"""临时目录和退出清理

``ScriptLifecycle`` 是一个上下文管理器: 进入时创建私有临时目录并捕获
SIGINT/SIGTERM, 任何方式离开 ``with`` 块 (正常结束, die, 信号, 未捕获异常)
都会删除临时目录.
"""

import atexit
import enum
import os
import random
import shutil
import signal
import tempfile
import threading
import traceback
from pathlib import Path
from typing import Dict, Optional, Union

from .messages import MessageLogger

ERR_CODE = 100
TRAPPED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class State(enum.Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    CLEANING = "cleaning"
    EXITED = "exited"


class ExitTrapped(BaseException):
    """收到中断/终止信号

    继承 BaseException, 避免被主流程中的 ``except Exception`` 吞掉.
    """

    def __init__(self, signum: int, context: str):
        super().__init__(f"signal {signum} in '{context}'")
        self.signum = signum
        self.context = context


def call_context(frame=None, tb=None) -> str:
    """当前调用栈中的函数名, 最内层在前"""
    if tb is not None:
        summary = traceback.extract_tb(tb)
    elif frame is not None:
        summary = traceback.extract_stack(frame)
    else:
        return ""
    return " ".join(entry.name for entry in reversed(summary))


class TempDirectory:
    """一次运行独占的临时目录

    目录名包含三个随机数和进程号. 只能创建一次, 删除后不再复用.
    """

    def __init__(self, script_name: str, root: Optional[Union[str, Path]] = None):
        root = Path(root) if root is not None else Path(tempfile.gettempdir())
        suffix = ".".join(str(random.randint(0, 32767)) for _ in range(3))
        self.path = root / f"{script_name}.{suffix}.{os.getpid()}"
        self.created = False
        self.removed = False

    def create(self) -> Path:
        if self.created:
            raise RuntimeError(f"Temporary directory already created: {self.path}")
        os.mkdir(self.path, 0o700)
        self.created = True
        return self.path

    def cleanup(self) -> None:
        if self.path.exists():
            shutil.rmtree(self.path, ignore_errors=True)
        if self.created:
            self.removed = True

    def __enter__(self) -> Path:
        return self.create()

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False


class ScriptLifecycle:
    def __init__(
        self,
        messages: MessageLogger,
        script_name: str,
        tmp_root: Optional[Union[str, Path]] = None,
    ):
        self.messages = messages
        self.tmp_dir = TempDirectory(script_name, tmp_root)
        self.state = State.UNINITIALIZED
        self._previous_handlers: Dict[int, object] = {}

    @property
    def path(self) -> Path:
        return self.tmp_dir.path

    def __enter__(self) -> "ScriptLifecycle":
        try:
            self.tmp_dir.create()
        except OSError:
            self.die("Could not create temporary directory!")

        self._install_traps()
        self.state = State.RUNNING
        return self

    def __exit__(self, exc_type, exc, tb):
        self.state = State.CLEANING
        self.cleanup()

        if exc_type is None or issubclass(exc_type, SystemExit):
            self._clear_traps()
            self.state = State.EXITED
            return False

        if isinstance(exc, ExitTrapped):
            context = exc.context
        else:
            context = call_context(tb=tb)
            self.messages.error(f"{exc_type.__name__}: {exc}")
        self.die(f"Exit trapped. In function: '{context}'.")

    def _install_traps(self) -> None:
        # 只有主线程可以注册信号处理函数
        if threading.current_thread() is threading.main_thread():
            for signum in TRAPPED_SIGNALS:
                self._previous_handlers[signum] = signal.signal(signum, self._trap)
        atexit.register(self.cleanup)

    def _clear_traps(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()
        atexit.unregister(self.cleanup)

    def _trap(self, signum, frame):
        raise ExitTrapped(signum, call_context(frame=frame))

    def cleanup(self) -> None:
        """删除临时目录, 可重复调用"""
        self.tmp_dir.cleanup()

    def safe_exit(self, code: int = 0):
        """正常退出: 清理临时目录, 移除信号和 atexit 钩子"""
        self.cleanup()
        self._clear_traps()
        self.state = State.EXITED
        raise SystemExit(code)

    def die(self, message: str):
        self.messages.error(f"{message} Exiting.")
        self.safe_exit(ERR_CODE)
