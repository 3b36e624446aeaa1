import os
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


TMPDIR_ENV = "SCRIPT_SCAFFOLD_TMPDIR"
LOG_DIR_ENV = "SCRIPT_SCAFFOLD_LOG_DIR"


@dataclass(frozen=True)
class RunConfig:
    """一次运行的模式开关, 只由选项解析器设置"""

    quiet: bool = False
    verbose: bool = False
    debug: bool = False
    print_log: bool = False
    no_exec: bool = False


@dataclass(frozen=True)
class ScriptPaths:
    name: str
    directory: Path
    tmp_root: Path

    @property
    def log_file(self) -> Path:
        return self.directory / f"{self.name}.log"

    @classmethod
    def from_environment(
        cls, default_name: str, argv0: Optional[str] = None
    ) -> "ScriptPaths":
        """根据调用脚本路径和环境变量确定脚本名、日志目录与临时根目录

        Args:
            default_name (str): ``python -m`` 方式启动时使用的名称
            argv0 (str, optional): 脚本路径, 默认为 ``sys.argv[0]``

        Returns:
            ScriptPaths: 解析后的路径信息
        """
        argv0 = sys.argv[0] if argv0 is None else argv0
        script = Path(argv0)

        if script.name in ("", "-c", "__main__.py") or not script.is_file():
            name, directory = default_name, Path.cwd()
        else:
            name, directory = script.name, script.resolve().parent

        log_dir = os.getenv(LOG_DIR_ENV)
        if log_dir:
            directory = Path(log_dir)

        tmp_root = Path(os.getenv(TMPDIR_ENV) or tempfile.gettempdir())
        return cls(name=name, directory=directory, tmp_root=tmp_root)
