import contextlib
import faulthandler
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from dotenv import load_dotenv

from .cli import get_cli_argument, load_cli_config
from .config import RunConfig, ScriptPaths
from .lifecycle import ERR_CODE, ExitTrapped, ScriptLifecycle, TempDirectory
from .messages import MessageLogger
from .usage import script_info, usage, usage_full
from .utils import suppress_stdout, xtrace

CLI_CONFIG = os.path.join(os.path.dirname(__file__), "cli_config.toml")

__all__ = [
    "ERR_CODE",
    "ExitTrapped",
    "MessageLogger",
    "RunConfig",
    "ScriptContext",
    "ScriptLifecycle",
    "ScriptPaths",
    "TempDirectory",
    "main",
    "main_script",
    "run",
    "script_info",
]


@dataclass
class ScriptContext:
    config: RunConfig
    paths: ScriptPaths
    messages: MessageLogger
    lifecycle: ScriptLifecycle

    @property
    def tmp_dir(self) -> Path:
        return self.lifecycle.path

    def die(self, message: str):
        self.lifecycle.die(message)


def main_script(ctx: ScriptContext) -> None:
    """在这里编写脚本的实际任务"""
    print("===== BEGIN YOUR SCRIPT! =====")


def _exit_code(exc: SystemExit) -> int:
    if exc.code is None:
        return 0
    if isinstance(exc.code, int):
        return exc.code
    return ERR_CODE


def _invoke(routine: Callable, ctx: ScriptContext) -> None:
    if ctx.config.no_exec:
        name = getattr(routine, "__name__", repr(routine))
        ctx.messages.notice(f"noexec mode: {name} was not executed")
        return

    with contextlib.ExitStack() as stack:
        if ctx.config.debug:
            if sys.__stderr__ is not None and not faulthandler.is_enabled():
                faulthandler.enable(file=sys.__stderr__)
                stack.callback(faulthandler.disable)
            code = getattr(routine, "__code__", None)
            if code is not None:
                stack.enter_context(xtrace(code.co_filename))
        if ctx.config.quiet:
            stack.enter_context(suppress_stdout())
        routine(ctx)


def run(
    routine: Callable[[ScriptContext], None] = main_script,
    argv: Optional[Sequence[str]] = None,
    config_path: str = CLI_CONFIG,
    argv0: Optional[str] = None,
) -> int:
    """解析参数, 准备临时目录和日志, 然后执行 ``routine``

    Returns:
        int: 0 为成功, 其他为失败 (ERR_CODE)
    """
    load_dotenv()
    cli_config = load_cli_config(config_path)
    paths = ScriptPaths.from_environment(cli_config.get("name", "script"), argv0)

    options = get_cli_argument(cli_config, argv)
    config = options.config
    messages = MessageLogger(config, paths.log_file)
    lifecycle = ScriptLifecycle(messages, paths.name, paths.tmp_root)

    try:
        if options.invalid_token is not None:
            print(usage(cli_config, paths.name), file=sys.stderr)
            lifecycle.die(f"invalid option: '{options.invalid_token}'.")
        if options.show_help:
            print(usage_full(cli_config, paths.name), file=sys.stderr)
            lifecycle.safe_exit()
        if options.show_version:
            print(script_info(cli_config, paths.name), file=sys.stderr)
            lifecycle.safe_exit()

        with lifecycle:
            ctx = ScriptContext(config, paths, messages, lifecycle)
            _invoke(routine, ctx)
            lifecycle.safe_exit()
    except SystemExit as e:
        return _exit_code(e)
    finally:
        messages.close()

    return 0


def main() -> int:
    """Main function
    Returns:
        int: 0 for success, 100 for failure
    """
    return run(main_script)
