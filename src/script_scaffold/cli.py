import argparse
import sys
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import toml

from .config import RunConfig


@dataclass
class ParsedOptions:
    config: RunConfig
    show_help: bool = False
    show_version: bool = False
    invalid_token: Optional[str] = None


def load_cli_config(config_path: str) -> Dict:
    return toml.load(config_path)


def build_parser(config: Dict) -> argparse.ArgumentParser:
    """从TOML配置构建参数解析器

    Args:
        config (Dict): 已加载的TOML配置

    Returns:
        argparse.ArgumentParser: 只包含布尔开关的解析器

    配置文件格式示例:
    ```toml
    description = "工具描述"
    [arguments]
    参数名称 = { short = "d", dest = "debug", help = "参数说明" }
    ```
    """
    parser = argparse.ArgumentParser(
        prog=config.get("name"),
        description=config.get("description", "CLI Tool"),
        add_help=False,
        allow_abbrev=False,
    )

    for arg, details in config.get("arguments", {}).items():
        flags = [f"--{arg}"]
        if details.get("short"):
            flags.insert(0, f"-{details['short']}")
        parser.add_argument(
            *flags,
            dest=details.get("dest", arg),
            action="store_true",
            default=False,
            help=details.get("help"),
        )

    return parser


def option_spellings(config: Dict) -> Dict[str, str]:
    """``[arguments]`` 表中每种写法 (``-v``, ``--verbose``) 对应的字段名"""
    spellings = {}
    for arg, details in config.get("arguments", {}).items():
        dest = details.get("dest", arg)
        spellings[f"--{arg}"] = dest
        if details.get("short"):
            spellings[f"-{details['short']}"] = dest
    return spellings


def get_cli_argument(config: Dict, argv: Optional[Sequence[str]] = None) -> ParsedOptions:
    """从左到右解析命令行参数

    每个参数必须与 ``[arguments]`` 中的某种写法完全一致. 遇到第一个
    help/version 或无法识别的参数时停止, 其后的参数不再读取;
    在它之前已识别的开关仍然生效.

    Returns:
        ParsedOptions: 解析结果, 无法识别的参数原样放在 ``invalid_token``
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    spellings = option_spellings(config)

    accepted = []
    options = ParsedOptions(config=RunConfig())
    for token in argv:
        dest = spellings.get(token)
        if dest is None:
            options.invalid_token = token
            break
        if dest == "help":
            options.show_help = True
            break
        if dest == "version":
            options.show_version = True
            break
        accepted.append(token)

    values = vars(build_parser(config).parse_args(accepted))
    options.config = RunConfig(
        quiet=values.get("quiet", False),
        verbose=values.get("verbose", False),
        debug=values.get("debug", False),
        print_log=values.get("print_log", False),
        no_exec=values.get("no_exec", False),
    )
    return options
