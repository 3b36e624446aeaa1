"""帮助信息渲染

帮助、用法和版本文本保存在随包发布的 ``cli_config.toml`` 的 ``[help]`` 表中,
OPTIONS 段落由 ``[arguments]`` 表生成, 与解析器共用同一份定义.
"""

from string import Template
from typing import Dict, List

INDENT = "    "
OPTION_WIDTH = 30


def _substitute(text: str, script_name: str) -> str:
    return Template(text).safe_substitute(scriptName=script_name)


def _block(title: str, text: str, script_name: str) -> List[str]:
    lines = [f" {title}"]
    for line in text.strip("\n").splitlines():
        lines.append(f"{INDENT}{_substitute(line, script_name)}".rstrip())
    lines.append("")
    return lines


def option_lines(config: Dict) -> List[str]:
    lines = []
    for arg, details in config.get("arguments", {}).items():
        spelling = f"--{arg}"
        if details.get("short"):
            spelling = f"-{details['short']}, {spelling}"
        lines.append(f"{INDENT}{spelling:<{OPTION_WIDTH}}{details.get('help', '')}")
    return lines


def usage(config: Dict, script_name: str) -> str:
    synopsis = config.get("help", {}).get("synopsis", "${scriptName}")
    return f"Usage: {_substitute(synopsis, script_name)}"


def usage_full(config: Dict, script_name: str) -> str:
    help_text = config.get("help", {})
    lines = _block("SYNOPSIS", help_text.get("synopsis", "${scriptName}"), script_name)
    if help_text.get("description"):
        lines += _block("DESCRIPTION", help_text["description"], script_name)
    lines += [" OPTIONS"] + option_lines(config) + [""]
    if help_text.get("examples"):
        lines += _block("EXAMPLES", help_text["examples"], script_name)
    return "\n".join(lines)


def script_info(config: Dict, script_name: str, kind: str = "version") -> str:
    """按类型渲染脚本信息

    Args:
        kind: ``usage`` 简短用法, ``full`` 完整帮助, ``version`` 实现信息
    """
    if kind == "usage":
        return usage(config, script_name)
    if kind == "full":
        return usage_full(config, script_name)
    if kind == "version":
        implementation = config.get("help", {}).get("implementation", "")
        return "\n".join(_block("IMPLEMENTATION", implementation, script_name))
    raise ValueError(f"Unknown script info kind: {kind}")
