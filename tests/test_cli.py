import pytest

from script_scaffold import CLI_CONFIG
from script_scaffold.cli import get_cli_argument, load_cli_config
from script_scaffold.config import RunConfig
from script_scaffold.usage import script_info, usage, usage_full


@pytest.fixture(scope="module")
def cli_config():
    return load_cli_config(CLI_CONFIG)


@pytest.mark.parametrize(
    "flags, field",
    [
        (["-v", "--verbose"], "verbose"),
        (["-l", "--log"], "print_log"),
        (["-q", "--quiet"], "quiet"),
        (["-d", "--debug"], "debug"),
        (["-n", "--noexec"], "no_exec"),
    ],
)
def test_flag_spellings(cli_config, flags, field):
    for flag in flags:
        options = get_cli_argument(cli_config, [flag])
        assert getattr(options.config, field) is True
        assert options.invalid_token is None
        others = {k: v for k, v in vars(options.config).items() if k != field}
        assert not any(others.values())


def test_defaults(cli_config):
    options = get_cli_argument(cli_config, [])
    assert options.config == RunConfig()
    assert not options.show_help
    assert not options.show_version


@pytest.mark.parametrize("flag, attr", [("-h", "show_help"), ("--help", "show_help"),
                                        ("-V", "show_version"), ("--version", "show_version")])
def test_help_and_version_flags(cli_config, flag, attr):
    assert getattr(get_cli_argument(cli_config, [flag]), attr)


def test_several_flags(cli_config):
    options = get_cli_argument(cli_config, ["-v", "--log", "-q"])
    assert options.config == RunConfig(verbose=True, print_log=True, quiet=True)


@pytest.mark.parametrize(
    "token", ["--bogus", "--verb", "-x", "positional", "-vl", "-vx", "--log=1", "-", ""]
)
def test_unknown_tokens(cli_config, token):
    options = get_cli_argument(cli_config, ["-q", token])
    assert options.invalid_token == token
    assert options.config.quiet


def test_stops_at_first_unknown_token(cli_config):
    options = get_cli_argument(cli_config, ["--bogus", "--log", "--other"])
    assert options.invalid_token == "--bogus"
    assert options.config == RunConfig()


def test_stops_at_help_or_version(cli_config):
    options = get_cli_argument(cli_config, ["-q", "-h", "--bogus", "-V"])
    assert options.show_help
    assert not options.show_version
    assert options.invalid_token is None
    assert options.config == RunConfig(quiet=True)

    options = get_cli_argument(cli_config, ["-V", "-h"])
    assert options.show_version
    assert not options.show_help


def test_usage(cli_config):
    assert usage(cli_config, "backup.py") == "Usage: backup.py [-hV] [-dqlv] args ..."
    assert script_info(cli_config, "backup.py", "usage") == usage(cli_config, "backup.py")


def test_usage_full(cli_config):
    text = usage_full(cli_config, "backup.py")
    for section in (" SYNOPSIS", " DESCRIPTION", " OPTIONS", " EXAMPLES"):
        assert section in text
    assert "    backup.py -l" in text
    assert "    -n, --noexec" in text
    assert "${scriptName}" not in text
    assert "IMPLEMENTATION" not in text
    assert script_info(cli_config, "backup.py", "full") == text


def test_version_info(cli_config):
    text = script_info(cli_config, "backup.py")
    assert text.startswith(" IMPLEMENTATION")
    assert "    version         backup.py 0.0.1" in text
    assert "SYNOPSIS" not in text


def test_unknown_info_kind(cli_config):
    with pytest.raises(ValueError):
        script_info(cli_config, "backup.py", "history")
