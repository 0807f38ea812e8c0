"""
Template functions turning a ShellProfile into configuration file text.
"""

from typing import List

from ..models.shell import ShellProfile


GENERATED_MARKER = "# Generated by multishell-setup"

BASH_PROFILE_SOURCE_LINE = "[ -f ~/.bashrc ] && . ~/.bashrc"

# Where nushell caches each tool's generated init script
NU_INIT_FILES = {
    "starship": "~/.cache/starship/init.nu",
    "zoxide": "~/.zoxide.nu",
    "atuin": "~/.local/share/atuin/init.nu",
}

# Written by env.nu with the aliases whose command is installed
NU_ALIAS_FILE = "~/.config/nushell/aliases.nu"

NU_INIT_COMMANDS = {
    "starship": "starship init nu",
    "zoxide": "zoxide init nushell",
    "atuin": "atuin init nu",
}


def is_generated(text: str) -> bool:
    return text.startswith(GENERATED_MARKER)


def _header(path_hint: str) -> List[str]:
    return [
        f"{GENERATED_MARKER}. Re-running setup overwrites {path_hint}.",
        "",
    ]


def _posix_common(profile: ShellProfile, alias_block: str) -> List[str]:
    """Sections shared by bash and zsh."""
    lines: List[str] = []
    if profile.editor:
        lines.append(f"export EDITOR={profile.editor}")
        lines.append(f"export VISUAL={profile.editor}")
    for key, value in sorted(profile.env.items()):
        lines.append(f'export {key}="{value}"')
    lines.append("")

    if profile.path_entries:
        lines.append("# PATH")
        dirs = " ".join(f'"$HOME/{p}"' for p in profile.path_entries)
        lines.append(f"for dir in {dirs}; do")
        lines.append('    case ":$PATH:" in')
        lines.append('        *":$dir:"*) ;;')
        lines.append('        *) [ -d "$dir" ] && PATH="$dir:$PATH" ;;')
        lines.append("    esac")
        lines.append("done")
        lines.append("export PATH")
        lines.append("")

    if alias_block:
        lines.append("# Aliases")
        lines.append(alias_block)
        lines.append("")
    return lines


def _posix_init(profile: ShellProfile) -> List[str]:
    shell = profile.shell.value
    lines = ["# Tool init"] if profile.init_tools else []
    for tool in profile.init_tools:
        lines.append(f'command -v {tool} >/dev/null 2>&1 && eval "$({tool} init {shell})"')
    return lines


def render_bashrc(profile: ShellProfile, alias_block: str) -> str:
    lines = _header("~/.bashrc")
    lines += [
        "# If not running interactively, don't do anything",
        "case $- in",
        "    *i*) ;;",
        "      *) return;;",
        "esac",
        "",
        "# History",
        "HISTSIZE=10000",
        "HISTFILESIZE=20000",
        "HISTCONTROL=ignoreboth:erasedups",
        "shopt -s histappend checkwinsize",
        "",
        "# Completion",
        "if [ -f /usr/share/bash-completion/bash_completion ]; then",
        "    . /usr/share/bash-completion/bash_completion",
        "fi",
        "",
    ]
    lines += _posix_common(profile, alias_block)
    lines += _posix_init(profile)
    return "\n".join(lines).rstrip() + "\n"


def render_zshrc(profile: ShellProfile, alias_block: str) -> str:
    lines = _header("~/.zshrc")
    lines += [
        "# History",
        "HISTFILE=~/.zsh_history",
        "HISTSIZE=10000",
        "SAVEHIST=10000",
        "setopt HIST_IGNORE_ALL_DUPS SHARE_HISTORY AUTO_CD",
        "",
        "# Completion",
        "autoload -Uz compinit && compinit",
        "",
    ]
    lines += _posix_common(profile, alias_block)
    if profile.plugins:
        lines.append("# Plugins")
        lines += [f"source {plugin}" for plugin in profile.plugins]
        lines.append("")
    lines += _posix_init(profile)
    return "\n".join(lines).rstrip() + "\n"


def render_nu_env(profile: ShellProfile, alias_block: str = "") -> str:
    lines = _header("~/.config/nushell/env.nu")
    if profile.editor:
        lines.append(f'$env.EDITOR = "{profile.editor}"')
        lines.append(f'$env.VISUAL = "{profile.editor}"')
    for key, value in sorted(profile.env.items()):
        lines.append(f'$env.{key} = "{value}"')
    lines.append("")

    if profile.path_entries:
        entries = " ".join(f'($env.HOME | path join "{p}")' for p in profile.path_entries)
        lines.append("$env.PATH = ($env.PATH | split row (char esep)")
        lines.append(f"    | prepend [{entries}]")
        lines.append("    | uniq)")
        lines.append("")

    # config.nu sources these files at parse time, so they must always exist
    for tool in profile.init_tools:
        target = NU_INIT_FILES[tool]
        parent = target.rsplit("/", 1)[0]
        lines.append(f"mkdir {parent}")
        lines.append(f"if (which {tool} | is-empty) {{")
        lines.append(f'    "" | save -f {target}')
        lines.append("} else {")
        lines.append(f"    {NU_INIT_COMMANDS[tool]} | save -f {target}")
        lines.append("}")

    if alias_block:
        lines.append("")
        lines.append("# Aliases")
        lines.append(alias_block)
    return "\n".join(lines).rstrip() + "\n"


def render_nu_config(profile: ShellProfile) -> str:
    lines = _header("~/.config/nushell/config.nu")
    lines += [
        "$env.config.show_banner = false",
        "",
    ]
    if profile.aliases:
        lines.append("# Aliases")
        lines.append(f"source {NU_ALIAS_FILE}")
        lines.append("")
    if profile.init_tools:
        lines.append("# Tool init")
    for tool in profile.init_tools:
        keyword = "use" if tool == "starship" else "source"
        lines.append(f"{keyword} {NU_INIT_FILES[tool]}")
    return "\n".join(lines).rstrip() + "\n"


def render_starship_toml() -> str:
    lines = _header("~/.config/starship.toml")
    lines += [
        "add_newline = true",
        "command_timeout = 1000",
        "",
        "[character]",
        'success_symbol = "[➜](bold green)"',
        'error_symbol = "[➜](bold red)"',
        "",
        "[directory]",
        "truncation_length = 3",
        "truncate_to_repo = true",
        "",
        "[git_branch]",
        'symbol = " "',
        "",
        "[cmd_duration]",
        "min_time = 2000",
    ]
    return "\n".join(lines) + "\n"
