"""
Alias unifier: one alias table, rendered in each shell's syntax.
"""

import shlex
from typing import Iterable, List, Optional

from .templates import NU_ALIAS_FILE
from ..models.shell import Alias, ShellTarget


# (alias, command, catalog tool)
DEFAULT_ALIASES = [
    ("ls", "exa --group-directories-first", "exa"),
    ("ll", "exa -l --git --group-directories-first", "exa"),
    ("la", "exa -la --git --group-directories-first", "exa"),
    ("lt", "exa --tree --level=2", "exa"),
    ("cat", "bat --paging=never", "bat"),
    ("grep", "rg", "ripgrep"),
    ("find", "fd", "fd"),
    ("top", "btm", "bottom"),
    ("du", "dust", "dust"),
    ("ps", "procs", "procs"),
    ("vim", "hx", "helix"),
    ("lg", "lazygit", "lazygit"),
    ("lzd", "lazydocker", "lazydocker"),
    ("zj", "zellij", "zellij"),
    ("trash", "trash-put", "trash-cli"),
]


class AliasUnifier:
    """Builds the cross-shell alias set and renders it per shell."""

    def __init__(self, table: Optional[Iterable[tuple]] = None):
        self.table = [Alias(name=n, command=c, tool=t) for n, c, t in (table or DEFAULT_ALIASES)]

    def build(self, available_tools: Iterable[str]) -> List[Alias]:
        """Aliases whose tool is part of the catalog, in table order."""
        available = set(available_tools)
        return [alias for alias in self.table if alias.tool in available]

    def render(self, shell: ShellTarget, aliases: List[Alias]) -> str:
        if not aliases:
            return ""
        if shell == ShellTarget.NUSHELL:
            # nushell aliases are fixed at parse time, so env.nu writes the
            # ones whose command exists into a file that config.nu sources
            lines = [f'"" | save -f {NU_ALIAS_FILE}']
            for a in aliases:
                line = f"alias {a.name} = {a.command}".replace("\\", "\\\\").replace('"', '\\"')
                lines.append(
                    f'if not (which {a.binary} | is-empty) {{ "{line}\\n" | save --append {NU_ALIAS_FILE} }}'
                )
        else:
            # Only shadow the builtin when the replacement is really there
            lines = [
                f"command -v {a.binary} >/dev/null 2>&1 && alias {a.name}={shlex.quote(a.command)}"
                for a in aliases
            ]
        return "\n".join(lines)
