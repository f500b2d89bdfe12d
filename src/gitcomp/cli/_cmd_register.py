"""Register command for gitcomp CLI - prints shell hook scripts."""

from __future__ import annotations

import typer

from gitcomp.constants import PROGRAM_NAME, SUPPORTED_SHELLS

from ._completions import complete_shells

BASH_SCRIPT = """\
# gitcomp completion for {program} (bash)
# Add to ~/.bashrc:  eval "$(gitcomp register bash)"
_gitcomp_{program}() {{
    local IFS=$'\\n'
    COMPREPLY=($(gitcomp complete --line "$COMP_LINE" --cursor "$COMP_POINT" --format plain 2>/dev/null))
}}
complete -o bashdefault -o default -F _gitcomp_{program} {program}
"""

ZSH_SCRIPT = """\
# gitcomp completion for {program} (zsh)
# Add to ~/.zshrc:  eval "$(gitcomp register zsh)"
_gitcomp_{program}() {{
    local -a candidates
    candidates=("${{(@f)$(gitcomp complete --line "$BUFFER" --cursor "$CURSOR" --format zsh 2>/dev/null)}}")
    (( ${{#candidates}} )) && [[ -n "${{candidates[1]}}" ]] || return 1
    _describe '{program}' candidates
}}
compdef _gitcomp_{program} {program}
"""

FISH_SCRIPT = """\
# gitcomp completion for {program} (fish)
# Add to ~/.config/fish/config.fish:  gitcomp register fish | source
complete -c {program} -f -a '(gitcomp complete --line (commandline -cp) --format tsv 2>/dev/null)'
"""

POWERSHELL_SCRIPT = """\
# gitcomp completion for {program} (PowerShell)
# Add to $PROFILE:  gitcomp register powershell | Out-String | Invoke-Expression
Register-ArgumentCompleter -Native -CommandName {program} -ScriptBlock {{
    param($wordToComplete, $commandAst, $cursorPosition)
    $line = $commandAst.Extent.Text
    $cursor = $cursorPosition - $commandAst.Extent.StartOffset
    $kinds = @{{
        command = 'Command'
        flag = 'ParameterName'
        value = 'ParameterValue'
        path = 'ProviderItem'
    }}
    gitcomp complete --line $line --cursor $cursor --format json 2>$null |
        ConvertFrom-Json |
        ForEach-Object {{
            [System.Management.Automation.CompletionResult]::new(
                $_.insertion_text, $_.display_text, $kinds[$_.kind], $_.tooltip)
        }}
}}
"""

SCRIPTS = {
    "bash": BASH_SCRIPT,
    "zsh": ZSH_SCRIPT,
    "fish": FISH_SCRIPT,
    "powershell": POWERSHELL_SCRIPT,
}


def registration_script(shell: str, program: str = PROGRAM_NAME) -> str:
    """Return the hook script that wires *program* completion to gitcomp.

    Raises:
        KeyError: If shell is not supported
    """
    return SCRIPTS[shell].format(program=program)


def register(app: typer.Typer) -> None:
    """Register the register command."""

    @app.command("register")
    def register_cmd(
        shell: str = typer.Argument(
            ...,
            help=f"Shell to emit a hook for: {', '.join(SUPPORTED_SHELLS)}",
            autocompletion=complete_shells,
        ),
    ) -> None:
        """Print the script that registers git completion with a shell.

        This is a one-time setup step; evaluate the output from your shell's
        startup file.
        """
        if shell not in SCRIPTS:
            typer.echo(
                f"Error: Unsupported shell '{shell}'. "
                f"Choose from: {', '.join(SUPPORTED_SHELLS)}",
                err=True,
            )
            raise typer.Exit(1)
        typer.echo(registration_script(shell), nl=False)
