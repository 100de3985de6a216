import typer

from .commands import (
    check as check_cmd,
    generate as generate_cmd,
)

app = typer.Typer(help="partialsum: generate and check partial checksums")

app.command("generate")(generate_cmd.generate)
app.command("check")(check_cmd.check)


if __name__ == "__main__":
    app()
