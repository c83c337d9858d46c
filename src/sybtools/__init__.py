import typer

from sybtools import syb

app = typer.Typer(help="Collection of tools for Syberia game archives")

app.add_typer(syb.app, name="syb", help="Tools for SYB archives (.syb files)")

if __name__ == "__main__":
    app()
