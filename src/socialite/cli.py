import typer
import uvicorn

from socialite.core.config import settings
from socialite.manager import SocialiteManager

app = typer.Typer(help="Socialite CLI")


@app.command()
def run(
    host: str = "0.0.0.0",
    port: int = 8000,
    reload: bool = False,
) -> None:
    """
    Run the FastAPI server
    """
    uvicorn.run(
        "socialite.main:app",
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def drivers() -> None:
    """
    List built-in drivers and whether each one is configured
    """
    for name in SocialiteManager.drivers:
        configured = "configured" if name in settings.PROVIDERS else "not configured"
        typer.echo(f"{name:<10} {configured}")


if __name__ == "__main__":
    app()
