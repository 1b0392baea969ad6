"""
Point d'entrée CLI de CineAmore.

Configure le logging et fournit les commandes CLI de modération.
"""

from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import (
    classify_genres,
    contributor_add,
    pending,
    quarantine_sweep,
)
from .config import Settings
from .logging_config import configure_logging

app = typer.Typer(
    name="cineamore",
    help="Modération du catalogue CineAmore",
)

app.command(name="classify-genres")(classify_genres)
app.command(name="quarantine-sweep")(quarantine_sweep)
app.command()(pending)
app.command(name="contributor-add")(contributor_add)


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = Settings()
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"API TMDB : {'activée' if config.tmdb_enabled else 'désactivée'}")
    typer.echo(f"Lot de classification : {config.classification_batch_size}")
    typer.echo(f"Critères de quarantaine : {', '.join(config.quarantine_criteria) or 'aucun'}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"CineAmore v{__version__}")


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8000,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance l'API web CineAmore."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("cineamore.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entrée de l'application."""
    configure_logging(Settings())
    logger.info(f"Démarrage de CineAmore {__version__}")
    app()


if __name__ == "__main__":
    main()
