"""
Commandes CLI de moderation : classification des genres, balayage de
quarantaine, liste des propositions et creation de contributeurs.

La CLI agit avec le role administrateur.
"""

from typing import Annotated, Optional

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from cineamore.adapters.cli.helpers import (
    async_command,
    console,
    exit_on_domain_error,
    suppress_loguru,
    with_container,
)
from cineamore.core.entities.session import Role
from cineamore.services.genre_classifier import ClassificationStatus
from cineamore.utils.constants import ADMIN_USERNAME

_STATUS_STYLES = {
    ClassificationStatus.UPDATED: "green",
    ClassificationStatus.NO_GENRES: "yellow",
    ClassificationStatus.NO_RESULTS: "yellow",
    ClassificationStatus.ERROR: "red",
}


@async_command
async def classify_genres(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Nombre de fiches a traiter (defaut: config)"),
    ] = None,
) -> None:
    """Classe un lot de fiches sans genre via TMDB."""
    await _classify_genres(limit)


@with_container
async def _classify_genres(container, limit: Optional[int]) -> None:
    classifier = container.genre_classifier()
    with exit_on_domain_error(), suppress_loguru():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Classification en cours...", total=None)
            report = await classifier.classify_batch(limit=limit)

    table = Table(title="Classification des genres")
    table.add_column("ID", style="dim")
    table.add_column("Titre")
    table.add_column("Recherche")
    table.add_column("Statut")
    table.add_column("Genres")
    for outcome in report.results:
        style = _STATUS_STYLES[outcome.status]
        table.add_row(
            outcome.item_id,
            outcome.title,
            outcome.cleaned_title,
            f"[{style}]{outcome.status.value}[/{style}]",
            ", ".join(outcome.genres) or (outcome.error or ""),
        )
    console.print(table)
    console.print(
        f"[bold]{report.processed}[/bold] traitee(s), "
        f"[bold]{report.remaining}[/bold] restante(s)"
    )


@with_container
def quarantine_sweep(container) -> None:
    """Met en quarantaine les fiches visibles incompletes."""
    service = container.visibility_service()
    with exit_on_domain_error(), suppress_loguru():
        result = service.sweep(role=Role.ADMIN)

    console.print(
        f"[bold]{result.quarantined}[/bold] fiche(s) mise(s) en quarantaine "
        f"sur {result.scanned} examinee(s)"
    )
    for item_id, reason in result.reasons.items():
        console.print(f"  [dim]{item_id}[/dim] {reason}")


@with_container
def pending(
    container,
    contributor: Annotated[
        Optional[str],
        typer.Option("--contributor", "-c", help="ID du contributeur"),
    ] = None,
) -> None:
    """Affiche les propositions en attente."""
    ledger = container.pending_change_ledger()
    changes = ledger.list_pending(contributor_id=contributor)
    if not changes:
        console.print("[yellow]Aucune proposition en attente.[/yellow]")
        return

    table = Table(title=f"Propositions en attente ({len(changes)})")
    table.add_column("ID", style="dim")
    table.add_column("Type")
    table.add_column("Fiche")
    table.add_column("Titre")
    table.add_column("Contributeur")
    table.add_column("Date")
    for change in changes:
        table.add_row(
            change.id,
            change.kind.value,
            change.item_id or "-",
            str(change.proposed.fields().get("title", "")),
            change.contributor_username,
            change.created_at.strftime("%Y-%m-%d %H:%M") if change.created_at else "",
        )
    console.print(table)


@with_container
def contributor_add(
    container,
    username: Annotated[str, typer.Argument(help="Identifiant (@ initial ignore)")],
    password: Annotated[str, typer.Option(prompt=True, hide_input=True)],
    display_name: Annotated[str, typer.Option("--name", help="Nom affiche")] = "",
) -> None:
    """Cree un compte contributeur."""
    service = container.contributor_service()
    with exit_on_domain_error():
        contributor = service.create(
            username,
            password,
            role=Role.ADMIN,
            display_name=display_name,
            created_by=ADMIN_USERNAME,
        )
    console.print(f"[green]Contributeur cree :[/green] {contributor.username} (id {contributor.id})")
