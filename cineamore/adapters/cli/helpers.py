"""
Utilitaires partages pour les commandes CLI de CineAmore.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver les logs loguru pendant l'affichage Rich
- with_container : decorateur injectant un container initialise
- async_command : decorateur transformant une fonction async en commande sync
- exit_on_domain_error : affiche une erreur du domaine et quitte avec le code 1
"""

import asyncio
import inspect
from contextlib import contextmanager
from functools import wraps

import typer
from loguru import logger as loguru_logger
from rich.console import Console

from cineamore.container import Container
from cineamore.core.errors import CineAmoreError

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("cineamore")
    try:
        yield
    finally:
        loguru_logger.enable("cineamore")


def with_container(func):
    """
    Decorateur qui injecte un container initialise en premier argument.

    La base est ouverte avant l'appel et liberee apres, y compris en cas
    d'erreur. Fonctionne pour les fonctions sync et async.

    Usage:
        @with_container
        async def _classify(container, limit):
            classifier = container.genre_classifier()
    """
    # Typer ne doit pas voir le parametre container
    signature = inspect.signature(func)
    public_signature = signature.replace(parameters=list(signature.parameters.values())[1:])

    if inspect.iscoroutinefunction(func):

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            container = Container()
            container.init_resources()
            try:
                return await func(container, *args, **kwargs)
            finally:
                client = container.tmdb_client()
                if client is not None:
                    await client.close()
                container.shutdown_resources()

        async_wrapper.__signature__ = public_signature
        return async_wrapper

    @wraps(func)
    def wrapper(*args, **kwargs):
        container = Container()
        container.init_resources()
        try:
            return func(container, *args, **kwargs)
        finally:
            container.shutdown_resources()

    wrapper.__signature__ = public_signature
    return wrapper


def async_command(func):
    """
    Transforme une fonction async en commande sync via asyncio.run().

    Preserve les annotations Typer pour que les options soient
    correctement interpretees.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        return asyncio.run(func(*args, **kwargs))

    wrapper.__signature__ = inspect.signature(func)
    wrapper.__annotations__ = func.__annotations__
    return wrapper


@contextmanager
def exit_on_domain_error():
    """Affiche le message d'une CineAmoreError et quitte avec le code 1."""
    try:
        yield
    except CineAmoreError as e:
        console.print(f"[red]Erreur :[/red] {e.message}")
        raise typer.Exit(code=1)
