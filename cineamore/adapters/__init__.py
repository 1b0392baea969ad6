"""
Adaptateurs de CineAmore.

- api/ : client TMDB (httpx), cache disque et retry
- auth/ : jetons de session signés
- cli/ : interface en ligne de commande (typer)
"""
