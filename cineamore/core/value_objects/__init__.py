"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- DownloadLink : Lien de telechargement d'une fiche
- ItemPatch : Modification partielle typee d'une fiche
- UNSET : Marqueur de champ absent d'un ItemPatch
"""

from cineamore.core.value_objects.download_link import DownloadLink
from cineamore.core.value_objects.item_patch import UNSET, ItemPatch

__all__ = [
    "DownloadLink",
    "ItemPatch",
    "UNSET",
]
