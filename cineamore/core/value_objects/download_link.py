"""
Objet valeur DownloadLink : lien de téléchargement attaché à une fiche.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class DownloadLink:
    """
    Lien de téléchargement d'une fiche.

    Attributs :
        label : Libellé affiché (ex: "1080p - Drive")
        url : Adresse du lien
        added_at : Date d'ajout du lien
    """

    label: str
    url: str
    added_at: Optional[datetime] = None
