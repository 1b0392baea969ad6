"""
Constantes globales pour CineAmore.

Ce module contient :
- Les marqueurs de release retirés des titres avant recherche TMDB
- Les libellés des critères de quarantaine
- Le format des identifiants historiques
"""

import re

# Marqueurs de qualité/encodage présents dans les titres importés
RELEASE_TOKENS = (
    "4k",
    "1080p",
    "720p",
    "cam",
    "ts",
    "hdcam",
    "hdts",
    "bluray",
    "x264",
    "x265",
    "hevc",
    "web-dl",
    "webrip",
)

RELEASE_TOKENS_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(token) for token in RELEASE_TOKENS) + r")\b",
    re.IGNORECASE,
)

# Critère de quarantaine -> libellé utilisé dans la raison
QUARANTINE_CRITERIA_LABELS = {
    "missing_genre": "Missing genre",
    "missing_poster": "Missing poster",
    "missing_plot": "Missing plot",
}

# Raison par défaut d'une mise en quarantaine manuelle
MANUAL_QUARANTINE_REASON = "Manually quarantined"

# Identifiant historique : "m" + 8 caractères hexadécimaux
LEGACY_ID_PREFIX = "m"
LEGACY_ID_HEX_LENGTH = 8

# Nom d'utilisateur réservé à l'administrateur dans les sessions
ADMIN_USERNAME = "admin"
