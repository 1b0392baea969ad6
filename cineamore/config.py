"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe CINEAMORE_,
et peut optionnellement être fournie via un fichier .env.

La clé API TMDB est optionnelle - la classification automatique des genres est
désactivée si elle n'est pas fournie.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de cineamore/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

# Critères de quarantaine reconnus par le balayage de visibilité
KNOWN_QUARANTINE_CRITERIA = ("missing_genre", "missing_poster", "missing_plot")


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe CINEAMORE_.
    Exemple : CINEAMORE_LOG_LEVEL=DEBUG

    Les listes (quarantine_criteria) s'écrivent en JSON :
    CINEAMORE_QUARANTINE_CRITERIA='["missing_genre", "missing_plot"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="CINEAMORE_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de données
    database_url: str = Field(default="sqlite:///cineamore.db")

    # TMDB (OPTIONNELLE - classification désactivée si non définie)
    tmdb_api_key: Optional[str] = Field(default=None)
    tmdb_language: str = Field(default="en-US")
    cache_dir: Path = Field(default=Path(".cache/api"))

    # Sessions
    admin_password: str = Field(default="admin123")
    session_secret: str = Field(default="default-secret-key-change-me-in-prod")
    session_ttl_hours: int = Field(default=24, ge=1)

    # Classification des genres (balayage par lots)
    classification_batch_size: int = Field(default=5, ge=1, le=50)
    classification_year_tolerance: int = Field(default=1, ge=0)
    classification_delay_seconds: float = Field(default=0.25, ge=0)
    sentinel_genre: str = Field(default="Uncategorized")

    # Quarantaine
    quarantine_criteria: list[str] = Field(
        default_factory=lambda: list(KNOWN_QUARANTINE_CRITERIA)
    )

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/cineamore.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("quarantine_criteria")
    @classmethod
    def check_criteria(cls, v: list[str]) -> list[str]:
        """Refuse les critères de quarantaine inconnus."""
        unknown = [c for c in v if c not in KNOWN_QUARANTINE_CRITERIA]
        if unknown:
            raise ValueError(f"Critères de quarantaine inconnus : {', '.join(unknown)}")
        return v

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si l'API TMDB est configurée."""
        return bool(self.tmdb_api_key)
