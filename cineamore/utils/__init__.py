"""Utilitaires partagés (constantes, nettoyage de titres, normalisation)."""
