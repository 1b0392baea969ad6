"""
Services métier de CineAmore.

Orchestrent les repositories (via l'unité de travail) et les clients
externes : propositions, approbation, quarantaine, classification des
genres, notes, comptes contributeurs et sessions.
"""
