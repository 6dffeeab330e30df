"""Exceptions personnalisees pour le calcul de paie IRSA."""


class PaieIRSAError(Exception):
    """Exception de base."""


class SaisieInvalideError(PaieIRSAError, ValueError):
    """Montant ou parametre d'entree invalide (negatif, non fini, non entier...)."""


class ConfigError(PaieIRSAError):
    """Erreur de configuration."""


class BaremeInvalideError(ConfigError):
    """Bareme IRSA mal forme (tranches non contigues, chevauchantes, sans tranche illimitee)."""
