"""
Constantes reglementaires de la paie a Madagascar.

Sources :
- Code General des Impots, bareme IRSA 2024
- Taux CNAPS / OSTIE du regime general (parametres financiers de l'ecole)
"""

from decimal import Decimal
from enum import Enum


DEVISE = "MGA"


# --- Bareme IRSA 2024 ---

NOM_BAREME_IRSA_2024 = "IRSA Madagascar 2024"

# (borne inferieure, borne superieure, taux %, libelle) ; None = tranche illimitee
TRANCHES_IRSA_2024 = (
    (0, 350_000, Decimal("0"), "Exonere"),
    (350_001, 400_000, Decimal("5"), "5%"),
    (400_001, 500_000, Decimal("10"), "10%"),
    (500_001, 600_000, Decimal("15"), "15%"),
    (600_001, None, Decimal("20"), "20%"),
)

# Pas d'abattement de base actuellement
ABATTEMENT_BASE_IRSA = Decimal("0")


class RegimeType(str, Enum):
    """Regimes de cotisations sociales."""
    CNAPS = "cnaps"   # Caisse Nationale de Prevoyance Sociale (retraite)
    OSTIE = "ostie"   # Organisation Sanitaire Tananarivienne Inter-Entreprises (sante)


# --- Taux de cotisations (en %) ---

TAUX_COTISATIONS = {
    RegimeType.CNAPS: {
        "salarial": Decimal("1"),
        "patronal": Decimal("13"),
        "plafond": Decimal("8000000"),
        "libelle": "CNAPS",
    },
    RegimeType.OSTIE: {
        "salarial": Decimal("1"),
        "patronal": Decimal("5"),
        "plafond": Decimal("8000000"),
        "libelle": "OSTIE",
    },
}


class TypeIndemnite(str, Enum):
    """Elements de remuneration ajoutes au salaire de base."""
    TRANSPORT = "transport"
    LOGEMENT = "logement"
    REPAS = "repas"
    PERFORMANCE = "performance"
    AUTRE = "autre"


STATUT_BROUILLON = "brouillon"
