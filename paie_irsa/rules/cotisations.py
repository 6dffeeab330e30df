"""Regles de calcul des cotisations sociales CNAPS et OSTIE.

Les cotisations salariale et patronale sont calculees sur la totalite du salaire
brut, arrondies a l'Ariary (demi a l'unite superieure). Un regime inactif ne
cotise pas. Le plafond du regime n'est pas applique.
"""

from decimal import Decimal

from paie_irsa.config.constants import RegimeType, TAUX_COTISATIONS
from paie_irsa.models.paie import Cotisation, RegimeCotisation
from paie_irsa.utils.number_utils import arrondir

CENT = Decimal("100")


def regime_par_defaut(code: RegimeType) -> RegimeCotisation:
    """Retourne le parametrage de reference d'un regime."""
    taux = TAUX_COTISATIONS[code]
    return RegimeCotisation(
        code=code,
        taux_salarial=taux["salarial"],
        taux_patronal=taux["patronal"],
        plafond=taux["plafond"],
        actif=True,
        libelle=taux["libelle"],
    )


def regimes_par_defaut() -> tuple[RegimeCotisation, RegimeCotisation]:
    """CNAPS (1% / 13%) et OSTIE (1% / 5%), plafond 8 000 000 MGA, actifs."""
    return regime_par_defaut(RegimeType.CNAPS), regime_par_defaut(RegimeType.OSTIE)


def calculer_cotisation(salaire_brut: Decimal, regime: RegimeCotisation) -> Cotisation:
    """Calcule les parts salariale et patronale d'un regime."""
    if not regime.actif:
        return Cotisation(regime=regime)
    return Cotisation(
        regime=regime,
        montant_salarial=arrondir(salaire_brut * regime.taux_salarial / CENT),
        montant_patronal=arrondir(salaire_brut * regime.taux_patronal / CENT),
    )
