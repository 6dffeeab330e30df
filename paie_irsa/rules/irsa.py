"""Calcul de l'IRSA (Impot sur les Revenus Salariaux et Assimiles).

Bareme progressif malgache 2024 :
- 0 a 350 000 MGA : exonere
- 350 001 a 400 000 MGA : 5%
- 400 001 a 500 000 MGA : 10%
- 500 001 a 600 000 MGA : 15%
- au-dela de 600 000 MGA : 20%

Chaque tranche impose la part du revenu comprise entre ses bornes. L'impot est
arrondi tranche par tranche (demi a l'unite superieure) puis additionne.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from paie_irsa.config.constants import (
    ABATTEMENT_BASE_IRSA,
    NOM_BAREME_IRSA_2024,
    TRANCHES_IRSA_2024,
)
from paie_irsa.models.paie import BaremeIRSA, DetailTranche, ResultatIRSA, TrancheIRSA
from paie_irsa.utils.number_utils import arrondir, arrondir_taux, vers_decimal

logger = logging.getLogger("paie_irsa.irsa")

CENT = Decimal("100")


def construire_bareme(
    lignes: Iterable[tuple[int, Optional[int], Decimal, str]],
    nom: str = "",
    abattement_base: Decimal = Decimal("0"),
) -> BaremeIRSA:
    """Construit un bareme valide a partir de lignes (min, max, taux, libelle)."""
    tranches = tuple(
        TrancheIRSA(borne_inferieure=mini, borne_superieure=maxi, taux=taux, libelle=libelle)
        for mini, maxi, taux, libelle in lignes
    )
    return BaremeIRSA(tranches=tranches, nom=nom, abattement_base=abattement_base)


_BAREME_IRSA_2024 = construire_bareme(
    TRANCHES_IRSA_2024, nom=NOM_BAREME_IRSA_2024, abattement_base=ABATTEMENT_BASE_IRSA,
)


def get_bareme_irsa() -> BaremeIRSA:
    """Retourne le bareme IRSA Madagascar 2024 (valeur immuable)."""
    return _BAREME_IRSA_2024


def _montant_dans_tranche(restant: Decimal, tranche: TrancheIRSA) -> Decimal:
    """Part du revenu restant imposee dans la tranche."""
    if tranche.illimitee:
        return restant
    plancher = max(tranche.borne_inferieure - 1, 0)
    largeur = Decimal(tranche.borne_superieure - plancher)
    return min(restant, largeur)


def calculer_irsa(montant_imposable, bareme: BaremeIRSA) -> ResultatIRSA:
    """Calcule l'IRSA detaille par tranche.

    Un montant nul ou negatif donne un impot nul (aucune exception).

    Raises:
        SaisieInvalideError: si le montant n'est pas un nombre fini.
    """
    montant = vers_decimal(montant_imposable, "montant imposable")
    if montant <= 0:
        return ResultatIRSA(montant_imposable=montant)

    details = []
    total = Decimal("0")
    restant = montant

    for tranche in bareme:
        if restant <= 0:
            break

        montant_tranche = _montant_dans_tranche(restant, tranche)
        if montant_tranche <= 0:
            continue

        impot_tranche = arrondir(montant_tranche * tranche.taux / CENT)
        details.append(DetailTranche(
            borne_inferieure=tranche.borne_inferieure,
            borne_superieure=tranche.borne_superieure,
            taux=tranche.taux,
            montant_tranche=montant_tranche,
            impot_tranche=impot_tranche,
        ))
        total += impot_tranche
        restant -= montant_tranche

    taux_effectif = arrondir_taux(total / montant * CENT)
    logger.debug(
        "IRSA calcule sur %s : %s (taux effectif %s%%)", montant, total, taux_effectif,
    )
    return ResultatIRSA(
        montant_imposable=montant,
        tranches=tuple(details),
        montant_total=total,
        taux_effectif=taux_effectif,
    )


def est_soumis_irsa(montant_imposable, bareme: BaremeIRSA) -> bool:
    """Verifie si un salaire imposable depasse le seuil d'exoneration."""
    return vers_decimal(montant_imposable, "montant imposable") > bareme.seuil_exoneration
