"""Calcul de la paie : salaire brut -> cotisations -> IRSA -> salaire net."""

import logging
from decimal import Decimal
from typing import Iterable, Sequence

from paie_irsa.core.exceptions import SaisieInvalideError
from paie_irsa.models.paie import BaremeIRSA, CalculPaie, Indemnite, RegimeCotisation
from paie_irsa.rules.cotisations import calculer_cotisation
from paie_irsa.rules.irsa import calculer_irsa
from paie_irsa.utils.number_utils import vers_montant_entier

logger = logging.getLogger("paie_irsa.paie")


def salaire_brut_total(salaire_base, indemnites: Iterable[Indemnite] = ()) -> Decimal:
    """Salaire brut = salaire de base + somme des indemnites."""
    total = vers_montant_entier(salaire_base, "salaire de base")
    for indemnite in indemnites:
        total += vers_montant_entier(
            indemnite.montant, f"indemnite {indemnite.type_indemnite.value}"
        )
    return total


def calculer_paie(
    salaire_brut,
    regimes: Sequence[RegimeCotisation],
    bareme: BaremeIRSA,
) -> CalculPaie:
    """Calcule la decomposition complete d'un salaire.

    Args:
        salaire_brut: Salaire brut entier positif ou nul (en Ariary).
        regimes: Les deux regimes de cotisation (CNAPS, OSTIE).
        bareme: Bareme IRSA a appliquer.

    Raises:
        SaisieInvalideError: salaire negatif, non fini ou non entier, ou nombre
            de regimes different de deux.
    """
    brut = vers_montant_entier(salaire_brut, "salaire brut")
    if len(regimes) != 2:
        raise SaisieInvalideError(f"Deux regimes de cotisation attendus, recu {len(regimes)}")

    cotisations = tuple(calculer_cotisation(brut, regime) for regime in regimes)
    total_salarial = sum((c.montant_salarial for c in cotisations), Decimal("0"))
    total_patronal = sum((c.montant_patronal for c in cotisations), Decimal("0"))

    salaire_imposable = brut - total_salarial
    irsa = calculer_irsa(salaire_imposable, bareme)

    calcul = CalculPaie(
        salaire_brut=brut,
        cotisations=cotisations,
        salaire_imposable=salaire_imposable,
        irsa=irsa,
        total_retenues_salariales=total_salarial + irsa.montant_total,
        total_cotisations_patronales=total_patronal,
        salaire_net=salaire_imposable - irsa.montant_total,
        cout_total_employeur=brut + total_patronal,
    )
    logger.debug(
        "Paie calculee : brut=%s imposable=%s irsa=%s net=%s",
        brut, salaire_imposable, irsa.montant_total, calcul.salaire_net,
    )
    return calcul
