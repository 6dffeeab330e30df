"""Utilitaires pour le traitement des montants et nombres."""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from paie_irsa.config.constants import DEVISE
from paie_irsa.core.exceptions import SaisieInvalideError

CENTIEME = Decimal("0.01")
MILLIERS_POINT = re.compile(r"-?\d{1,3}(\.\d{3})+")


def vers_decimal(valeur, nom: str = "montant") -> Decimal:
    """Convertit une valeur numerique en Decimal fini.

    Les booleens, les chaines et les valeurs non finies (NaN, infini) sont refuses.
    """
    if isinstance(valeur, bool) or not isinstance(valeur, (int, float, Decimal)):
        raise SaisieInvalideError(f"{nom} doit etre un nombre, recu {type(valeur).__name__}")
    d = valeur if isinstance(valeur, Decimal) else Decimal(str(valeur))
    if not d.is_finite():
        raise SaisieInvalideError(f"{nom} doit etre un nombre fini, recu {valeur!r}")
    return d


def vers_montant_entier(valeur, nom: str = "montant") -> Decimal:
    """Convertit en Decimal entier positif ou nul (plus petite unite monetaire)."""
    d = vers_decimal(valeur, nom)
    if d < 0:
        raise SaisieInvalideError(f"{nom} ne peut pas etre negatif : {valeur}")
    if d != d.to_integral_value():
        raise SaisieInvalideError(f"{nom} doit etre un montant entier : {valeur}")
    return d.to_integral_value()


def arrondir(valeur: Decimal) -> Decimal:
    """Arrondi commercial (demi a l'unite superieure) a l'unite monetaire."""
    return valeur.to_integral_value(rounding=ROUND_HALF_UP)


def arrondir_taux(valeur: Decimal) -> Decimal:
    """Arrondi d'un pourcentage a deux decimales."""
    return valeur.quantize(CENTIEME, ROUND_HALF_UP)


def parser_montant(valeur: str) -> Decimal:
    """Parse un montant saisi (1 000 000, 1.000.000, 350000 Ar, 1234,50...)."""
    if not valeur or not valeur.strip():
        raise SaisieInvalideError("Montant vide")

    v = valeur.strip()

    # Retirer les symboles monetaires
    for symbole in (DEVISE, "Ar", "ar"):
        v = v.replace(symbole, "")
    v = v.replace(" ", "").replace("\u00a0", "").replace("\u202f", "")

    if "," in v and "." in v:
        # 1.234,56 -> format europeen
        if v.rindex(",") > v.rindex("."):
            v = v.replace(".", "").replace(",", ".")
        else:
            # 1,234.56 -> format anglo-saxon
            v = v.replace(",", "")
    elif "," in v:
        v = v.replace(",", ".")
    elif MILLIERS_POINT.fullmatch(v):
        # 350.000, 1.000.000 -> separateur de milliers
        v = v.replace(".", "")

    try:
        montant = Decimal(v)
    except InvalidOperation:
        raise SaisieInvalideError(f"Montant illisible : {valeur!r}")
    if not montant.is_finite():
        raise SaisieInvalideError(f"Montant illisible : {valeur!r}")
    return montant


def formater_montant(montant: Decimal, devise: str = DEVISE) -> str:
    """Formate un montant entier en format francais : 1 180 000 MGA."""
    signe = "-" if montant < 0 else ""
    s = str(int(abs(arrondir(Decimal(montant)))))

    # Separateur de milliers
    groupes = []
    while s:
        groupes.insert(0, s[-3:])
        s = s[:-3]

    return f"{signe}{' '.join(groupes)} {devise}"
