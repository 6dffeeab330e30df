"""Modeles de donnees du calcul de paie : bareme IRSA, cotisations, bulletins."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from paie_irsa.config.constants import RegimeType, TypeIndemnite, STATUT_BROUILLON
from paie_irsa.core.exceptions import BaremeInvalideError, ConfigError

CENT = Decimal("100")


def _taux_decimal(taux):
    """Convertit un taux entier en Decimal."""
    if isinstance(taux, int) and not isinstance(taux, bool):
        return Decimal(taux)
    return taux


# --- Bareme IRSA ---

@dataclass(frozen=True)
class TrancheIRSA:
    """Une tranche du bareme progressif (bornes incluses)."""
    borne_inferieure: int
    borne_superieure: Optional[int]   # None = tranche illimitee
    taux: Decimal                     # en %
    libelle: str = ""

    def __post_init__(self):
        object.__setattr__(self, "taux", _taux_decimal(self.taux))

    @property
    def illimitee(self) -> bool:
        return self.borne_superieure is None


@dataclass(frozen=True)
class BaremeIRSA:
    """Bareme IRSA ordonne et immuable, valide a la construction."""
    tranches: tuple[TrancheIRSA, ...]
    nom: str = ""
    abattement_base: Decimal = Decimal("0")  # conserve, non applique

    def __post_init__(self):
        object.__setattr__(self, "tranches", tuple(self.tranches))
        self._valider()

    def _valider(self) -> None:
        if not self.tranches:
            raise BaremeInvalideError("Le bareme doit contenir au moins une tranche")

        borne_attendue = 0
        dernier = len(self.tranches) - 1
        for i, tranche in enumerate(self.tranches):
            if not isinstance(tranche, TrancheIRSA):
                raise BaremeInvalideError(f"Tranche {i + 1} : type invalide {type(tranche).__name__}")
            for borne in (tranche.borne_inferieure, tranche.borne_superieure):
                if borne is not None and (isinstance(borne, bool) or not isinstance(borne, int)):
                    raise BaremeInvalideError(f"Tranche {i + 1} : borne non entiere {borne!r}")
            if not isinstance(tranche.taux, Decimal):
                raise BaremeInvalideError(
                    f"Tranche {i + 1} : taux de type {type(tranche.taux).__name__}, Decimal attendu"
                )
            if not tranche.taux.is_finite() or not Decimal("0") <= tranche.taux <= CENT:
                raise BaremeInvalideError(f"Tranche {i + 1} : taux hors de [0, 100] ({tranche.taux!r})")
            if tranche.borne_inferieure != borne_attendue:
                raise BaremeInvalideError(
                    f"Tranche {i + 1} : borne inferieure {tranche.borne_inferieure} "
                    f"au lieu de {borne_attendue} (tranches non contigues ou chevauchantes)"
                )
            if tranche.illimitee:
                if i != dernier:
                    raise BaremeInvalideError(
                        f"Tranche {i + 1} : seule la derniere tranche peut etre illimitee"
                    )
                continue
            if tranche.borne_superieure < tranche.borne_inferieure:
                raise BaremeInvalideError(
                    f"Tranche {i + 1} : borne superieure {tranche.borne_superieure} "
                    f"< borne inferieure {tranche.borne_inferieure}"
                )
            borne_attendue = tranche.borne_superieure + 1

        if not self.tranches[-1].illimitee:
            raise BaremeInvalideError("La derniere tranche du bareme doit etre illimitee")

    def __iter__(self):
        return iter(self.tranches)

    def __len__(self) -> int:
        return len(self.tranches)

    @property
    def seuil_exoneration(self) -> int:
        """Montant imposable jusqu'auquel l'IRSA est nul (tranches a 0% en tete)."""
        seuil = 0
        for tranche in self.tranches:
            if tranche.taux != 0 or tranche.illimitee:
                break
            seuil = tranche.borne_superieure
        return seuil


@dataclass(frozen=True)
class DetailTranche:
    """Impot calcule sur la part du revenu situee dans une tranche."""
    borne_inferieure: int
    borne_superieure: Optional[int]
    taux: Decimal
    montant_tranche: Decimal
    impot_tranche: Decimal

    def to_dict(self) -> dict:
        return {
            "min": self.borne_inferieure,
            "max": self.borne_superieure,
            "taux": str(self.taux),
            "montant_tranche": int(self.montant_tranche),
            "impot_tranche": int(self.impot_tranche),
        }


@dataclass(frozen=True)
class ResultatIRSA:
    """Resultat d'un calcul IRSA."""
    montant_imposable: Decimal
    tranches: tuple[DetailTranche, ...] = ()
    montant_total: Decimal = Decimal("0")
    taux_effectif: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {
            "salaire_imposable": str(self.montant_imposable),
            "tranches": [t.to_dict() for t in self.tranches],
            "irsa": int(self.montant_total),
            "taux_effectif": str(self.taux_effectif),
        }


# --- Cotisations sociales ---

@dataclass(frozen=True)
class RegimeCotisation:
    """Parametrage d'un regime de cotisation (CNAPS, OSTIE).

    Le plafond fait partie du parametrage mais n'est pas applique au calcul :
    les cotisations portent sur la totalite du salaire brut.
    """
    code: RegimeType
    taux_salarial: Decimal
    taux_patronal: Decimal
    plafond: Optional[Decimal] = None
    actif: bool = True
    libelle: str = ""

    def __post_init__(self):
        for nom in ("taux_salarial", "taux_patronal"):
            taux = _taux_decimal(getattr(self, nom))
            if not isinstance(taux, Decimal):
                raise ConfigError(f"{self.code.value} : {nom} de type {type(taux).__name__}, Decimal attendu")
            if not taux.is_finite() or not Decimal("0") <= taux <= CENT:
                raise ConfigError(f"{self.code.value} : {nom} hors de [0, 100] ({taux!r})")
            object.__setattr__(self, nom, taux)
        if self.plafond is not None and self.plafond < 0:
            raise ConfigError(f"{self.code.value} : plafond negatif ({self.plafond})")
        if not self.libelle:
            object.__setattr__(self, "libelle", self.code.value.upper())


@dataclass(frozen=True)
class Cotisation:
    """Montants de cotisation d'un regime pour un salaire donne."""
    regime: RegimeCotisation
    montant_salarial: Decimal = Decimal("0")
    montant_patronal: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.montant_salarial + self.montant_patronal

    def to_dict(self) -> dict:
        return {
            "regime": self.regime.code.value,
            "taux": {"salarial": str(self.regime.taux_salarial), "patronal": str(self.regime.taux_patronal)},
            "actif": self.regime.actif,
            "cotisation_salariale": int(self.montant_salarial),
            "cotisation_patronale": int(self.montant_patronal),
            "total": int(self.total),
        }


@dataclass(frozen=True)
class CalculPaie:
    """Decomposition complete brut -> net et cout employeur."""
    salaire_brut: Decimal
    cotisations: tuple[Cotisation, Cotisation]
    salaire_imposable: Decimal
    irsa: ResultatIRSA
    total_retenues_salariales: Decimal
    total_cotisations_patronales: Decimal
    salaire_net: Decimal
    cout_total_employeur: Decimal

    def cotisation(self, code: RegimeType) -> Cotisation:
        for c in self.cotisations:
            if c.regime.code == code:
                return c
        raise KeyError(code)

    @property
    def total_cotisations_salariales(self) -> Decimal:
        return sum((c.montant_salarial for c in self.cotisations), Decimal("0"))

    def to_dict(self) -> dict:
        return {
            "salaire_brut": int(self.salaire_brut),
            "cotisations": [c.to_dict() for c in self.cotisations],
            "salaire_imposable": int(self.salaire_imposable),
            "irsa": self.irsa.to_dict(),
            "total_retenues_salariales": int(self.total_retenues_salariales),
            "total_cotisations_patronales": int(self.total_cotisations_patronales),
            "salaire_net": int(self.salaire_net),
            "cout_total_employeur": int(self.cout_total_employeur),
        }


# --- Employes et traitement de paie ---

@dataclass(frozen=True)
class Indemnite:
    """Un element de remuneration ajoute au salaire de base."""
    type_indemnite: TypeIndemnite
    montant: Decimal


@dataclass
class EmployePaie:
    """Donnees de paie d'un salarie."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nom: str = ""
    poste: str = ""
    departement: str = ""
    salaire_base: Decimal = Decimal("0")
    indemnites: list[Indemnite] = field(default_factory=list)


@dataclass
class LignePaie:
    """Resultat de paie d'un salarie dans un traitement."""
    employe: EmployePaie
    calcul: CalculPaie
    statut: str = STATUT_BROUILLON

    def to_dict(self) -> dict:
        return {
            "employe_id": self.employe.id,
            "nom": self.employe.nom,
            "poste": self.employe.poste,
            "departement": self.employe.departement,
            "statut": self.statut,
            "calcul": self.calcul.to_dict(),
        }


@dataclass
class ResultatTraitement:
    """Resultat d'un traitement de paie groupe (lignes dans l'ordre de saisie)."""
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    date_traitement: datetime = field(default_factory=datetime.now)
    lignes: list[LignePaie] = field(default_factory=list)

    def _somme(self, attribut: str) -> Decimal:
        return sum((getattr(l.calcul, attribut) for l in self.lignes), Decimal("0"))

    @property
    def total_brut(self) -> Decimal:
        return self._somme("salaire_brut")

    @property
    def total_net(self) -> Decimal:
        return self._somme("salaire_net")

    @property
    def total_irsa(self) -> Decimal:
        return sum((l.calcul.irsa.montant_total for l in self.lignes), Decimal("0"))

    @property
    def total_cotisations_salariales(self) -> Decimal:
        return self._somme("total_cotisations_salariales")

    @property
    def total_cotisations_patronales(self) -> Decimal:
        return self._somme("total_cotisations_patronales")

    @property
    def cout_total_employeur(self) -> Decimal:
        return self._somme("cout_total_employeur")

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "date_traitement": self.date_traitement.isoformat(),
            "lignes": [l.to_dict() for l in self.lignes],
            "totaux": {
                "salaire_brut": int(self.total_brut),
                "cotisations_salariales": int(self.total_cotisations_salariales),
                "irsa": int(self.total_irsa),
                "salaire_net": int(self.total_net),
                "cotisations_patronales": int(self.total_cotisations_patronales),
                "cout_total_employeur": int(self.cout_total_employeur),
            },
        }
