"""Chargement des parametres financiers (bareme IRSA, regimes CNAPS / OSTIE).

Les parametres sont lus depuis un fichier JSON externe :

    {
      "bareme": {"nom": "...", "tranches": [{"min": 0, "max": 350000, "taux": 0}, ...]},
      "cnaps": {"employeeRate": 1, "employerRate": 13, "ceiling": 8000000, "isActive": true},
      "ostie": {"employeeRate": 1, "employerRate": 5, "ceiling": 8000000, "isActive": true}
    }

Chaque section est optionnelle ; une section absente reprend les valeurs de reference.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from paie_irsa.config.constants import RegimeType, TAUX_COTISATIONS
from paie_irsa.core.exceptions import ConfigError
from paie_irsa.models.paie import BaremeIRSA, RegimeCotisation
from paie_irsa.rules.irsa import construire_bareme, get_bareme_irsa

logger = logging.getLogger("paie_irsa.parametres")


class ParametreModel(BaseModel):
    """Base immuable qui refuse les champs inconnus."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class TrancheParametre(ParametreModel):
    borne_inferieure: int = Field(alias="min", ge=0)
    borne_superieure: Optional[int] = Field(default=None, alias="max", ge=0)
    taux: Decimal = Field(ge=0, le=100)
    libelle: str = Field(default="", alias="description")


class BaremeParametre(ParametreModel):
    nom: str = ""
    abattement_base: Decimal = Field(default=Decimal("0"), alias="abattementBase", ge=0)
    tranches: list[TrancheParametre] = Field(min_length=1)

    def vers_bareme(self) -> BaremeIRSA:
        return construire_bareme(
            (
                (t.borne_inferieure, t.borne_superieure, t.taux, t.libelle)
                for t in self.tranches
            ),
            nom=self.nom,
            abattement_base=self.abattement_base,
        )


class RegimeParametre(ParametreModel):
    taux_salarial: Decimal = Field(alias="employeeRate", ge=0, le=100)
    taux_patronal: Decimal = Field(alias="employerRate", ge=0, le=100)
    plafond: Optional[Decimal] = Field(default=None, alias="ceiling", ge=0)
    actif: bool = Field(default=True, alias="isActive")

    def vers_regime(self, code: RegimeType) -> RegimeCotisation:
        return RegimeCotisation(
            code=code,
            taux_salarial=self.taux_salarial,
            taux_patronal=self.taux_patronal,
            plafond=self.plafond,
            actif=self.actif,
            libelle=TAUX_COTISATIONS[code]["libelle"],
        )

    @classmethod
    def reference(cls, code: RegimeType) -> RegimeParametre:
        taux = TAUX_COTISATIONS[code]
        return cls(
            taux_salarial=taux["salarial"],
            taux_patronal=taux["patronal"],
            plafond=taux["plafond"],
            actif=True,
        )


class ParametresFinanciers(ParametreModel):
    """Parametres financiers complets de la paie."""

    bareme_irsa: Optional[BaremeParametre] = Field(default=None, alias="bareme")
    cnaps: RegimeParametre = Field(default_factory=lambda: RegimeParametre.reference(RegimeType.CNAPS))
    ostie: RegimeParametre = Field(default_factory=lambda: RegimeParametre.reference(RegimeType.OSTIE))

    def bareme(self) -> BaremeIRSA:
        """Bareme configure, ou bareme IRSA 2024 a defaut.

        Raises:
            BaremeInvalideError: si les tranches ne forment pas un bareme valide.
        """
        if self.bareme_irsa is None:
            return get_bareme_irsa()
        return self.bareme_irsa.vers_bareme()

    def regimes(self) -> tuple[RegimeCotisation, RegimeCotisation]:
        return self.cnaps.vers_regime(RegimeType.CNAPS), self.ostie.vers_regime(RegimeType.OSTIE)


def parametres_depuis_dict(donnees: dict) -> ParametresFinanciers:
    """Valide un dictionnaire de parametres.

    Raises:
        ConfigError: si les parametres sont invalides.
    """
    if not isinstance(donnees, dict):
        raise ConfigError("Les parametres financiers doivent etre un objet JSON")
    try:
        parametres = ParametresFinanciers.model_validate(donnees)
    except ValidationError as e:
        raise ConfigError(f"Parametres financiers invalides : {e}") from e
    # Le bareme est construit ici pour echouer au chargement, pas au calcul
    parametres.bareme()
    return parametres


def charger_parametres(chemin: Path) -> ParametresFinanciers:
    """Charge et valide les parametres financiers depuis un fichier JSON.

    Raises:
        ConfigError: fichier illisible, JSON invalide ou parametres invalides.
    """
    try:
        with open(chemin, "r", encoding="utf-8") as f:
            donnees = json.load(f)
    except OSError as e:
        raise ConfigError(f"Impossible de lire les parametres {chemin} : {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"JSON invalide dans {chemin} : {e}") from e

    parametres = parametres_depuis_dict(donnees)
    logger.info("Parametres financiers charges depuis %s", chemin)
    return parametres
