"""Traitement de paie groupe.

Calcule la paie de chaque salarie independamment, dans l'ordre de saisie,
agrege les totaux et journalise le traitement.
"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from paie_irsa.config.constants import TypeIndemnite
from paie_irsa.config.settings import AppConfig
from paie_irsa.core.exceptions import ConfigError, SaisieInvalideError
from paie_irsa.journal.audit_logger import AuditLogger
from paie_irsa.models.paie import (
    BaremeIRSA, EmployePaie, Indemnite, LignePaie, RegimeCotisation, ResultatTraitement,
)
from paie_irsa.rules.cotisations import regimes_par_defaut
from paie_irsa.rules.irsa import get_bareme_irsa
from paie_irsa.rules.paie import calculer_paie, salaire_brut_total

logger = logging.getLogger("paie_irsa.traitement")


class EmployeSaisie(BaseModel):
    """Saisie d'un salarie dans un fichier de traitement."""

    model_config = ConfigDict(extra="forbid")

    id: str
    nom: str = ""
    poste: str = ""
    departement: str = ""
    salaire_base: StrictInt = Field(ge=0)
    indemnites: dict[TypeIndemnite, StrictInt] = Field(default_factory=dict)

    def vers_employe(self) -> EmployePaie:
        return EmployePaie(
            id=self.id,
            nom=self.nom,
            poste=self.poste,
            departement=self.departement,
            salaire_base=Decimal(self.salaire_base),
            indemnites=[
                Indemnite(type_indemnite=t, montant=Decimal(m))
                for t, m in self.indemnites.items()
            ],
        )


def charger_employes(chemin: Path) -> list[EmployePaie]:
    """Charge la liste des salaries depuis un fichier JSON (liste d'objets).

    Raises:
        ConfigError: fichier illisible ou saisie invalide.
    """
    try:
        with open(chemin, "r", encoding="utf-8") as f:
            donnees = json.load(f)
    except OSError as e:
        raise ConfigError(f"Impossible de lire {chemin} : {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"JSON invalide dans {chemin} : {e}") from e

    if not isinstance(donnees, list):
        raise ConfigError(f"{chemin} doit contenir une liste de salaries")

    employes = []
    for i, item in enumerate(donnees):
        try:
            employes.append(EmployeSaisie.model_validate(item).vers_employe())
        except ValidationError as e:
            raise ConfigError(f"Salarie n°{i + 1} invalide dans {chemin} : {e}") from e
    return employes


class TraitementPaie:
    """Coordonne le calcul de paie d'une liste de salaries."""

    def __init__(
        self,
        bareme: Optional[BaremeIRSA] = None,
        regimes: Optional[Sequence[RegimeCotisation]] = None,
        config: Optional[AppConfig] = None,
    ):
        self.bareme = bareme if bareme is not None else get_bareme_irsa()
        self.regimes = tuple(regimes) if regimes is not None else regimes_par_defaut()
        self.config = config or AppConfig()
        self.audit = AuditLogger(self.config.audit_log_path) if self.config.calcul.journaliser else None

    def calculer_lot(self, employes: Sequence[EmployePaie]) -> ResultatTraitement:
        """Calcule la paie de chaque salarie ; les lignes suivent l'ordre de saisie.

        Raises:
            SaisieInvalideError: si la saisie d'un salarie est invalide. Le
                traitement est alors interrompu.
        """
        resultat = ResultatTraitement()
        session_id = resultat.session_id
        logger.info("Demarrage du traitement de paie - Session %s (%d salaries)", session_id, len(employes))
        self._journaliser("demarrage_traitement", session_id, details={
            "nb_salaries": len(employes),
            "bareme": self.bareme.nom,
        })

        for employe in employes:
            try:
                brut = salaire_brut_total(employe.salaire_base, employe.indemnites)
                calcul = calculer_paie(brut, self.regimes, self.bareme)
            except SaisieInvalideError as e:
                logger.warning("Saisie invalide pour %s : %s", employe.id, e)
                if self.audit:
                    self.audit.log_erreur(session_id, "calcul_paie", f"{employe.id} : {e}")
                raise SaisieInvalideError(f"Salarie {employe.id} ({employe.nom}) : {e}") from e

            resultat.lignes.append(LignePaie(employe=employe, calcul=calcul))
            if self.audit:
                self.audit.log_calcul(session_id, employe.id, calcul)

        logger.info(
            "Traitement termine : brut=%s net=%s irsa=%s cout employeur=%s",
            resultat.total_brut, resultat.total_net, resultat.total_irsa, resultat.cout_total_employeur,
        )
        self._journaliser("fin_traitement", session_id, details={
            "total_brut": int(resultat.total_brut),
            "total_net": int(resultat.total_net),
            "cout_total_employeur": int(resultat.cout_total_employeur),
        })
        return resultat

    def _journaliser(self, operation: str, session_id: str, details: dict) -> None:
        if self.audit:
            self.audit.log(operation, session_id, details=details)
