"""Journal d'audit des calculs de paie (append-only, une ligne JSON par entree)."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from paie_irsa.models.paie import CalculPaie

logger = logging.getLogger("paie_irsa.audit")


class AuditLogger:
    """Journalise les traitements de paie de maniere immutable (append-only)."""

    def __init__(self, log_path: Path):
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(
        self,
        operation: str,
        session_id: str,
        *,
        details: Optional[dict] = None,
        employe_id: Optional[str] = None,
        resultat: str = "succes",
    ) -> None:
        """Ajoute une entree au journal d'audit."""
        entry = {
            "timestamp": datetime.now().isoformat(),
            "session_id": session_id,
            "operation": operation,
            "resultat": resultat,
        }
        if employe_id:
            entry["employe_id"] = employe_id
        if details:
            entry["details"] = details

        line = json.dumps(entry, ensure_ascii=False)
        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.error("Impossible d'ecrire dans le journal d'audit: %s", e)

    def log_calcul(self, session_id: str, employe_id: str, calcul: CalculPaie) -> None:
        self.log(
            "calcul_paie",
            session_id,
            employe_id=employe_id,
            details={
                "salaire_brut": int(calcul.salaire_brut),
                "irsa": int(calcul.irsa.montant_total),
                "salaire_net": int(calcul.salaire_net),
                "cout_total_employeur": int(calcul.cout_total_employeur),
            },
        )

    def log_erreur(self, session_id: str, operation: str, erreur: str) -> None:
        self.log(operation, session_id, details={"erreur": erreur}, resultat="echec")

    def lire_journal(self) -> list[dict]:
        """Lit toutes les entrees du journal."""
        if not self.log_path.exists():
            return []
        entries = []
        with open(self.log_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    entries.append(json.loads(line))
        return entries
