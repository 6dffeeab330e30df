"""Tests du traitement de paie groupe."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import json
from decimal import Decimal

import pytest

from paie_irsa.config.constants import TypeIndemnite, STATUT_BROUILLON
from paie_irsa.config.settings import AppConfig, CalculConfig
from paie_irsa.core.exceptions import ConfigError, SaisieInvalideError
from paie_irsa.core.traitement import TraitementPaie, charger_employes
from paie_irsa.models.paie import EmployePaie, Indemnite


def creer_config(tmp_path, journaliser=True) -> AppConfig:
    return AppConfig(
        base_dir=tmp_path,
        data_dir=tmp_path / "data",
        audit_log_path=tmp_path / "audit.log",
        calcul=CalculConfig(journaliser=journaliser),
    )


def employes_exemple() -> list[EmployePaie]:
    return [
        EmployePaie(id="e2", nom="Rakoto", poste="Enseignant", departement="Primaire",
                    salaire_base=Decimal("1000000")),
        EmployePaie(id="e1", nom="Rabe", poste="Surveillant", departement="Vie scolaire",
                    salaire_base=Decimal("300000"),
                    indemnites=[Indemnite(TypeIndemnite.TRANSPORT, Decimal("50000"))]),
        EmployePaie(id="e3", nom="Rasoa", poste="Secretaire", departement="Administration",
                    salaire_base=Decimal("450000")),
    ]


class TestTraitementPaie:
    """Tests du calcul groupe."""

    def test_ordre_de_saisie_conserve(self, tmp_path):
        traitement = TraitementPaie(config=creer_config(tmp_path))
        resultat = traitement.calculer_lot(employes_exemple())
        assert [l.employe.id for l in resultat.lignes] == ["e2", "e1", "e3"]
        assert all(l.statut == STATUT_BROUILLON for l in resultat.lignes)

    def test_indemnites_dans_le_brut(self, tmp_path):
        traitement = TraitementPaie(config=creer_config(tmp_path))
        resultat = traitement.calculer_lot(employes_exemple())
        assert resultat.lignes[1].calcul.salaire_brut == 350_000

    def test_totaux(self, tmp_path):
        traitement = TraitementPaie(config=creer_config(tmp_path))
        resultat = traitement.calculer_lot(employes_exemple())
        assert resultat.total_brut == 1_800_000
        assert resultat.total_net == sum(l.calcul.salaire_net for l in resultat.lignes)
        assert resultat.total_irsa == sum(l.calcul.irsa.montant_total for l in resultat.lignes)
        assert resultat.cout_total_employeur == 1_800_000 + resultat.total_cotisations_patronales
        assert resultat.total_net + resultat.total_cotisations_salariales + resultat.total_irsa == 1_800_000

    def test_chaque_calcul_est_independant(self, tmp_path):
        traitement = TraitementPaie(config=creer_config(tmp_path))
        seul = traitement.calculer_lot(employes_exemple()[:1]).lignes[0].calcul
        groupe = traitement.calculer_lot(employes_exemple()).lignes[0].calcul
        assert seul == groupe
        assert groupe.salaire_net == 876_500

    def test_lot_vide(self, tmp_path):
        resultat = TraitementPaie(config=creer_config(tmp_path)).calculer_lot([])
        assert resultat.lignes == []
        assert resultat.total_brut == 0

    def test_journal(self, tmp_path):
        config = creer_config(tmp_path)
        traitement = TraitementPaie(config=config)
        resultat = traitement.calculer_lot(employes_exemple())

        entries = traitement.audit.lire_journal()
        assert [e["operation"] for e in entries] == [
            "demarrage_traitement", "calcul_paie", "calcul_paie", "calcul_paie", "fin_traitement",
        ]
        assert all(e["session_id"] == resultat.session_id for e in entries)
        assert entries[1]["employe_id"] == "e2"
        assert entries[1]["details"]["salaire_net"] == 876_500

    def test_sans_journal(self, tmp_path):
        config = creer_config(tmp_path, journaliser=False)
        traitement = TraitementPaie(config=config)
        traitement.calculer_lot(employes_exemple())
        assert traitement.audit is None
        assert not config.audit_log_path.exists()

    def test_saisie_invalide_interrompt_le_traitement(self, tmp_path):
        traitement = TraitementPaie(config=creer_config(tmp_path))
        employes = employes_exemple() + [EmployePaie(id="e4", nom="Invalide", salaire_base=Decimal("-10"))]

        with pytest.raises(SaisieInvalideError, match="e4"):
            traitement.calculer_lot(employes)

        entries = traitement.audit.lire_journal()
        assert entries[-1]["resultat"] == "echec"

    def test_to_dict(self, tmp_path):
        resultat = TraitementPaie(config=creer_config(tmp_path)).calculer_lot(employes_exemple())
        data = resultat.to_dict()
        assert data["totaux"]["salaire_brut"] == 1_800_000
        assert data["lignes"][0]["nom"] == "Rakoto"
        json.dumps(data)


class TestChargerEmployes:
    """Tests de lecture du fichier des salaries."""

    def test_charger(self, tmp_path):
        chemin = tmp_path / "employes.json"
        chemin.write_text(json.dumps([
            {"id": "e1", "nom": "Rabe", "salaire_base": 300000,
             "indemnites": {"transport": 50000, "repas": 20000}},
            {"id": "e2", "nom": "Rakoto", "poste": "Enseignant", "salaire_base": 1000000},
        ]), encoding="utf-8")

        employes = charger_employes(chemin)

        assert [e.id for e in employes] == ["e1", "e2"]
        assert {i.type_indemnite for i in employes[0].indemnites} == {
            TypeIndemnite.TRANSPORT, TypeIndemnite.REPAS,
        }
        assert employes[1].salaire_base == 1_000_000

    def test_type_indemnite_inconnu(self, tmp_path):
        chemin = tmp_path / "employes.json"
        chemin.write_text(json.dumps([
            {"id": "e1", "salaire_base": 300000, "indemnites": {"voiture": 1}},
        ]), encoding="utf-8")
        with pytest.raises(ConfigError):
            charger_employes(chemin)

    def test_salaire_negatif(self, tmp_path):
        chemin = tmp_path / "employes.json"
        chemin.write_text(json.dumps([{"id": "e1", "salaire_base": -1}]), encoding="utf-8")
        with pytest.raises(ConfigError):
            charger_employes(chemin)

    @pytest.mark.parametrize("salaire", [True, "1000000", 1000000.0])
    def test_salaire_non_entier_refuse(self, tmp_path, salaire):
        chemin = tmp_path / "employes.json"
        chemin.write_text(json.dumps([{"id": "e1", "salaire_base": salaire}]), encoding="utf-8")
        with pytest.raises(ConfigError):
            charger_employes(chemin)

    @pytest.mark.parametrize("montant", [True, "50000"])
    def test_indemnite_non_entiere_refusee(self, tmp_path, montant):
        chemin = tmp_path / "employes.json"
        chemin.write_text(json.dumps([
            {"id": "e1", "salaire_base": 300000, "indemnites": {"transport": montant}},
        ]), encoding="utf-8")
        with pytest.raises(ConfigError):
            charger_employes(chemin)

    def test_pas_une_liste(self, tmp_path):
        chemin = tmp_path / "employes.json"
        chemin.write_text(json.dumps({"id": "e1"}), encoding="utf-8")
        with pytest.raises(ConfigError):
            charger_employes(chemin)
