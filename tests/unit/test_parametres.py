"""Tests du chargement des parametres financiers."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import json
from decimal import Decimal

import pytest

from paie_irsa.config.constants import RegimeType
from paie_irsa.config.parametres import (
    ParametresFinanciers, charger_parametres, parametres_depuis_dict,
)
from paie_irsa.core.exceptions import BaremeInvalideError, ConfigError
from paie_irsa.rules.irsa import calculer_irsa, get_bareme_irsa

BAREME_SIMPLE = {
    "nom": "Bareme test",
    "tranches": [
        {"min": 0, "max": 100000, "taux": 0, "description": "Exonere"},
        {"min": 100001, "max": None, "taux": 10, "description": "10%"},
    ],
}


class TestParametresFinanciers:
    """Tests des parametres financiers."""

    def test_valeurs_de_reference(self):
        parametres = ParametresFinanciers()
        assert parametres.bareme() is get_bareme_irsa()
        cnaps, ostie = parametres.regimes()
        assert cnaps.code == RegimeType.CNAPS
        assert cnaps.taux_patronal == Decimal("13")
        assert ostie.taux_patronal == Decimal("5")
        assert ostie.plafond == Decimal("8000000")

    def test_dictionnaire_vide(self):
        parametres = parametres_depuis_dict({})
        assert parametres.regimes() == ParametresFinanciers().regimes()

    def test_bareme_personnalise(self):
        parametres = parametres_depuis_dict({"bareme": BAREME_SIMPLE})
        bareme = parametres.bareme()
        assert bareme.nom == "Bareme test"
        assert len(bareme) == 2
        assert calculer_irsa(200_000, bareme).montant_total == 10_000

    def test_regime_inactif(self):
        parametres = parametres_depuis_dict({
            "ostie": {"employeeRate": 1, "employerRate": 5, "ceiling": 8000000, "isActive": False},
        })
        _, ostie = parametres.regimes()
        assert ostie.actif is False
        assert ostie.libelle == "OSTIE"

    def test_taux_hors_limites(self):
        with pytest.raises(ConfigError):
            parametres_depuis_dict({"cnaps": {"employeeRate": 150, "employerRate": 13}})

    def test_champ_inconnu(self):
        with pytest.raises(ConfigError):
            parametres_depuis_dict({"cnaps": {"employeeRate": 1, "employerRate": 13, "foo": 1}})

    def test_bareme_non_contigu(self):
        bareme = {
            "tranches": [
                {"min": 0, "max": 100000, "taux": 0},
                {"min": 200000, "max": None, "taux": 10},
            ],
        }
        with pytest.raises(BaremeInvalideError):
            parametres_depuis_dict({"bareme": bareme})

    def test_bareme_sans_tranche(self):
        with pytest.raises(ConfigError):
            parametres_depuis_dict({"bareme": {"tranches": []}})

    def test_pas_un_objet(self):
        with pytest.raises(ConfigError):
            parametres_depuis_dict([1, 2])


class TestChargerParametres:
    """Tests de lecture du fichier JSON."""

    def test_charger_fichier(self, tmp_path):
        chemin = tmp_path / "parametres.json"
        chemin.write_text(json.dumps({
            "bareme": BAREME_SIMPLE,
            "cnaps": {"employeeRate": 2, "employerRate": 12, "isActive": True},
        }), encoding="utf-8")

        parametres = charger_parametres(chemin)

        cnaps, _ = parametres.regimes()
        assert cnaps.taux_salarial == Decimal("2")
        assert cnaps.plafond is None
        assert parametres.bareme().seuil_exoneration == 100_000

    def test_fichier_introuvable(self, tmp_path):
        with pytest.raises(ConfigError):
            charger_parametres(tmp_path / "absent.json")

    def test_json_invalide(self, tmp_path):
        chemin = tmp_path / "parametres.json"
        chemin.write_text("{pas du json", encoding="utf-8")
        with pytest.raises(ConfigError):
            charger_parametres(chemin)
