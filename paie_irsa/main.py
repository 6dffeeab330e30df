"""Point d'entree CLI pour le calcul de paie IRSA.

Usage :
    python -m paie_irsa.main irsa 450000
    python -m paie_irsa.main paie 1000000 --indemnite transport=50000
    python -m paie_irsa.main lot employes.json --format json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from paie_irsa.config.constants import TypeIndemnite
from paie_irsa.config.parametres import ParametresFinanciers, charger_parametres
from paie_irsa.config.settings import AppConfig
from paie_irsa.core.exceptions import PaieIRSAError, SaisieInvalideError
from paie_irsa.core.traitement import TraitementPaie, charger_employes
from paie_irsa.models.paie import CalculPaie, Indemnite, ResultatIRSA, ResultatTraitement
from paie_irsa.rules.irsa import calculer_irsa
from paie_irsa.rules.paie import calculer_paie, salaire_brut_total
from paie_irsa.utils.number_utils import formater_montant, parser_montant


def configurer_logging(verbose: bool = False) -> None:
    """Configure le logging de l'application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)-7s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def parser_indemnite(valeur: str) -> Indemnite:
    """Parse une indemnite saisie sous la forme TYPE=MONTANT."""
    type_str, sep, montant = valeur.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Format attendu TYPE=MONTANT : {valeur!r}")
    try:
        type_indemnite = TypeIndemnite(type_str.strip().lower())
    except ValueError:
        types = ", ".join(t.value for t in TypeIndemnite)
        raise argparse.ArgumentTypeError(f"Type d'indemnite inconnu {type_str!r} (acceptes : {types})")
    try:
        return Indemnite(type_indemnite=type_indemnite, montant=parser_montant(montant))
    except SaisieInvalideError as e:
        raise argparse.ArgumentTypeError(str(e))


def creer_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paie_irsa",
        description="Calcul de l'IRSA et de la paie (CNAPS, OSTIE) a Madagascar.",
    )
    parser.add_argument(
        "--parametres", "-p",
        type=Path,
        default=None,
        help="Fichier JSON des parametres financiers (bareme, CNAPS, OSTIE)",
    )
    parser.add_argument(
        "--format", "-f",
        choices=["texte", "json"],
        default="texte",
        help="Format de sortie (defaut: texte)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Mode verbeux (debug)",
    )
    sub = parser.add_subparsers(dest="commande", required=True)

    p_irsa = sub.add_parser("irsa", help="Calcule l'IRSA d'un salaire imposable")
    p_irsa.add_argument("montant", help="Salaire imposable (MGA)")

    p_paie = sub.add_parser("paie", help="Calcule la paie complete d'un salaire brut")
    p_paie.add_argument("salaire_base", help="Salaire de base (MGA)")
    p_paie.add_argument(
        "--indemnite", "-i",
        action="append",
        type=parser_indemnite,
        default=[],
        metavar="TYPE=MONTANT",
        help="Indemnite ajoutee au brut (transport, logement, repas, performance, autre)",
    )

    p_lot = sub.add_parser("lot", help="Traitement de paie d'une liste de salaries (JSON)")
    p_lot.add_argument("fichier", type=Path, help="Fichier JSON des salaries")
    p_lot.add_argument(
        "--journal",
        type=Path,
        default=None,
        help="Chemin du journal d'audit (defaut: data/audit_paie.log)",
    )
    return parser


def formater_irsa(resultat: ResultatIRSA) -> str:
    lignes = [f"Salaire imposable : {formater_montant(resultat.montant_imposable)}"]
    for i, t in enumerate(resultat.tranches, 1):
        borne_sup = formater_montant(t.borne_superieure) if t.borne_superieure is not None else "illimitee"
        lignes.append(
            f"  Tranche {i} : {formater_montant(t.borne_inferieure)} - {borne_sup} ({t.taux}%) "
            f"sur {formater_montant(t.montant_tranche)} = {formater_montant(t.impot_tranche)}"
        )
    lignes.append(f"IRSA : {formater_montant(resultat.montant_total)}")
    lignes.append(f"Taux effectif : {resultat.taux_effectif}%")
    return "\n".join(lignes)


def formater_paie(calcul: CalculPaie) -> str:
    lignes = [f"Salaire brut : {formater_montant(calcul.salaire_brut)}"]
    for c in calcul.cotisations:
        etat = "" if c.regime.actif else " (inactif)"
        lignes.append(
            f"  {c.regime.libelle}{etat} : salarial {formater_montant(c.montant_salarial)}, "
            f"patronal {formater_montant(c.montant_patronal)}"
        )
    lignes.append(formater_irsa(calcul.irsa))
    lignes.append(f"Total retenues : {formater_montant(calcul.total_retenues_salariales)}")
    lignes.append(f"Salaire net : {formater_montant(calcul.salaire_net)}")
    lignes.append(f"Cout total employeur : {formater_montant(calcul.cout_total_employeur)}")
    return "\n".join(lignes)


def formater_traitement(resultat: ResultatTraitement) -> str:
    lignes = [f"Traitement {resultat.session_id} : {len(resultat.lignes)} salarie(s)"]
    for ligne in resultat.lignes:
        lignes.append(
            f"  {ligne.employe.id} {ligne.employe.nom} : brut {formater_montant(ligne.calcul.salaire_brut)}, "
            f"net {formater_montant(ligne.calcul.salaire_net)}"
        )
    lignes.append(f"Total brut : {formater_montant(resultat.total_brut)}")
    lignes.append(f"Total IRSA : {formater_montant(resultat.total_irsa)}")
    lignes.append(f"Total net : {formater_montant(resultat.total_net)}")
    lignes.append(f"Cout total employeur : {formater_montant(resultat.cout_total_employeur)}")
    return "\n".join(lignes)


def executer(args: argparse.Namespace) -> str:
    """Execute la commande et retourne la sortie a afficher."""
    parametres = charger_parametres(args.parametres) if args.parametres else ParametresFinanciers()
    bareme = parametres.bareme()
    regimes = parametres.regimes()

    if args.commande == "irsa":
        resultat = calculer_irsa(parser_montant(args.montant), bareme)
        return json.dumps(resultat.to_dict(), ensure_ascii=False, indent=2) \
            if args.format == "json" else formater_irsa(resultat)

    if args.commande == "paie":
        brut = salaire_brut_total(parser_montant(args.salaire_base), args.indemnite)
        calcul = calculer_paie(brut, regimes, bareme)
        return json.dumps(calcul.to_dict(), ensure_ascii=False, indent=2) \
            if args.format == "json" else formater_paie(calcul)

    config = AppConfig(data_dir=args.journal.parent, audit_log_path=args.journal) if args.journal else AppConfig()
    traitement = TraitementPaie(bareme=bareme, regimes=regimes, config=config)
    resultat = traitement.calculer_lot(charger_employes(args.fichier))
    return json.dumps(resultat.to_dict(), ensure_ascii=False, indent=2) \
        if args.format == "json" else formater_traitement(resultat)


def main(argv=None) -> int:
    """Point d'entree principal."""
    parser = creer_argument_parser()
    args = parser.parse_args(argv)

    configurer_logging(args.verbose)
    logger = logging.getLogger("paie_irsa")

    try:
        print(executer(args))
        return 0
    except PaieIRSAError as e:
        logger.error("Erreur de calcul : %s", e)
        return 1
    except Exception as e:
        logger.exception("Erreur inattendue : %s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
