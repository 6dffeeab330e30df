"""Configuration globale de l'application."""

from pathlib import Path
from dataclasses import dataclass, field


@dataclass
class CalculConfig:
    """Configuration du calcul de paie."""
    journaliser: bool = True


@dataclass
class AppConfig:
    """Configuration principale de l'application."""
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent.parent.parent)
    data_dir: Path = field(default=None)
    audit_log_path: Path = field(default=None)

    calcul: CalculConfig = field(default_factory=CalculConfig)

    def __post_init__(self):
        if self.data_dir is None:
            self.data_dir = self.base_dir / "data"
        if self.audit_log_path is None:
            self.audit_log_path = self.data_dir / "audit_paie.log"

        self.data_dir.mkdir(parents=True, exist_ok=True)
