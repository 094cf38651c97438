"""Configuration loader and validation for reconciliation settings."""

from decimal import Decimal
from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class AmountTier(BaseModel):
    """Score awarded when the amount difference is strictly below a limit."""

    max_difference: Decimal
    score: float


class DateTier(BaseModel):
    """Score awarded when the date gap is at most a number of days."""

    max_days: int
    score: float


class MatchingSettings(BaseModel):
    """Thresholds and weights used by the scorer and the matcher."""

    exact_confidence: float = 0.98
    exact_amount_tolerance: Decimal = Decimal("0.01")
    amount_tiers: list[AmountTier] = Field(
        default_factory=lambda: [
            AmountTier(max_difference=Decimal("0.01"), score=0.4),
            AmountTier(max_difference=Decimal("1"), score=0.3),
            AmountTier(max_difference=Decimal("10"), score=0.2),
        ]
    )
    amount_hard_reject: Decimal = Decimal("100")
    date_tiers: list[DateTier] = Field(
        default_factory=lambda: [
            DateTier(max_days=0, score=0.3),
            DateTier(max_days=2, score=0.2),
            DateTier(max_days=5, score=0.1),
        ]
    )
    date_hard_reject_days: int = 10
    description_weight: float = 0.3
    min_token_length: int = 3
    fuzzy_acceptance_threshold: float = 0.7
    fuzzy_type_threshold: float = 0.9


class SuggestionSettings(BaseModel):
    """Settings for suggestions derived from unmatched transactions."""

    missing_amount_threshold: Decimal = Decimal("100")
    missing_book_confidence: float = 0.8
    missing_bank_confidence: float = 0.7
    duplicate_amount_tolerance: Decimal = Decimal("0.01")
    duplicate_near_days: int = 1
    duplicate_near_similarity: float = 0.8
    duplicate_far_days: int = 3
    duplicate_far_similarity: float = 0.9
    duplicate_confidence_cap: float = 0.95
    duplicate_date_gap_factor: float = 0.9


class RiskSettings(BaseModel):
    """Thresholds and weights for the risk assessment."""

    high_value_threshold: Decimal = Decimal("10000")
    round_number_unit: Decimal = Decimal("100")
    round_number_minimum: Decimal = Decimal("1000")
    round_number_count: int = 3
    low_confidence_threshold: float = 0.8
    low_confidence_ratio: float = 0.3
    variance_threshold: Decimal = Decimal("5000")
    unmatched_ratio: float = 0.2
    fraud_weight: float = 0.4
    pattern_weight: float = 0.3
    compliance_weight: float = 0.2
    variance_weight: float = 0.1
    variance_normalizer: Decimal = Decimal("50000")


class DisputeSettings(BaseModel):
    """Settings for dispute detection over recent bank activity."""

    window_days: int = 30
    unusual_amount_threshold: Decimal = Decimal("5000")
    business_hours_start: int = 6
    business_hours_end: int = 20
    # Day gaps must be strictly below these limits
    unauthorized_book_window_days: int = 2
    unauthorized_amount_tolerance: Decimal = Decimal("0.01")
    discrepancy_window_days: int = 3
    discrepancy_similarity: float = 0.8
    discrepancy_amount_tolerance: Decimal = Decimal("1")
    unauthorized_success_probability: float = 0.7
    discrepancy_success_probability: float = 0.85
    unauthorized_resolution_timeline: str = "30-45 days"
    discrepancy_resolution_timeline: str = "15-20 days"


class InputConfig(BaseModel):
    """Configuration for CSV input files."""

    encoding: str = "utf-8"
    delimiter: str = ","
    date_format: str = "%Y-%m-%d"
    bank_columns: dict[str, str] = Field(
        default_factory=lambda: {
            "id": "id",
            "account_id": "account_id",
            "date": "date",
            "posted_at": "posted_at",
            "description": "description",
            "amount": "amount",
            "type": "type",
            "reference_number": "reference_number",
            "category": "category",
            "statement_line": "statement_line",
            "reconciled": "reconciled",
        }
    )
    book_columns: dict[str, str] = Field(
        default_factory=lambda: {
            "id": "id",
            "account_id": "account_id",
            "date": "date",
            "description": "description",
            "amount": "amount",
            "reference_number": "reference",
            "reconciliation_status": "reconciliation_status",
        }
    )
    account_columns: dict[str, str] = Field(
        default_factory=lambda: {
            "id": "id",
            "name": "name",
            "current_balance": "current_balance",
        }
    )


class ExcelOutputConfig(BaseModel):
    """Configuration for Excel output."""

    filename_template: str = "reconciliation_{account}_{date}_{time}.xlsx"


class SheetConfig(BaseModel):
    """Configuration for a report sheet."""

    enabled: bool = True
    name: str


class SheetsConfig(BaseModel):
    """Configuration for all report sheets."""

    summary: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Summary"))
    matches: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Matches"))
    unmatched_bank: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Unmatched Bank")
    )
    unmatched_book: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Unmatched Book")
    )
    suggestions: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Suggestions")
    )
    risk: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Risk Assessment"))
    disputes: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Disputes"))


class OutputConfig(BaseModel):
    """Configuration for output."""

    excel: ExcelOutputConfig = Field(default_factory=ExcelOutputConfig)
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Rotating log file; console only when unset
    file: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    suggestions: SuggestionSettings = Field(default_factory=SuggestionSettings)
    risk: RiskSettings = Field(default_factory=RiskSettings)
    disputes: DisputeSettings = Field(default_factory=DisputeSettings)
    input: InputConfig = Field(default_factory=InputConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a plain dictionary."""
    defaults = ReconConfig().model_dump(mode="json", exclude={"config_file_path"})
    return defaults


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file cannot be parsed or holds invalid values
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"Configuration file {config_path} must contain a mapping"
            )

        # Deep merge user config into defaults
        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return ReconConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    config_dict = get_default_config()

    yaml_content = """# Bank/book reconciliation configuration
# Generated configuration file - customize as needed

"""
    yaml_content += yaml.dump(config_dict, default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
