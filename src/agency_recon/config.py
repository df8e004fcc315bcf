"""Configuration loader and validation for reconciliation settings."""

from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class FileInputConfig(BaseModel):
    """How to read one kind of input file (CSV or Excel)."""

    encoding: str = "utf-8"
    delimiter: str = ","
    sheet_name: Optional[str] = None

    # strptime format tried before the built-in date patterns
    date_format: Optional[str] = None
    column_mappings: dict[str, str] = Field(default_factory=dict)


class InputConfig(BaseModel):
    """Configuration for input file parsing."""

    transactions: FileInputConfig = Field(
        default_factory=lambda: FileInputConfig(
            column_mappings={
                "id": "id",
                "date": "transaction_date",
                "description": "description",
                "amount": "amount",
                "bank_name": "bank_name",
                "group_id": "package_id",
            }
        )
    )
    records: FileInputConfig = Field(
        default_factory=lambda: FileInputConfig(
            column_mappings={
                "id": "id",
                "kind": "type",
                "amount": "amount",
                "date": "invoice_date",
                "vendor_or_client": "merchant",
                "invoice_number": "invoice_number",
                "description": "description",
                "group_id": "package_id",
            }
        )
    )


class SuggestionSettings(BaseModel):
    """Settings for the interactive suggestion ranker (0-1 scale)."""

    amount_weight: float = Field(default=0.40, gt=0)
    date_weight: float = Field(default=0.35, ge=0)
    text_weight: float = Field(default=0.25, ge=0)
    min_confidence: float = Field(default=0.5, ge=0, le=1)
    max_suggestions: int = Field(default=5, ge=0)
    high_threshold: float = Field(default=0.9, ge=0, le=1)
    medium_threshold: float = Field(default=0.7, ge=0, le=1)

    @model_validator(mode="after")
    def _check_thresholds(self) -> "SuggestionSettings":
        if self.medium_threshold > self.high_threshold:
            raise ValueError("medium_threshold must not exceed high_threshold")
        return self


class BatchSettings(BaseModel):
    """Settings for the batch reconciler (0-100 point scale)."""

    min_confidence: float = Field(default=80, ge=0, le=100)
    suggest_threshold: float = Field(default=50, ge=0, le=100)
    dry_run: bool = False


class SheetConfig(BaseModel):
    """Configuration for a report sheet."""

    enabled: bool = True
    name: str


class SheetsConfig(BaseModel):
    """Configuration for all report sheets."""

    summary: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Summary"))
    confirmed: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Confirmed Matches")
    )
    suggested: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Suggested Matches")
    )
    review: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Review Suggestions")
    )


class OutputConfig(BaseModel):
    """Configuration for output."""

    sheets: SheetsConfig = Field(default_factory=SheetsConfig)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    input: InputConfig = Field(default_factory=InputConfig)
    suggestions: SuggestionSettings = Field(default_factory=SuggestionSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return ReconConfig().model_dump(exclude={"config_file_path"})


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {config_path}"
            )

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

    yaml_content = """# Agency reconciliation configuration
# suggestions: interactive ranking, 0-1 scale
# batch: automatic matching, 0-100 point scale

"""
    yaml_content += yaml.dump(
        config_dict, default_flow_style=False, sort_keys=False, allow_unicode=True
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
