"""
Cost Model Loader
Reads the automated-workflow assumptions from YAML.

A missing or malformed file is not fatal: the loader logs a warning and
returns the built-in defaults, so the service always starts.
"""

import yaml
import logging
from typing import Any, Dict
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from invoice_roi.core.models import CostModel, DEFAULT_COST_MODEL

logger = logging.getLogger("CostModelLoader")
logger.setLevel(logging.INFO)


def _load_yaml(filepath: Path) -> Dict[str, Any]:
    """Load and parse a YAML configuration file into a dict."""
    try:
        if not filepath.exists():
            logger.warning(f"Cost model file not found: {filepath}. Using defaults.")
            return {}

        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            if not isinstance(data, dict):
                raise ValueError(f"YAML file {filepath.name} must parse to a dict.")
            return data

    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Failed to load {filepath.name}: {e}")
        return {}


def load_cost_model(filepath: Path) -> CostModel:
    """
    Build a CostModel from the `cost_model` section of a YAML file.

    Keys absent from the file keep their default values.
    """
    section = _load_yaml(Path(filepath)).get("cost_model") or {}
    if not section:
        return DEFAULT_COST_MODEL

    try:
        model = CostModel(**section)
    except (PydanticValidationError, TypeError) as e:
        logger.warning(f"Invalid cost model in {filepath}: {e}. Using defaults.")
        return DEFAULT_COST_MODEL

    logger.info(
        f"Cost model loaded: automated_cost_per_invoice={model.automated_cost_per_invoice}, "
        f"error_rate_auto={model.error_rate_auto}, "
        f"time_saved_per_invoice_minutes={model.time_saved_per_invoice_minutes}, "
        f"min_roi_boost_factor={model.min_roi_boost_factor}"
    )
    return model
