"""
Configuration and constants for the DOCX export pipeline.

This module provides:
- Export settings (target profile, file name, document metadata)
- Environment overrides
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import logging

logger = logging.getLogger("lipikor")


# ============================================================================
# Export Configuration
# ============================================================================

@dataclass
class ExportConfig:
    """DOCX export configuration."""
    # Target consumer application: word (profile A) or gdocs (profile B)
    target_app: str = "gdocs"
    output_filename: str = "extracted_text.docx"
    title: str = "Extracted Document Content"
    creator: str = "Smart Lipikor"
    # Timestamp stamped into the package; None = fixed epoch
    timestamp: Optional[datetime] = None


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    export: ExportConfig = field(default_factory=ExportConfig)

    # Global settings
    debug_mode: bool = False


# ============================================================================
# Default Configuration Instance
# ============================================================================

def get_config() -> PipelineConfig:
    """Get the default pipeline configuration with environment overrides."""
    config = PipelineConfig()

    target = os.environ.get("LIPIKOR_TARGET_APP", "").lower()
    if target in ("word", "gdocs"):
        config.export.target_app = target

    if os.environ.get("LIPIKOR_DEBUG", "").lower() == "true":
        config.debug_mode = True

    # Reproducible-builds convention for the package timestamp
    epoch = os.environ.get("SOURCE_DATE_EPOCH")
    if epoch:
        try:
            stamp = datetime.fromtimestamp(int(epoch), tz=timezone.utc)
            config.export.timestamp = stamp.replace(tzinfo=None)
        except (ValueError, OverflowError, OSError):
            logger.warning(f"Ignoring invalid SOURCE_DATE_EPOCH: {epoch!r}")

    return config
