"""
Display field mapping - declarative category -> field table for registry manifests
"""

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import structlog
import yaml
from pydantic import BaseModel, Field

from meta_adapter.core.config import settings, get_absolute_path

logger = structlog.get_logger(__name__)


class DisplayField(BaseModel):
    key: str
    label: str
    format: Literal["text", "number", "currency", "percentage", "date"] = "text"


class CanvasDisplay(BaseModel):
    type: Literal["card", "table"] = "card"
    title: str
    subtitle: Optional[str] = None
    fields: List[DisplayField] = Field(default_factory=list)
    actions: List[Dict[str, str]] = Field(default_factory=lambda: [{"label": "Refresh"}])


class DisplayFieldMapping:
    """Category display table, loaded once from YAML"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = get_absolute_path(config_path or settings.DISPLAY_FIELDS_CONFIG_PATH)
        self.categories: Dict[str, List[DisplayField]] = {}
        self.table_categories: set = set()
        self.default_fields: List[DisplayField] = [DisplayField(key="data", label="Result")]
        self._load_config()

    def _load_config(self):
        """Load the mapping, keeping defaults when the file is missing or broken"""
        try:
            if not Path(self.config_path).exists():
                logger.warning("Display field config not found", path=str(self.config_path))
                return
            with open(self.config_path, "r") as f:
                config_data: Dict[str, Any] = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load display field config", path=str(self.config_path), error=str(e))
            return

        self.categories = {
            category.lower(): [DisplayField(**field) for field in fields or []]
            for category, fields in (config_data.get("categories") or {}).items()
        }
        self.table_categories = {c.lower() for c in config_data.get("table_categories") or []}
        if config_data.get("default_fields"):
            self.default_fields = [DisplayField(**field) for field in config_data["default_fields"]]

        logger.info("Display field config loaded",
                    path=str(self.config_path),
                    categories=len(self.categories))

    def fields_for(self, category: str) -> List[DisplayField]:
        return self.categories.get(category.lower(), self.default_fields)

    def layout_for(self, category: str) -> str:
        return "table" if category.lower() in self.table_categories else "card"

    def build_display(self, category: str, title: str, subtitle: Optional[str] = None) -> CanvasDisplay:
        return CanvasDisplay(
            type=self.layout_for(category),
            title=title,
            subtitle=subtitle,
            fields=self.fields_for(category),
        )
