from pydantic import BaseModel
from typing import Dict, Any, Optional


class ComponentConfig(BaseModel):
    """A model for a single component's configuration (ocr, generator, etc.)"""

    type: str
    config: Dict[str, Any] = {}


class OrganizationConfig(BaseModel):
    """How delivered documents are organized."""

    criteria: str = "date"


class PipelineConfig(BaseModel):
    """The top-level model for the entire pipeline.yaml configuration."""

    input_path: str
    output_dir: str = "./temp"
    output_format: str = "Word"
    organization: OrganizationConfig = OrganizationConfig()
    ocr: ComponentConfig = ComponentConfig(type="tesseract")
    generator: ComponentConfig = ComponentConfig(type="default")
    categorizer: Optional[ComponentConfig] = None
    delivery: ComponentConfig
