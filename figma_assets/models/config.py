"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

import re

from pydantic import BaseModel, Field, field_validator, model_validator

# Figma node ids look like "1:2" or "I12:34;56:78" for instance sublayers
NODE_ID_PATTERN = re.compile(r"^I?\d+[:\-]\d+(?:;\d+[:\-]\d+)*$")


class FigmaConfig(BaseModel):
    """A validated configuration model for the download pipeline."""

    # Authentication & API
    token: str = ""
    file_key: str = ""

    # Export Settings
    node_ids: list[str] = Field(default_factory=list)
    scale: float = 1.0

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("scale")
    @classmethod
    def validate_scale(cls, v: float) -> float:
        """Figma renders images between 1% and 400% of their original size."""
        if v < 0.01 or v > 4:
            raise ValueError("Scale must be between 0.01 and 4.")
        return v

    @field_validator("node_ids")
    @classmethod
    def validate_node_ids(cls, v: list[str]) -> list[str]:
        """Normalizes URL-style ids ('1-2') to API ids ('1:2')."""
        normalized = []
        for node_id in v:
            node_id = node_id.strip()
            if not node_id:
                continue
            if not NODE_ID_PATTERN.match(node_id):
                raise ValueError(f"Invalid node id: {node_id!r}")
            normalized.append(node_id.replace("-", ":"))
        return list(dict.fromkeys(normalized))

    @model_validator(mode="after")
    def validate_auth_and_file(self) -> "FigmaConfig":
        """Validates that the token and file key are present."""
        if not self.token:
            raise ValueError(
                "Figma token not configured. Run 'figma-assets init' or set "
                "FIGMA_TOKEN."
            )
        if not self.file_key:
            raise ValueError(
                "Figma file key not configured. Run 'figma-assets init', set "
                "FIGMA_FILE_KEY or pass --file-key."
            )
        return self

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
