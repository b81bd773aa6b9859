from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from typeforge.model import DEFAULT_ARRAY_COUNT, DEFAULT_MAX_DEPTH, ForgeConfig


class ForgeSettings(BaseModel):
    default_array_count: int = Field(DEFAULT_ARRAY_COUNT, ge=0)
    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=1)
    seed: Optional[int] = None
    locale: Optional[str] = None

    def to_forge_config(self) -> ForgeConfig:
        return ForgeConfig(
            default_array_count=self.default_array_count,
            max_depth=self.max_depth,
        )


class MockRequest(BaseModel):
    module_path: str
    type_name: str
    count: int = Field(1, ge=0)
    static: bool = False


class MockResponse(BaseModel):
    type: str
    module: str
    items: List[Any] = []
    registered: List[str] = []
