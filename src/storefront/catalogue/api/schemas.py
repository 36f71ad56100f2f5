"""Pydantic response schemas for the catalogue API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SizeCount(BaseModel):
    size: str
    count: int


class Availability(BaseModel):
    available: bool
    details: str | None = None


class VariantSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    product_ref_id: str = Field(..., alias="productRefId")
    name: str
    sub_title: str | None = Field(None, alias="subTitle")
    color: str | None = None
    gender: str | None = None
    currency: str
    price: float
    old_price: float | None = Field(None, alias="oldPrice")
    sizes: list[SizeCount]
    images: list[dict]
    available: Availability


class SearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_count: int = Field(..., alias="totalCount")
    length: int
    all_sizes: list[str] = Field(..., alias="allSizes")
    products: list[VariantSummary]


class SizesResponse(BaseModel):
    sizes: list[str]
