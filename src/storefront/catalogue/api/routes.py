"""FastAPI endpoints for product search and product pages."""

from fastapi import APIRouter, Depends, Query

from storefront.catalogue.api.schemas import SearchResponse, SizesResponse, VariantSummary
from storefront.catalogue.search import ProductSearch, SearchQuery
from storefront.services import get_product_search

product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("/search", response_model=SearchResponse, response_model_by_alias=True)
async def search_products(
    q: str | None = None,
    skip: int = 0,
    gender: str | None = None,
    colors: list[str] = Query(default=[]),
    sizes: list[str] = Query(default=[]),
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    discount: bool = False,
    sort_by_price: str | None = Query(None, alias="sortByPrice"),
    exact_mode: bool = Query(False, alias="exactMode"),
    search: ProductSearch = Depends(get_product_search),
):
    query = SearchQuery(
        q=q,
        exact_mode=exact_mode,
        colors=tuple(colors),
        sizes=tuple(sizes),
        min_price=min_price,
        max_price=max_price,
        discount=discount,
        gender=gender,
        sort_by_price=sort_by_price,
        skip=skip,
    )
    return search.search(query)


@product_router.get("/sizes", response_model=SizesResponse)
async def available_sizes(q: str | None = None, search: ProductSearch = Depends(get_product_search)):
    return SizesResponse(sizes=search.available_sizes(q))


@product_router.get("/{variant_id}", response_model=VariantSummary, response_model_by_alias=True)
async def get_product(variant_id: str, search: ProductSearch = Depends(get_product_search)):
    return search.get_variant(variant_id)
