"""Product search over the catalogue.

Filtering runs in memory over the stored variants: text match (exact
substring on name and subtitle, or word match on name, subtitle, colour
and description), colour, size in stock, price range, discount and
gender.  Results are ordered by popularity unless a price sort is asked
for, then paged with ``skip`` and ``max_search_results``.
"""

import re
from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.variant import ProductVariant
from storefront.config import settings as default_settings
from storefront.domain import logger

GENDER_FILTERS = ("all", "null", "male", "female")
PRICE_SORTS = ("asc", "desc")
MIN_QUERY_LENGTH = 3

_SIZE_SUFFIX = re.compile(r"\s*\(.*?\)\s*")
_WORD = re.compile(r"\w+")


@dataclass(frozen=True)
class SearchQuery:
    q: str | None = None
    exact_mode: bool = False
    colors: tuple = field(default=())
    sizes: tuple = field(default=())
    min_price: float | None = None
    max_price: float | None = None
    discount: bool = False
    gender: str | None = None
    sort_by_price: str | None = None
    skip: int = 0


def strip_size_suffix(size: str) -> str:
    """``"42 (EU)"`` -> ``"42"``."""
    return _SIZE_SUFFIX.sub(" ", size).strip()


class ProductSearch:
    def __init__(self, settings=None):
        self.settings = settings or default_settings

    def search_colors(self, text: str) -> list[str]:
        """Known colour names mentioned in ``text``, in order of appearance."""
        words = [w.lower() for w in _WORD.findall(text or "")]
        return list(dict.fromkeys(w for w in words if w in self.settings.search_colors))

    def search(self, query: SearchQuery) -> dict:
        self._validate(query)

        colors = self.search_colors(" ".join([*query.colors, query.q or ""]))
        if query.colors and not self.search_colors(" ".join(query.colors)):
            raise ValidationError(
                {"colors": [f"Unknown colors, expected any of: {', '.join(self.settings.search_colors)}"]}
            )

        matches = [v for v in self._candidates() if self._matches(v, query, colors)]

        if query.sort_by_price:
            matches.sort(key=lambda v: v.price, reverse=query.sort_by_price == "desc")
        else:
            matches.sort(key=lambda v: v.clicks or 0, reverse=True)

        if not 0 <= query.skip <= len(matches):
            raise ValidationError({"skip": [f"skip must be between 0 and {len(matches)}"]})

        total_count = len(matches) - query.skip
        page = matches[query.skip : query.skip + self.settings.max_search_results]
        all_sizes = self._sizes_in_stock(page)

        logger.debug("Product search", q=query.q, matches=len(matches), returned=len(page))
        return {
            "totalCount": total_count,
            "length": len(page),
            "allSizes": all_sizes,
            "products": [v.to_summary() for v in page],
        }

    def available_sizes(self, q: str | None = None) -> list[str]:
        """Distinct in-stock size labels of the variants matching ``q``."""
        query = SearchQuery(q=q) if q else SearchQuery()
        variants = [v for v in self._candidates() if self._matches_text(v, query)]
        return list(dict.fromkeys(strip_size_suffix(size) for size in self._sizes_in_stock(variants)))

    def get_variant(self, variant_id) -> dict:
        try:
            variant = current_domain.repository_for(ProductVariant).get(variant_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError(f"Product variant {variant_id} not found") from None
        return variant.to_detail()

    def _validate(self, query: SearchQuery):
        errors = {}
        if query.q is not None and len(query.q.strip()) < MIN_QUERY_LENGTH:
            errors["q"] = [f"Query must be at least {MIN_QUERY_LENGTH} characters"]
        if query.gender is not None and query.gender not in GENDER_FILTERS:
            errors["gender"] = [f"Gender must be one of: {', '.join(GENDER_FILTERS)}"]
        if query.sort_by_price is not None and query.sort_by_price not in PRICE_SORTS:
            errors["sortByPrice"] = ["sortByPrice must be asc or desc"]
        if query.min_price is not None and query.min_price < 0:
            errors["minPrice"] = ["minPrice must not be negative"]
        if query.min_price is not None and query.max_price is not None and query.max_price < query.min_price:
            errors["maxPrice"] = ["maxPrice must not be lower than minPrice"]
        if errors:
            raise ValidationError(errors)

    def _candidates(self) -> list[ProductVariant]:
        repo = current_domain.repository_for(ProductVariant)
        return [v for v in repo.find_all() if v.image_list]

    def _matches(self, variant: ProductVariant, query: SearchQuery, colors: list[str]) -> bool:
        if not self._matches_text(variant, query):
            return False
        if colors and not any(c in (variant.color or "").lower() for c in colors):
            return False
        if query.sizes and not set(query.sizes) & set(variant.in_stock_sizes()):
            return False
        if query.min_price is not None and variant.price < query.min_price:
            return False
        if query.max_price is not None and variant.price > query.max_price:
            return False
        if query.discount and not variant.old_price:
            return False
        return self._matches_gender(variant, query.gender)

    def _matches_text(self, variant: ProductVariant, query: SearchQuery) -> bool:
        if not query.q:
            return True

        q = query.q.strip().lower()
        if query.exact_mode:
            return any(q in (text or "").lower() for text in (variant.name, variant.sub_title))

        words = set()
        for text in (variant.name, variant.sub_title, variant.color, variant.description):
            words.update(w.lower() for w in _WORD.findall(text or ""))
        return any(token in words for token in _WORD.findall(q))

    @staticmethod
    def _matches_gender(variant: ProductVariant, gender: str | None) -> bool:
        if gender is None or gender == "all":
            return True
        if gender == "null":
            return variant.gender is None
        return variant.gender == gender

    @staticmethod
    def _sizes_in_stock(variants) -> list[str]:
        totals = {}
        for variant in variants:
            for stock in variant.sizes:
                totals[stock.size] = totals.get(stock.size, 0) + stock.count
        return [size for size, count in totals.items() if count > 0]
