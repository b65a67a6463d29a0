# gallery/utils/printing.py
"""
Print-on-demand adapters. Each artwork product is published to Printful and
Printify; a product type counts as created when at least one accepts it.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional

import httpx

from gallery.core.config import settings

logger = logging.getLogger(__name__)

PRODUCT_CATALOG = {
    "canvas": {
        "name": "Canvas Print",
        "base_price": 89,
        "description": "Premium canvas print with wooden frame",
        "sizes": ["16x20", "20x24", "24x36"],
        "recommended": True,
    },
    "poster": {
        "name": "Art Poster",
        "base_price": 25,
        "description": "High-quality paper poster",
        "sizes": ["18x24", "24x36", "36x48"],
        "recommended": True,
    },
    "shirt": {
        "name": "Art T-Shirt",
        "base_price": 35,
        "description": "Soft cotton t-shirt with artwork",
        "sizes": ["S", "M", "L", "XL", "XXL"],
        "recommended": False,
    },
    "mug": {
        "name": "Art Mug",
        "base_price": 18,
        "description": "Ceramic mug with mystical artwork",
        "sizes": ["11oz", "15oz"],
        "recommended": False,
    },
    "phone-case": {
        "name": "Phone Case",
        "base_price": 22,
        "description": "Protective case with artwork",
        "sizes": ["iPhone", "Samsung"],
        "recommended": False,
    },
    "sticker": {
        "name": "Sticker Pack",
        "base_price": 8,
        "description": "Vinyl stickers perfect for laptops",
        "sizes": ["3x3", "4x4", "6x6"],
        "recommended": True,
    },
}

PRINTFUL_VARIANTS = {
    "canvas": 7679,
    "poster": 1,
    "shirt": 71,
    "mug": 19,
    "phone-case": 266,
    "sticker": 641,
}

PRINTIFY_BLUEPRINTS = {
    "canvas": 384,
    "poster": 5,
    "shirt": 6,
    "mug": 15,
    "phone-case": 26,
    "sticker": 642,
}
PRINTIFY_VARIANTS = {
    "canvas": 63217,
    "poster": 17241,
    "shirt": 17241,
    "mug": 46657,
    "phone-case": 45270,
    "sticker": 89731,
}
PRINTIFY_PROVIDER_ID = 1


class PrintProviderError(Exception):
    """A print provider rejected a request or could not be reached."""


def retail_price(product_type: str) -> float:
    return float(PRODUCT_CATALOG.get(product_type, {}).get("base_price", 25))


def absolute_artwork_url(url: str) -> str:
    """Providers download the artwork themselves, so local URLs get the public host."""
    if url.startswith("/"):
        return f"{settings.app_url.rstrip('/')}{url}"
    return url


class _ProviderClient:
    name = "provider"
    base_url = ""

    def __init__(self, api_key: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.transport = transport

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, endpoint: str, payload: Optional[dict] = None) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=settings.print_provider_timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(method, endpoint, json=payload)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise PrintProviderError(
                f"{self.name} API error: {e.response.status_code} {e.response.reason_phrase}"
            )
        except httpx.HTTPError as e:
            raise PrintProviderError(f"{self.name} API unreachable: {e}")


class PrintfulClient(_ProviderClient):
    name = "Printful"
    base_url = "https://api.printful.com"

    def __init__(self, api_key: str, store_id: str = "", transport=None):
        super().__init__(api_key, transport)
        self.store_id = store_id

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.store_id:
            headers["X-PF-Store-Id"] = self.store_id
        return headers

    async def create_product(self, artwork_url: str, product_type: str, title: str) -> str:
        payload = {
            "sync_product": {"name": f"{title} - {product_type}", "thumbnail": artwork_url},
            "sync_variants": [
                {
                    "retail_price": f"{retail_price(product_type):.2f}",
                    "variant_id": PRINTFUL_VARIANTS.get(product_type, 1),
                    "files": [
                        {
                            "type": "default",
                            "url": artwork_url,
                            "options": [{"id": "template_type", "value": "native"}],
                        }
                    ],
                }
            ],
        }
        data = await self._request("POST", "/store/products", payload)
        return str(data["result"]["id"])


class PrintifyClient(_ProviderClient):
    name = "Printify"
    base_url = "https://api.printify.com/v1"

    def __init__(self, api_key: str, shop_id: str = "", transport=None):
        super().__init__(api_key, transport)
        self.shop_id = shop_id

    def is_configured(self) -> bool:
        return bool(self.api_key and self.shop_id)

    async def upload_image(self, image_url: str) -> str:
        data = await self._request(
            "POST",
            "/uploads/images.json",
            {"file_name": f"artwork_{int(time.time() * 1000)}.jpg", "url": image_url},
        )
        return str(data["id"])

    async def create_product(self, artwork_url: str, product_type: str, title: str) -> str:
        image_id = await self.upload_image(artwork_url)
        variant_id = PRINTIFY_VARIANTS.get(product_type, 17241)
        payload = {
            "title": f"{title} - {product_type}",
            "description": f"Mystical artwork from {settings.app_name} featuring {title}",
            "blueprint_id": PRINTIFY_BLUEPRINTS.get(product_type, 5),
            "print_provider_id": PRINTIFY_PROVIDER_ID,
            "variants": [
                {
                    "id": variant_id,
                    "price": int(round(retail_price(product_type) * 100)),
                    "is_enabled": True,
                }
            ],
            "print_areas": [
                {
                    "variant_ids": [variant_id],
                    "placeholders": [
                        {
                            "position": "front",
                            "images": [
                                {"id": image_id, "x": 0.5, "y": 0.5, "scale": 1, "angle": 0}
                            ],
                        }
                    ],
                }
            ],
        }
        data = await self._request("POST", f"/shops/{self.shop_id}/products.json", payload)
        return str(data["id"])


class PrintManager:
    """Publishes a product type to every configured provider."""

    def __init__(self, printful: PrintfulClient, printify: PrintifyClient):
        self.printful = printful
        self.printify = printify

    async def _create(self, client: _ProviderClient, artwork_url, product_type, title):
        if not client.is_configured():
            return None
        try:
            return await client.create_product(artwork_url, product_type, title)
        except PrintProviderError as e:
            logger.error(f"{client.name} failed to create {product_type}: {e}")
            return None

    async def create_product_on_all_platforms(
        self, artwork_url: str, product_type: str, title: str
    ) -> Dict[str, Optional[str]]:
        """
        Returns:
            {"printful": id or None, "printify": id or None}

        Raises:
            PrintProviderError: If no provider created the product
        """
        if not (self.printful.is_configured() or self.printify.is_configured()):
            raise PrintProviderError("No print provider is configured")

        url = absolute_artwork_url(artwork_url)
        printful_id, printify_id = await asyncio.gather(
            self._create(self.printful, url, product_type, title),
            self._create(self.printify, url, product_type, title),
        )
        if printful_id is None and printify_id is None:
            raise PrintProviderError(f"No print provider accepted the {product_type} product")

        return {"printful": printful_id, "printify": printify_id}


print_manager = PrintManager(
    PrintfulClient(settings.printful_api_key, settings.printful_store_id),
    PrintifyClient(settings.printify_api_key, settings.printify_shop_id),
)
