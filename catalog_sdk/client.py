# catalog_sdk/client.py
import argparse
import asyncio
import logging
from typing import Any, Optional

import httpx
import requests

from catalog_sdk.config import Settings, load_settings

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}

CATEGORIES_PATH = "/CategoryApi"
PRODUCTS_PATH = "/ProductApi"


class ApiError(Exception):
    """Any failed request: non-2xx response, transport failure or undecodable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _decode(r, method: str, url: str) -> Any:
    try:
        return r.json()
    except ValueError as e:
        logger.error("API error: %s %s returned a body that is not JSON: %s", method, url, e)
        raise ApiError("Invalid JSON response", status_code=r.status_code) from e


class CatalogClient:
    def __init__(self, base_url: str = "https://localhost:7077/api", timeout: float = 10,
                 verify: bool = True, session=None, async_transport=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify = verify
        self._async_transport = async_transport
        if session is None:
            session = requests.Session()
            session.verify = verify
        self.session = session
        self.session.headers.update(JSON_HEADERS)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CatalogClient":
        settings = settings or load_settings()
        return cls(base_url=settings.base_url, timeout=settings.timeout, verify=settings.verify_tls)

    def call(self, endpoint: str, method: str = "GET", data: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        kwargs = {"timeout": self.timeout}
        if data is not None:
            kwargs["json"] = data
        try:
            r = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error("API error: %s %s failed: %s", method, url, e)
            raise ApiError(str(e)) from e

        if not 200 <= r.status_code < 300:
            logger.error("API error: %s %s returned HTTP %s", method, url, r.status_code)
            raise ApiError(f"HTTP {r.status_code}", status_code=r.status_code)

        if method == "DELETE":
            return {"success": True}
        if not r.content:
            return None
        return _decode(r, method, url)

    # Categories
    def list_categories(self):
        return self.call(CATEGORIES_PATH)

    def get_category(self, category_id: int):
        return self.call(f"{CATEGORIES_PATH}/{category_id}")

    def add_category(self, name: str, description: str = ""):
        return self.call(CATEGORIES_PATH, "POST", {"name": name, "description": description})

    def update_category(self, category_id: int, name: str, description: str = ""):
        return self.call(f"{CATEGORIES_PATH}/{category_id}", "PUT", {
            "id": category_id, "name": name, "description": description
        })

    def delete_category(self, category_id: int):
        return self.call(f"{CATEGORIES_PATH}/{category_id}", "DELETE")

    # Products
    def list_products(self):
        return self.call(PRODUCTS_PATH)

    def get_product(self, product_id: int):
        return self.call(f"{PRODUCTS_PATH}/{product_id}")

    def add_product(self, name: str, price: float, description: str, category_id: int):
        return self.call(PRODUCTS_PATH, "POST", {
            "name": name, "price": price, "description": description, "categoryId": category_id
        })

    def update_product(self, product_id: int, name: str, price: float, description: str, category_id: int):
        return self.call(f"{PRODUCTS_PATH}/{product_id}", "PUT", {
            "id": product_id, "name": name, "price": price,
            "description": description, "categoryId": category_id
        })

    def delete_product(self, product_id: int):
        return self.call(f"{PRODUCTS_PATH}/{product_id}", "DELETE")

    # Async snapshot of both collections
    async def fetch_catalog_async(self):
        async with httpx.AsyncClient(timeout=self.timeout, verify=self.verify,
                                     headers=JSON_HEADERS, transport=self._async_transport) as client:
            async def _get(endpoint: str):
                url = f"{self.base_url}{endpoint}"
                try:
                    r = await client.get(url)
                except httpx.HTTPError as e:
                    logger.error("API error: GET %s failed: %s", url, e)
                    raise ApiError(str(e)) from e
                if not r.is_success:
                    logger.error("API error: GET %s returned HTTP %s", url, r.status_code)
                    raise ApiError(f"HTTP {r.status_code}", status_code=r.status_code)
                return _decode(r, "GET", url)

            categories, products = await asyncio.gather(_get(CATEGORIES_PATH), _get(PRODUCTS_PATH))
            return categories, products


def _name(raw: str) -> str:
    name = raw.strip()
    if not name:
        raise argparse.ArgumentTypeError("must not be blank")
    return name


def main(argv=None):
    from rich import print

    parser = argparse.ArgumentParser(description="Catalog admin one-shot commands")
    parser.add_argument("--base-url", help="Override CATALOG_ADMIN_BASE_URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---------------------------
    # Category commands
    # ---------------------------
    subparsers.add_parser("list-categories", help="List all categories")

    ac = subparsers.add_parser("add-category", help="Create a category")
    ac.add_argument("--name", type=_name, required=True)
    ac.add_argument("--description", type=str.strip, default="")

    uc = subparsers.add_parser("update-category", help="Update a category")
    uc.add_argument("--id", type=int, required=True)
    uc.add_argument("--name", type=_name, required=True)
    uc.add_argument("--description", type=str.strip, default="")

    dc = subparsers.add_parser("delete-category", help="Delete a category")
    dc.add_argument("--id", type=int, required=True)

    # ---------------------------
    # Product commands
    # ---------------------------
    subparsers.add_parser("list-products", help="List all products")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--id", type=int, required=True)

    ap = subparsers.add_parser("add-product", help="Create a product")
    ap.add_argument("--name", type=_name, required=True)
    ap.add_argument("--price", type=float, required=True)
    ap.add_argument("--description", type=str.strip, default="")
    ap.add_argument("--category-id", type=int, required=True)

    up = subparsers.add_parser("update-product", help="Update a product")
    up.add_argument("--id", type=int, required=True)
    up.add_argument("--name", type=_name, required=True)
    up.add_argument("--price", type=float, required=True)
    up.add_argument("--description", type=str.strip, default="")
    up.add_argument("--category-id", type=int, required=True)

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--id", type=int, required=True)

    subparsers.add_parser("snapshot", help="Fetch categories and products concurrently")

    args = parser.parse_args(argv)
    settings = load_settings()
    if args.base_url:
        settings = settings.model_copy(update={"base_url": args.base_url})
    c = CatalogClient.from_settings(settings)

    try:
        if args.command == "list-categories":
            print(c.list_categories())
        elif args.command == "add-category":
            print(c.add_category(args.name, args.description))
        elif args.command == "update-category":
            print(c.update_category(args.id, args.name, args.description))
        elif args.command == "delete-category":
            print(c.delete_category(args.id))
        elif args.command == "list-products":
            print(c.list_products())
        elif args.command == "get-product":
            print(c.get_product(args.id))
        elif args.command == "add-product":
            print(c.add_product(args.name, args.price, args.description, args.category_id))
        elif args.command == "update-product":
            print(c.update_product(args.id, args.name, args.price, args.description, args.category_id))
        elif args.command == "delete-product":
            print(c.delete_product(args.id))
        elif args.command == "snapshot":
            categories, products = asyncio.run(c.fetch_catalog_async())
            print({"categories": categories, "products": products})
    except ApiError as e:
        print(f"[red]Request failed: {e}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
