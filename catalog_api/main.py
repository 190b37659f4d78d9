# catalog_api/main.py
import logging
from typing import Dict, Any, List

from fastapi import APIRouter, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware

from catalog_api.database import CATEGORIES, PRODUCTS, next_id, reset_stores
from catalog_api.models import CategoryIn, CategoryUpdate, ProductIn, ProductUpdate

logger = logging.getLogger(__name__)

app = FastAPI(title="catalog-api (in-memory dev backend)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api = APIRouter(prefix="/api")

# ---------------------------
# Helpers
# ---------------------------
def _make_category_dict(category_id: int, c: CategoryIn) -> Dict[str, Any]:
    return {
        "id": category_id,
        "name": c.name,
        "description": c.description,
    }

def _make_product_dict(product_id: int, p: ProductIn) -> Dict[str, Any]:
    return {
        "id": product_id,
        "name": p.name,
        "price": p.price,
        "description": p.description,
        "categoryId": p.category_id,
    }

def _get_or_404(store: Dict[int, Dict[str, Any]], item_id: int, what: str) -> Dict[str, Any]:
    item = store.get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    return item

def _check_body_id(path_id: int, body_id) -> None:
    if body_id is not None and body_id != path_id:
        raise HTTPException(status_code=400, detail="id mismatch")

def _check_category(category_id: int) -> None:
    if category_id not in CATEGORIES:
        raise HTTPException(status_code=400, detail="category not found")

# ---------------------------
# Category endpoints
# ---------------------------
@api.get("/CategoryApi")
async def list_categories() -> List[Dict[str, Any]]:
    return list(CATEGORIES.values())

@api.get("/CategoryApi/{category_id}")
async def get_category(category_id: int):
    return _get_or_404(CATEGORIES, category_id, "category")

@api.post("/CategoryApi", status_code=201)
async def create_category(payload: CategoryIn):
    cid = next_id("category")
    CATEGORIES[cid] = _make_category_dict(cid, payload)
    logger.info("Created category %s (%s)", cid, payload.name)
    return CATEGORIES[cid]

@api.put("/CategoryApi/{category_id}")
async def update_category(category_id: int, payload: CategoryUpdate):
    _check_body_id(category_id, payload.id)
    _get_or_404(CATEGORIES, category_id, "category")
    CATEGORIES[category_id] = _make_category_dict(category_id, payload)
    logger.info("Updated category %s", category_id)
    return CATEGORIES[category_id]

@api.delete("/CategoryApi/{category_id}", status_code=204)
async def delete_category(category_id: int):
    _get_or_404(CATEGORIES, category_id, "category")
    # products keep their dangling categoryId
    del CATEGORIES[category_id]
    logger.info("Deleted category %s", category_id)
    return Response(status_code=204)

# ---------------------------
# Product endpoints
# ---------------------------
@api.get("/ProductApi")
async def list_products() -> List[Dict[str, Any]]:
    return list(PRODUCTS.values())

@api.get("/ProductApi/{product_id}")
async def get_product(product_id: int):
    return _get_or_404(PRODUCTS, product_id, "product")

@api.post("/ProductApi", status_code=201)
async def create_product(payload: ProductIn):
    _check_category(payload.category_id)
    pid = next_id("product")
    PRODUCTS[pid] = _make_product_dict(pid, payload)
    logger.info("Created product %s (%s)", pid, payload.name)
    return PRODUCTS[pid]

@api.put("/ProductApi/{product_id}")
async def update_product(product_id: int, payload: ProductUpdate):
    _check_body_id(product_id, payload.id)
    _get_or_404(PRODUCTS, product_id, "product")
    _check_category(payload.category_id)
    PRODUCTS[product_id] = _make_product_dict(product_id, payload)
    logger.info("Updated product %s", product_id)
    return PRODUCTS[product_id]

@api.delete("/ProductApi/{product_id}", status_code=204)
async def delete_product(product_id: int):
    _get_or_404(PRODUCTS, product_id, "product")
    del PRODUCTS[product_id]
    logger.info("Deleted product %s", product_id)
    return Response(status_code=204)

app.include_router(api)

# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all():
    reset_stores()
    return {"status": "reset"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="127.0.0.1", port=7077)
