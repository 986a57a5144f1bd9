# checkout/catalog_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Catalog Service (dev mock)")


SELLERS = {
    "seller-1": {
        "id": "seller-1",
        "display_name": "Anna",
        "store_name": "Automation Lab",
        "payout_account_id": "acct_1ExampleSellerOne",
    },
    "seller-2": {
        "id": "seller-2",
        "display_name": "Marek",
        "store_name": None,
        "payout_account_id": "acct_1ExampleSellerTwo",
    },
    #sprzedawca bez podpiętego konta wypłat
    "seller-3": {
        "id": "seller-3",
        "display_name": "Ola",
        "store_name": "Flows by Ola",
        "payout_account_id": None,
    },
}

PRODUCTS = {
    1: {"id": 1, "title": "Invoice OCR workflow", "status": "published", "price_cents": 2000, "seller": SELLERS["seller-1"]},
    2: {"id": 2, "title": "CRM lead sync", "status": "published", "price_cents": 3550, "seller": SELLERS["seller-2"]},
    3: {"id": 3, "title": "Slack digest", "status": "published", "price_cents": 0, "seller": SELLERS["seller-1"]},
    4: {"id": 4, "title": "Draft scraper", "status": "draft", "price_cents": 1500, "seller": SELLERS["seller-2"]},
    5: {"id": 5, "title": "Email triage", "status": "published", "price_cents": 900, "seller": SELLERS["seller-3"]},
}


@app.get("/products/{product_id}")
def get_product(product_id: int):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
