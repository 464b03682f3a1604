# cafe/menu_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Menu Service (dev mock)")


MENU = {
    "64f1a2b3c4d5e6f708192a3b": {
        "id": "64f1a2b3c4d5e6f708192a3b",
        "name": "Latte",
        "category": "Coffee",
        "price": 4.50,
        "sizes": [
            {"size": "Small", "price": 4.00},
            {"size": "Medium", "price": 4.50},
            {"size": "Large", "price": 5.25},
        ],
        "alt_milk_options": ["Oat Milk", "Almond Milk", "Soy Milk", "Coconut Milk"],
        "cold_foam_available": True,
        "available": True,
    },
    "64f1a2b3c4d5e6f708192a3c": {
        "id": "64f1a2b3c4d5e6f708192a3c",
        "name": "Maple Cold Brew",
        "category": "Coffee",
        "price": 5.00,
        "sizes": [],
        "alt_milk_options": ["Oat Milk"],
        "cold_foam_available": True,
        "available": True,
    },
    "64f1a2b3c4d5e6f708192a3d": {
        "id": "64f1a2b3c4d5e6f708192a3d",
        "name": "Date Scone",
        "category": "Bakery",
        "price": 3.25,
        "sizes": [],
        "alt_milk_options": [],
        "cold_foam_available": False,
        "available": True,
    },
    "64f1a2b3c4d5e6f708192a3e": {
        "id": "64f1a2b3c4d5e6f708192a3e",
        "name": "Seasonal Pie",
        "category": "Bakery",
        "price": 6.00,
        "sizes": [],
        "alt_milk_options": [],
        "cold_foam_available": False,
        "available": False,
    },
}


@app.get("/menu")
def list_menu(category: str | None = None):
    items = list(MENU.values())
    if category:
        items = [i for i in items if i["category"].lower() == category.lower()]
    return items


@app.get("/menu/{menu_item_id}")
def get_menu_item(menu_item_id: str):
    item = MENU.get(menu_item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return item
