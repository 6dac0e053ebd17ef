"""
Example graph data for demonstration purposes
"""
import json
import os


def example_graph_data():
    """A small e-commerce workspace dump, shaped like the graph-data endpoint response."""

    # Example: shop with customers, orders and staff; staff.staff_id points at the manager
    return {
        "users": [
            {"id": 1, "name": "Alice Moreau", "email": "alice@example.com", "created_at": 1700000000000},
            {"id": 2, "name": "Bob Tanaka", "email": "bob@example.com", "created_at": 1700000500000},
            {"id": 3, "name": "Chidi Okafor", "email": "chidi@example.com", "created_at": 1700001000000},
        ],
        "staff": [
            {"id": 1, "username": "mgr.kim", "staff_id": None},
            {"id": 2, "username": "ops.lee", "staff_id": 1},
            {"id": 3, "username": "ops.ruiz", "staff_id": 1},
        ],
        "categories": [
            {"id": 1, "title": "Books"},
            {"id": 2, "title": "Games"},
        ],
        "products": [
            {"id": 10, "name": "Field Guide", "category_id": 1, "price": 24.5},
            {"id": 11, "name": "Board Game", "category_id": 2, "price": 39.0},
            {"id": 12, "name": "Puzzle Box", "category_id": 2, "price": 15.0},
        ],
        "orders": [
            {"id": 100, "user_id": 1, "staff_id": 2, "status": "shipped"},
            {"id": 101, "user_id": 1, "staff_id": 3, "status": "pending"},
            {"id": 102, "user_id": 2, "staff_id": 2, "status": "shipped"},
            {"id": 103, "user_id": 9, "staff_id": None, "status": "cancelled"},
        ],
        "order_items": [
            {"id": 1000, "order_id": 100, "product_id": 10, "quantity": 1},
            {"id": 1001, "order_id": 100, "product_id": 12, "quantity": 2},
            {"id": 1002, "order_id": 101, "product_id": 11, "quantity": 1},
            {"id": 1003, "order_id": 102, "product_id": 10, "quantity": 3},
        ],
        "api_tokens": [
            {"id": 1, "user_id": 3, "token": "redacted", "label": "CI"},
        ],
        "process_queue": [],
    }


def create_example_data(path="graph-data.json"):
    """Write the example payload to ``path``."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "w") as f:
        json.dump(example_graph_data(), f, indent=2)

    print(f"  ✅ Created example graph data ({path})")
    return path
