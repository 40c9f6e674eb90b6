# app/schema.py

SCHEMA_DESCRIPTION = """
The SQLite database consists of three tables: categories, products, and sales.

1. categories:
   - id (INTEGER, PRIMARY KEY, AUTOINCREMENT): unique identifier for each category.
   - name (TEXT, UNIQUE, NOT NULL): name of the category (e.g., Electronics, Furniture).

2. products:
   - id (INTEGER, PRIMARY KEY, AUTOINCREMENT): unique identifier for each product.
   - name (TEXT, UNIQUE, NOT NULL): name of the product (e.g., Laptop, Chair).
   - category_id (INTEGER, FOREIGN KEY): references categories(id).
   - price (REAL): price of the product.

3. sales:
   - id (INTEGER, PRIMARY KEY, AUTOINCREMENT): unique identifier for each sale.
   - product_id (INTEGER, FOREIGN KEY): references products(id).
   - revenue (REAL): revenue generated from the sale.
   - quantity_sold (INTEGER): number of units sold.
   - sale_date (TEXT): date of the sale (YYYY-MM-DD format).

Sample contents: categories Electronics, Furniture, Clothing, Grocery;
products such as Laptop, Smartphone, Tablet, Desk, Chair, Sofa, T-Shirt,
Jeans, Jacket, Milk, Bread; sales dated between 2024-01 and 2024-03.
""".strip()

DDL = """
CREATE TABLE IF NOT EXISTS categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL
);

CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    category_id INTEGER,
    price REAL,
    FOREIGN KEY (category_id) REFERENCES categories(id)
);

CREATE TABLE IF NOT EXISTS sales (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    product_id INTEGER,
    revenue REAL,
    quantity_sold INTEGER,
    sale_date TEXT,
    FOREIGN KEY (product_id) REFERENCES products(id)
);
"""

TABLES = ("categories", "products", "sales")

SEED_CATEGORIES = ["Electronics", "Furniture", "Clothing", "Grocery"]

# (name, category_id, price)
SEED_PRODUCTS = [
    ("Laptop", 1, 1200),
    ("Smartphone", 1, 800),
    ("Tablet", 1, 500),
    ("Desk", 2, 300),
    ("Chair", 2, 150),
    ("Sofa", 2, 700),
    ("T-Shirt", 3, 25),
    ("Jeans", 3, 40),
    ("Jacket", 3, 100),
    ("Milk", 4, 5),
    ("Bread", 4, 3),
]

# (product_id, revenue, quantity_sold, sale_date)
SEED_SALES = [
    (1, 1200, 10, "2024-03-15"),
    (2, 800, 15, "2024-03-10"),
    (3, 500, 8, "2024-02-20"),
    (4, 300, 5, "2024-01-25"),
    (5, 150, 12, "2024-02-10"),
    (6, 700, 3, "2024-03-05"),
    (7, 25, 50, "2024-03-18"),
    (8, 40, 30, "2024-03-12"),
    (9, 100, 20, "2024-02-15"),
    (10, 5, 100, "2024-03-17"),
    (11, 3, 90, "2024-03-16"),
]
