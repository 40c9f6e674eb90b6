# app/examples.py

FEW_SHOTS = [
    {
        "q": "Show total sales for each product.",
        "sql": (
            "SELECT p.name, SUM(s.revenue) AS total_sales "
            "FROM products p JOIN sales s ON p.id = s.product_id "
            "GROUP BY p.name;"
        ),
        "explanation": "Joins products with their sales and sums the revenue per product.",
    },
    {
        "q": "How many units were sold per category in March 2024?",
        "sql": (
            "SELECT c.name, SUM(s.quantity_sold) AS units_sold "
            "FROM sales s JOIN products p ON s.product_id = p.id "
            "JOIN categories c ON p.category_id = c.id "
            "WHERE s.sale_date BETWEEN '2024-03-01' AND '2024-03-31' "
            "GROUP BY c.name;"
        ),
        "explanation": "Filters sales to March 2024 and adds up the quantity sold for each category.",
    },
]

def few_shot_block() -> str:
    # Formats as:
    # Q: ...
    # SQL: SELECT ...
    # EXPLANATION: ...
    lines = []
    for ex in FEW_SHOTS:
        lines.append(f"Q: {ex['q']}\nSQL: {ex['sql']}\nEXPLANATION: {ex['explanation']}")
    return "\n\n".join(lines)
