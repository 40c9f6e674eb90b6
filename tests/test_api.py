import logging

import pytest
from httpx import AsyncClient

from app.config import settings
from app.errors import ConfigError, GatewayError
from app.main import app, lifespan

TOTAL_SALES_SQL = (
    "SELECT p.name, SUM(s.revenue) AS total_sales "
    "FROM products p JOIN sales s ON p.id = s.product_id "
    "GROUP BY p.name"
)
VALID = "VALID: yes\nALIGNED: yes\nJUSTIFICATION: Asks for revenue per product."
INVALID = "VALID: no\nALIGNED: no\nJUSTIFICATION: The database has no weather data."
TRANSLATION = f"SQL: {TOTAL_SALES_SQL};\nEXPLANATION: Sums revenue per product."

SEEDED_REVENUE = {
    "Laptop": 1200, "Smartphone": 800, "Tablet": 500, "Desk": 300,
    "Chair": 150, "Sofa": 700, "T-Shirt": 25, "Jeans": 40,
    "Jacket": 100, "Milk": 5, "Bread": 3,
}


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"message": "I'm fine!"}


@pytest.mark.asyncio
async def test_query_end_to_end(client: AsyncClient, gateway):
    """Total sales per product returns one row per seeded product"""
    gateway.replies = [VALID, TRANSLATION]
    response = await client.post("/query", json={"query": "Show total sales for each product."})

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Query executed successfully!"
    assert data["sqlQuery"] == f"{TOTAL_SALES_SQL};"
    assert data["explanation"] == "Sums revenue per product."
    assert data["columns"] == ["name", "total_sales"]
    assert len(data["rows"]) == 11
    assert data["rowCount"] == 11
    assert data["truncated"] is False
    assert {r["name"]: r["total_sales"] for r in data["rows"]} == SEEDED_REVENUE
    assert len(gateway.calls) == 2


@pytest.mark.asyncio
async def test_query_accepts_positional_replies(client: AsyncClient, gateway):
    gateway.replies = [
        "yes yes The question asks for revenue per product.",
        f"{TOTAL_SALES_SQL}; Sums revenue per product.",
    ]
    response = await client.post("/query", json={"query": "Show total sales for each product."})

    assert response.status_code == 200
    assert response.json()["sqlQuery"] == TOTAL_SALES_SQL
    assert len(response.json()["rows"]) == 11


@pytest.mark.asyncio
async def test_query_missing(client: AsyncClient, gateway):
    response = await client.post("/query", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Query is required"}
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_query_blank_is_missing(client: AsyncClient, gateway):
    response = await client.post("/validate", json={"query": "    "})
    assert response.status_code == 400
    assert response.json() == {"error": "Query is required"}
    assert gateway.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("route", ["/query", "/validate", "/explain"])
async def test_query_too_long(client: AsyncClient, gateway, route):
    """Over 500 characters never reaches the model"""
    response = await client.post(route, json={"query": "a" * 501})
    assert response.status_code == 400
    assert response.json() == {"error": "Query can only be a maximum of 500 characters"}
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_query_500_characters_allowed(client: AsyncClient, gateway):
    gateway.replies = [VALID]
    response = await client.post("/validate", json={"query": "b" * 500})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_query_rejected_by_validator(client: AsyncClient, gateway, store, monkeypatch):
    """Invalid questions stop before translation and execution"""
    executed = []
    monkeypatch.setattr(store, "run_sql", lambda sql: executed.append(sql))
    gateway.replies = [INVALID]

    response = await client.post("/query", json={"query": "What is the weather tomorrow?"})

    assert response.status_code == 400
    assert response.json() == {
        "error": "Query is not a valid request for this database: The database has no weather data."
    }
    assert len(gateway.calls) == 1
    assert executed == []


@pytest.mark.asyncio
async def test_query_rejected_when_misaligned(client: AsyncClient, gateway):
    gateway.replies = ["VALID: yes\nALIGNED: no\nJUSTIFICATION: There is no customers table."]
    response = await client.post("/query", json={"query": "List all customers."})
    assert response.status_code == 400
    assert len(gateway.calls) == 1


@pytest.mark.asyncio
async def test_query_empty_validation_reply_fails_closed(client: AsyncClient, gateway):
    gateway.replies = [None]
    response = await client.post("/query", json={"query": "Show total sales."})
    assert response.status_code == 400
    assert response.json()["error"].endswith("Failed to validate query.")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "sql",
    [
        "DROP TABLE sales",
        "delete from products WHERE id = 1",
        "ALTER TABLE products ADD COLUMN x INTEGER",
        "update set price = 0",
    ],
)
async def test_query_destructive_sql_never_executes(client: AsyncClient, gateway, store, monkeypatch, sql):
    executed = []
    monkeypatch.setattr(store, "run_sql", lambda s: executed.append(s))
    gateway.replies = [VALID, f"SQL: {sql}\nEXPLANATION: Does something bad."]

    response = await client.post("/query", json={"query": "Clean up the data."})

    assert response.status_code == 400
    assert response.json() == {"error": "Potentially destructive queries are not allowed"}
    assert executed == []


@pytest.mark.asyncio
async def test_query_non_select_rejected(client: AsyncClient, gateway, store):
    gateway.replies = [VALID, "SQL: UPDATE products SET price = 0\nEXPLANATION: Zeroes prices."]
    before = store.table_counts()

    response = await client.post("/query", json={"query": "Make everything free."})

    assert response.status_code == 400
    assert response.json() == {"error": "Only SELECT queries are allowed"}
    assert store.conn.execute("SELECT SUM(price) FROM products").fetchone()[0] == 3823
    assert store.table_counts() == before


@pytest.mark.asyncio
async def test_query_execution_error_is_generic_500(client: AsyncClient, gateway):
    gateway.replies = [VALID, "SQL: SELECT * FROM customers\nEXPLANATION: Lists customers."]
    response = await client.post("/query", json={"query": "List customers."})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to execute SQL query"}


@pytest.mark.asyncio
async def test_query_empty_translation_is_500(client: AsyncClient, gateway):
    gateway.replies = [VALID, ""]
    response = await client.post("/query", json={"query": "Show total sales."})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to translate query to SQL"}


@pytest.mark.asyncio
async def test_gateway_failure_is_500(client: AsyncClient, gateway):
    gateway.replies = [GatewayError(detail="connection refused")]
    response = await client.post("/query", json={"query": "Show total sales."})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to reach the language model"}


@pytest.mark.asyncio
async def test_unexpected_error_is_500(client: AsyncClient, gateway):
    gateway.replies = [RuntimeError("boom")]
    response = await client.post("/validate", json={"query": "Show total sales."})
    assert response.status_code == 500
    assert response.json() == {"error": "Server Side Error"}


@pytest.mark.asyncio
async def test_validate(client: AsyncClient, gateway):
    gateway.replies = [VALID]
    response = await client.post("/validate", json={"query": "Show total sales for each product."})
    assert response.status_code == 200
    assert response.json() == {
        "message": "Query is valid!",
        "justification": "Asks for revenue per product.",
    }


@pytest.mark.asyncio
async def test_validate_rejected(client: AsyncClient, gateway):
    gateway.replies = [INVALID]
    response = await client.post("/validate", json={"query": "Will it rain?"})
    assert response.status_code == 400
    assert "no weather data" in response.json()["error"]


@pytest.mark.asyncio
async def test_explain(client: AsyncClient, gateway):
    gateway.replies = [VALID, TRANSLATION]
    response = await client.post("/explain", json={"query": "Show total sales for each product."})
    assert response.status_code == 200
    assert response.json() == {
        "message": "Query translated successfully to SQL!",
        "sqlQuery": f"{TOTAL_SALES_SQL};",
        "explanation": "Sums revenue per product.",
    }


@pytest.mark.asyncio
async def test_validate_and_explain_do_not_mutate(client: AsyncClient, gateway, store):
    before = store.table_counts()
    for _ in range(3):
        gateway.replies = [VALID, "SQL: DELETE FROM sales\nEXPLANATION: Removes every sale.", VALID]
        assert (await client.post("/explain", json={"query": "Remove sales"})).status_code == 200
        assert (await client.post("/validate", json={"query": "Remove sales"})).status_code == 200
    assert store.table_counts() == before == {"categories": 4, "products": 11, "sales": 11}


@pytest.mark.asyncio
async def test_unknown_route(client: AsyncClient):
    response = await client.get("/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "URL not found"}


@pytest.mark.asyncio
async def test_wrong_method(client: AsyncClient):
    response = await client.get("/query")
    assert response.status_code == 405
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_invalid_json(client: AsyncClient, gateway):
    response = await client.post(
        "/query", content=b'{"query": ', headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON format"}
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_non_string_query(client: AsyncClient, gateway):
    response = await client.post("/query", json={"query": 42})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid Request"}


@pytest.mark.asyncio
async def test_query_reports_truncated_rows(client: AsyncClient, gateway):
    """121-row cross join is capped at the default limit and flagged"""
    gateway.replies = [
        VALID,
        "SQL: SELECT a.name, b.name FROM products a CROSS JOIN products b\nEXPLANATION: Every pair.",
    ]
    response = await client.post("/query", json={"query": "Pair every product with every product."})

    assert response.status_code == 200
    data = response.json()
    assert data["rowCount"] == 100
    assert len(data["rows"]) == 100
    assert data["truncated"] is True


@pytest.mark.asyncio
async def test_success_response_is_logged(client: AsyncClient, caplog):
    caplog.set_level(logging.INFO)
    await client.get("/health")
    assert "REQUEST | GET | /health" in caplog.messages
    assert "RESPONSE | 200 | GET | /health | I'm fine!" in caplog.messages


@pytest.mark.asyncio
async def test_client_error_is_logged(client: AsyncClient, caplog):
    caplog.set_level(logging.INFO)
    await client.post("/query", json={})
    assert "RESPONSE | 400 | POST | /query | Query is required" in caplog.messages


@pytest.mark.asyncio
async def test_server_error_detail_logged_not_returned(client: AsyncClient, gateway, caplog):
    caplog.set_level(logging.INFO)
    gateway.replies = [VALID, "SQL: SELECT * FROM customers\nEXPLANATION: Lists customers."]

    response = await client.post("/query", json={"query": "List customers."})

    assert response.status_code == 500
    assert "no such table" not in response.text
    assert "RESPONSE | 500 | POST | /query | Server Side Error" in caplog.messages
    assert any(
        "ExecutionError" in m and "no such table: customers" in m for m in caplog.messages
    )


@pytest.mark.asyncio
async def test_lifespan_without_token_is_fatal(monkeypatch, tmp_path):
    monkeypatch.setattr("app.main.configure_logging", lambda level: None)
    monkeypatch.setattr(settings, "llm_api_token", "")
    monkeypatch.setattr(settings, "db_path", str(tmp_path / "sales.db"))

    with pytest.raises(ConfigError, match="LLM_API_TOKEN"):
        async with lifespan(app):
            pass
    assert not (tmp_path / "sales.db").exists()


@pytest.mark.asyncio
async def test_lifespan_opens_seeded_store(monkeypatch, tmp_path):
    monkeypatch.setattr("app.main.configure_logging", lambda level: None)
    monkeypatch.setattr(settings, "llm_api_token", "token")
    monkeypatch.setattr(settings, "db_path", str(tmp_path / "sales.db"))

    async with lifespan(app):
        assert app.state.store.table_counts() == {"categories": 4, "products": 11, "sales": 11}
        assert app.state.gateway.settings is settings
