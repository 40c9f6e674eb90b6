# app/prompt.py
from .examples import few_shot_block
from .schema import SCHEMA_DESCRIPTION

VALIDATION_INSTR = (
    "You check whether a question can be answered with a read-only query "
    "against the SQLite database described below.\n"
    "- VALID is yes if the question is a meaningful data-retrieval request, no otherwise.\n"
    "- ALIGNED is yes if it only needs tables and columns from the schema, no otherwise.\n"
    "- Requests to modify, delete or restructure data are never valid.\n"
    "Reply with exactly three lines and nothing else:\n"
    "VALID: yes|no\n"
    "ALIGNED: yes|no\n"
    "JUSTIFICATION: <one or two sentences>\n"
)

TRANSLATION_INSTR = (
    "You convert English questions into a SINGLE SQLite SELECT query.\n"
    "- Write the SQL on one line, no code fences, no new lines.\n"
    "- Use only tables/columns from the provided schema.\n"
    "- Do NOT modify data.\n"
    "Reply with exactly two lines and nothing else:\n"
    "SQL: <query>\n"
    "EXPLANATION: <what the query does, in plain English>\n"
)

def build_system_prompt(instruction: str, schema_text: str, examples_block: str | None = None) -> str:
    """
    Compose a schema-aware system prompt for the LLM.
    examples_block: optional few-shot examples to guide the model.
    """
    parts = [instruction, "Database schema:", schema_text, ""]
    if examples_block:
        parts += ["Examples:", examples_block, ""]
    return "\n".join(parts)

def validation_messages(question: str) -> list[dict]:
    return [
        {"role": "system", "content": build_system_prompt(VALIDATION_INSTR, SCHEMA_DESCRIPTION)},
        {"role": "user", "content": f'Validate this query: "{question}"'},
    ]

def translation_messages(question: str) -> list[dict]:
    return [
        {
            "role": "system",
            "content": build_system_prompt(TRANSLATION_INSTR, SCHEMA_DESCRIPTION, few_shot_block()),
        },
        {"role": "user", "content": f'Convert this into SQL: "{question}"'},
    ]
