# streamlit_app.py
import time
import json
import requests
import pandas as pd
import streamlit as st

# ---------- Page setup ----------
st.set_page_config(page_title="Sales NL to SQL", layout="wide")

# Minimal, subtle styling (no loud colors, no emojis)
st.markdown("""
    <style>
    .main .block-container {padding-top: 2rem; padding-bottom: 3rem; max-width: 1200px;}
    .stTextInput>div>div>input {font-size: 16px; height: 46px;}
    .small-muted {color:#6b7280; font-size:13px;}
    .section-title {font-weight:600; font-size: 18px; margin-top: 1rem;}
    .hr {border-top:1px solid #e5e7eb; margin: 20px 0;}
    </style>
""", unsafe_allow_html=True)

# ---------- Sidebar ----------
with st.sidebar:
    st.header("Settings")
    api_url = st.text_input("API base URL", value="http://127.0.0.1:8000")
    show_sql = st.checkbox("Show generated SQL", value=True)
    enable_csv = st.checkbox("Enable CSV download", value=True)
    st.markdown("<div class='small-muted'>The API should be running via <code>python -m app</code> with PORT and LLM_API_TOKEN set.</div>", unsafe_allow_html=True)

# ---------- Session state ----------
if "history" not in st.session_state:
    st.session_state.history = []  # {action, question, sql, explanation, message, df, ms, ok, error}

# ---------- Header ----------
st.title("Ask the sales database")
st.markdown("<div class='small-muted'>Type a question in English. The model checks it against the schema, writes SQL, and the SQL runs on a read-only SQLite database.</div>", unsafe_allow_html=True)

# ---------- Input row ----------
question = st.text_input("Question", value="", max_chars=500, placeholder="e.g., Show total sales for each product")
col_run, col_validate, col_explain = st.columns(3)
with col_run:
    run_clicked = st.button("Run", type="primary", use_container_width=True)
with col_validate:
    validate_clicked = st.button("Validate", use_container_width=True)
with col_explain:
    explain_clicked = st.button("Explain", use_container_width=True)

def call_backend(api: str, action: str, q: str):
    t0 = time.perf_counter()
    url = api.rstrip("/") + "/" + action
    try:
        r = requests.post(url, json={"query": q.strip()}, timeout=120)
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        try:
            data = r.json()
        except ValueError:
            data = {"error": r.text}
        if r.status_code == 200:
            rows = data.get("rows", [])
            cols = data.get("columns", [])
            df = pd.DataFrame(rows, columns=cols or None) if rows else pd.DataFrame(columns=cols)
            return {
                "ok": True,
                "sql": data.get("sqlQuery", ""),
                "explanation": data.get("explanation") or data.get("justification", ""),
                "message": data.get("message", ""),
                "df": df,
                "ms": elapsed_ms,
                "error": None,
            }
        return {"ok": False, "sql": "", "explanation": "", "message": "", "df": pd.DataFrame(),
                "ms": elapsed_ms, "error": data.get("error", data)}
    except requests.exceptions.RequestException as e:
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        return {"ok": False, "sql": "", "explanation": "", "message": "", "df": pd.DataFrame(),
                "ms": elapsed_ms, "error": str(e)}

# ---------- Execute ----------
action = "query" if run_clicked else "validate" if validate_clicked else "explain" if explain_clicked else None
if action and question.strip():
    with st.spinner("Working…"):
        result = call_backend(api_url, action, question)
    st.session_state.history.insert(0, {"action": action, "question": question, **result})

def show_error(err):
    if isinstance(err, (dict, list)):
        st.code(json.dumps(err, indent=2))
    else:
        st.code(str(err))

# ---------- Latest result ----------
if st.session_state.history:
    latest = st.session_state.history[0]
    st.subheader("Result")
    st.markdown(f"<div class='small-muted'>/{latest['action']} finished in {latest['ms']} ms</div>", unsafe_allow_html=True)

    if latest["ok"]:
        st.success(latest["message"])
        if latest["sql"] and show_sql:
            st.markdown("<div class='section-title'>Generated SQL</div>", unsafe_allow_html=True)
            st.code(latest["sql"], language="sql")
        if latest["explanation"]:
            st.markdown("<div class='section-title'>Explanation</div>", unsafe_allow_html=True)
            st.write(latest["explanation"])
        if latest["action"] == "query":
            if latest["df"].empty:
                st.info("No rows returned.")
            else:
                st.dataframe(latest["df"], use_container_width=True, height=420)
                if enable_csv:
                    csv = latest["df"].to_csv(index=False).encode("utf-8")
                    st.download_button("Download CSV", data=csv, file_name="result.csv", mime="text/csv")
    else:
        st.error("The request did not succeed.")
        st.markdown("<div class='section-title'>Details</div>", unsafe_allow_html=True)
        show_error(latest["error"])

    st.markdown("<div class='hr'></div>", unsafe_allow_html=True)

# ---------- History ----------
st.subheader("History")
if not st.session_state.history:
    st.markdown("<div class='small-muted'>Your recent queries will appear here.</div>", unsafe_allow_html=True)
else:
    for i, item in enumerate(st.session_state.history):
        with st.expander(f"{i+1}. /{item['action']}  {item['question']}  •  {item['ms']} ms"):
            if item["ok"] and item["sql"] and show_sql:
                st.code(item["sql"], language="sql")
            if item["ok"] and item["explanation"]:
                st.write(item["explanation"])
            if item["ok"] and not item["df"].empty:
                st.dataframe(item["df"], use_container_width=True, height=260)
            if not item["ok"]:
                st.markdown("<div class='section-title'>Error</div>", unsafe_allow_html=True)
                show_error(item["error"])
