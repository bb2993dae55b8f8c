# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-13
# Description: gradio_app.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterator, List, Optional, Tuple

import gradio as gr
import pandas as pd
import requests


# Environment configuration
API_BASE_URL = os.getenv("ADVISOR_API_BASE_URL", "http://127.0.0.1:8000").rstrip("/")
LOG_FILE = os.getenv("ADVISOR_LOG_FILE", "./logs/advisor_rag.log")
LOG_TAIL_LINES = int(os.getenv("ADVISOR_UI_LOG_TAIL_LINES", "400"))
TIMEOUT_SECONDS = int(os.getenv("ADVISOR_UI_TIMEOUT_SECONDS", "60"))


# Small URL helpers
def _url(path: str) -> str:
    return f"{API_BASE_URL}{path}"


def _get(path: str, params: Optional[dict] = None) -> Any:
    try:
        r = requests.get(_url(path), params=params, timeout=TIMEOUT_SECONDS)
        if not r.ok:
            return {"error": f"HTTP {r.status_code}: {r.text}"}
        return r.json()
    except requests.exceptions.RequestException as e:
        return {"error": f"API request failed: {e}"}


def _post(path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    try:
        r = requests.post(_url(path), json=payload, timeout=TIMEOUT_SECONDS)
        if not r.ok:
            return {"error": f"HTTP {r.status_code}: {r.text}"}
        return r.json()
    except requests.exceptions.RequestException as e:
        return {"error": f"RequestException: {e}"}


def _delete(path: str) -> Dict[str, Any]:
    try:
        r = requests.delete(_url(path), timeout=TIMEOUT_SECONDS)
        r.raise_for_status()
        return r.json()
    except requests.exceptions.RequestException as e:
        return {"error": f"API request failed: {e}"}


def _user_id(raw: Any) -> Optional[int]:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


# Log tailing for UI
def tail_log_file(path: str, n_lines: int = 200) -> str:
    """Tail last n_lines from the local rotating log file (ADVISOR_LOG_TO_FILE=1)."""
    try:
        if not path or not os.path.exists(path):
            return f"[log] file not found: {path}"
        with open(path, "rb") as f:
            data = f.read()
        lines = data.decode("utf-8", errors="replace").splitlines()[-int(n_lines):]
        return "\n".join(lines)
    except OSError as e:
        return f"[log] failed to read log file: {e}"


# Chat UI functions
def ui_chat(user_id: Any, question: str, history):
    question = (question or "").strip()
    uid = _user_id(user_id)
    history = history or []
    if not question:
        return history, ""
    if uid is None:
        return history + [{"role": "assistant", "content": "User ID is required."}], ""

    out = _post("/chat", payload={"user_id": uid, "query": question})
    answer = out.get("answer") or out.get("error") or ""

    history = history + [
        {"role": "user", "content": question},
        {"role": "assistant", "content": answer},
    ]
    return history, json.dumps({k: v for k, v in out.items() if k != "answer"}, indent=2)


def ui_chat_stream(user_id: Any, question: str, history) -> Iterator[Tuple[list, str]]:
    """Consume /chat/stream (SSE) and grow the assistant message as deltas arrive."""
    question = (question or "").strip()
    uid = _user_id(user_id)
    history = history or []
    if not question or uid is None:
        yield history + [{"role": "assistant", "content": "User ID and question are required."}], ""
        return

    history = history + [{"role": "user", "content": question}, {"role": "assistant", "content": ""}]
    status: Dict[str, Any] = {"deltas": 0}

    try:
        with requests.get(
                _url("/chat/stream"),
                params={"user_id": uid, "query": question},
                stream=True,
                timeout=TIMEOUT_SECONDS,
        ) as r:
            if not r.ok:
                history[-1]["content"] = f"HTTP {r.status_code}: {r.text}"
                yield history, json.dumps(status, indent=2)
                return

            for line in r.iter_lines(decode_unicode=True):
                if not line or not line.startswith("data: "):
                    continue
                event = json.loads(line[len("data: "):])
                if event.get("type") == "delta":
                    status["deltas"] += 1
                    history[-1]["content"] += event.get("text", "")
                else:
                    status.update(event)
                yield history, json.dumps(status, indent=2)
    except requests.exceptions.RequestException as e:
        status["error"] = f"stream failed: {e}"
        yield history, json.dumps(status, indent=2)


def ui_history(user_id: Any) -> pd.DataFrame:
    uid = _user_id(user_id)
    if uid is None:
        return pd.DataFrame([{"error": "User ID is required."}])
    out = _get(f"/chat/history/{uid}")
    if isinstance(out, dict) and out.get("error"):
        return pd.DataFrame([out])
    return pd.DataFrame(out.get("turns") or [])


def ui_reset_history(user_id: Any) -> str:
    uid = _user_id(user_id)
    if uid is None:
        return json.dumps({"error": "User ID is required."}, indent=2)
    return json.dumps(_delete(f"/chat/history/{uid}"), indent=2)


# User UI functions
def ui_list_users() -> pd.DataFrame:
    out = _get("/users")
    if isinstance(out, dict):
        return pd.DataFrame([out])
    return pd.DataFrame(out)


def ui_register_user(first_name: str, last_name: str, role: str, email: str,
                     skills_text: str, experiences_json: str) -> str:
    skills = [s.strip() for s in (skills_text or "").replace("\n", ",").split(",") if s.strip()]

    experiences: List[Dict[str, Any]] = []
    experiences_json = (experiences_json or "").strip()
    if experiences_json:
        try:
            experiences = json.loads(experiences_json)
        except json.JSONDecodeError as e:
            return json.dumps({"error": f"invalid experiences JSON: {e}"}, indent=2)

    payload = {
        "first_name": first_name,
        "last_name": last_name,
        "role": role or None,
        "email": email or None,
        "skills": skills,
        "experiences": experiences,
    }
    return json.dumps(_post("/users", payload=payload), indent=2)


# Document UI functions
def ui_add_document(topic: str, content: str, vector_text: str) -> str:
    payload: Dict[str, Any] = {"topic": topic, "content": content}
    vector_text = (vector_text or "").strip()
    if vector_text:
        try:
            payload["vector"] = [float(x) for x in vector_text.split(",")]
        except ValueError as e:
            return json.dumps({"error": f"invalid vector: {e}"}, indent=2)
    return json.dumps(_post("/documents", payload=payload), indent=2)


# Skill UI functions
def ui_similar_skills(skill: str, top_n: int) -> pd.DataFrame:
    skill = (skill or "").strip()
    if not skill:
        return pd.DataFrame([{"error": "skill must not be empty"}])
    out = _get("/skills/similar", params={"skill": skill, "top_n": int(top_n)})
    if out.get("error"):
        return pd.DataFrame([out])
    return pd.DataFrame(out.get("results") or [])


def ui_health(run_chat: bool) -> str:
    return json.dumps(_get("/health/deep", params={"run_chat": bool(run_chat)}), indent=2)


# Build Gradio UI
def build_gradio_app(api_base_url: str = API_BASE_URL) -> gr.Blocks:
    global API_BASE_URL
    API_BASE_URL = api_base_url.rstrip("/")

    with gr.Blocks(title="Advisor RAG UI", analytics_enabled=False) as demo:
        gr.Markdown(f"""# Advisor RAG (Chat)  **API:** `{API_BASE_URL}`  **Log file:** `{LOG_FILE}`""")

        with gr.Tab("Chat"):
            c_user = gr.Number(label="user_id", value=1, precision=0)
            chatbot = gr.Chatbot(label="Chat", height=420)
            question = gr.Textbox(label="Question", placeholder="How should I price my first product?")
            with gr.Row():
                send_btn = gr.Button("Send")
                stream_btn = gr.Button("Send (stream)")
            chat_debug = gr.Code(label="Response details", language="json")

            send_btn.click(
                fn=ui_chat,
                inputs=[c_user, question, chatbot],
                outputs=[chatbot, chat_debug],
            ).then(lambda: "", outputs=[question])
            stream_btn.click(
                fn=ui_chat_stream,
                inputs=[c_user, question, chatbot],
                outputs=[chatbot, chat_debug],
            ).then(lambda: "", outputs=[question])

            gr.Markdown("### History")
            with gr.Row():
                history_btn = gr.Button("Load history")
                reset_btn = gr.Button("Reset history")
            history_df = gr.Dataframe(label="Turns", interactive=False)
            reset_out = gr.Code(label="Reset output", language="json")
            history_btn.click(fn=ui_history, inputs=[c_user], outputs=[history_df])
            reset_btn.click(fn=ui_reset_history, inputs=[c_user], outputs=[reset_out])

        with gr.Tab("Users"):
            users_btn = gr.Button("Refresh users")
            users_df = gr.Dataframe(label="Users (/users)", interactive=False)
            users_btn.click(fn=ui_list_users, outputs=[users_df])

            gr.Markdown("### Register user")
            with gr.Row():
                u_first = gr.Textbox(label="first_name")
                u_last = gr.Textbox(label="last_name")
                u_role = gr.Textbox(label="role")
                u_email = gr.Textbox(label="email")
            u_skills = gr.Textbox(label="skills (comma separated)", placeholder="python, devops")
            u_exps = gr.Textbox(
                label="experiences JSON",
                value='[{"company_name": "Acme", "job_title": "Engineer"}]',
                lines=3,
            )
            u_btn = gr.Button("Register (/users)")
            u_out = gr.Code(label="Registered user", language="json")
            u_btn.click(fn=ui_register_user, inputs=[u_first, u_last, u_role, u_email, u_skills, u_exps],
                        outputs=[u_out])

        with gr.Tab("Documents"):
            d_topic = gr.Textbox(label="topic")
            d_content = gr.Textbox(label="content", lines=6)
            d_vector = gr.Textbox(label="vector (optional, 4 comma separated floats)", placeholder="0.2, 0.4, 0.1, 0.3")
            d_btn = gr.Button("Add document (/documents)")
            d_out = gr.Code(label="Document", language="json")
            d_btn.click(fn=ui_add_document, inputs=[d_topic, d_content, d_vector], outputs=[d_out])

        with gr.Tab("Skills"):
            with gr.Row():
                s_skill = gr.Textbox(label="skill", value="python")
                s_top = gr.Slider(1, 20, value=5, step=1, label="top_n")
                s_btn = gr.Button("Similar skills")
            s_df = gr.Dataframe(label="Similar skills (cosine)", interactive=False)
            s_btn.click(fn=ui_similar_skills, inputs=[s_skill, s_top], outputs=[s_df])

        with gr.Tab("Health"):
            h_chat = gr.Checkbox(value=True, label="Ping chat endpoint")
            h_btn = gr.Button("Run /health/deep")
            h_out = gr.Code(label="Deep health", language="json")
            h_btn.click(fn=ui_health, inputs=[h_chat], outputs=[h_out])

        with gr.Tab("Logs"):
            with gr.Row():
                log_path = gr.Textbox(label="Log file path", value=LOG_FILE)
                tail_lines = gr.Slider(50, 2000, value=LOG_TAIL_LINES, step=50, label="Tail lines")
                refresh_logs_btn = gr.Button("Refresh logs")
            log_view = gr.Textbox(label="Logs", value="", lines=25, interactive=False)
            refresh_logs_btn.click(fn=tail_log_file, inputs=[log_path, tail_lines], outputs=[log_view])

    return demo


if __name__ == "__main__":
    import threading

    import uvicorn

    API_HOST = os.getenv("ADVISOR_API_HOST", "127.0.0.1")
    API_PORT = int(os.getenv("ADVISOR_API_PORT", "8000"))

    UI_HOST = os.getenv("ADVISOR_UI_HOST", "127.0.0.1")
    UI_PORT = int(os.getenv("ADVISOR_UI_PORT", "7860"))

    def run_api() -> None:
        uvicorn.run("api.main:app", host=API_HOST, port=API_PORT, log_level="info", reload=False)

    api_thread = threading.Thread(target=run_api, daemon=True)
    api_thread.start()

    demo = build_gradio_app(api_base_url=f"http://{API_HOST}:{API_PORT}")
    demo.launch(server_name=UI_HOST, server_port=UI_PORT)
