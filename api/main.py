# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: main.py
# -----------------------------------------------------------------------------
import logging
import os
from contextlib import asynccontextmanager

import gradio as gr
from fastapi import FastAPI

import settings
from api.AppContainer import get_app_container
from api.routers import chat, documents, health, skills, users
from ui.gradio_app import build_gradio_app

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    try:
        get_app_container()
    except ValueError as e:
        # missing configuration; requests will retry the build and fail loudly
        logger.error("Application container not initialised at startup: %s", e)
    yield


app = FastAPI(title="Advisor RAG API", lifespan=lifespan)
app.include_router(health.router)
app.include_router(chat.router)
app.include_router(users.router)
app.include_router(documents.router)
app.include_router(skills.router)

# Mount Gradio (served by the SAME uvicorn process/port)
if settings.MOUNT_UI:
    API_BASE_URL = os.getenv("ADVISOR_API_BASE_URL", "http://127.0.0.1:8000")
    gradio_blocks = build_gradio_app(api_base_url=API_BASE_URL)
    app = gr.mount_gradio_app(app, gradio_blocks, path="/ui")
