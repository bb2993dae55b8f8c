# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: ChromaClientFactory
# -----------------------------------------------------------------------------
import chromadb
from chromadb import ClientAPI

from config.Config import Config
from utility.logging_utils import get_logger

logger = get_logger(__name__)


def build_chroma_client(cfg: Config) -> ClientAPI:
    """Chroma client for ADVISOR_CHROMA_MODE=local|cloud."""
    if cfg.chroma_mode == "local":
        logger.info("Initialising Chroma persistent client (path=%s)", cfg.chroma_path)
        return chromadb.PersistentClient(path=cfg.chroma_path)

    if cfg.chroma_mode == "cloud":
        logger.info(
            "Initialising Chroma Cloud client (tenant=%s, database=%s)",
            cfg.chroma_tenant,
            cfg.chroma_database,
        )
        return chromadb.CloudClient(
            tenant=cfg.chroma_tenant,
            database=cfg.chroma_database,
            api_key=cfg.chroma_api_key,
        )

    raise ValueError(f"No Chroma client for chroma_mode={cfg.chroma_mode!r}")
