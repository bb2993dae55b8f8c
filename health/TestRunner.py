# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: TestRunner
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from utility.logging_utils import get_class_logger


class TestRunner:
    """
    Orchestrates all smoke tests and reports a consolidated result.

    Tests included:
      - <store>_store  (test_connection() on each candidate space)
      - chat           (OpenAI-compatible chat ping, optional)
    """

    __test__ = False  # not a pytest class

    def __init__(
            self,
            *,
            stores: Sequence[Any],
            chat_client: Any = None,
            logger: Optional[logging.Logger] = None,
    ):
        self.stores = list(stores)
        self.chat_client = chat_client
        self.logger = logger or get_class_logger(self.__class__)

        self.logger.info("Initialising SmokeTestRunner (%d stores, chat=%s)",
                         len(self.stores), chat_client is not None)

    # -------------------------------------------------------------------------
    def run_all(self, run_chat: bool = True) -> Dict[str, bool]:
        """
        Run all configured smoke tests.

        :param run_chat: If True, pings the chat endpoint as well (one short completion).
        :return: Dict mapping test names to True/False.
        """
        self.logger.info("Starting smoke test suite (run_chat=%s)", run_chat)

        results: Dict[str, bool] = {}

        for store in self.stores:
            name = f"{getattr(store, 'name', type(store).__name__)}_store"
            try:
                self.logger.info("Running %s.test_connection()", name)
                ok = bool(store.test_connection())
            except Exception as e:
                self.logger.exception("%s.test_connection() raised an exception: %s", name, e)
                ok = False
            results[name] = ok
            self._log_result(name, ok)

        if run_chat and self.chat_client is not None:
            try:
                self.logger.info("Running chat healthcheck()")
                ok_chat = bool(self.chat_client.healthcheck())
            except Exception as e:
                self.logger.exception("chat healthcheck() raised an exception: %s", e)
                ok_chat = False
            results["chat"] = ok_chat
            self._log_result("chat", ok_chat)

        self._log_summary(results)
        return results

    # -------------------------------------------------------------------------
    def _log_result(self, name: str, ok: bool) -> None:
        if ok:
            self.logger.info("%s: PASS", name)
        else:
            self.logger.error("%s: FAIL", name)

    def _log_summary(self, results: Dict[str, bool]) -> None:
        total = len(results)
        passed = sum(1 for v in results.values() if v)
        failed = total - passed

        self.logger.info("Smoke test summary: %d total, %d passed, %d failed", total, passed, failed)

        for name, ok in results.items():
            self.logger.info("  %s: %s", name, "PASS" if ok else "FAIL")
