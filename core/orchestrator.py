"""Top-level application wiring."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.app_controller import DEFAULT_HISTORY_LIMIT, AppController
from core.event_bus import EventBus
from core.policy_runtime import load_effective_config, resolve_db_path
from llm.base_llm import BaseLLM
from llm.llm_factory import build_llm
from memory.plan_storage import PlanStorage
from memory.stores.sql_store import SQLStore
from planner.plan_service import PlannerSettings, PlanService
from ui.clipboard import copy_to_clipboard


ROOT_ENV_VAR = "CLEAR_PATH_ROOT"


def default_root() -> Path:
    """Return $CLEAR_PATH_ROOT when set, else the current working directory."""
    env_root = os.getenv(ROOT_ENV_VAR)
    return Path(env_root).expanduser() if env_root else Path.cwd()


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    llm: BaseLLM
    plan_service: PlanService
    storage: PlanStorage
    controller: AppController


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or default_root()).resolve()

    def load_config(self) -> dict[str, Any]:
        return load_effective_config(self.root)

    def build(self, config: dict[str, Any] | None = None) -> RuntimeBundle:
        config = config if config is not None else self.load_config()

        sql_store = SQLStore(resolve_db_path(self.root, config))
        sql_store.create_all()
        storage = PlanStorage(sql_store)

        llm = build_llm(config=config)
        plan_service = PlanService(llm=llm, settings=PlannerSettings.from_config(config))
        controller = AppController(
            plan_service=plan_service,
            storage=storage,
            event_bus=EventBus(),
            clipboard=copy_to_clipboard,
            history_limit=int(config.get("history", {}).get("limit", DEFAULT_HISTORY_LIMIT)),
        )

        return RuntimeBundle(
            config=config,
            llm=llm,
            plan_service=plan_service,
            storage=storage,
            controller=controller,
        )
