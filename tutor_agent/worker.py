"""
LiveKit worker process for the tutor agent.

Process-wide state (settings, Supabase topic store, realtime session factory,
tool registry) is built once in ``prewarm`` and shared by every job the
process runs. Each job gets its own ``SessionBootstrapper``.
"""

import logging
import sys
from dataclasses import dataclass

from livekit.agents import JobContext, JobProcess, WorkerOptions, cli

from .bootstrap import SessionBootstrapper
from .config import Settings, load_environment
from .errors import BootstrapError, ConfigurationError
from .logging_config import setup_global_logging
from .realtime import RealtimeSessionFactory
from .tools import ToolRegistry, default_catalogue
from .topics import TopicStore

logger = logging.getLogger(__name__)

RUNTIME_KEY = "tutor_runtime"


@dataclass
class AgentRuntime:
    settings: Settings
    topic_store: TopicStore
    session_factory: RealtimeSessionFactory
    tools: ToolRegistry

    @classmethod
    def from_settings(cls, settings: Settings) -> "AgentRuntime":
        return cls(
            settings=settings,
            topic_store=TopicStore.from_settings(settings.supabase),
            session_factory=RealtimeSessionFactory(settings.worker),
            tools=default_catalogue().select(settings.worker.tools),
        )

    def bootstrapper(self) -> SessionBootstrapper:
        return SessionBootstrapper(
            topic_store=self.topic_store,
            session_factory=self.session_factory,
            tools=self.tools,
            participant_timeout=self.settings.worker.participant_timeout,
        )


def prewarm(proc: JobProcess):
    """Build process-wide state once, before the process takes jobs."""
    load_environment()
    settings = Settings.from_env()
    proc.userdata[RUNTIME_KEY] = AgentRuntime.from_settings(settings)
    logger.info(f"Job process ready (tools: {settings.worker.tools or 'none'})")


async def entrypoint(ctx: JobContext):
    """Job entrypoint: bootstrap one tutoring session for the dispatched room."""
    runtime: AgentRuntime = ctx.proc.userdata[RUNTIME_KEY]
    try:
        result = await runtime.bootstrapper().run(ctx)
    except BootstrapError as e:
        logger.error(f"❌ Bootstrap failed for room {e.room_name} at state {e.state}: {e}", exc_info=True)
        raise
    logger.info(f"✅ Tutor session live in room {result.room_name} (topic: {result.topic.topic})")


def build_worker_options(settings: Settings) -> WorkerOptions:
    kwargs = dict(
        entrypoint_fnc=entrypoint,
        prewarm_fnc=prewarm,
        host=settings.worker.host,
        port=settings.worker.port,
    )
    if settings.worker.agent_name:
        kwargs["agent_name"] = settings.worker.agent_name
    return WorkerOptions(**kwargs)


def main():
    """Validate configuration, then hand over to the LiveKit CLI."""
    load_environment()

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        setup_global_logging(fmt="text")
        logger.error(f"❌ {e}")
        sys.exit(1)

    setup_global_logging(settings.worker.log_level, settings.worker.log_format)
    logger.info(f"🚀 Starting tutor agent worker on {settings.worker.host}:{settings.worker.port}")

    cli.run_app(build_worker_options(settings))
