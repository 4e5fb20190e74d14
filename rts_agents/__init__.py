"""rts-agents: per-tick decision cores for resource collection and path search controllers."""

from rts_agents.agents import Agent, PathSearchAgent, ResourceCollectionAgent
from rts_agents.config import RTSAgentsConfig, load_config
from rts_agents.models import Command, EventLog, WorldState

__all__ = [
    "Agent",
    "PathSearchAgent",
    "ResourceCollectionAgent",
    "RTSAgentsConfig",
    "load_config",
    "Command",
    "EventLog",
    "WorldState",
]
