"""
Chronicle - world state tracker for interactive fiction set in Valdris.

Keeps an in-world date, clock, location, environment and social context in
step with freeform narrative text:
- Calendar engine for the Valdris reckoning (10 months, Vexdays, two moons)
- Narrative parser for date headers and time/location cues in prose
- Temporal manager owning the state, undo history and subscribers

Main entry points:
- TemporalManager: owns and mutates one WorldState
- WorldStateAPI: facade for downstream readers and chat hosts

Example usage:
    from chronicle import TemporalManager, WorldStateAPI

    manager = TemporalManager().initialize({"starting_date": "1st of Thawbreak, 2850 AV"})
    api = WorldStateAPI(manager)
    api.ingest_message("[Ironhold, 3rd of Thawbreak, 2850 AV, Dusk] The gates close.")
    print(api.get_current_date())
"""

from .config import TrackerConfig, load_config
from .observer import WorldStateAPI
from .services import TemporalManager

__version__ = "0.1.0"

__all__ = ["TrackerConfig", "load_config", "TemporalManager", "WorldStateAPI"]
