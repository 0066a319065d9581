from animvis.errors import AnimVisError, ConfigurationError, TransientRenderSkip
from animvis.graph_engine import GraphLayoutEngine
from animvis.fluid_field import FluidFieldRenderer, Obstacle

__version__ = "1.0.0"
