from .properties import PropertyCache
from .fluxes import FluxEngine
from .radiation import RadiationModel
