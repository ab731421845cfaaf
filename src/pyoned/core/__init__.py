from .base import FlowComponent, PropertyComponent, SubmodelComponent
from .domain import Domain1D
from .grid import OneDimGrid, Refiner, RefineCriteria
from .state import FlowState
